from __future__ import annotations

from flask import Flask, g, request

from ..common.http import json_body, ok, verified_required
from ..container import Container
from ..predictor import calculator
from .serializers import record_to_dict, subject_counters_to_dict, summary_to_dict


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @verified_required
    def list_records():
        records = attendance.list_records(g.current_user.user_id, request.args.to_dict())
        return ok({"records": [record_to_dict(r) for r in records]}, count=len(records))

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @verified_required
    def stats():
        return ok(summary_to_dict(attendance.summary(g.current_user.user_id)))

    @app.route("/api/attendance/date/<date_value>", methods=["GET"], endpoint="attendance_by_date")
    @verified_required
    def by_date(date_value: str):
        day, records = attendance.for_date(g.current_user.user_id, date_value)
        return ok({"records": [record_to_dict(r) for r in records]}, date=day.isoformat(), count=len(records))

    @app.route("/api/attendance/subject/<int:subject_id>/history", methods=["GET"], endpoint="attendance_history")
    @verified_required
    def history(subject_id: int):
        subject, records = attendance.history(g.current_user.user_id, subject_id, request.args.get("limit"))
        return ok(
            {
                "subject": {
                    "id": subject.subject_id,
                    "name": subject.name,
                    "attendance": calculator.percentage(subject.attended_lectures, subject.total_lectures),
                },
                "history": [record_to_dict(r) for r in records],
            },
            count=len(records),
        )

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_mark")
    @verified_required
    def mark():
        result = attendance.mark(g.current_user.user_id, json_body())
        return ok(
            {"attendance": record_to_dict(result.record), "subject": subject_counters_to_dict(result.subject)},
            message="Attendance marked successfully" if result.created else "Attendance updated successfully",
            status=201 if result.created else 200,
        )

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="attendance_update")
    @verified_required
    def update(attendance_id: int):
        result = attendance.update(g.current_user.user_id, attendance_id, json_body())
        return ok(
            {"attendance": record_to_dict(result.record), "subject": subject_counters_to_dict(result.subject)},
            message="Attendance updated successfully",
        )

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="attendance_delete")
    @verified_required
    def delete(attendance_id: int):
        attendance.delete(g.current_user.user_id, attendance_id)
        return ok(message="Attendance record deleted successfully")
