from __future__ import annotations

from flask import Flask, g

from ..common.http import json_body, ok, verified_required
from ..container import Container
from .serializers import stats_to_dict, subject_to_dict


def register(app: Flask, container: Container) -> None:
    subjects = container.subject_service

    @app.route("/api/subjects", methods=["GET"], endpoint="subjects_list")
    @verified_required
    def list_subjects():
        overview = subjects.overview(g.current_user.user_id)
        return ok(
            {
                "subjects": [subject_to_dict(s) for s in overview.subjects],
                "overallAttendance": overview.overall_attendance,
                "totalLectures": overview.total_lectures,
                "totalAttended": overview.total_attended,
            },
            count=len(overview.subjects),
        )

    @app.route("/api/subjects", methods=["POST"], endpoint="subjects_create")
    @verified_required
    def create_subject():
        subject = subjects.create(g.current_user.user_id, json_body())
        return ok({"subject": subject_to_dict(subject)}, message="Subject created successfully", status=201)

    @app.route("/api/subjects/<int:subject_id>", methods=["GET"], endpoint="subjects_get")
    @verified_required
    def get_subject(subject_id: int):
        return ok({"subject": subject_to_dict(subjects.get(g.current_user.user_id, subject_id))})

    @app.route("/api/subjects/<int:subject_id>", methods=["PUT"], endpoint="subjects_update")
    @verified_required
    def update_subject(subject_id: int):
        subject = subjects.update(g.current_user.user_id, subject_id, json_body())
        return ok({"subject": subject_to_dict(subject)}, message="Subject updated successfully")

    @app.route("/api/subjects/<int:subject_id>", methods=["DELETE"], endpoint="subjects_delete")
    @verified_required
    def delete_subject(subject_id: int):
        subjects.delete(g.current_user.user_id, subject_id)
        return ok(message="Subject deleted successfully")

    @app.route("/api/subjects/<int:subject_id>/stats", methods=["GET"], endpoint="subjects_stats")
    @verified_required
    def subject_stats(subject_id: int):
        subject, stats = subjects.stats(g.current_user.user_id, subject_id)
        return ok({"subject": subject.name, "stats": stats_to_dict(subject, stats)})
