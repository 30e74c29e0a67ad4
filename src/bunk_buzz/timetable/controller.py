from __future__ import annotations

from flask import Flask, g, request

from ..common.http import json_body, ok, verified_required
from ..container import Container
from .serializers import entry_to_dict


def register(app: Flask, container: Container) -> None:
    timetable = container.timetable_service

    @app.route("/api/timetable", methods=["GET"], endpoint="timetable_list")
    @verified_required
    def list_entries():
        entries = timetable.list_entries(g.current_user.user_id, day=request.args.get("day"))
        grouped = timetable.group_by_day(entries)
        return ok(
            {
                "timetable": [entry_to_dict(e) for e in entries],
                "groupedByDay": {day: [entry_to_dict(e) for e in items] for day, items in grouped.items()},
            },
            count=len(entries),
        )

    @app.route("/api/timetable/today", methods=["GET"], endpoint="timetable_today")
    @verified_required
    def today():
        day, entries = timetable.today(g.current_user.user_id)
        return ok({"timetable": [entry_to_dict(e) for e in entries]}, day=day.value, count=len(entries))

    @app.route("/api/timetable", methods=["POST"], endpoint="timetable_create")
    @verified_required
    def create_entry():
        entry = timetable.create(g.current_user.user_id, json_body())
        return ok({"entry": entry_to_dict(entry)}, message="Timetable entry created successfully", status=201)

    @app.route("/api/timetable/<int:entry_id>", methods=["GET"], endpoint="timetable_get")
    @verified_required
    def get_entry(entry_id: int):
        return ok({"entry": entry_to_dict(timetable.get(g.current_user.user_id, entry_id))})

    @app.route("/api/timetable/<int:entry_id>", methods=["PUT"], endpoint="timetable_update")
    @verified_required
    def update_entry(entry_id: int):
        entry = timetable.update(g.current_user.user_id, entry_id, json_body())
        return ok({"entry": entry_to_dict(entry)}, message="Timetable entry updated successfully")

    @app.route("/api/timetable/<int:entry_id>", methods=["DELETE"], endpoint="timetable_delete")
    @verified_required
    def delete_entry(entry_id: int):
        timetable.delete(g.current_user.user_id, entry_id)
        return ok(message="Timetable entry deleted successfully")
