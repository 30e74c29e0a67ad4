from __future__ import annotations

from typing import Any

from .model import BulkPrediction, BunkPrediction, Simulation


def prediction_to_dict(p: BunkPrediction) -> dict[str, Any]:
    return {
        "canBunk": p.can_bunk,
        "safeBunks": p.safe_bunks,
        "currentAttendance": p.current_attendance,
        "afterBunkAttendance": p.after_bunk_attendance,
        "minimumRequired": p.minimum_required,
        "attendanceDrop": p.attendance_drop,
        "classesNeededToRecover": p.classes_needed_to_recover,
        "recommendation": p.recommendation,
        "details": {
            "currentTotal": p.current_total,
            "currentAttended": p.current_attended,
            "afterBunkTotal": p.after_bunk_total,
            "afterBunkAttended": p.after_bunk_attended,
        },
    }


def bulk_to_dict(bulk: BulkPrediction) -> dict[str, Any]:
    return {
        "summary": {
            "totalSubjects": bulk.total_subjects,
            "safeSubjects": bulk.safe_subjects,
            "riskySubjects": bulk.risky_subjects,
            "totalSafeBunks": bulk.total_safe_bunks,
            "unlimitedSubjects": bulk.unlimited_subjects,
        },
        "predictions": [
            {
                "subjectId": item.subject_id,
                "subjectName": item.subject_name,
                "currentAttendance": item.prediction.current_attendance,
                "canBunk": item.prediction.can_bunk,
                "safeBunks": item.prediction.safe_bunks,
                "afterBunkAttendance": item.prediction.after_bunk_attendance,
            }
            for item in bulk.items
        ],
    }


def simulation_to_dict(sim: Simulation) -> dict[str, Any]:
    return {
        "simulation": [
            {
                "bunkNumber": s.step,
                "totalLectures": s.total_lectures,
                "attendedLectures": s.attended_lectures,
                "attendance": s.attendance,
                "isSafe": s.is_safe,
                "status": "safe" if s.is_safe else "danger",
            }
            for s in sim.steps
        ],
        "analysis": {
            "requestedBunks": sim.requested_bunks,
            "safeBunks": sim.safe_bunks,
            "turningPoint": sim.turning_point,
            "finalAttendance": sim.final_attendance,
            "recommendation": sim.recommendation,
        },
    }
