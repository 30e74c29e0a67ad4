from __future__ import annotations

from flask import Flask, g

from ..common.http import json_body, ok, verified_required
from ..container import Container
from .serializers import bulk_to_dict, prediction_to_dict, simulation_to_dict


def register(app: Flask, container: Container) -> None:
    predictor = container.bunk_predictor_service

    @app.route("/api/bunk-predictor/predict", methods=["POST"], endpoint="bunk_predict")
    @verified_required
    def predict():
        subject, prediction = predictor.predict(g.current_user.user_id, json_body().get("subjectId"))
        return ok(
            {
                "subject": {"id": subject.subject_id, "name": subject.name, "code": subject.code},
                "prediction": prediction_to_dict(prediction),
            }
        )

    @app.route("/api/bunk-predictor/bulk-predict", methods=["GET"], endpoint="bunk_bulk_predict")
    @verified_required
    def bulk_predict():
        return ok(bulk_to_dict(predictor.bulk_predict(g.current_user.user_id)))

    @app.route("/api/bunk-predictor/simulate", methods=["POST"], endpoint="bunk_simulate")
    @verified_required
    def simulate():
        body = json_body()
        subject, simulation = predictor.simulate(
            g.current_user.user_id, body.get("subjectId"), body.get("numberOfBunks")
        )
        return ok(
            {
                "subject": {
                    "id": subject.subject_id,
                    "name": subject.name,
                    "currentAttendance": simulation.current_attendance,
                },
                **simulation_to_dict(simulation),
            }
        )
