from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.responses import domain_error, server_error
from ..container import Container
from ..core.exceptions import DomainError
from ..students.model import student_to_dict
from .model import recent_call_to_dict


def register(app: Flask, container: Container) -> None:
    prefix = app.config.get("API_PREFIX", "/api")
    calls = container.call_service

    @app.route(f"{prefix}/call/start", methods=["GET"], endpoint="call_start")
    def call_start():
        try:
            student = calls.start(request.args.get("mode", "random"))
            data = student_to_dict(student)
            return jsonify(
                {
                    "data": {
                        k: data[k]
                        for k in ("id", "student_id", "name", "major", "current_score")
                    }
                }
            )
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(app, "Roll-call failed", e)

    @app.route(f"{prefix}/call/submit", methods=["POST"], endpoint="call_submit")
    def call_submit():
        data = request.get_json(silent=True) or {}
        try:
            result = calls.submit(
                student_id=data.get("student_id"),
                action=data.get("action"),
                score_change=data.get("score_change"),
            )
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(app, "Submit failed", e)

        event_msg = ""
        if result.bonus_triggered:
            event_msg = f"Random event! Points doubled: {result.applied_delta:.2f} points this time!"

        return jsonify(
            {
                "message": "Submitted",
                "randomEvent": result.bonus_triggered,
                "eventMsg": event_msg,
                "newScore": result.display_score,
            }
        )

    @app.route(f"{prefix}/call/records", methods=["GET"], endpoint="call_records")
    def call_records():
        try:
            return jsonify([recent_call_to_dict(r) for r in calls.recent()])
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(app, "Failed to load call records", e)
