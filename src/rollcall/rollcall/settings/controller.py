from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.responses import domain_error, server_error
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    prefix = app.config.get("API_PREFIX", "/api")
    settings = container.settings_service

    @app.route(f"{prefix}/settings", methods=["GET"], endpoint="get_settings")
    def get_settings():
        try:
            return jsonify(settings.get_settings())
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(app, "Failed to load settings", e)

    @app.route(f"{prefix}/settings", methods=["PUT"], endpoint="update_settings")
    def update_settings():
        data = request.get_json(silent=True) or {}
        try:
            settings.update_settings(
                score_rules=data.get("score_rules"),
                random_event_probability=data.get("random_event_probability"),
            )
            return jsonify({"message": "Settings saved"})
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(app, "Failed to save settings", e)
