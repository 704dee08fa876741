from __future__ import annotations

import atexit
import importlib
from typing import Optional

import mysql.connector
from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from config import get_settings_module

from .calls.controller import register as register_calls
from .common.logging import configure_logging, get_logger
from .common.responses import error_response
from .container import Container, build_container
from .core.constants import API_PREFIX, DEFAULT_POOL_SIZE
from .core.exceptions import UnavailableError
from .database.bootstrap import SCHEMA_PATH, apply_schema, ensure_default_settings, list_tables
from .settings.controller import register as register_settings
from .stats.controller import register as register_stats
from .students.controller import register as register_students

log = get_logger(__name__)


def _connect_store(settings) -> Container:
    """Prepare the schema, seed default settings and open the pool.

    Any failure here is fatal: the service cannot run without its database.
    """

    db_config = dict(getattr(settings, "DB_CONFIG"))
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    try:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            log.info("schema ready on %s (tables=%s)", target, len(list_tables(db_config)))
        ensure_default_settings(db_config)

        container = build_container(
            db_config=db_config,
            pool_size=int(getattr(settings, "DB_POOL_SIZE", DEFAULT_POOL_SIZE)),
        )
        container.conn.open()
    except (mysql.connector.Error, UnavailableError) as exc:
        log.critical("cannot reach database %s: %s", target, exc)
        log.critical("check the .env settings and that MySQL is running")
        raise SystemExit(1) from exc

    atexit.register(container.close)
    return container


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    configure_logging(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")),
        json_logs=bool(getattr(settings, "LOG_JSON", False)),
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["API_PREFIX"] = getattr(settings, "API_PREFIX", API_PREFIX)
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_UPLOAD_MB", 10)) * 1024 * 1024
    app.config["RATELIMIT_ENABLED"] = bool(getattr(settings, "RATELIMIT_ENABLED", True))
    app.json.ensure_ascii = False

    prefix = app.config["API_PREFIX"]

    CORS(
        app,
        send_wildcard=True,
        resources={rf"{prefix}/*": {"origins": getattr(settings, "CORS_ORIGINS", "*")}},
        methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )
    Limiter(
        get_remote_address,
        app=app,
        default_limits=[getattr(settings, "RATE_LIMIT", "200 per 15 minutes")],
        storage_uri="memory://",
    )

    @app.errorhandler(429)
    def too_many_requests(_e):
        return error_response("Too many requests, please try again later", 429)

    @app.errorhandler(413)
    def too_large(_e):
        return error_response(f"File too large (max {getattr(settings, 'MAX_UPLOAD_MB', 10)} MB)", 413)

    if container is None:
        log.info("starting with settings=%s", settings_module)
        container = _connect_store(settings)

    app.extensions["rollcall.container"] = container

    register_students(app, container)
    register_calls(app, container)
    register_stats(app, container)
    register_settings(app, container)

    return app


def run() -> None:
    app = create_app()
    settings = importlib.import_module(get_settings_module())
    port = int(getattr(settings, "PORT", 3000))
    log.info("serving on http://localhost:%s%s", port, app.config["API_PREFIX"])
    app.run(host="0.0.0.0", port=port, threaded=True)
