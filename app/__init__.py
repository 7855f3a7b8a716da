"""Flask 애플리케이션 팩토리"""

import logging
from typing import Optional

from flask import Flask, current_app, jsonify, request
from werkzeug.exceptions import RequestEntityTooLarge

from app.domain.errors import PayloadTooLarge
from config import AppConfig, get_config

# multipart boundaries and headers on top of the file itself
MULTIPART_OVERHEAD_BYTES = 1024 * 1024


def current_config() -> AppConfig:
    """Config of the running app (falls back to the environment singleton)."""
    return current_app.extensions.get("quiz_config") or get_config()


def create_app(config: Optional[AppConfig] = None):
    """
    Flask 애플리케이션 팩토리

    Args:
        config: explicit AppConfig; read from the environment when omitted

    Returns:
        Flask 앱 인스턴스
    """
    app = Flask(__name__)

    cfg = config or get_config()
    app.extensions["quiz_config"] = cfg

    logging.basicConfig(
        level=cfg.runtime.log_level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )
    app.logger.setLevel(cfg.runtime.log_level)

    app.config["SECRET_KEY"] = cfg.secret_key
    app.config["MAX_CONTENT_LENGTH"] = (
        cfg.runtime.max_upload_bytes + MULTIPART_OVERHEAD_BYTES
    )
    app.json.ensure_ascii = False

    # Blueprint 등록
    from app.routes.main import main_bp
    from app.routes.api_upload import api_upload_bp
    from app.routes.api_questions import api_questions_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(api_upload_bp)
    app.register_blueprint(api_questions_bp)

    @app.errorhandler(RequestEntityTooLarge)
    def handle_request_too_large(error):
        err = PayloadTooLarge(
            f"File exceeds the {cfg.runtime.max_upload_mb} MB upload limit"
        )
        return jsonify(err.to_dict()), err.status_code

    @app.after_request
    def add_cors_headers(response):
        origins = cfg.runtime.cors_allowed_origins
        if not origins:
            return response
        origin = request.headers.get("Origin")
        allowed = [o.strip() for o in origins.split(",") if o.strip()]
        if origin and ("*" in allowed or origin in allowed):
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
        return response

    app.logger.info(
        "Quiz importer ready (vendor=%s, payload=%s, max upload=%d MB)",
        cfg.runtime.ai_vendor,
        cfg.extraction.payload_mode,
        cfg.runtime.max_upload_mb,
    )
    return app
