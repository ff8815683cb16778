from flask import Flask, send_file, send_from_directory, current_app, request
from .config import config_by_name
from .extensions import db, migrate, jwt, cors, limiter
from .api.v1 import v1_bp
from .cli import register_cli
from .errors import register_error_handlers, register_jwt_handlers
from .log_config import configure_logging
from .services.media import init_media_store
from .utils.login_attempts import LoginAttemptLimiter
from flask_swagger_ui import get_swaggerui_blueprint
import os

from . import models  # noqa: F401  (register tables with db.metadata)


SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
    "X-DNS-Prefetch-Control": "off",
}

# Swagger UI runs inline scripts, so the policy is only sent with API responses
API_CONTENT_SECURITY_POLICY = (
    "default-src 'self'; style-src 'self' 'unsafe-inline'; "
    "script-src 'self'; img-src 'self' data: https:"
)


def register_security_headers(app: Flask) -> None:
    @app.after_request
    def _apply(response):
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if request.path.startswith("/api/"):
            response.headers.setdefault("Content-Security-Policy", API_CONTENT_SECURITY_POLICY)
        return response


def create_app(config_name: str = "development", overrides=None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    if overrides:
        app.config.update(overrides)

    configure_logging(app)

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    register_jwt_handlers(jwt)
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=86400,
        supports_credentials=True,
    )
    limiter.init_app(app)

    init_media_store(app)
    app.extensions["login_limiter"] = LoginAttemptLimiter(
        max_attempts=app.config["LOGIN_MAX_ATTEMPTS"],
        window_seconds=app.config["LOGIN_LOCKOUT_SECONDS"],
        capacity=app.config["LOGIN_ATTEMPT_CAPACITY"],
    )

    # -------------------------------------------------
    # API Blueprints
    # -------------------------------------------------
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)
    register_cli(app)
    register_security_headers(app)

    # -------------------------------------------------
    # Local media (MEDIA_BACKEND=local)
    # -------------------------------------------------
    if app.config.get("MEDIA_BACKEND") == "local":
        media_url = app.config.get("MEDIA_BASE_URL", "/uploads").rstrip("/")

        @app.route(f"{media_url}/<path:public_id>", methods=["GET"], endpoint="local_media")
        def serve_media(public_id):
            folder = os.path.abspath(current_app.config.get("UPLOAD_FOLDER", "uploads"))
            return send_from_directory(folder, public_id)

    # -------------------------------------------------
    # Serve OpenAPI YAML (PUBLIC)
    # -------------------------------------------------
    @app.route("/openapi/cms.yaml", methods=["GET"], endpoint="openapi_cms")
    def serve_openapi():
        spec_path = os.path.join(
            current_app.root_path,
            "api",
            "v1",
            "cms_openapi.yaml",
        )

        if not os.path.exists(spec_path):
            raise FileNotFoundError("cms_openapi.yaml not found")

        return send_file(
            spec_path,
            mimetype="application/yaml",
            as_attachment=False,
        )

    # -------------------------------------------------
    # Swagger UI
    # -------------------------------------------------
    SWAGGER_URL = "/swagger"
    API_URL = "/openapi/cms.yaml"

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={
            "app_name": "ENTYRE CMS API",
            "deepLinking": True,
            "persistAuthorization": True,
        },
    )

    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)

    return app
