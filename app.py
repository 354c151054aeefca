"""Application factory."""

import json
import logging
import os
import uuid

from flask import Flask, jsonify, g, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from config import Config
from models import db
from routes.auth import auth_bp
from routes.users import uploads_bp, users_bp
from services.codes import VerificationCodeGenerator
from services.credentials import CredentialWorkflow, WorkflowSettings
from services.hasher import SecretHasher
from services.notifications import (
    LoggingNotificationGateway,
    NotificationGateway,
    SMTPNotificationGateway,
)
from services.profiles import ProfileService
from services.tokens import SESSION_TOKEN, TokenIssuer
from storage.local_storage import LocalStorage
from storage.sql_credential_store import SQLCredentialStore

migrate = Migrate()
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)


def create_app(
    config_class: type[Config] = Config,
    notifier: NotificationGateway | None = None,
) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))
    logging.getLogger("services").setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Core subsystems
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # CORS
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    # Rate limiting
    storage_uri = app.config.get("RATELIMIT_STORAGE_URI", "memory://")
    headers_enabled = app.config.get("RATELIMIT_HEADERS_ENABLED", True)
    key_prefix = app.config.get("RATELIMIT_KEY_PREFIX") or str(uuid.uuid4())

    global limiter
    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[lambda: app.config.get("RATE_LIMIT", "60 per minute")],
        storage_uri=storage_uri,
        headers_enabled=headers_enabled,
        key_prefix=key_prefix,
    )
    limiter.init_app(app)
    app.config["RATELIMIT_KEY_PREFIX"] = key_prefix

    # Ensure uploads directory exists
    upload_dir = app.config.get("UPLOAD_DIR")
    if upload_dir:
        os.makedirs(upload_dir, exist_ok=True)

    # Account services
    _init_services(app, notifier)

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(users_bp, url_prefix="/api/auth")
    app.register_blueprint(uploads_bp, url_prefix=app.config.get("UPLOAD_URL_PREFIX", "/uploads"))

    # Health
    @app.route("/health", methods=["GET"])
    def health_check():
        return jsonify({"status": "ok"})

    # Errors
    _register_error_handlers(app)
    _register_jwt_callbacks(app)

    return app


def _build_notifier(app: Flask) -> NotificationGateway:
    if not app.config.get("MAIL_SERVER"):
        app.logger.info("MAIL_SERVER is not set; outgoing mail will only be logged.")
        return LoggingNotificationGateway()
    return SMTPNotificationGateway(
        host=app.config["MAIL_SERVER"],
        port=app.config.get("MAIL_PORT", 587),
        username=app.config.get("MAIL_USERNAME"),
        password=app.config.get("MAIL_PASSWORD"),
        sender=app.config.get("MAIL_DEFAULT_SENDER"),
        use_tls=app.config.get("MAIL_USE_TLS", True),
        timeout=app.config.get("MAIL_TIMEOUT", 10.0),
    )


def _init_services(app: Flask, notifier: NotificationGateway | None) -> None:
    """Build the credential workflow once from the application config."""

    store = SQLCredentialStore(db)
    tokens = TokenIssuer(
        secret=app.config["JWT_SECRET_KEY"],
        algorithm=app.config.get("JWT_ALGORITHM", "HS256"),
        session_ttl=app.config["JWT_ACCESS_TOKEN_EXPIRES"],
        reset_ttl=app.config["RESET_TOKEN_EXPIRES"],
    )
    workflow = CredentialWorkflow(
        store=store,
        hasher=SecretHasher(),
        tokens=tokens,
        codes=VerificationCodeGenerator(),
        notifier=notifier or _build_notifier(app),
        settings=WorkflowSettings.from_config(app.config),
    )
    images = LocalStorage(
        app.config["UPLOAD_DIR"], url_prefix=app.config.get("UPLOAD_URL_PREFIX", "/uploads")
    )

    app.extensions["token_issuer"] = tokens
    app.extensions["credential_workflow"] = workflow
    app.extensions["profile_service"] = ProfileService(store, images)


def _error_payload(error: str, detail: str, status: int):
    request_id = g.get("request_id") or str(uuid.uuid4())
    response = jsonify({"error": error, "detail": detail, "request_id": request_id})
    response.status_code = status
    response.headers.setdefault("X-Request-ID", request_id)
    return response


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():  # pragma: no cover
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_request_id_header(response):  # pragma: no cover
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        request_id = g.get("request_id") or str(uuid.uuid4())
        if error.code and error.code >= 500:
            app.logger.warning("%s on %s: %s", error.code, request.path, error.description)
        response = error.get_response()
        payload = {
            "error": getattr(error, "name", "Error"),
            "detail": error.description,
            "request_id": request_id,
        }
        response.data = json.dumps(payload)
        response.content_type = "application/json"
        response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):  # pragma: no cover
        app.logger.exception("Unhandled application error", exc_info=error)
        return _error_payload(
            "Internal Server Error", "An unexpected error occurred.", 500
        )


def _register_jwt_callbacks(app: Flask) -> None:
    """Render session cookie failures in the same JSON shape as other errors."""

    @jwt.token_verification_loader
    def _only_session_tokens(jwt_header, jwt_data) -> bool:
        return jwt_data.get("type") == SESSION_TOKEN

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return _error_payload("Unauthorized", "User not authenticated.", 401)

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        app.logger.info("Rejected session token: %s", reason)
        return _error_payload("Unauthorized", "Invalid token.", 401)

    @jwt.expired_token_loader
    def _expired_token(jwt_header, jwt_data):
        return _error_payload("Unauthorized", "Invalid token.", 401)

    @jwt.token_verification_failed_loader
    def _wrong_token_type(jwt_header, jwt_data):
        return _error_payload("Unauthorized", "Invalid token.", 401)


if __name__ == "__main__":
    logging.basicConfig(level=Config.LOG_LEVEL)
    application = create_app()
    application.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
