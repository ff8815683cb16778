from flask import jsonify
from werkzeug.exceptions import HTTPException

from entyre_cms.domain.exceptions import DomainError, RateLimited


def register_error_handlers(app):
    @app.errorhandler(DomainError)
    def handle_domain_error(error):
        if error.status_code >= 500:
            app.logger.error("%s: %s", type(error).__name__, error.message)
        response = jsonify(error.to_dict())
        response.status_code = error.status_code
        if isinstance(error, RateLimited) and error.retry_after:
            response.headers["Retry-After"] = str(error.retry_after)
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        response = jsonify({
            "error": error.name,
            "message": error.description,
        })
        response.status_code = error.code
        return response

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        app.logger.exception("Unhandled error: %s", error)
        body = {"error": "Internal server error"}
        if app.config.get("EXPOSE_ERROR_DETAILS"):
            body["message"] = str(error)
        response = jsonify(body)
        response.status_code = 500
        return response


def register_jwt_handlers(jwt):
    """Render Flask-JWT-Extended failures in the same shape as other errors."""

    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({
            "error": "Authentication failed",
            "message": "Access denied. No authentication token provided.",
        }), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({"error": "Authentication failed", "message": "Invalid token."}), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({
            "error": "Authentication failed",
            "message": "Token expired. Please log in again.",
        }), 401
