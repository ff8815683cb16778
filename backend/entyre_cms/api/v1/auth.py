from datetime import datetime, timezone

from flask import current_app, jsonify, request
from flask_jwt_extended import create_access_token, get_jwt_identity, jwt_required

from entyre_cms.extensions import db
from entyre_cms.domain.exceptions import AuthFailure, PermissionDenied, RateLimited, ValidationError
from entyre_cms.models.user import User
from entyre_cms.utils.audit import log_action
from entyre_cms.utils.transaction import transactional
from . import v1_bp

MIN_PASSWORD_LENGTH = 8
INVALID_CREDENTIALS = "Invalid username or password."


def safe_user(user):
    return {
        "id": user.id,
        "username": user.username,
        "role": user.role,
        "isActive": bool(user.is_active),
        "lastLogin": user.last_login.isoformat() if user.last_login else None,
    }


def login_limiter():
    return current_app.extensions["login_limiter"]


def issue_token(user):
    return create_access_token(
        identity=str(user.id),
        additional_claims={"username": user.username, "role": user.role},
    )


def current_user():
    user = db.session.get(User, get_jwt_identity())
    if not user or not user.is_active:
        raise AuthFailure("User account does not exist or has been disabled.")
    return user


@v1_bp.route("/auth/login", methods=["POST"])
def login():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError(["Invalid request body"])

    raw_username = data.get("username")
    username = raw_username.strip().lower() if isinstance(raw_username, str) else ""
    password = data.get("password") if isinstance(data.get("password"), str) else ""

    if not username or not password:
        raise ValidationError(["Username and password are required."])

    limiter = login_limiter()
    attempt_key = limiter.key_for(request.remote_addr, username)

    retry_after = limiter.retry_after(attempt_key)
    if retry_after:
        current_app.logger.warning("Login locked for %s", attempt_key)
        raise RateLimited(
            "Too many failed login attempts. Please try again later.",
            retry_after=retry_after,
        )

    user = User.query.filter_by(username=username).first()

    if not user or not user.check_password(password):
        failures = limiter.register_failure(attempt_key)
        current_app.logger.info("Failed login for %s (%d in window)", attempt_key, failures)
        raise AuthFailure(INVALID_CREDENTIALS)

    if not user.is_active:
        raise PermissionDenied("User account disabled")

    limiter.reset(attempt_key)

    with transactional():
        user.last_login = datetime.now(timezone.utc)

    current_app.logger.info("User %s logged in (ip=%s)", user.username, request.remote_addr)

    return jsonify({
        "message": "Login successful",
        "token": issue_token(user),
        "user": safe_user(user),
    }), 200


@v1_bp.route("/auth/verify", methods=["GET"])
@jwt_required()
def verify():
    return jsonify({"valid": True, "user": safe_user(current_user())}), 200


@v1_bp.route("/auth/me", methods=["GET"])
@jwt_required()
def me():
    return jsonify({"user": safe_user(current_user())}), 200


@v1_bp.route("/auth/logout", methods=["POST"])
@jwt_required()
def logout():
    # Tokens are stateless; the client discards its copy.
    return jsonify({"message": "Logout successful"}), 200


@v1_bp.route("/auth/change-password", methods=["POST"])
@jwt_required()
def change_password():
    user = current_user()
    data = request.get_json(silent=True) or {}

    current_password = data.get("currentPassword")
    new_password = data.get("newPassword")

    errors = []
    if not isinstance(current_password, str) or not current_password:
        errors.append("currentPassword is required")
    if not isinstance(new_password, str) or len(new_password) < MIN_PASSWORD_LENGTH:
        errors.append(f"newPassword must be at least {MIN_PASSWORD_LENGTH} characters")
    if errors:
        raise ValidationError(errors)

    if not user.check_password(current_password):
        raise AuthFailure("Current password is incorrect")

    with transactional():
        user.set_password(new_password)
        log_action(
            action="user.change_password",
            entity_type="user",
            entity_id=user.id,
        )

    return jsonify({"message": "Password updated successfully"}), 200
