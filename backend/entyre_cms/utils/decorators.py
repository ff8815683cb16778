# entyre_cms/utils/decorators.py
from functools import wraps
from flask import g
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from entyre_cms.domain.exceptions import PermissionDenied

EDITOR_ROLES = ("admin", "editor")


def _bind_identity():
    g.current_user_id = get_jwt_identity()
    g.current_role = get_jwt().get("role")


def roles_required(*allowed_roles):
    """Require a valid bearer token whose ``role`` claim is in ``allowed_roles``."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            _bind_identity()

            if g.current_role not in allowed_roles:
                raise PermissionDenied("Insufficient permissions")

            return fn(*args, **kwargs)
        return wrapper
    return decorator


def optional_identity(fn):
    """Accept anonymous callers; bind the identity when a valid token is sent."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request(optional=True)
        if get_jwt_identity() is not None:
            _bind_identity()
        else:
            g.current_user_id = None
            g.current_role = None
        return fn(*args, **kwargs)
    return wrapper
