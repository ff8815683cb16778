# entyre_cms/utils/audit.py
from typing import Optional

from flask import g
from flask_jwt_extended import get_jwt_identity
from entyre_cms.extensions import db
from entyre_cms.models.audit_log import AuditLog


def current_actor_id() -> Optional[str]:
    actor = getattr(g, "current_user_id", None)
    if actor:
        return actor
    try:
        return get_jwt_identity()
    except RuntimeError:
        # outside a verified request (CLI, tests calling use cases directly)
        return None


def log_action(
    *,
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    payload: Optional[dict] = None,
):
    """Stage an audit entry in the current session; the caller commits."""
    log = AuditLog()

    log.actor_id = current_actor_id()
    log.action = action
    log.entity_type = entity_type
    log.entity_id = str(entity_id) if entity_id is not None else "-"
    log.payload = payload or {}

    db.session.add(log)
    return log
