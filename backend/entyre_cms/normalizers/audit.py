# entyre_cms/normalizers/audit.py
from __future__ import annotations

from typing import Dict, Any
from entyre_cms.models.audit_log import AuditLog
from .dates import iso


def normalize_audit_log(log: AuditLog) -> Dict[str, Any]:
    """entity_id is always a string; payload is stored JSON."""
    if not log:
        raise ValueError("AuditLog cannot be None")

    return {
        "id": log.id,
        "actor_id": log.actor_id,
        "action": log.action,
        "entity_type": log.entity_type,
        "entity_id": str(log.entity_id) if log.entity_id is not None else None,
        "payload": log.payload or {},
        "created_at": iso(log.created_at),
    }
