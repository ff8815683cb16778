# entyre_cms/utils/optimistic_lock.py
from datetime import datetime, timezone
from typing import Optional

from dateutil.parser import parse as parse_date
from flask import abort, request

CONFLICT_MESSAGE = "Conflict detected. Resource has been modified."


def normalize_ts(ts: datetime) -> datetime:
    """Naive datetimes are read as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def _client_timestamp() -> Optional[datetime]:
    raw = request.headers.get("If-Unmodified-Since")
    if not raw:
        return None
    try:
        return normalize_ts(parse_date(raw))
    except (ValueError, OverflowError):
        abort(400, description="Invalid If-Unmodified-Since header")


def enforce_optimistic_lock(entity) -> None:
    """
    409 when ``entity.updated_at`` is newer than the request's
    ``If-Unmodified-Since``; no header means no check.

    HTTP dates carry whole seconds, so the stored value is truncated first.
    """
    client_ts = _client_timestamp()
    if client_ts is None or entity.updated_at is None:
        return

    if normalize_ts(entity.updated_at).replace(microsecond=0) > client_ts:
        abort(409, description=CONFLICT_MESSAGE)
