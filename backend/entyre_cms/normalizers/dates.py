# entyre_cms/normalizers/dates.py
from entyre_cms.utils.optimistic_lock import normalize_ts


def iso(value):
    """Timezone-aware ISO 8601 string, or None."""
    if value is None:
        return None
    return normalize_ts(value).isoformat()
