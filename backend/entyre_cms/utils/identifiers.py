# entyre_cms/utils/identifiers.py
import uuid

from entyre_cms.domain.exceptions import InvalidIdentifier


def validate_identifier(value, label: str = "resource") -> str:
    """Canonical string form of a UUID primary key, or InvalidIdentifier."""
    try:
        return str(uuid.UUID(str(value)))
    except (ValueError, TypeError, AttributeError):
        raise InvalidIdentifier(f"Invalid {label} id: {value}") from None
