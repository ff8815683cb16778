# entyre_cms/utils/coercion.py
"""Helpers for loosely-typed wire values (form fields, query strings, JSON)."""
from typing import Any, Optional

TRUE_VALUES = {"true", "1", "yes", "on"}
FALSE_VALUES = {"false", "0", "no", "off"}


def parse_bool(value: Any) -> Optional[bool]:
    """
    Interpret ``value`` as a boolean.

    Returns None when the value has no boolean reading, so callers can
    report it instead of guessing.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
    return None


def to_bool(value: Any, default: bool = False) -> bool:
    parsed = parse_bool(value)
    return default if parsed is None else parsed


def to_str(value: Any) -> str:
    """None becomes "", strings are trimmed, anything else is stringified."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value)


def parse_int(value: Any) -> Optional[int]:
    """Accept real integers and integer strings; reject bools and floats."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("+-").isdigit():
            return int(text)
    return None


def split_csv(value: Any) -> list:
    """"a, b,,c" -> ["a", "b", "c"]; lists pass through trimmed."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        items = value
    else:
        items = str(value).split(",")
    return [str(item).strip() for item in items if str(item).strip()]
