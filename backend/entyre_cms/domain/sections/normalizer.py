# entyre_cms/domain/sections/normalizer.py
"""
Canonical form of a home content section.

``normalize_section_payload`` is the only place defaults are filled, loose
wire types are coerced and type-specific data is cleaned up. It runs on every
create and update, after validation and before anything is written.
"""
from __future__ import annotations

import copy
import json
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from dateutil.parser import parse as parse_date

from entyre_cms.domain.sections.registry import (
    DEFAULT_SECTION_TYPE,
    ITEM_DEFAULTS,
    PAYLOAD_DEFAULTS,
    PAYLOAD_ZERO_VALUES,
    SECTION_TYPES,
    SectionTypeSpec,
)
from entyre_cms.utils.coercion import parse_int, to_bool, to_str

LAYOUT_DEFAULTS: Dict[str, Any] = {
    "containerWidth": "contained",
    "padding": "normal",
    "background": "transparent",
    "customBackground": "",
    "textAlign": "left",
    "columns": 1,
    "gap": "normal",
}

TYPOGRAPHY_DEFAULTS: Dict[str, Any] = {
    "titleSize": "h2",
    "titleColor": "#003C69",
    "contentColor": "#333333",
    "fontFamily": "default",
}

ANIMATION_DEFAULTS: Dict[str, Any] = {
    "enabled": False,
    "type": "fadeIn",
    "delay": 0,
    "duration": 500,
}

DISPLAY_CONDITION_DEFAULTS: Dict[str, Any] = {
    "startDate": None,
    "endDate": None,
    "userRoles": [],
    "deviceType": "all",
}

SEO_DEFAULTS: Dict[str, Any] = {
    "metaTitle": "",
    "metaDescription": "",
    "keywords": [],
}

SUB_OBJECT_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "layout": LAYOUT_DEFAULTS,
    "typography": TYPOGRAPHY_DEFAULTS,
    "animation": ANIMATION_DEFAULTS,
    "displayConditions": DISPLAY_CONDITION_DEFAULTS,
    "seo": SEO_DEFAULTS,
}

# Type-dependent layout defaults: (type, key, generic default, type default)
TYPE_LAYOUT_DEFAULTS = (
    ("hero", "background", "transparent", "gradient-1"),
    ("features-grid", "columns", 1, 3),
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_aware(value: Any) -> Optional[datetime]:
    """Datetime or ISO string -> timezone-aware datetime (naive means UTC)."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = parse_date(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# -------------------------------------------------
# Sub-objects
# -------------------------------------------------

def _coerce_layout(layout: Dict[str, Any]) -> Dict[str, Any]:
    columns = parse_int(layout.get("columns"))
    layout["columns"] = columns if columns is not None else LAYOUT_DEFAULTS["columns"]
    layout["customBackground"] = to_str(layout.get("customBackground"))
    return layout


def _coerce_animation(animation: Dict[str, Any]) -> Dict[str, Any]:
    animation["enabled"] = to_bool(animation.get("enabled"))
    for key in ("delay", "duration"):
        parsed = parse_int(animation.get(key))
        animation[key] = parsed if parsed is not None else ANIMATION_DEFAULTS[key]
    return animation


def _coerce_display_conditions(conditions: Dict[str, Any]) -> Dict[str, Any]:
    for key in ("startDate", "endDate"):
        parsed = as_aware(conditions.get(key))
        conditions[key] = parsed.isoformat() if parsed else None
    conditions["userRoles"] = [to_str(role) for role in conditions.get("userRoles") or []]
    return conditions


def _coerce_seo(seo: Dict[str, Any]) -> Dict[str, Any]:
    seo["metaTitle"] = to_str(seo.get("metaTitle"))
    seo["metaDescription"] = to_str(seo.get("metaDescription"))
    seo["keywords"] = [to_str(word) for word in seo.get("keywords") or [] if to_str(word)]
    return seo


SUB_OBJECT_COERCERS = {
    "layout": _coerce_layout,
    "animation": _coerce_animation,
    "displayConditions": _coerce_display_conditions,
    "seo": _coerce_seo,
}


def merge_sub_object(
    name: str,
    supplied: Optional[Mapping[str, Any]],
    existing: Optional[Mapping[str, Any]],
) -> Dict[str, Any]:
    """defaults <- existing <- supplied, restricted to known keys."""
    defaults = SUB_OBJECT_DEFAULTS[name]
    merged = copy.deepcopy(defaults)

    for source in (existing, supplied):
        if not source:
            continue
        for key in defaults:
            if key in source and source[key] is not None:
                merged[key] = copy.deepcopy(source[key])

    coerce = SUB_OBJECT_COERCERS.get(name)
    return coerce(merged) if coerce else merged


def _apply_type_layout_defaults(
    section_type: str,
    layout: Dict[str, Any],
    supplied_layout: Optional[Mapping[str, Any]],
) -> None:
    supplied_layout = supplied_layout or {}
    for owner, key, generic, typed in TYPE_LAYOUT_DEFAULTS:
        if section_type == owner and key not in supplied_layout and layout[key] == generic:
            layout[key] = typed


# -------------------------------------------------
# Type-specific payload
# -------------------------------------------------

def _coerce_item(field_name: str, item: Mapping[str, Any]) -> Dict[str, Any]:
    normalized = {}
    for key, default in ITEM_DEFAULTS[field_name].items():
        value = item.get(key)
        if isinstance(default, bool):
            normalized[key] = to_bool(value, default)
        else:
            normalized[key] = to_str(value) or default
    return normalized


def _coerce_payload_value(name: str, value: Any) -> Any:
    if name in ITEM_DEFAULTS:
        return [_coerce_item(name, item) for item in value or []]
    return to_str(value) or PAYLOAD_DEFAULTS[name]


def build_payload(
    spec: SectionTypeSpec,
    supplied: Mapping[str, Any],
    carried: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Type-specific fields owned by ``spec``.

    ``carried`` holds the previous values and must only be passed when the
    section keeps its type.
    """
    carried = carried or {}
    payload = {}
    for name in spec.payload_fields:
        if name in supplied:
            value = supplied[name]
        else:
            value = carried.get(name, PAYLOAD_DEFAULTS[name])
        payload[name] = _coerce_payload_value(name, copy.deepcopy(value))
    return payload


def expand_payload(section_type: str, payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Every type-specific field: owned ones from ``payload``, the rest zeroed."""
    spec = SECTION_TYPES.get(section_type)
    owned = set(spec.payload_fields) if spec else set()
    payload = payload or {}

    expanded = {}
    for name, zero in PAYLOAD_ZERO_VALUES.items():
        if name in owned:
            expanded[name] = copy.deepcopy(payload.get(name, PAYLOAD_DEFAULTS[name]))
        else:
            expanded[name] = copy.deepcopy(zero)
    return expanded


# -------------------------------------------------
# Content
# -------------------------------------------------

def _normalize_content(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, indent=2, ensure_ascii=False)
    return to_str(value)


def normalize_section_payload(
    validated: Mapping[str, Any],
    existing: Optional[Mapping[str, Any]] = None,
    *,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Produce the canonical section document.

    ``validated`` is the output of ``validate_section_payload``; ``existing``
    is the current canonical document on update. The result carries every
    common field, every sub-object, the tagged ``payload`` for the resolved
    type and ``updatedAt``. ``sectionIndex`` may be None when the caller left
    it to the store.
    """
    existing = existing or {}

    section_type = validated.get("type") or existing.get("type") or DEFAULT_SECTION_TYPE
    spec = SECTION_TYPES[section_type]

    document: Dict[str, Any] = {"type": section_type}

    if validated.get("sectionIndex") is not None:
        document["sectionIndex"] = parse_int(validated["sectionIndex"])
    else:
        document["sectionIndex"] = existing.get("sectionIndex")

    document["title"] = to_str(validated["title"]) if "title" in validated else existing.get("title", "")
    document["content"] = (
        _normalize_content(validated["content"]) if "content" in validated else existing.get("content", "")
    )

    if "isVisible" in validated and validated["isVisible"] is not None:
        document["isVisible"] = to_bool(validated["isVisible"], True)
    else:
        document["isVisible"] = existing.get("isVisible", True)

    for name in ("customCSS", "customJS"):
        document[name] = to_str(validated[name]) if name in validated else existing.get(name, "")

    for name in SUB_OBJECT_DEFAULTS:
        document[name] = merge_sub_object(name, validated.get(name), existing.get(name))

    _apply_type_layout_defaults(section_type, document["layout"], validated.get("layout"))

    # Type switch: the previous payload is dropped, never merged.
    carried = existing if existing.get("type") == section_type else None
    document["payload"] = build_payload(spec, validated, carried)

    timestamp = as_aware(now) or utcnow()
    previous = as_aware(existing.get("updatedAt"))
    if previous and previous > timestamp:
        timestamp = previous
    document["updatedAt"] = timestamp

    return document
