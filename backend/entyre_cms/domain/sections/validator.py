# entyre_cms/domain/sections/validator.py
"""
Request validation for home content sections.

Pure functions: no database access, no Flask context. Every problem found is
collected and raised together so an editor can highlight all of them in one
round trip.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from dateutil.parser import parse as parse_date

from entyre_cms.domain.exceptions import ValidationError
from entyre_cms.domain.sections.registry import (
    DEFAULT_SECTION_TYPE,
    ITEM_DEFAULTS,
    SECTION_TYPES,
    SectionTypeSpec,
    is_section_type,
)
from entyre_cms.utils.coercion import parse_bool, parse_int, to_str

CREATE = "create"
UPDATE = "update"

SUB_OBJECTS = ("layout", "typography", "animation", "displayConditions", "seo")

LAYOUT_CHOICES = {
    "containerWidth": ("full", "contained", "narrow"),
    "padding": ("none", "small", "normal", "large"),
    "background": ("transparent", "white", "gray", "gradient-1", "gradient-2", "custom"),
    "textAlign": ("left", "center", "right"),
    "gap": ("small", "normal", "large"),
}
TYPOGRAPHY_CHOICES = {
    "titleSize": ("h1", "h2", "h3", "h4", "h5", "h6"),
    "fontFamily": ("default", "serif", "mono"),
}
ANIMATION_TYPES = ("fadeIn", "slideUp", "slideDown", "slideLeft", "slideRight", "zoomIn")
DEVICE_TYPES = ("all", "desktop", "mobile", "tablet")
BUTTON_STYLES = ("primary", "secondary", "outline", "ghost")
VIDEO_PLATFORMS = ("youtube", "vimeo", "custom")
MIN_COLUMNS, MAX_COLUMNS = 1, 4

SCALAR_CHOICES = {
    "cardButtonStyle": BUTTON_STYLES,
    "videoPlatform": VIDEO_PLATFORMS,
}


def _choices(values) -> str:
    return ", ".join(values)


def _check_choice(errors: List[str], label: str, value: Any, allowed) -> None:
    if value is None:
        return
    if not isinstance(value, str) or value not in allowed:
        errors.append(f"{label} must be one of: {_choices(allowed)}")


def _check_string(errors: List[str], label: str, value: Any) -> None:
    if value is not None and not isinstance(value, str):
        errors.append(f"{label} must be a string")


def _check_non_negative_int(errors: List[str], label: str, value: Any) -> None:
    if value is None:
        return
    parsed = parse_int(value)
    if parsed is None or parsed < 0:
        errors.append(f"{label} must be a non-negative integer")


def _check_string_list(errors: List[str], label: str, value: Any) -> None:
    if value is None:
        return
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        errors.append(f"{label} must be an array of strings")


def _validate_layout(layout: Mapping[str, Any], errors: List[str]) -> None:
    for key, allowed in LAYOUT_CHOICES.items():
        _check_choice(errors, f"layout.{key}", layout.get(key), allowed)

    _check_string(errors, "layout.customBackground", layout.get("customBackground"))

    if layout.get("columns") is not None:
        columns = parse_int(layout["columns"])
        if columns is None or not MIN_COLUMNS <= columns <= MAX_COLUMNS:
            errors.append(
                f"layout.columns must be an integer between {MIN_COLUMNS} and {MAX_COLUMNS}"
            )


def _validate_typography(typography: Mapping[str, Any], errors: List[str]) -> None:
    for key, allowed in TYPOGRAPHY_CHOICES.items():
        _check_choice(errors, f"typography.{key}", typography.get(key), allowed)
    for key in ("titleColor", "contentColor"):
        _check_string(errors, f"typography.{key}", typography.get(key))


def _validate_animation(animation: Mapping[str, Any], errors: List[str]) -> None:
    if animation.get("enabled") is not None and parse_bool(animation["enabled"]) is None:
        errors.append("animation.enabled must be a boolean")
    _check_choice(errors, "animation.type", animation.get("type"), ANIMATION_TYPES)
    _check_non_negative_int(errors, "animation.delay", animation.get("delay"))
    _check_non_negative_int(errors, "animation.duration", animation.get("duration"))


def _validate_display_conditions(conditions: Mapping[str, Any], errors: List[str]) -> None:
    _check_choice(errors, "displayConditions.deviceType", conditions.get("deviceType"), DEVICE_TYPES)
    _check_string_list(errors, "displayConditions.userRoles", conditions.get("userRoles"))

    dates = {}
    for key in ("startDate", "endDate"):
        raw = conditions.get(key)
        if raw in (None, ""):
            continue
        try:
            dates[key] = parse_date(str(raw))
        except (ValueError, OverflowError):
            errors.append(f"displayConditions.{key} must be a valid date")

    if len(dates) == 2:
        try:
            if dates["startDate"] > dates["endDate"]:
                errors.append("displayConditions.startDate must not be after endDate")
        except TypeError:
            errors.append("displayConditions dates must both include or both omit a timezone")


def _validate_seo(seo: Mapping[str, Any], errors: List[str]) -> None:
    _check_string(errors, "seo.metaTitle", seo.get("metaTitle"))
    _check_string(errors, "seo.metaDescription", seo.get("metaDescription"))
    _check_string_list(errors, "seo.keywords", seo.get("keywords"))


SUB_OBJECT_VALIDATORS = {
    "layout": _validate_layout,
    "typography": _validate_typography,
    "animation": _validate_animation,
    "displayConditions": _validate_display_conditions,
    "seo": _validate_seo,
}


def _validate_items(field_name: str, items: Any, spec: SectionTypeSpec, errors: List[str]) -> None:
    if not isinstance(items, list):
        errors.append(f"{field_name} must be an array")
        return

    known_keys = ITEM_DEFAULTS[field_name]
    for position, item in enumerate(items):
        label = f"{field_name}[{position}]"
        if not isinstance(item, dict):
            errors.append(f"{label} must be an object")
            continue

        for key in spec.item_required:
            if not to_str(item.get(key)):
                errors.append(f"{label}.{key} is required")

        for key, default in known_keys.items():
            value = item.get(key)
            if value is None:
                continue
            if isinstance(default, bool):
                if parse_bool(value) is None:
                    errors.append(f"{label}.{key} must be a boolean")
            elif not isinstance(value, (str, int, float)) or isinstance(value, bool):
                errors.append(f"{label}.{key} must be a string")

        if field_name == "heroButtons":
            _check_choice(errors, f"{label}.style", item.get("style") or None, BUTTON_STYLES)


def _validate_type_payload(
    payload: Mapping[str, Any],
    spec: SectionTypeSpec,
    existing: Optional[Mapping[str, Any]],
    errors: List[str],
) -> None:
    # Only reuse stored values when the section keeps its type; a type switch
    # starts from an empty payload.
    carried = existing if existing and existing.get("type") == spec.name else {}

    for name in spec.scalar_fields:
        if name in payload:
            _check_string(errors, name, payload[name])
            if name in SCALAR_CHOICES and payload[name] not in (None, ""):
                _check_choice(errors, name, payload[name], SCALAR_CHOICES[name])

    for name in spec.required:
        value = payload[name] if name in payload else carried.get(name)
        if not to_str(value):
            errors.append(f"{name} is required for {spec.name} sections")

    if spec.array_field and payload.get(spec.array_field) is not None:
        _validate_items(spec.array_field, payload[spec.array_field], spec, errors)


def validate_section_payload(
    payload: Any,
    *,
    mode: str = CREATE,
    existing: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Validate a create or update request for a section.

    ``existing`` is the current canonical document and is only consulted in
    update mode, to resolve the active type and to check type-specific
    required fields against the merged view.

    Returns a shallow copy of the payload with ``type`` resolved. Raises
    ``ValidationError`` carrying one message per violated rule.
    """
    if mode not in (CREATE, UPDATE):
        raise ValueError(f"Unknown validation mode: {mode}")

    if not isinstance(payload, dict):
        raise ValidationError(["Request body must be a JSON object"])

    errors: List[str] = []
    data = dict(payload)

    # -------------------------
    # Common fields
    # -------------------------
    if mode == CREATE or "title" in data:
        title = data.get("title")
        if title is None or (isinstance(title, str) and not title.strip()):
            errors.append("title is required")
        elif not isinstance(title, str):
            errors.append("title must be a string")

    type_supplied = "type" in data and not (mode == CREATE and data["type"] is None)
    if type_supplied and not is_section_type(data["type"]):
        errors.append(f"type must be one of: {_choices(SECTION_TYPES)}")

    if data.get("sectionIndex") is not None:
        index = parse_int(data["sectionIndex"])
        if index is None:
            errors.append("sectionIndex must be an integer")
        elif index < 0:
            errors.append("sectionIndex must not be negative")
    elif mode == UPDATE and "sectionIndex" in data:
        errors.append("sectionIndex must be an integer")

    if "content" in data and data["content"] is not None:
        if not isinstance(data["content"], (str, dict, list)):
            errors.append("content must be a string or a JSON object/array")

    if data.get("isVisible") is not None and parse_bool(data["isVisible"]) is None:
        errors.append("isVisible must be a boolean")

    for name in ("customCSS", "customJS"):
        _check_string(errors, name, data.get(name))

    # -------------------------
    # Sub-objects
    # -------------------------
    for name in SUB_OBJECTS:
        value = data.get(name)
        if value is None:
            continue
        if not isinstance(value, dict):
            errors.append(f"{name} must be an object")
            continue
        SUB_OBJECT_VALIDATORS[name](value, errors)

    # -------------------------
    # Type-specific payload
    # -------------------------
    if type_supplied:
        resolved_type = data["type"] if is_section_type(data["type"]) else None
    elif mode == UPDATE and existing:
        resolved_type = existing.get("type", DEFAULT_SECTION_TYPE)
    else:
        resolved_type = DEFAULT_SECTION_TYPE

    if resolved_type is not None:
        _validate_type_payload(
            data,
            SECTION_TYPES[resolved_type],
            existing if mode == UPDATE else None,
            errors,
        )
        data["type"] = resolved_type

    if errors:
        raise ValidationError(errors)

    return data
