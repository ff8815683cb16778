# entyre_cms/api/v1/common.py
"""Request parsing shared by the v1 handlers."""
from typing import Any, Dict, Optional

from flask import request

from entyre_cms.extensions import db
from entyre_cms.domain.exceptions import NotFound, ValidationError
from entyre_cms.utils.coercion import parse_bool
from entyre_cms.utils.identifiers import validate_identifier


def request_data() -> Dict[str, Any]:
    """JSON object body, or the form fields of a multipart/urlencoded request."""
    if request.is_json:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError(["Request body must be a JSON object"])
        return data
    return request.form.to_dict()


def uploaded_file(*names):
    for name in names:
        file = request.files.get(name)
        if file and file.filename:
            return file
    return None


def bool_arg(name: str) -> Optional[bool]:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    value = parse_bool(raw)
    if value is None:
        raise ValidationError([f"{name} must be true or false"])
    return value


def positive_int_arg(name: str) -> Optional[int]:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError([f"{name} must be a positive integer"]) from None
    if value <= 0:
        raise ValidationError([f"{name} must be a positive integer"])
    return value


def load_or_404(model, object_id, label: str):
    obj = db.session.get(model, validate_identifier(object_id, label))
    if obj is None:
        raise NotFound(f"{label.capitalize()} not found")
    return obj


def apply_fields(obj, cleaned: Dict[str, Any]) -> list:
    """setattr every cleaned value; returns the attributes that changed."""
    changed = []
    for attribute, value in cleaned.items():
        if getattr(obj, attribute) != value:
            setattr(obj, attribute, value)
            changed.append(attribute)
    return changed
