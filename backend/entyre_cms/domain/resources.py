# entyre_cms/domain/resources.py
"""
Validation for the CMS resources that sit next to home sections: articles,
banners, videos, workflows and Excel files.

Each ``clean_*`` function takes the raw request fields (JSON body or form
fields), collects every problem and raises a single ``ValidationError``, or
returns the cleaned values keyed by model attribute. ``partial=True`` is used
by PUT: only supplied fields are checked and returned.
"""
from typing import Any, Dict, List, Mapping

from entyre_cms.domain.exceptions import ValidationError
from entyre_cms.models.excel_file import CATEGORIES, DEFAULT_CATEGORY
from entyre_cms.utils.coercion import parse_bool, split_csv, to_str

EDGE_STYLES = ("default", "redDashed", "redSolid", "grayDashed", "blueBold")
CONNECTION_STRING_KEYS = ("sourceHandle", "targetHandle", "edgeType")


def _require_title(data: Mapping[str, Any], key: str, errors: List[str], partial: bool) -> None:
    if partial and key not in data:
        return
    if not to_str(data.get(key)):
        errors.append(f"{key} is required")


def _copy_strings(data, cleaned, mapping) -> None:
    for key, attribute in mapping.items():
        if key in data:
            cleaned[attribute] = to_str(data[key])


def _raise_if(errors: List[str]) -> None:
    if errors:
        raise ValidationError(errors)


def clean_article(data: Mapping[str, Any], *, partial: bool = False) -> Dict[str, Any]:
    errors: List[str] = []
    _require_title(data, "title", errors, partial)
    _raise_if(errors)

    cleaned: Dict[str, Any] = {}
    _copy_strings(data, cleaned, {
        "title": "title",
        "summary": "summary",
        "content": "content",
        "imageUrl": "image_url",
    })
    return cleaned


def clean_banner(data: Mapping[str, Any], *, partial: bool = False) -> Dict[str, Any]:
    errors: List[str] = []
    _require_title(data, "title", errors, partial)

    active = None
    if data.get("active") not in (None, ""):
        active = parse_bool(data["active"])
        if active is None:
            errors.append("active must be a boolean")
    _raise_if(errors)

    cleaned: Dict[str, Any] = {}
    _copy_strings(data, cleaned, {
        "title": "title",
        "image": "image",
        "imageUrl": "image_url",
    })
    if active is not None:
        cleaned["active"] = active
    elif not partial:
        cleaned["active"] = True
    return cleaned


def clean_video(data: Mapping[str, Any], *, partial: bool = False) -> Dict[str, Any]:
    errors: List[str] = []
    _require_title(data, "title", errors, partial)
    _require_title(data, "videoUrl", errors, partial)
    _raise_if(errors)

    cleaned: Dict[str, Any] = {}
    _copy_strings(data, cleaned, {
        "title": "title",
        "description": "description",
        "videoUrl": "video_url",
        "thumbnail": "thumbnail",
    })
    return cleaned


def _check_nodes(nodes: Any, errors: List[str]) -> None:
    if not isinstance(nodes, list):
        errors.append("nodes must be an array")
        return
    for position, node in enumerate(nodes):
        if not isinstance(node, str) or not node.strip():
            errors.append(f"nodes[{position}] must be a non-empty string")


def _check_connections(connections: Any, errors: List[str]) -> None:
    if not isinstance(connections, list):
        errors.append("connections must be an array")
        return
    for position, connection in enumerate(connections):
        label = f"connections[{position}]"
        if not isinstance(connection, dict):
            errors.append(f"{label} must be an object")
            continue
        for key in ("from", "to"):
            if not isinstance(connection.get(key), str) or not connection[key].strip():
                errors.append(f"{label}.{key} is required")
        for key in CONNECTION_STRING_KEYS:
            if connection.get(key) is not None and not isinstance(connection[key], str):
                errors.append(f"{label}.{key} must be a string")
        style = connection.get("edgeStyle")
        if style is not None and style not in EDGE_STYLES:
            errors.append(f"{label}.edgeStyle must be one of: {', '.join(EDGE_STYLES)}")


def _check_positions(positions: Any, errors: List[str]) -> None:
    if not isinstance(positions, dict):
        errors.append("nodePositions must be an object")
        return
    for node_id, point in positions.items():
        label = f"nodePositions.{node_id}"
        if not isinstance(point, dict):
            errors.append(f"{label} must be an object with x and y")
            continue
        for axis in ("x", "y"):
            value = point.get(axis)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                errors.append(f"{label}.{axis} must be a number")


def _clean_connection(connection: Mapping[str, Any]) -> Dict[str, Any]:
    cleaned = {"from": connection["from"].strip(), "to": connection["to"].strip()}
    for key in CONNECTION_STRING_KEYS:
        if connection.get(key) is not None:
            cleaned[key] = connection[key].strip()
    if connection.get("edgeStyle") is not None:
        cleaned["edgeStyle"] = connection["edgeStyle"]
    return cleaned


def clean_workflow(data: Any, *, partial: bool = False) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError(["Request body must be a JSON object"])

    errors: List[str] = []
    if not partial or "name" in data:
        if not isinstance(data.get("name"), str) or not data["name"].strip():
            errors.append("name is required and must be a string")
    for key in ("status", "description"):
        if data.get(key) is not None and not isinstance(data[key], str):
            errors.append(f"{key} must be a string")

    if data.get("nodes") is not None:
        _check_nodes(data["nodes"], errors)
    if data.get("connections") is not None:
        _check_connections(data["connections"], errors)
    if data.get("nodePositions") is not None:
        _check_positions(data["nodePositions"], errors)
    _raise_if(errors)

    cleaned: Dict[str, Any] = {}
    _copy_strings(data, cleaned, {
        "name": "name",
        "status": "status",
        "description": "description",
    })
    if data.get("nodes") is not None:
        cleaned["nodes"] = [node.strip() for node in data["nodes"]]
    elif not partial:
        cleaned["nodes"] = []
    if data.get("connections") is not None:
        cleaned["connections"] = [_clean_connection(c) for c in data["connections"]]
    elif not partial:
        cleaned["connections"] = []
    if data.get("nodePositions") is not None:
        cleaned["node_positions"] = {
            str(node_id): {"x": point["x"], "y": point["y"]}
            for node_id, point in data["nodePositions"].items()
        }
    elif not partial:
        cleaned["node_positions"] = {}
    return cleaned


def clean_excel_fields(data: Mapping[str, Any], *, partial: bool = False) -> Dict[str, Any]:
    """Form fields of an Excel upload; the file itself is checked by the caller."""
    errors: List[str] = []
    _require_title(data, "title", errors, partial)

    category = to_str(data.get("category"))
    if category and category not in CATEGORIES:
        errors.append(f"category must be one of: {', '.join(CATEGORIES)}")

    is_active = None
    if data.get("isActive") not in (None, ""):
        is_active = parse_bool(data["isActive"])
        if is_active is None:
            errors.append("isActive must be a boolean")
    _raise_if(errors)

    cleaned: Dict[str, Any] = {}
    _copy_strings(data, cleaned, {"title": "title", "description": "description"})
    if category:
        cleaned["category"] = category
    elif not partial:
        cleaned["category"] = DEFAULT_CATEGORY
    if "tags" in data:
        cleaned["tags"] = split_csv(data["tags"])
    elif not partial:
        cleaned["tags"] = []
    if is_active is not None:
        cleaned["is_active"] = is_active
    elif not partial:
        cleaned["is_active"] = True
    return cleaned
