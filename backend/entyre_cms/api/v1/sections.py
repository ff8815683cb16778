# entyre_cms/api/v1/sections.py
from flask import g, jsonify, request

from entyre_cms.application.sections.create_section import create_section
from entyre_cms.application.sections.delete_section import delete_section
from entyre_cms.application.sections.queries import get_section, list_sections
from entyre_cms.application.sections.reorder_sections import reorder_sections
from entyre_cms.application.sections.update_section import update_section
from entyre_cms.domain.exceptions import NotFound, ValidationError
from entyre_cms.domain.sections.registry import SECTION_TYPES, describe_types, is_section_type
from entyre_cms.normalizers.section import normalize_section
from entyre_cms.utils.decorators import EDITOR_ROLES, optional_identity, roles_required
from entyre_cms.utils.optimistic_lock import enforce_optimistic_lock
from .common import bool_arg, positive_int_arg
from . import v1_bp


def _json_body():
    return request.get_json(silent=True)


# ------------------------
# Reads
# ------------------------

@v1_bp.route("/sections", methods=["GET"])
@optional_identity
def list_home_sections():
    section_type = request.args.get("type") or None
    if section_type and not is_section_type(section_type):
        raise ValidationError([f"type must be one of: {', '.join(SECTION_TYPES)}"])

    visible = bool_arg("visible")
    limit = positive_int_arg("limit")

    # Anonymous readers only ever see visible sections
    if g.current_user_id is None:
        visible = True

    sections = list_sections(section_type=section_type, visible=visible, limit=limit)
    return jsonify([normalize_section(s) for s in sections]), 200


@v1_bp.route("/sections/types", methods=["GET"])
def list_section_types():
    return jsonify(describe_types()), 200


@v1_bp.route("/sections/<section_id>", methods=["GET"])
@optional_identity
def get_home_section(section_id):
    section = get_section(section_id)
    if g.current_user_id is None and not section.is_visible:
        raise NotFound("Section not found")
    return jsonify(normalize_section(section)), 200


# ------------------------
# Writes
# ------------------------

@v1_bp.route("/sections", methods=["POST"])
@roles_required(*EDITOR_ROLES)
def create_home_section():
    section = create_section(_json_body())
    return jsonify(normalize_section(section)), 201


@v1_bp.route("/sections/<section_id>", methods=["PUT"])
@roles_required(*EDITOR_ROLES)
def update_home_section(section_id):
    # -----------------------
    # Optimistic Locking Check
    # -----------------------
    enforce_optimistic_lock(get_section(section_id))

    section = update_section(section_id, _json_body())
    return jsonify(normalize_section(section)), 200


@v1_bp.route("/sections/<section_id>", methods=["DELETE"])
@roles_required(*EDITOR_ROLES)
def delete_home_section(section_id):
    summary = delete_section(section_id)
    return jsonify({
        "message": "Section deleted successfully",
        "deletedSection": summary,
    }), 200


@v1_bp.route("/sections/reorder", methods=["PATCH"])
@roles_required(*EDITOR_ROLES)
def reorder_home_sections():
    data = _json_body()
    ordered_ids = data.get("sectionIds") if isinstance(data, dict) else data

    sections = reorder_sections(ordered_ids)
    return jsonify([normalize_section(s) for s in sections]), 200
