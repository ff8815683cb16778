# entyre_cms/api/v1/excel_files.py
import io

from flask import current_app, jsonify, request

from entyre_cms.extensions import db
from entyre_cms.domain.exceptions import ValidationError
from entyre_cms.domain.resources import clean_excel_fields
from entyre_cms.models.excel_file import ExcelFile
from entyre_cms.normalizers.content import normalize_excel_file
from entyre_cms.services.excel import analyze_workbook, classify_filename
from entyre_cms.services.media import (
    EXCEL_FOLDER,
    SPREADSHEET_EXTENSIONS,
    check_extension,
    discard_media,
    discard_on_error,
    get_media_store,
)
from entyre_cms.utils.audit import log_action
from entyre_cms.utils.decorators import EDITOR_ROLES, roles_required
from entyre_cms.utils.transaction import transactional
from .common import apply_fields, bool_arg, load_or_404, request_data, uploaded_file
from . import v1_bp

MAX_EXCEL_BYTES = 10 * 1024 * 1024


def _receive_workbook(file):
    """Check, analyze and upload a spreadsheet; returns (upload, file fields)."""
    check_extension(file, SPREADSHEET_EXTENSIONS)

    content = file.read()
    if len(content) > MAX_EXCEL_BYTES:
        raise ValidationError(["File too large. Maximum size is 10MB."])

    metadata = analyze_workbook(io.BytesIO(content))
    file.stream.seek(0)

    upload = get_media_store().upload(file, EXCEL_FOLDER)
    classification = classify_filename(file.filename)

    fields = {
        "file_url": upload["url"],
        "file_public_id": upload["publicId"],
        "original_name": file.filename,
        "file_size": len(content),
        "file_metadata": metadata,
        "scenario_id": classification["scenarioId"],
        "scenario_type": classification["scenarioType"],
        "scope_type": classification["scopeType"],
    }
    return upload, fields


@v1_bp.route("/excel-files", methods=["GET"])
def list_excel_files():
    query = ExcelFile.query

    if category := request.args.get("category"):
        query = query.filter(ExcelFile.category == category)

    active = bool_arg("active")
    if active is not None:
        query = query.filter(ExcelFile.is_active == active)

    if scenario_type := request.args.get("scenarioType"):
        query = query.filter(ExcelFile.scenario_type == scenario_type)

    if scope_type := request.args.get("scopeType"):
        query = query.filter(ExcelFile.scope_type == scope_type)

    files = query.order_by(ExcelFile.created_at.desc()).all()
    return jsonify([normalize_excel_file(f) for f in files]), 200


@v1_bp.route("/excel-files/meta/categories", methods=["GET"])
def list_excel_categories():
    rows = db.session.query(ExcelFile.category).distinct().all()
    return jsonify(sorted(row[0] for row in rows if row[0])), 200


@v1_bp.route("/excel-files/meta/scenarios", methods=["GET"])
def list_excel_scenarios():
    files = (
        ExcelFile.query
        .filter(ExcelFile.is_active == True, ExcelFile.scenario_id.isnot(None))  # noqa: E712
        .order_by(ExcelFile.created_at.desc())
        .all()
    )
    return jsonify([
        {
            "id": f.scenario_id,
            "fileId": f.id,
            "scenarioType": f.scenario_type,
            "scopeType": f.scope_type,
            "title": f.title,
            "originalName": f.original_name,
        }
        for f in files
    ]), 200


@v1_bp.route("/excel-files/<file_id>", methods=["GET"])
def get_excel_file(file_id):
    return jsonify(normalize_excel_file(load_or_404(ExcelFile, file_id, "excel file"))), 200


@v1_bp.route("/excel-files/<file_id>/content", methods=["GET"])
def get_excel_file_content(file_id):
    excel_file = load_or_404(ExcelFile, file_id, "excel file")
    return jsonify({
        "fileUrl": excel_file.file_url,
        "metadata": excel_file.file_metadata or {},
        "title": excel_file.title,
        "category": excel_file.category,
        "scenarioId": excel_file.scenario_id,
        "scenarioType": excel_file.scenario_type,
        "scopeType": excel_file.scope_type,
    }), 200


@v1_bp.route("/excel-files", methods=["POST"])
@roles_required(*EDITOR_ROLES)
def create_excel_file():
    file = uploaded_file("file")
    if not file:
        raise ValidationError(["Please provide an Excel file"])

    cleaned = clean_excel_fields(request_data())
    upload, file_fields = _receive_workbook(file)

    excel_file = ExcelFile()
    with discard_on_error(upload):
        with transactional():
            apply_fields(excel_file, {**cleaned, **file_fields})
            db.session.add(excel_file)
            db.session.flush()

            log_action(
                action="excel_file.create",
                entity_type="excel_file",
                entity_id=excel_file.id,
                payload={
                    "title": excel_file.title,
                    "originalName": excel_file.original_name,
                    "scenarioId": excel_file.scenario_id,
                },
            )

    current_app.logger.info(
        "Excel file %s stored (%d bytes)", excel_file.original_name, excel_file.file_size
    )
    return jsonify(normalize_excel_file(excel_file)), 201


@v1_bp.route("/excel-files/<file_id>", methods=["PUT"])
@roles_required(*EDITOR_ROLES)
def update_excel_file(file_id):
    excel_file = load_or_404(ExcelFile, file_id, "excel file")
    cleaned = clean_excel_fields(request_data(), partial=True)

    upload, file_fields = None, {}
    file = uploaded_file("file")
    if file:
        upload, file_fields = _receive_workbook(file)
    replaced = excel_file.file_public_id if upload else None

    with discard_on_error(upload):
        with transactional():
            changed = apply_fields(excel_file, {**cleaned, **file_fields})
            log_action(
                action="excel_file.update",
                entity_type="excel_file",
                entity_id=excel_file.id,
                payload={"fields": changed},
            )

    discard_media(replaced)
    return jsonify(normalize_excel_file(excel_file)), 200


@v1_bp.route("/excel-files/<file_id>", methods=["DELETE"])
@roles_required(*EDITOR_ROLES)
def delete_excel_file(file_id):
    excel_file = load_or_404(ExcelFile, file_id, "excel file")
    snapshot = normalize_excel_file(excel_file)

    with transactional():
        db.session.delete(excel_file)
        log_action(
            action="excel_file.delete",
            entity_type="excel_file",
            entity_id=snapshot["id"],
            payload={"originalName": snapshot["originalName"]},
        )

    discard_media(snapshot["filePublicId"])
    return jsonify({"message": "Excel file deleted successfully", "file": snapshot}), 200


@v1_bp.route("/excel-files/<file_id>/toggle-active", methods=["POST"])
@roles_required(*EDITOR_ROLES)
def toggle_excel_file(file_id):
    excel_file = load_or_404(ExcelFile, file_id, "excel file")

    with transactional():
        excel_file.is_active = not excel_file.is_active
        log_action(
            action="excel_file.toggle_active",
            entity_type="excel_file",
            entity_id=excel_file.id,
            payload={"isActive": excel_file.is_active},
        )

    state = "activated" if excel_file.is_active else "deactivated"
    return jsonify({
        "message": f"File {state} successfully",
        "isActive": excel_file.is_active,
    }), 200
