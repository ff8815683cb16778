# entyre_cms/api/v1/mcda.py
from flask import jsonify

from entyre_cms.extensions import db
from entyre_cms.domain.exceptions import ValidationError
from entyre_cms.models.mcda_file import McdaFile
from entyre_cms.normalizers.content import normalize_mcda_file
from entyre_cms.services.media import (
    MCDA_EXTENSIONS,
    MCDA_FOLDER,
    check_extension,
    discard_media,
    discard_on_error,
    get_media_store,
)
from entyre_cms.utils.audit import log_action
from entyre_cms.utils.decorators import EDITOR_ROLES, roles_required
from entyre_cms.utils.transaction import transactional
from .common import load_or_404, uploaded_file
from . import v1_bp


@v1_bp.route("/mcda", methods=["GET"])
def list_mcda_files():
    files = McdaFile.query.order_by(McdaFile.created_at.desc()).all()
    return jsonify([normalize_mcda_file(f) for f in files]), 200


@v1_bp.route("/mcda/<file_id>", methods=["GET"])
def get_mcda_file(file_id):
    return jsonify(normalize_mcda_file(load_or_404(McdaFile, file_id, "file"))), 200


@v1_bp.route("/mcda", methods=["POST"])
@roles_required(*EDITOR_ROLES)
def upload_mcda_file():
    file = uploaded_file("file")
    if not file:
        raise ValidationError(["No file uploaded"])
    check_extension(file, MCDA_EXTENSIONS)

    upload = get_media_store().upload(file, MCDA_FOLDER)

    mcda_file = McdaFile()
    with discard_on_error(upload):
        with transactional():
            mcda_file.file_url = upload["url"]
            mcda_file.file_public_id = upload["publicId"]
            mcda_file.original_name = file.filename
            db.session.add(mcda_file)
            db.session.flush()

            log_action(
                action="mcda_file.create",
                entity_type="mcda_file",
                entity_id=mcda_file.id,
                payload={"originalName": mcda_file.original_name},
            )

    return jsonify(normalize_mcda_file(mcda_file)), 201


@v1_bp.route("/mcda/<file_id>", methods=["DELETE"])
@roles_required(*EDITOR_ROLES)
def delete_mcda_file(file_id):
    mcda_file = load_or_404(McdaFile, file_id, "file")
    snapshot = normalize_mcda_file(mcda_file)

    with transactional():
        db.session.delete(mcda_file)
        log_action(
            action="mcda_file.delete",
            entity_type="mcda_file",
            entity_id=snapshot["id"],
            payload={"originalName": snapshot["originalName"]},
        )

    discard_media(snapshot["filePublicId"])
    return jsonify({"message": "File deleted", "file": snapshot}), 200
