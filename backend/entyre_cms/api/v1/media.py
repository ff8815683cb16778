# entyre_cms/api/v1/media.py
from flask import jsonify

from entyre_cms.domain.exceptions import ValidationError
from entyre_cms.services.media import (
    IMAGE_EXTENSIONS,
    WORKFLOW_ICON_FOLDER,
    check_extension,
    get_media_store,
)
from entyre_cms.utils.audit import log_action
from entyre_cms.utils.decorators import EDITOR_ROLES, roles_required
from entyre_cms.utils.transaction import transactional
from .common import uploaded_file
from . import v1_bp


@v1_bp.route("/media/upload-icon", methods=["POST"])
@roles_required(*EDITOR_ROLES)
def upload_icon():
    """Upload a workflow node icon; the caller stores the returned URL."""
    file = uploaded_file("file", "icon")
    if not file:
        raise ValidationError(["No file uploaded"])
    check_extension(file, IMAGE_EXTENSIONS)

    upload = get_media_store().upload(file, WORKFLOW_ICON_FOLDER)

    with transactional():
        log_action(
            action="media.upload",
            entity_type="media",
            entity_id=upload["publicId"].rsplit("/", 1)[-1].split(".", 1)[0],
            payload={"publicId": upload["publicId"], "folder": WORKFLOW_ICON_FOLDER},
        )

    return jsonify({"fileUrl": upload["url"], "publicId": upload["publicId"]}), 200
