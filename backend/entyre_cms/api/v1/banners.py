# entyre_cms/api/v1/banners.py
from flask import jsonify

from entyre_cms.extensions import db
from entyre_cms.domain.resources import clean_banner
from entyre_cms.models.banner import Banner
from entyre_cms.normalizers.content import normalize_banner
from entyre_cms.services.media import (
    BANNER_FOLDER,
    IMAGE_EXTENSIONS,
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


def _upload_image():
    file = uploaded_file("image", "file")
    if not file:
        return None
    check_extension(file, IMAGE_EXTENSIONS)
    return get_media_store().upload(file, BANNER_FOLDER)


def _attach(banner, upload):
    banner.image = upload["url"]
    banner.image_url = upload["url"]
    banner.image_public_id = upload["publicId"]


@v1_bp.route("/banners", methods=["GET"])
def list_banners():
    query = Banner.query
    active = bool_arg("active")
    if active is not None:
        query = query.filter(Banner.active == active)

    banners = query.order_by(Banner.created_at.desc()).all()
    return jsonify([normalize_banner(b) for b in banners]), 200


@v1_bp.route("/banners/<banner_id>", methods=["GET"])
def get_banner(banner_id):
    return jsonify(normalize_banner(load_or_404(Banner, banner_id, "banner"))), 200


@v1_bp.route("/banners", methods=["POST"])
@roles_required(*EDITOR_ROLES)
def create_banner():
    cleaned = clean_banner(request_data())
    upload = _upload_image()

    banner = Banner()
    with discard_on_error(upload):
        with transactional():
            apply_fields(banner, cleaned)
            if upload:
                _attach(banner, upload)
            db.session.add(banner)
            db.session.flush()

            log_action(
                action="banner.create",
                entity_type="banner",
                entity_id=banner.id,
                payload={"title": banner.title, "active": banner.active},
            )

    return jsonify(normalize_banner(banner)), 201


@v1_bp.route("/banners/<banner_id>", methods=["PUT"])
@roles_required(*EDITOR_ROLES)
def update_banner(banner_id):
    banner = load_or_404(Banner, banner_id, "banner")
    cleaned = clean_banner(request_data(), partial=True)
    upload = _upload_image()
    replaced = banner.image_public_id if upload else None

    with discard_on_error(upload):
        with transactional():
            changed = apply_fields(banner, cleaned)
            if upload:
                _attach(banner, upload)
                changed.append("image")

            log_action(
                action="banner.update",
                entity_type="banner",
                entity_id=banner.id,
                payload={"fields": changed},
            )

    discard_media(replaced)
    return jsonify(normalize_banner(banner)), 200


@v1_bp.route("/banners/<banner_id>", methods=["DELETE"])
@roles_required(*EDITOR_ROLES)
def delete_banner(banner_id):
    banner = load_or_404(Banner, banner_id, "banner")
    snapshot = normalize_banner(banner)

    with transactional():
        db.session.delete(banner)
        log_action(
            action="banner.delete",
            entity_type="banner",
            entity_id=snapshot["id"],
            payload={"title": snapshot["title"]},
        )

    discard_media(snapshot["imagePublicId"])
    return jsonify({"message": "Banner deleted successfully", "banner": snapshot}), 200
