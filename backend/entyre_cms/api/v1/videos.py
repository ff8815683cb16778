# entyre_cms/api/v1/videos.py
from flask import jsonify

from entyre_cms.extensions import db
from entyre_cms.domain.resources import clean_video
from entyre_cms.models.video import Video
from entyre_cms.normalizers.content import normalize_video
from entyre_cms.services.media import (
    IMAGE_EXTENSIONS,
    VIDEO_THUMBNAIL_FOLDER,
    check_extension,
    discard_media,
    discard_on_error,
    get_media_store,
)
from entyre_cms.utils.audit import log_action
from entyre_cms.utils.decorators import EDITOR_ROLES, roles_required
from entyre_cms.utils.transaction import transactional
from .common import apply_fields, load_or_404, request_data, uploaded_file
from . import v1_bp


def _upload_thumbnail():
    file = uploaded_file("thumbnail", "file")
    if not file:
        return None
    check_extension(file, IMAGE_EXTENSIONS)
    return get_media_store().upload(file, VIDEO_THUMBNAIL_FOLDER)


@v1_bp.route("/videos", methods=["GET"])
def list_videos():
    videos = Video.query.order_by(Video.created_at.desc()).all()
    return jsonify([normalize_video(v) for v in videos]), 200


@v1_bp.route("/videos/<video_id>", methods=["GET"])
def get_video(video_id):
    return jsonify(normalize_video(load_or_404(Video, video_id, "video"))), 200


@v1_bp.route("/videos", methods=["POST"])
@roles_required(*EDITOR_ROLES)
def create_video():
    cleaned = clean_video(request_data())
    upload = _upload_thumbnail()

    video = Video()
    with discard_on_error(upload):
        with transactional():
            apply_fields(video, cleaned)
            if upload:
                video.thumbnail = upload["url"]
                video.thumbnail_public_id = upload["publicId"]
            db.session.add(video)
            db.session.flush()

            log_action(
                action="video.create",
                entity_type="video",
                entity_id=video.id,
                payload={"title": video.title, "videoUrl": video.video_url},
            )

    return jsonify(normalize_video(video)), 201


@v1_bp.route("/videos/<video_id>", methods=["PUT"])
@roles_required(*EDITOR_ROLES)
def update_video(video_id):
    video = load_or_404(Video, video_id, "video")
    cleaned = clean_video(request_data(), partial=True)
    upload = _upload_thumbnail()
    replaced = video.thumbnail_public_id if upload else None

    with discard_on_error(upload):
        with transactional():
            changed = apply_fields(video, cleaned)
            if upload:
                video.thumbnail = upload["url"]
                video.thumbnail_public_id = upload["publicId"]
                changed.append("thumbnail")

            log_action(
                action="video.update",
                entity_type="video",
                entity_id=video.id,
                payload={"fields": changed},
            )

    discard_media(replaced)
    return jsonify(normalize_video(video)), 200


@v1_bp.route("/videos/<video_id>", methods=["DELETE"])
@roles_required(*EDITOR_ROLES)
def delete_video(video_id):
    video = load_or_404(Video, video_id, "video")
    snapshot = normalize_video(video)

    with transactional():
        db.session.delete(video)
        log_action(
            action="video.delete",
            entity_type="video",
            entity_id=snapshot["id"],
            payload={"title": snapshot["title"]},
        )

    discard_media(snapshot["thumbnailPublicId"])
    return jsonify({"message": "Video deleted successfully", "video": snapshot}), 200
