# entyre_cms/services/media.py
"""
Media store used by every upload in the CMS.

Two backends share one interface: ``upload(file, folder) -> {"url",
"publicId"}`` and ``destroy(public_id)``. ``local`` writes under
``UPLOAD_FOLDER`` and is served from ``MEDIA_BASE_URL``; ``s3`` puts objects
into ``S3_MEDIA_BUCKET``. The active store lives in
``app.extensions["media_store"]`` so tests can swap in a fake.
"""
import logging
import os
import uuid
from contextlib import contextmanager
from typing import Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app
from werkzeug.utils import secure_filename

from entyre_cms.domain.exceptions import UpstreamFailure, ValidationError

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp', 'svg'}
SPREADSHEET_EXTENSIONS = {'xlsx', 'xlsm'}
# MCDA model inputs are stored raw
MCDA_EXTENSIONS = SPREADSHEET_EXTENSIONS | {'xls', 'csv', 'json', 'pdf'}

# Remote folders per resource
ARTICLE_FOLDER = "entyre/articles"
BANNER_FOLDER = "entyre/banners"
VIDEO_THUMBNAIL_FOLDER = "entyre/videosThumbnail"
EXCEL_FOLDER = "entyre/excel-files"
WORKFLOW_ICON_FOLDER = "entyre/workflowFiles"
MCDA_FOLDER = "entyre/mcda"


def file_extension(filename: Optional[str]) -> str:
    if not filename or '.' not in filename:
        return ''
    return filename.rsplit('.', 1)[1].lower()


def check_extension(file, allowed) -> str:
    ext = file_extension(getattr(file, "filename", None))
    if ext not in allowed:
        raise ValidationError(
            [f"File type not allowed. Allowed: {', '.join(sorted(allowed))}"]
        )
    return ext


def _object_name(file, folder: str) -> str:
    filename = secure_filename(file.filename or "") or "upload"
    ext = file_extension(filename)
    unique = uuid.uuid4().hex
    return f"{folder}/{unique}.{ext}" if ext else f"{folder}/{unique}"


class LocalMediaStore:
    def __init__(self, upload_folder: str, base_url: str = "/uploads"):
        self.upload_folder = upload_folder
        self.base_url = base_url.rstrip("/")

    def _path(self, public_id: str) -> str:
        root = os.path.abspath(self.upload_folder)
        path = os.path.abspath(os.path.join(root, public_id))
        if os.path.commonpath([root, path]) != root:
            raise ValidationError(["Invalid media identifier"])
        return path

    def upload(self, file, folder: str) -> Dict[str, str]:
        public_id = _object_name(file, folder)
        path = self._path(public_id)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        file.save(path)
        logger.info("Stored media %s", public_id)
        return {"url": f"{self.base_url}/{public_id}", "publicId": public_id}

    def destroy(self, public_id: str) -> bool:
        if not public_id:
            return False
        path = self._path(public_id)
        if not os.path.exists(path):
            return False
        os.remove(path)
        logger.info("Removed media %s", public_id)
        return True


class S3MediaStore:
    def __init__(
        self,
        bucket: str,
        region: Optional[str] = None,
        public_base_url: Optional[str] = None,
        client=None,
    ):
        if not bucket:
            raise ValueError("S3_MEDIA_BUCKET is not configured")
        self.bucket = bucket
        self.s3_client = client or boto3.client('s3', region_name=region)
        if public_base_url:
            self.public_base_url = public_base_url.rstrip("/")
        elif region:
            self.public_base_url = f"https://{bucket}.s3.{region}.amazonaws.com"
        else:
            self.public_base_url = f"https://{bucket}.s3.amazonaws.com"

    def upload(self, file, folder: str) -> Dict[str, str]:
        key = _object_name(file, folder)
        try:
            self.s3_client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=file.read(),
                ContentType=file.mimetype or "application/octet-stream",
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("S3 upload failed for %s: %s", key, exc)
            raise UpstreamFailure("Media upload failed") from exc
        return {"url": f"{self.public_base_url}/{key}", "publicId": key}

    def destroy(self, public_id: str) -> bool:
        if not public_id:
            return False
        try:
            self.s3_client.delete_object(Bucket=self.bucket, Key=public_id)
        except (BotoCoreError, ClientError) as exc:
            logger.error("S3 delete failed for %s: %s", public_id, exc)
            raise UpstreamFailure("Media delete failed") from exc
        return True


def build_media_store(config):
    backend = config.get("MEDIA_BACKEND", "local")
    if backend == "s3":
        return S3MediaStore(
            bucket=config.get("S3_MEDIA_BUCKET"),
            region=config.get("S3_MEDIA_REGION"),
            public_base_url=config.get("S3_PUBLIC_BASE_URL"),
        )
    if backend == "local":
        return LocalMediaStore(
            upload_folder=config.get("UPLOAD_FOLDER", "uploads"),
            base_url=config.get("MEDIA_BASE_URL", "/uploads"),
        )
    raise ValueError(f"Unknown MEDIA_BACKEND: {backend}")


def init_media_store(app):
    app.extensions.setdefault("media_store", build_media_store(app.config))


def get_media_store():
    return current_app.extensions["media_store"]


def discard_media(public_id: Optional[str]) -> None:
    """
    Best-effort removal of an uploaded object that is no longer referenced,
    e.g. after the database write following an upload failed. Failures are
    logged, never raised.
    """
    if not public_id:
        return
    try:
        get_media_store().destroy(public_id)
    except (UpstreamFailure, OSError, ValidationError) as exc:
        logger.warning("Could not remove orphaned media %s: %s", public_id, exc)


@contextmanager
def discard_on_error(upload: Optional[Dict[str, str]]):
    """Remove ``upload`` again if the block that records it fails."""
    try:
        yield
    except Exception:
        if upload:
            logger.warning("Write failed after upload; discarding %s", upload["publicId"])
            discard_media(upload["publicId"])
        raise
