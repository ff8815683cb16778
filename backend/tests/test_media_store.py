import io

import boto3
import pytest
from botocore.stub import ANY, Stubber
from werkzeug.datastructures import FileStorage

from entyre_cms.domain.exceptions import UpstreamFailure, ValidationError
from entyre_cms.services.media import (
    IMAGE_EXTENSIONS,
    LocalMediaStore,
    S3MediaStore,
    build_media_store,
    check_extension,
    discard_media,
)


def storage(name="icon.png", body=b"png-bytes"):
    return FileStorage(stream=io.BytesIO(body), filename=name, content_type="image/png")


def test_check_extension():
    assert check_extension(storage("Photo.JPG"), IMAGE_EXTENSIONS) == "jpg"
    with pytest.raises(ValidationError):
        check_extension(storage("script.exe"), IMAGE_EXTENSIONS)
    with pytest.raises(ValidationError):
        check_extension(storage("noextension"), IMAGE_EXTENSIONS)


def test_local_store_round_trip(tmp_path):
    store = LocalMediaStore(str(tmp_path), "/uploads/")

    upload = store.upload(storage(), "entyre/banners")

    assert upload["publicId"].startswith("entyre/banners/")
    assert upload["publicId"].endswith(".png")
    assert upload["url"] == f"/uploads/{upload['publicId']}"
    assert (tmp_path / upload["publicId"]).read_bytes() == b"png-bytes"

    assert store.destroy(upload["publicId"]) is True
    assert store.destroy(upload["publicId"]) is False


def test_local_store_refuses_paths_outside_its_folder(tmp_path):
    store = LocalMediaStore(str(tmp_path / "media"))
    with pytest.raises(ValidationError):
        store.destroy("../outside.png")


def test_s3_store_upload_and_delete():
    client = boto3.client("s3", region_name="eu-west-1")
    store = S3MediaStore("entyre-media", region="eu-west-1", client=client)

    with Stubber(client) as stub:
        stub.add_response("put_object", {}, {
            "Bucket": "entyre-media",
            "Key": ANY,
            "Body": b"png-bytes",
            "ContentType": "image/png",
        })
        upload = store.upload(storage(), "entyre/articles")

        stub.add_response("delete_object", {}, {"Bucket": "entyre-media", "Key": upload["publicId"]})
        assert store.destroy(upload["publicId"]) is True

    assert upload["url"] == f"https://entyre-media.s3.eu-west-1.amazonaws.com/{upload['publicId']}"


def test_s3_failures_become_upstream_errors():
    client = boto3.client("s3", region_name="eu-west-1")
    store = S3MediaStore("entyre-media", public_base_url="https://cdn.test/", client=client)

    with Stubber(client) as stub:
        stub.add_client_error("put_object", service_error_code="AccessDenied", http_status_code=403)
        with pytest.raises(UpstreamFailure):
            store.upload(storage(), "entyre/articles")


def test_build_media_store_backends(tmp_path):
    local = build_media_store({"MEDIA_BACKEND": "local", "UPLOAD_FOLDER": str(tmp_path)})
    assert isinstance(local, LocalMediaStore)

    with pytest.raises(ValueError):
        build_media_store({"MEDIA_BACKEND": "ftp"})
    with pytest.raises(ValueError):
        build_media_store({"MEDIA_BACKEND": "s3"})


def test_discard_media_never_raises(app):
    class Broken:
        def destroy(self, public_id):
            raise UpstreamFailure("Media delete failed")

    app.extensions["media_store"] = Broken()
    discard_media("entyre/articles/x.png")
    discard_media(None)
