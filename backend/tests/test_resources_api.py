import io
import uuid

from entyre_cms.api.v1 import articles
from entyre_cms.models.audit_log import AuditLog


def multipart(client, method, url, headers, data):
    return client.open(url, method=method, data=data, headers=headers, content_type="multipart/form-data")


def test_article_lifecycle_releases_replaced_images(client, editor_headers, media_store, png_file):
    created = multipart(client, "POST", "/api/v1/articles", editor_headers, {
        "title": "New plant",
        "summary": "Opening soon",
        "file": png_file(),
    })
    assert created.status_code == 201
    article = created.get_json()
    assert article["imagePublicId"] == "entyre/articles/fake-1"
    assert article["imageUrl"] == "https://media.test/entyre/articles/fake-1"

    updated = multipart(client, "PUT", f"/api/v1/articles/{article['id']}", editor_headers, {
        "image": png_file("second.png"),
    })
    assert updated.status_code == 200
    assert updated.get_json()["imagePublicId"] == "entyre/articles/fake-2"
    assert updated.get_json()["title"] == "New plant"
    assert media_store.destroyed == ["entyre/articles/fake-1"]

    deleted = client.delete(f"/api/v1/articles/{article['id']}", headers=editor_headers)
    assert deleted.status_code == 200
    assert deleted.get_json()["article"]["id"] == article["id"]
    assert media_store.destroyed == ["entyre/articles/fake-1", "entyre/articles/fake-2"]
    assert client.get(f"/api/v1/articles/{article['id']}").status_code == 404


def test_article_needs_title_and_image_type(client, editor_headers, png_file):
    missing = client.post("/api/v1/articles", json={"summary": "x"}, headers=editor_headers)
    assert missing.status_code == 400
    assert missing.get_json()["details"] == ["title is required"]

    wrong_type = multipart(client, "POST", "/api/v1/articles", editor_headers, {
        "title": "Doc",
        "file": png_file("notes.txt"),
    })
    assert wrong_type.status_code == 400


def test_failed_write_discards_the_upload(client, editor_headers, media_store, png_file, monkeypatch):
    def explode(**kwargs):
        raise RuntimeError("audit store down")

    monkeypatch.setattr(articles, "log_action", explode)

    resp = multipart(client, "POST", "/api/v1/articles", editor_headers, {
        "title": "Doomed",
        "file": png_file(),
    })
    assert resp.status_code == 500
    assert media_store.destroyed == ["entyre/articles/fake-1"]
    assert client.get("/api/v1/articles").get_json() == []


def test_banner_active_filter(client, editor_headers, png_file):
    multipart(client, "POST", "/api/v1/banners", editor_headers, {"title": "On", "image": png_file()})
    off = client.post("/api/v1/banners", json={"title": "Off", "active": "false"}, headers=editor_headers)
    assert off.status_code == 201
    assert off.get_json()["active"] is False

    active = client.get("/api/v1/banners?active=true").get_json()
    assert [b["title"] for b in active] == ["On"]
    assert active[0]["image"] == active[0]["imageUrl"]

    assert len(client.get("/api/v1/banners").get_json()) == 2


def test_video_requires_url(client, editor_headers, media_store, png_file):
    resp = client.post("/api/v1/videos", json={"title": "Tour"}, headers=editor_headers)
    assert resp.status_code == 400
    assert resp.get_json()["details"] == ["videoUrl is required"]

    created = multipart(client, "POST", "/api/v1/videos", editor_headers, {
        "title": "Tour",
        "videoUrl": "https://youtu.be/abc",
        "thumbnail": png_file(),
    })
    assert created.status_code == 201
    video = created.get_json()
    assert video["thumbnailPublicId"] == "entyre/videosThumbnail/fake-1"

    client.delete(f"/api/v1/videos/{video['id']}", headers=editor_headers)
    assert media_store.destroyed == ["entyre/videosThumbnail/fake-1"]


def test_workflow_validation_collects_every_problem(client, editor_headers):
    resp = client.post("/api/v1/workflows", json={
        "name": "",
        "nodes": ["Collect", ""],
        "connections": [{"from": "Collect"}, {"from": "a", "to": "b", "edgeStyle": "zigzag"}],
        "nodePositions": {"Collect": {"x": "1", "y": 2}},
    }, headers=editor_headers)

    assert resp.status_code == 400
    assert resp.get_json()["details"] == [
        "name is required and must be a string",
        "nodes[1] must be a non-empty string",
        "connections[0].to is required",
        "connections[1].edgeStyle must be one of: default, redDashed, redSolid, grayDashed, blueBold",
        "nodePositions.Collect.x must be a number",
    ]


def test_workflow_create_and_partial_update(client, editor_headers):
    created = client.post("/api/v1/workflows", json={
        "name": " Recycling ",
        "nodes": ["Collect", "Shred"],
        "connections": [{"from": "Collect", "to": "Shred", "edgeStyle": "redDashed"}],
        "nodePositions": {"Collect": {"x": 0, "y": 0}, "Shred": {"x": 120.5, "y": 40}},
    }, headers=editor_headers)
    assert created.status_code == 201
    workflow = created.get_json()
    assert workflow["name"] == "Recycling"
    assert workflow["connections"] == [{"from": "Collect", "to": "Shred", "edgeStyle": "redDashed"}]

    updated = client.put(
        f"/api/v1/workflows/{workflow['id']}",
        json={"status": "draft"},
        headers=editor_headers,
    )
    assert updated.status_code == 200
    body = updated.get_json()
    assert body["status"] == "draft"
    assert body["nodes"] == ["Collect", "Shred"]

    entry = AuditLog.query.filter_by(action="workflow.update").one()
    assert entry.payload == {"fields": ["status"]}


def test_resource_lookups(client, editor_headers):
    assert client.get("/api/v1/workflows/nope").status_code == 400
    assert client.get(f"/api/v1/banners/{uuid.uuid4()}").status_code == 404
    assert client.delete(f"/api/v1/videos/{uuid.uuid4()}", headers=editor_headers).status_code == 404


def test_resource_writes_need_editor(client, viewer_headers):
    assert client.post("/api/v1/workflows", json={"name": "x"}).status_code == 401
    assert client.post("/api/v1/workflows", json={"name": "x"}, headers=viewer_headers).status_code == 403


def test_upload_icon(client, editor_headers, png_file):
    resp = multipart(client, "POST", "/api/v1/media/upload-icon", editor_headers, {"file": png_file()})
    assert resp.status_code == 200
    assert resp.get_json() == {
        "fileUrl": "https://media.test/entyre/workflowFiles/fake-1",
        "publicId": "entyre/workflowFiles/fake-1",
    }

    missing = multipart(client, "POST", "/api/v1/media/upload-icon", editor_headers, {})
    assert missing.status_code == 400


def test_mcda_upload_list_and_delete(client, editor_headers, media_store):
    created = multipart(client, "POST", "/api/v1/mcda", editor_headers, {
        "file": (io.BytesIO(b"criterion,weight\ncost,0.4\n"), "weights.csv"),
    })
    assert created.status_code == 201
    mcda = created.get_json()
    assert mcda["filePublicId"] == "entyre/mcda/fake-1"
    assert mcda["fileUrl"] == "https://media.test/entyre/mcda/fake-1"
    assert mcda["originalName"] == "weights.csv"

    assert [f["id"] for f in client.get("/api/v1/mcda").get_json()] == [mcda["id"]]
    assert client.get(f"/api/v1/mcda/{mcda['id']}").get_json()["originalName"] == "weights.csv"

    deleted = client.delete(f"/api/v1/mcda/{mcda['id']}", headers=editor_headers)
    assert deleted.status_code == 200
    assert deleted.get_json()["message"] == "File deleted"
    assert media_store.destroyed == ["entyre/mcda/fake-1"]

    missing = client.get(f"/api/v1/mcda/{mcda['id']}")
    assert missing.status_code == 404
    assert missing.get_json()["message"] == "File not found"


def test_mcda_upload_rejections(client, editor_headers, viewer_headers, png_file):
    assert multipart(client, "POST", "/api/v1/mcda", editor_headers, {}).status_code == 400
    assert multipart(client, "POST", "/api/v1/mcda", editor_headers, {"file": png_file()}).status_code == 400
    assert multipart(client, "POST", "/api/v1/mcda", viewer_headers, {
        "file": (io.BytesIO(b"a,b\n"), "model.csv"),
    }).status_code == 403
