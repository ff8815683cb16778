from entyre_cms.extensions import db

from conftest import bearer, make_user

LOGIN = "/api/v1/auth/login"


def login(client, username="editor", password="correct-horse"):
    return client.post(LOGIN, json={"username": username, "password": password})


def test_login_returns_token_and_safe_user(client, editor):
    resp = login(client, username="  Editor ")
    assert resp.status_code == 200

    body = resp.get_json()
    assert body["token"]
    assert body["user"]["username"] == "editor"
    assert body["user"]["role"] == "editor"
    assert body["user"]["lastLogin"] is not None
    assert "password_hash" not in body["user"]

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.get_json()["user"]["id"] == editor.id


def test_missing_credentials(client):
    resp = client.post(LOGIN, json={"username": "editor"})
    assert resp.status_code == 400
    assert resp.get_json()["details"] == ["Username and password are required."]


def test_wrong_password_and_unknown_user_look_the_same(client, editor):
    wrong = login(client, password="nope")
    unknown = login(client, username="nobody")

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.get_json() == unknown.get_json()
    assert wrong.get_json()["message"] == "Invalid username or password."


def test_repeated_failures_lock_the_key(client, editor):
    for _ in range(5):
        assert login(client, password="nope").status_code == 401

    locked = login(client)
    assert locked.status_code == 429
    assert int(locked.headers["Retry-After"]) > 0

    # another username from the same address is unaffected
    make_user("other", "editor")
    assert login(client, username="other").status_code == 200


def test_success_clears_failures(app, client, editor):
    for _ in range(4):
        login(client, password="nope")
    assert login(client).status_code == 200
    assert app.extensions["login_limiter"].snapshot() == {}


def test_disabled_user_is_refused(client, app):
    make_user("retired", "editor", active=False)
    resp = login(client, username="retired")
    assert resp.status_code == 403


def test_verify_and_logout(client, editor_headers):
    verify = client.get("/api/v1/auth/verify", headers=editor_headers)
    assert verify.status_code == 200
    assert verify.get_json()["valid"] is True

    assert client.get("/api/v1/auth/verify").status_code == 401
    assert client.get(
        "/api/v1/auth/verify", headers={"Authorization": "Bearer garbage"}
    ).status_code == 401

    assert client.post("/api/v1/auth/logout", headers=editor_headers).status_code == 200


def test_token_of_disabled_user_is_rejected(client, app):
    user = make_user("leaving", "editor")
    headers = bearer(user)
    user.is_active = False
    db.session.commit()

    assert client.get("/api/v1/auth/me", headers=headers).status_code == 401


def test_change_password(client, editor, editor_headers):
    url = "/api/v1/auth/change-password"

    short = client.post(url, json={"currentPassword": "correct-horse", "newPassword": "short"}, headers=editor_headers)
    assert short.status_code == 400

    wrong = client.post(url, json={"currentPassword": "nope", "newPassword": "battery-staple"}, headers=editor_headers)
    assert wrong.status_code == 401

    ok = client.post(url, json={"currentPassword": "correct-horse", "newPassword": "battery-staple"}, headers=editor_headers)
    assert ok.status_code == 200

    assert login(client).status_code == 401
    assert login(client, password="battery-staple").status_code == 200
