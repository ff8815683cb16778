import io

import pytest

from entyre_cms import create_app
from entyre_cms.api.v1.auth import issue_token
from entyre_cms.extensions import db
from entyre_cms.models.user import User


class FakeMediaStore:
    """In-memory stand-in for the media store; records every destroy call."""

    def __init__(self):
        self.objects = {}
        self.destroyed = []
        self._counter = 0

    def upload(self, file, folder):
        self._counter += 1
        public_id = f"{folder}/fake-{self._counter}"
        self.objects[public_id] = file.read()
        return {"url": f"https://media.test/{public_id}", "publicId": public_id}

    def destroy(self, public_id):
        self.destroyed.append(public_id)
        return self.objects.pop(public_id, None) is not None


@pytest.fixture
def media_store():
    return FakeMediaStore()


@pytest.fixture
def app(media_store):
    app = create_app("testing")
    app.extensions["media_store"] = media_store

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(username, role, password="correct-horse", active=True):
    user = User()
    user.username = username
    user.role = role
    user.is_active = active
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def admin(app):
    return make_user("admin", "admin")


@pytest.fixture
def editor(app):
    return make_user("editor", "editor")


@pytest.fixture
def viewer(app):
    return make_user("viewer", "viewer")


def bearer(user):
    return {"Authorization": f"Bearer {issue_token(user)}"}


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)


@pytest.fixture
def editor_headers(editor):
    return bearer(editor)


@pytest.fixture
def viewer_headers(viewer):
    return bearer(viewer)


@pytest.fixture
def png_file():
    def _make(name="picture.png"):
        return (io.BytesIO(b"\x89PNG\r\n\x1a\nfake"), name)
    return _make
