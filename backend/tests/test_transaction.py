import pytest
from sqlalchemy.exc import IntegrityError

from entyre_cms.domain.exceptions import DuplicateKey
from entyre_cms.extensions import db
from entyre_cms.models.user import User
from entyre_cms.utils.transaction import transactional


def add_user(username):
    user = User()
    user.username = username
    user.set_password("irrelevant-pass")
    db.session.add(user)


def test_commits_on_success(app):
    with transactional():
        add_user("first")
    assert User.query.count() == 1


def test_unique_violation_maps_to_duplicate_key(app):
    with transactional():
        add_user("taken")

    with pytest.raises(DuplicateKey) as excinfo:
        with transactional(conflict="username taken is already in use"):
            add_user("taken")

    assert excinfo.value.message == "username taken is already in use"
    assert User.query.count() == 1


def test_unique_violation_without_conflict_message_propagates(app):
    with transactional():
        add_user("taken")

    with pytest.raises(IntegrityError):
        with transactional():
            add_user("taken")


def test_other_errors_roll_back(app):
    with pytest.raises(RuntimeError):
        with transactional():
            add_user("ghost")
            db.session.flush()
            raise RuntimeError("boom")

    assert User.query.count() == 0
