from datetime import datetime

import pytest

from elibrary import create_app
from elibrary.config import TestConfig
from elibrary.extensions import db, mail
from tests.factories import make_book, make_user


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def outbox(app):
    with mail.record_messages() as messages:
        yield messages


@pytest.fixture
def admin(app):
    return make_user("admin", role="admin", name="Admin User")


@pytest.fixture
def reader(app):
    return make_user("reader", name="Reader One")


@pytest.fixture
def other_reader(app):
    return make_user("other", name="Other Reader")


@pytest.fixture
def book(app):
    return make_book()


@pytest.fixture
def now():
    return datetime(2024, 3, 1, 10, 0, 0)
