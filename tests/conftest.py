"""
Shared fixtures: in-memory SQLite per test, Flask test client with a known
CSRF token, and a logged-in variant.
"""
import os

os.environ["CAFE_DATABASE_URL"] = "sqlite://"
os.environ["CAFE_SEED"] = "0"
os.environ["CAFE_USERNAME"] = "marcelo"
os.environ["CAFE_PASSWORD"] = "marcelo"
os.environ["CAFE_SECRET_KEY"] = "test-secret"

import pytest

import app as cafe

CSRF = "test-csrf-token"


@pytest.fixture
def db_session():
    cafe.Base.metadata.create_all(cafe.engine)
    yield cafe.db()
    cafe.SessionLocal.remove()
    cafe.Base.metadata.drop_all(cafe.engine)


@pytest.fixture
def client(db_session):
    cafe.app.config.update(TESTING=True)
    with cafe.app.test_client() as c:
        with c.session_transaction() as sess:
            sess["_csrf_token"] = CSRF
        yield c


@pytest.fixture
def auth_client(client):
    with client.session_transaction() as sess:
        sess["auth"] = True
    return client
