"""Shared fixtures: a throwaway SQLite database and ready-made services."""

import itertools
import os
import tempfile

# The application reads its configuration at import time
_TMP_DIR = tempfile.mkdtemp(prefix="blog-api-tests-")
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_FILE"] = ""
os.environ["APP_ENV"] = "test"
os.environ["ADMIN_EMAIL"] = ""

import pytest
from fastapi.testclient import TestClient

from src.auth import TokenService
from src.database import SessionLocal, engine
from src.main import app
from src.models import Base
from src.services.auth_service import AuthService
from src.services.post_service import PostService
from src.stores import PostStore, UserStore

TEST_SECRET = "test-secret"
PASSWORD = "Secret123"

_counter = itertools.count(1)


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def token_service():
    return TokenService(TEST_SECRET)


@pytest.fixture
def auth_service(db, token_service):
    return AuthService(UserStore(db), token_service)


@pytest.fixture
def post_service(db):
    return PostService(PostStore(db))


@pytest.fixture
def make_user(auth_service):
    """Register a user and return it."""

    def _make_user(first_name="Ada", last_name="Lovelace", email=None, password=PASSWORD):
        email = email or f"user{next(_counter)}@example.com"
        return auth_service.register(first_name, last_name, email, password).user

    return _make_user


@pytest.fixture
def make_post(post_service):
    """Create a post for the given author."""

    def _make_post(author, **overrides):
        data = {
            "title": "A post about testing",
            "content": "Some words that make up the body of the post.",
        }
        data.update(overrides)
        return post_service.create_post(data, author.id)

    return _make_post


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def register_via_api(client):
    """Register through the API and return (user json, auth headers)."""

    def _register(first_name="Grace", last_name="Hopper", email=None, password=PASSWORD):
        email = email or f"api{next(_counter)}@example.com"
        response = client.post("/api/auth/register", json={
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "password": password,
        })
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return data["user"], {"Authorization": f"Bearer {data['token']}"}

    return _register
