"""Shared test fixtures for neighborfit."""

import os
import tempfile

# Must be set before neighborfit.config builds its Settings
os.environ.setdefault("BCRYPT_WORK_FACTOR", "4")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault(
    "DATABASE_PATH",
    os.path.join(tempfile.mkdtemp(prefix="neighborfit-"), "import.db")
)

import pytest

from neighborfit.auth.hashing import BcryptHasher
from neighborfit.auth.service import AuthService
from neighborfit.auth.token import JWTSigner
from neighborfit.config import settings
from neighborfit.db import get_core, init_db
from neighborfit.main import app

TEST_SECRET = "test-signing-secret"


@pytest.fixture
def db_path():
    """Point settings at a fresh temp-file database with the schema applied.

    A file (not :memory:) so every get_core() call sees the same data.
    """
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    os.unlink(path)

    original_db_path = settings.database_path
    settings.database_path = path
    try:
        init_db()
        yield path
    finally:
        settings.database_path = original_db_path
        if os.path.exists(path):
            os.unlink(path)


@pytest.fixture
def core(db_path):
    """Autocommit Core on the test database."""
    core = get_core()
    yield core
    core.close()


@pytest.fixture
def hasher():
    return BcryptHasher(rounds=4)


@pytest.fixture
def signer():
    return JWTSigner(TEST_SECRET)


@pytest.fixture
def auth_service(db_path, hasher, signer):
    """AuthService wired to the test database."""
    return AuthService(hasher=hasher, signer=signer)


@pytest.fixture
def client(db_path):
    """Flask test client backed by the test database."""
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def registered_user(client):
    """Register a user through the API.

    Returns a tuple of (response body, password).
    """
    password = "pw123456"
    response = client.post(
        "/api/auth/register",
        json={"name": "Ana", "email": "ana@x.com", "password": password}
    )
    assert response.status_code == 201
    return response.get_json(), password


@pytest.fixture
def auth_headers(registered_user):
    """Authorization header for the registered user."""
    body, _password = registered_user
    return {"Authorization": f"Bearer {body['token']}"}
