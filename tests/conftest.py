import os
import tempfile
import pytest
import mongomock
from fastapi.testclient import TestClient

# Set test environment variables BEFORE importing app modules
os.environ["STORAGE_DIR"] = tempfile.mkdtemp(prefix="imagedb_test_")
os.environ["SESSION_SECRET"] = "test-session-secret-0123456789abcdef"
os.environ["AUTH_REQUIRED"] = "true"
os.environ["PUBLIC_HOST"] = ""
os.environ["LOG_LEVEL"] = "WARNING"
for var in ("ADMIN_EMAIL", "ADMIN_NAME", "ADMIN_PASSWORD"):
    os.environ.pop(var, None)

from imagedb.main import app
from imagedb.settings import settings
from imagedb.storage.mongo import MongoService
from imagedb.auth_service.service import hash_password

TEST_EMAIL = "admin@example.com"
TEST_NAME = "Admin"
TEST_PASSWORD = "correct horse battery staple"


@pytest.fixture(scope="session")
def password_hash():
    return hash_password(TEST_PASSWORD)


@pytest.fixture(scope="function")
def mongo_service(password_hash):
    """MongoService over an in-memory mongomock client, with the single account seeded."""
    service = MongoService(client=mongomock.MongoClient(tz_aware=True))
    service.upsert_user(TEST_EMAIL, TEST_NAME, password_hash)
    return service


@pytest.fixture(scope="function")
def test_client(mongo_service, mocker):
    # The lifespan builds its MongoService through this name
    mocker.patch("imagedb.main.MongoService", return_value=mongo_service)

    with TestClient(app) as client:
        yield client


@pytest.fixture(scope="function")
def auth_headers(test_client):
    resp = test_client.post(
        "/api/auth/login",
        json={"email": TEST_EMAIL, "password": TEST_PASSWORD},
    )
    assert resp.status_code == 200
    return {settings.token_header: resp.json()["data"]["token"]}
