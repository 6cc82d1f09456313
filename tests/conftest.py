"""
Shared fixtures: an in-memory MongoDB (mongomock), a temporary upload
directory and helpers to register users through the API.
"""

import os
import tempfile

# Settings are read once at import time
os.environ["HF_API_KEY"] = ""
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="credhub-uploads-"))

import mongomock
import pytest
from fastapi.testclient import TestClient

from credhub.core.auth import hash_password
from credhub.db.mongodb import init_mongo_indexes, set_mongo_client
from credhub.main import app
from credhub.models.profiles import AdminProfile
from credhub.services.mongo_service import UserService, to_mongo
from credhub.services.storage_service import LocalFileStorage, set_storage

PASSWORD = "Secret123!"


@pytest.fixture(autouse=True)
def mongo_client():
    client = mongomock.MongoClient()
    set_mongo_client(client)
    init_mongo_indexes()
    yield client
    set_mongo_client(None)


@pytest.fixture(autouse=True)
def storage(tmp_path):
    backend = LocalFileStorage(root=str(tmp_path / "uploads"), base_url="/uploads")
    set_storage(backend)
    yield backend
    set_storage(None)


@pytest.fixture
def client():
    return TestClient(app)


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    """Register an account and return the token response JSON."""

    def _register(role: str = "learner", email: str = None, **fields) -> dict:
        payload = {
            "email": email or f"{role}@example.com",
            "password": PASSWORD,
            "role": role,
        }
        if role == "learner":
            payload.update(first_name="Asha", last_name="Rao")
        elif role == "employer":
            payload.update(company_name="Acme Labs", industry="Software")
        elif role == "institution":
            payload.update(
                institution_name="City Polytechnic",
                institution_type="college",
                registration_number="REG-001",
            )
        payload.update(fields)
        response = client.post("/api/v1/auth/register", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def learner(register):
    return register("learner")


@pytest.fixture
def employer(register):
    return register("employer")


@pytest.fixture
def institution(register):
    return register("institution")


@pytest.fixture
def admin(client):
    """Admins cannot self-register, so insert one and log in."""
    UserService().create(
        email="admin@example.com",
        password_hash=hash_password(PASSWORD),
        role="admin",
        profile=to_mongo(AdminProfile(display_name="Root").model_dump()),
    )
    response = client.post(
        "/api/v1/auth/login", json={"email": "admin@example.com", "password": PASSWORD}
    )
    assert response.status_code == 200, response.text
    return response.json()
