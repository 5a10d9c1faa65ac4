"""Shared fixtures for the API tests.

Each test gets its own SQLite file and media directory under
``tmp_path`` so tests never see each other's data.
"""

import os
import sys

import pytest
from fastapi.testclient import TestClient

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from khadmaty_api.app.core.config import settings  # noqa: E402
from khadmaty_api.app.core.db import init_db  # noqa: E402
from khadmaty_api.app.main import create_app  # noqa: E402


API = "/api/v1"


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def sign_up(client: TestClient, email: str, role: str = "customer", **extra) -> dict:
    payload = {"email": email, "password": "secret123", "full_name": extra.pop("full_name", "مستخدم"), "role": role}
    payload.update(extra)
    response = client.post(f"{API}/auth/signup", json=payload)
    assert response.status_code == 201, response.text
    body = response.json()
    return {"token": body["access_token"], "headers": auth_headers(body["access_token"]), "user": body["user"]}


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "test.db"))
    monkeypatch.setattr(settings, "media_root", str(tmp_path / "media"))
    init_db()
    with TestClient(create_app()) as c:
        yield c


@pytest.fixture
def provider(client):
    return sign_up(client, "provider@example.com", role="provider", full_name="أحمد الكهربائي", phone="0551234567")


@pytest.fixture
def customer(client):
    return sign_up(client, "customer@example.com", full_name="سارة", phone="0661234567", wilaya="16")


@pytest.fixture
def service(client, provider):
    response = client.post(
        f"{API}/services/",
        json={
            "title": "تمديدات كهربائية",
            "category": "electrician",
            "description": "تركيب وصيانة",
            "price_fixed": 1500,
            "location": "الجزائر",
        },
        headers=provider["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()
