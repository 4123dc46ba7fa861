from __future__ import annotations

import os
from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient

# Environment must be in place before the app (and its settings) are imported
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("JWT_SECRET", "test_jwt_secret_32_chars_minimum")
os.environ.setdefault("OAUTH_CLIENT_ID", "myApp")
os.environ.setdefault("OAUTH_CLIENT_SECRET", "pass")
os.environ.setdefault("ADMIN_USERNAME", "admin@email.com")
os.environ.setdefault("ADMIN_PASSWORD", "admin")
os.environ.setdefault("USER_USERNAME", "user@email.com")
os.environ.setdefault("USER_PASSWORD", "user")

from events_api.core.config import settings  # noqa: E402
from events_api.db import SessionLocal, drop_db, init_db  # noqa: E402
from events_api.main import app  # noqa: E402
from events_api.services.accounts_service import AccountService  # noqa: E402


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def clean_db():
    # Fresh schema and default accounts for each test
    drop_db()
    init_db()
    db = SessionLocal()
    try:
        AccountService(db).ensure_default_accounts()
    finally:
        db.close()
    yield


@pytest.fixture
def get_token(client: TestClient) -> Callable[[str, str], str]:
    def _get_token(username: str, password: str) -> str:
        resp = client.post(
            "/oauth/token",
            auth=(settings.oauth_client_id, settings.oauth_client_secret),
            data={"username": username, "password": password, "grant_type": "password"},
        )
        assert resp.status_code == 200, resp.text
        return resp.json()["access_token"]

    return _get_token


@pytest.fixture
def admin_headers(get_token) -> dict[str, str]:
    token = get_token(settings.admin_username, settings.admin_password)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(get_token) -> dict[str, str]:
    token = get_token(settings.user_username, settings.user_password)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def event_payload() -> Callable[..., dict]:
    def _payload(**overrides) -> dict:
        payload = {
            "name": "name",
            "description": "description",
            "beginEnrollmentDateTime": "2021-08-01T08:30:00",
            "closeEnrollmentDateTime": "2021-08-31T05:30:00",
            "beginEventDateTime": "2021-08-01T08:30:00",
            "endEventDateTime": "2021-08-31T05:30:00",
            "location": "location",
            "basePrice": 1000,
            "maxPrice": 2000,
            "limitOfEnrollment": 1000,
        }
        payload.update(overrides)
        return payload

    return _payload
