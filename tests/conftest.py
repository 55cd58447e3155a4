from __future__ import annotations

import time

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from starlette.testclient import TestClient

from app.core.dependencies import get_current_user
from app.main import app
from app.models.auth import UserInfo
from app.models.employee import Employee

TEST_SECRET_KEY = "test-secret-key-0000000000000000"
TEST_USERNAME = "admin"
TEST_PASSWORD = "password"


@pytest.fixture(autouse=True)
def _test_settings():
    from app.core.config import settings

    original = {
        "JWT_SECRET_KEY": settings.JWT_SECRET_KEY,
        "UPSTREAM_BASE_URL": settings.UPSTREAM_BASE_URL,
        "AUTH_USERNAME": settings.AUTH_USERNAME,
        "AUTH_PASSWORD": settings.AUTH_PASSWORD,
    }
    settings.JWT_SECRET_KEY = TEST_SECRET_KEY
    settings.UPSTREAM_BASE_URL = ""
    settings.AUTH_USERNAME = TEST_USERNAME
    settings.AUTH_PASSWORD = TEST_PASSWORD
    yield
    for key, value in original.items():
        setattr(settings, key, value)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def _make_token(
    *,
    subject: str = TEST_USERNAME,
    secret: str = TEST_SECRET_KEY,
    expired: bool = False,
) -> str:
    now = int(time.time())
    claims = {
        "sub": subject,
        "iat": now - 60,
        "exp": now - 3600 if expired else now + 3600,
    }
    return jwt.encode(claims, secret, algorithm="HS256")


@pytest.fixture
def mock_user():
    return UserInfo(username="admin")


@pytest.fixture
def authenticated_client(mock_user):
    app.dependency_overrides[get_current_user] = lambda: mock_user
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def sample_employees() -> list[Employee]:
    return [
        Employee(id="1", name="John", salary=1000, age=30, title="Engineer", email="john@company.com"),
        Employee(id="2", name="Jane", salary=2000, age=28, title="Manager", email="jane@company.com"),
        Employee(id="3", name="Bob", salary=1500, age=45, title="Analyst", email="bob@company.com"),
        Employee(id="4", name="Alice", salary=3000, age=35, title="Director", email="alice@company.com"),
    ]
