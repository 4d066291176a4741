import pytest
from httpx import AsyncClient

from app.core import security


COOKIE = security.settings.AUTH_COOKIE_NAME


@pytest.fixture
def admin_password(monkeypatch):
    monkeypatch.setattr(security.settings, "ADMIN_PASSWORD", "hunter2")
    return "hunter2"


@pytest.mark.asyncio
async def test_open_access_without_password(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(security.settings, "ADMIN_PASSWORD", None)

    response = await client.get("/api/v1/projects")

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_login_without_password_configured(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(security.settings, "ADMIN_PASSWORD", None)

    response = await client.post("/api/v1/auth/login", json={})

    assert response.status_code == 200
    assert response.json()["message"] == "No password configured"


@pytest.mark.asyncio
async def test_protected_routes_require_cookie(client: AsyncClient, admin_password):
    for path in ("/api/v1/projects", "/api/v1/expenses", "/api/v1/analytics/summary",
                 "/api/v1/backlinks", "/api/v1/export", "/api/v1/resources",
                 "/api/v1/github-accounts"):
        response = await client.get(path)
        assert response.status_code == 401, path
        assert response.json()["error"] == "unauthorized"


@pytest.mark.asyncio
async def test_health_stays_public(client: AsyncClient, admin_password):
    response = await client.get("/api/v1/ready")

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_wrong_password_is_rejected(client: AsyncClient, admin_password):
    response = await client.post("/api/v1/auth/login", json={"password": "wrong"})

    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"
    assert COOKIE not in response.cookies


@pytest.mark.asyncio
async def test_login_sets_session_cookie(client: AsyncClient, admin_password):
    response = await client.post("/api/v1/auth/login", json={"password": admin_password})

    assert response.status_code == 200
    assert response.json()["message"] == "Logged in"
    token = response.cookies.get(COOKIE)
    assert token == security.session_token()

    response = await client.get(
        "/api/v1/projects", headers={"Cookie": f"{COOKIE}={token}"}
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_forged_cookie_is_rejected(client: AsyncClient, admin_password):
    response = await client.get(
        "/api/v1/projects", headers={"Cookie": f"{COOKIE}=authenticated"}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_changing_password_invalidates_sessions(
    client: AsyncClient, admin_password, monkeypatch
):
    old_token = security.session_token()
    monkeypatch.setattr(security.settings, "ADMIN_PASSWORD", "correct horse")

    response = await client.get(
        "/api/v1/projects", headers={"Cookie": f"{COOKIE}={old_token}"}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_clears_cookie(client: AsyncClient):
    response = await client.post("/api/v1/auth/logout")

    assert response.status_code == 200
    assert COOKIE in response.headers.get("set-cookie", "")
