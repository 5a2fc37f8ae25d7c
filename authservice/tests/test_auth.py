"""
Test cases for the authentication endpoints.
"""
import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from authservice.auth.models import TokenPayload

SIGNUP = {"name": "Ada Lovelace", "email": "Ada@Example.com", "password": "Str0ng!Pass"}


@pytest.mark.asyncio
async def test_health(app):
    """Test that the service is responding."""
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://test", transport=transport) as ac:
        response = await ac.get("/health")
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["data"]["status"] == "ok"


@pytest.mark.asyncio
async def test_signup_login_and_me(app, tokens):
    """Test registration, login and profile retrieval."""
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://test", transport=transport) as ac:
        response = await ac.post("/auth/signup", json=SIGNUP)
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "User registered successfully"

        user = body["data"]["user"]
        assert user["name"] == "Ada Lovelace"
        assert user["email"] == "ada@example.com"
        assert user["role"] == "user"
        assert "createdAt" in user
        assert "updatedAt" in user
        assert "password_hash" not in user

        payload = tokens.verify_token(body["data"]["token"])
        assert payload.user_id == user["id"]
        assert payload.email == "ada@example.com"

        response = await ac.post("/auth/login", json={"email": "ADA@example.com", "password": "Str0ng!Pass"})
        assert response.status_code == 200
        token = response.json()["data"]["token"]

        me_response = await ac.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me_response.status_code == 200
        assert me_response.json()["data"]["id"] == user["id"]


@pytest.mark.asyncio
async def test_duplicate_signup(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://test", transport=transport) as ac:
        assert (await ac.post("/auth/signup", json=SIGNUP)).status_code == 201
        response = await ac.post("/auth/signup", json={**SIGNUP, "email": "ada@example.com"})
        assert response.status_code == 409
        assert response.json() == {"success": False, "message": "Email address is already registered"}


@pytest.mark.asyncio
async def test_signup_validation_failure(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://test", transport=transport) as ac:
        response = await ac.post("/auth/signup", json={"name": "A", "email": "BAD", "password": "weak"})
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert {e["field"] for e in body["error"]} == {"name", "email", "password"}


@pytest.mark.asyncio
async def test_invalid_login(app):
    """Test login with invalid credentials."""
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://test", transport=transport) as ac:
        await ac.post("/auth/signup", json=SIGNUP)

        response = await ac.post("/auth/login", json={"email": "ada@example.com", "password": "Wr0ng!Pass"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

        response = await ac.post("/auth/login", json={"email": "nobody@example.com", "password": "Str0ng!Pass"})
        assert response.status_code == 401
        assert "data" not in response.json()


@pytest.mark.asyncio
async def test_password_reset_does_not_reveal_accounts(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://test", transport=transport) as ac:
        await ac.post("/auth/signup", json=SIGNUP)
        known = await ac.post("/auth/password-reset", json={"email": "ada@example.com"})
        unknown = await ac.post("/auth/password-reset", json={"email": "nobody@example.com"})
        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()


@pytest.mark.asyncio
async def test_protected_endpoints_unauthorized(app):
    """Test that protected endpoints reject unauthorized access."""
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://test", transport=transport) as ac:
        response = await ac.get("/auth/me")
        assert response.status_code == 401
        assert response.json()["message"] == "Authorization header missing"

        response = await ac.get("/auth/me", headers={"Authorization": "Basic xyz"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid authorization header format"

        response = await ac.get("/auth/me", headers={"Authorization": "Bearer invalid.token.here"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"


def test_me_for_deleted_user(app, tokens):
    token = tokens.generate_token(TokenPayload(user_id="gone", email="gone@example.com", role="user"))
    client = TestClient(app)
    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 404
    assert response.json()["message"] == "User not found"