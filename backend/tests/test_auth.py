"""
Tests for authentication endpoints: registration, login, and the current profile.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_register_user(client: AsyncClient):
    """Successful registration returns the profile with an opening balance."""
    response = await client.post("/api/v1/auth/register", json={
        "name": "Asha",
        "email": "New@Example.com",
        "password": "securepassword123",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "new@example.com"
    assert data["name"] == "Asha"
    assert data["walletBalance"] == 500
    assert "hashedPassword" not in data  # Never expose password hash
    assert "hashed_password" not in data


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, test_user):
    """Duplicate email returns 409, regardless of case."""
    response = await client.post("/api/v1/auth/register", json={
        "name": "Someone Else",
        "email": "TEST@example.com",
        "password": "securepassword123",
    })
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_register_weak_password(client: AsyncClient):
    """Password under 8 chars returns 422."""
    response = await client.post("/api/v1/auth/register", json={
        "name": "Weak",
        "email": "weak@example.com",
        "password": "short",
    })
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_register_invalid_email(client: AsyncClient):
    response = await client.post("/api/v1/auth/register", json={
        "name": "Nobody",
        "email": "not-an-email",
        "password": "securepassword123",
    })
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, test_user):
    """Valid credentials return JWT token."""
    response = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "testpassword123",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["accessToken"]
    assert data["tokenType"] == "bearer"


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, test_user):
    """Wrong password returns 401."""
    response = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "wrongpassword",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_nonexistent_email(client: AsyncClient):
    """Non-existent email returns 401."""
    response = await client.post("/api/v1/auth/login", json={
        "email": "nobody@example.com",
        "password": "anypassword123",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_register_then_login_and_read_profile(client: AsyncClient):
    await client.post("/api/v1/auth/register", json={
        "name": "Ravi",
        "email": "ravi@example.com",
        "password": "securepassword123",
    })
    login = await client.post("/api/v1/auth/login", json={
        "email": "ravi@example.com",
        "password": "securepassword123",
    })
    token = login.json()["accessToken"]

    response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["email"] == "ravi@example.com"
    assert response.json()["walletBalance"] == 500


@pytest.mark.asyncio
async def test_me_requires_token(client: AsyncClient):
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401
