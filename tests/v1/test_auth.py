# mypy: ignore-errors
"""Tests for authentication endpoints."""

from fastapi import status
from jose import jwt

from gyansetu.core.security import create_access_token
from gyansetu.core.settings import settings


def test_register_returns_token_and_profile(client) -> None:
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "Neha@Example.edu", "password": "long-enough", "display_name": "Neha"},
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["profile"]["email"] == "neha@example.edu"
    assert data["profile"]["role"] == "student"
    claims = jwt.decode(data["access_token"], settings.secret_key, algorithms=[settings.jwt_algorithm])
    assert claims["sub"] == str(data["profile"]["id"])
    assert claims["role"] == "student"


def test_register_duplicate_email(client) -> None:
    body = {"email": "twice@example.edu", "password": "long-enough"}
    assert client.post("/api/v1/auth/register", json=body).status_code == status.HTTP_201_CREATED
    response = client.post("/api/v1/auth/register", json=body)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json() == {
        "error": "An account with this email already exists",
        "status": 409,
    }


def test_register_short_password(client) -> None:
    response = client.post(
        "/api/v1/auth/register", json={"email": "short@example.edu", "password": "abc"}
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {
        "error": "password: String should have at least 8 characters",
        "status": 400,
    }


def test_login_and_me(client) -> None:
    client.post("/api/v1/auth/register", json={"email": "arjun@example.edu", "password": "long-enough"})
    response = client.post(
        "/api/v1/auth/login", json={"email": "arjun@example.edu", "password": "long-enough"}
    )
    assert response.status_code == status.HTTP_200_OK
    token = response.json()["access_token"]

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == status.HTTP_200_OK
    assert me.json()["email"] == "arjun@example.edu"


def test_login_wrong_password(client, student) -> None:
    response = client.post(
        "/api/v1/auth/login", json={"email": student.email, "password": "not the password"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["error"] == "Invalid email or password"


def test_me_requires_token(client) -> None:
    response = client.get("/api/v1/auth/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Not authenticated", "status": 401}


def test_me_rejects_garbage_token(client) -> None:
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_token_for_unknown_user(client) -> None:
    token = create_access_token(424242)
    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["error"] == "User not found"
