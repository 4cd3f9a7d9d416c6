# tests/test_auth.py
"""Tests for sign-up, sign-in and token verification."""
import uuid
from datetime import timedelta

from fastapi import status

from app.core.config import get_settings

from conftest import make_token

API = get_settings().API_V1_STR


def test_signup_creates_profile_with_no_role(client, identity_provider, store) -> None:
    r = client.post(
        f"{API}/auth/signup",
        json={
            "email": "new@example.com",
            "password": "secret123",
            "name": "New Neighbour",
            "phoneNumber": "+971500000000",
        },
    )
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["success"] is True
    user_id = data["userId"]

    profile = store(f"user:{user_id}")
    assert profile["email"] == "new@example.com"
    assert profile["name"] == "New Neighbour"
    assert profile["phoneNumber"] == "+971500000000"
    assert profile["role"] == "none"
    assert profile["communityId"] is None


def test_signup_missing_fields_is_400(client, identity_provider) -> None:
    r = client.post(f"{API}/auth/signup", json={"email": "new@example.com", "password": "x"})
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert "error" in r.json()


def test_signup_blank_name_is_400(client, identity_provider) -> None:
    r = client.post(
        f"{API}/auth/signup",
        json={"email": "new@example.com", "password": "x", "name": "   "},
    )
    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_signup_provider_rejection_is_400(client, identity_provider) -> None:
    body = {"email": "dup@example.com", "password": "pw", "name": "Dup"}
    assert client.post(f"{API}/auth/signup", json=body).status_code == 200

    r = client.post(f"{API}/auth/signup", json=body)
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert "already been registered" in r.json()["error"]


def test_signin_returns_token_and_profile(client, identity_provider) -> None:
    client.post(
        f"{API}/auth/signup",
        json={"email": "sam@example.com", "password": "pw", "name": "Sam"},
    )

    r = client.post(f"{API}/auth/signin", json={"email": "sam@example.com", "password": "pw"})
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["success"] is True
    assert data["accessToken"]
    assert data["user"]["email"] == "sam@example.com"
    assert data["profile"]["role"] == "none"

    me = client.get(
        f"{API}/auth/me",
        headers={"Authorization": f"Bearer {data['accessToken']}"},
    )
    assert me.status_code == status.HTTP_200_OK
    assert me.json()["profile"]["name"] == "Sam"


def test_signin_wrong_password_is_400(client, identity_provider) -> None:
    client.post(
        f"{API}/auth/signup",
        json={"email": "sam@example.com", "password": "pw", "name": "Sam"},
    )
    r = client.post(f"{API}/auth/signin", json={"email": "sam@example.com", "password": "nope"})
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json()["error"] == "Invalid login credentials"


def test_me_requires_authorization_header(client) -> None:
    r = client.get(f"{API}/auth/me")
    assert r.status_code == status.HTTP_401_UNAUTHORIZED
    assert r.json()["error"] == "Missing authorization header"


def test_me_rejects_invalid_token(client) -> None:
    r = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == status.HTTP_401_UNAUTHORIZED
    assert r.json()["error"] == "Invalid or expired token"


def test_me_rejects_expired_token(client) -> None:
    token = make_token(str(uuid.uuid4()), "old@example.com", expires_in=timedelta(minutes=-5))
    r = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == status.HTTP_401_UNAUTHORIZED


def test_me_rejects_non_uuid_subject(client) -> None:
    token = make_token("not-a-uuid", "x@example.com")
    r = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == status.HTTP_401_UNAUTHORIZED
    assert r.json()["error"] == "Invalid sub in token"


def test_me_auto_provisions_missing_profile(client, owner, store) -> None:
    r = client.get(f"{API}/auth/me", headers=owner["headers"])
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["user"]["id"] == owner["id"]
    assert data["profile"]["role"] == "none"
    assert data["profile"]["name"] == owner["name"]
    assert store(f"user:{owner['id']}")["role"] == "none"
