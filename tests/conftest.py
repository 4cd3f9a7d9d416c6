# tests/conftest.py
from __future__ import annotations

import os
import uuid
from collections.abc import Callable, Generator, Iterator
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

os.environ["SUPABASE_URL"] = "http://localhost:54321"
os.environ["SUPABASE_KEY"] = "test-anon-key"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"
os.environ["DATABASE_URL"] = "sqlite://"

from fastapi import FastAPI
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.core.config import get_settings
from app.core.errors import ValidationFailed
from app.core.identity import ProviderSession, get_identity_provider
from app.database import get_session as app_get_session
from app.main import app as fastapi_app
from app.models.kv import KVRecord
from app.repositories.kv_repo import KVRepository
from app.schemas.user import AuthUser

API = get_settings().API_V1_STR


def make_token(
    user_id: str,
    email: str,
    name: str | None = None,
    expires_in: timedelta = timedelta(hours=1),
) -> str:
    claims: dict[str, Any] = {
        "sub": user_id,
        "email": email,
        "aud": "authenticated",
        "exp": datetime.now(timezone.utc) + expires_in,
        "user_metadata": {"name": name} if name else {},
    }
    settings = get_settings()
    return jwt.encode(claims, settings.SUPABASE_JWT_SECRET, algorithm=settings.SUPABASE_JWT_ALG)


class FakeIdentityProvider:
    """In-memory stand-in for the Supabase auth API."""

    def __init__(self) -> None:
        self.users: dict[str, dict[str, Any]] = {}

    def sign_up(self, email: str, password: str, name: str, phone_number: str = "") -> AuthUser:
        if email in self.users:
            raise ValidationFailed("A user with this email address has already been registered")
        user = AuthUser(
            id=str(uuid.uuid4()),
            email=email,
            user_metadata={"name": name, "phoneNumber": phone_number},
        )
        self.users[email] = {"password": password, "user": user}
        return user

    def sign_in(self, email: str, password: str) -> ProviderSession:
        entry = self.users.get(email)
        if entry is None or entry["password"] != password:
            raise ValidationFailed("Invalid login credentials")
        user: AuthUser = entry["user"]
        return ProviderSession(
            access_token=make_token(user.id, user.email, user.display_name),
            user=user,
        )


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    try:
        yield engine
    finally:
        SQLModel.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, engine: Engine) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        with Session(engine) as session:
            yield session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        # Each test starts with an empty store.
        with engine.begin() as cleanup_conn:
            cleanup_conn.execute(KVRecord.__table__.delete())


@pytest.fixture()
def identity_provider(app: FastAPI) -> Iterator[FakeIdentityProvider]:
    provider = FakeIdentityProvider()
    app.dependency_overrides[get_identity_provider] = lambda: provider
    try:
        yield provider
    finally:
        app.dependency_overrides.pop(get_identity_provider, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def store(engine: Engine) -> Callable[[str], Any]:
    """Read a raw value from the key-value table with a fresh session."""
    kv = KVRepository()

    def _read(key: str) -> Any:
        with Session(engine) as session:
            return kv.get(session, key)

    return _read


@pytest.fixture()
def write_store(engine: Engine) -> Callable[[str, Any], None]:
    kv = KVRepository()

    def _write(key: str, value: Any) -> None:
        with Session(engine) as session:
            kv.set(session, key, value)
            session.commit()

    return _write


def _identity(name: str) -> dict[str, Any]:
    user_id = str(uuid.uuid4())
    email = f"{name.lower()}@example.com"
    token = make_token(user_id, email, name)
    return {
        "id": user_id,
        "email": email,
        "name": name,
        "headers": {"Authorization": f"Bearer {token}"},
    }


@pytest.fixture()
def owner() -> dict[str, Any]:
    return _identity("Olivia")


@pytest.fixture()
def resident() -> dict[str, Any]:
    return _identity("Rami")


@pytest.fixture()
def outsider() -> dict[str, Any]:
    return _identity("Omar")


@pytest.fixture()
def community(client: TestClient, owner: dict[str, Any]) -> dict[str, Any]:
    """A community created by `owner` with code OWNER123."""
    response = client.post(
        f"{API}/communities/create",
        json={"name": "Palm Tower", "address": "12 Palm St", "authorizationCode": "OWNER123"},
        headers=owner["headers"],
    )
    assert response.status_code == 200, response.text
    return response.json()["community"]


@pytest.fixture()
def join_code(client: TestClient, owner: dict[str, Any], community: dict[str, Any]) -> str:
    response = client.post(
        f"{API}/communities/{community['id']}/generate-code",
        json={"recipientName": "Flat 4B", "expiresInDays": 7},
        headers=owner["headers"],
    )
    assert response.status_code == 200, response.text
    return response.json()["joinCode"]
