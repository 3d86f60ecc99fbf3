from __future__ import annotations

import asyncio
import importlib
from datetime import datetime, timezone
from uuid import uuid4

from fastapi.testclient import TestClient

from lettrly.db.session import get_session_factory
from lettrly.features.auth import repo as auth_repo
from lettrly.main import app

auth_api = importlib.import_module("lettrly.features.auth.api")


class _FakeResult:
    def __init__(self, value):
        self._value = value

    def scalar_one_or_none(self):
        return self._value


class _FakeSession:
    def __init__(self, value=None):
        self.value = value
        self.statements = []

    async def execute(self, stmt):
        self.statements.append(stmt)
        return _FakeResult(self.value)


class _FakeSessionCM:
    def __init__(self, session):
        self._session = session

    async def __aenter__(self):
        return self._session

    async def __aexit__(self, _exc_type, _exc, _tb):
        return False


def test_blank_token_skips_the_database():
    session = _FakeSession()

    user_id = asyncio.run(auth_repo.resolve_session_user_id(session, token="   "))

    assert user_id is None
    assert session.statements == []


def test_token_lookup_filters_expired_sessions():
    owner = uuid4()
    session = _FakeSession(owner)
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)

    user_id = asyncio.run(auth_repo.resolve_session_user_id(session, token=" abc ", now=now))

    assert user_id == owner
    params = session.statements[0].compile().params
    assert "abc" in params.values()
    assert now in params.values()


def _client_with_session(monkeypatch, resolved):
    tokens: list[str] = []

    async def _fake_resolve(_session, *, token, now=None):
        tokens.append(token)
        return resolved

    monkeypatch.setattr(auth_api, "resolve_session_user_id", _fake_resolve)
    app.dependency_overrides[get_session_factory] = lambda: (lambda: _FakeSessionCM(_FakeSession()))
    return TestClient(app), tokens


def test_bearer_header_is_used_for_profile_me(monkeypatch):
    client, tokens = _client_with_session(monkeypatch, None)
    try:
        response = client.get("/api/profiles/me", headers={"Authorization": "Bearer tok-1"})
    finally:
        app.dependency_overrides.clear()

    assert tokens == ["tok-1"]
    assert response.status_code == 401


def test_session_cookie_is_used_when_header_missing(monkeypatch):
    client, tokens = _client_with_session(monkeypatch, None)
    client.cookies.set("lettrly_session", "cookie-token")
    try:
        response = client.get("/api/letters")
    finally:
        app.dependency_overrides.clear()

    assert tokens == ["cookie-token"]
    assert response.status_code == 401


def test_missing_credentials_never_hit_the_store(monkeypatch):
    client, tokens = _client_with_session(monkeypatch, uuid4())
    try:
        response = client.get("/api/letters/stream")
    finally:
        app.dependency_overrides.clear()

    assert tokens == []
    assert response.status_code == 401
    assert response.json() == {"detail": "Unauthorized"}

