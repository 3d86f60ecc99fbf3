from __future__ import annotations

import importlib
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient


@pytest.mark.asyncio
async def test_lifespan_configures_logging_and_disposes_engine(monkeypatch):
    main = importlib.import_module("lettrly.main")

    calls: list[str] = []

    def _fake_configure_logging():
        calls.append("logging")

    async def _fake_dispose():
        calls.append("dispose")

    monkeypatch.setattr(main, "configure_logging", _fake_configure_logging)
    monkeypatch.setattr(main, "async_engine", SimpleNamespace(dispose=_fake_dispose))

    async with main.lifespan(main.app):
        assert calls == ["logging"]

    assert calls == ["logging", "dispose"]


def test_root_and_health():
    main = importlib.import_module("lettrly.main")
    client = TestClient(main.app)

    assert client.get("/").json() == {"status": "ok", "service": "lettrly"}
    assert client.get("/health").json() == {"healthy": True}


def test_configure_logging_runs_once(monkeypatch):
    observability = importlib.import_module("lettrly.core.observability")
    calls: list[dict] = []

    monkeypatch.setattr(observability, "_is_configured", False)
    monkeypatch.setattr(observability.logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    observability.configure_logging()
    observability.configure_logging()

    assert len(calls) == 1
    assert calls[0]["format"] == observability.LOG_FORMAT
