from __future__ import annotations

import asyncio
import re
from types import SimpleNamespace
from uuid import uuid4

import pytest

from lettrly.features.letters import service as letters_service
from lettrly.features.letters.errors import LetterValidationError, RecipientNotFoundError
from lettrly.features.profiles.errors import ProfileNotFoundError

RECIPIENT = SimpleNamespace(id=uuid4(), username="leigh")


def _patch(monkeypatch):
    created: list[dict] = []

    async def _fake_profile(_session, username):
        if username.strip().lower() != "leigh":
            raise ProfileNotFoundError(f"Profile '{username}' was not found.")
        return RECIPIENT

    async def _fake_create(_session, **kwargs):
        created.append(kwargs)
        return SimpleNamespace(id=uuid4(), **kwargs)

    monkeypatch.setattr(letters_service, "get_profile_by_username", _fake_profile)
    monkeypatch.setattr(letters_service, "create_letter", _fake_create)
    return created


def _send(**overrides):
    params = {
        "recipient_username": "leigh",
        "content": "Hello there",
        "sender_name": None,
        "is_anonymous": False,
        "sender_id": None,
        "max_length": 20,
    }
    params.update(overrides)
    return asyncio.run(letters_service.send_letter(object(), **params))


def test_send_letter_strips_and_sanitizes_content(monkeypatch):
    created = _patch(monkeypatch)

    _send(content="  Dear\x00 you\r\n  ", sender_name="  Sam  ")

    assert created[0]["content"] == "Dear you"
    assert created[0]["sender_display_name"] == "Sam"
    assert created[0]["recipient_id"] == RECIPIENT.id


def test_unauthenticated_sender_is_always_anonymous(monkeypatch):
    created = _patch(monkeypatch)

    _send(is_anonymous=False, sender_id=None)

    assert created[0]["is_anonymous"] is True
    assert created[0]["sender_id"] is None


def test_signed_in_sender_is_recorded_unless_anonymous(monkeypatch):
    created = _patch(monkeypatch)
    sender_id = uuid4()

    _send(sender_id=sender_id)
    _send(sender_id=sender_id, is_anonymous=True)

    assert created[0]["sender_id"] == sender_id
    assert created[0]["is_anonymous"] is False
    assert created[1]["sender_id"] is None
    assert created[1]["is_anonymous"] is True


def test_blank_sender_name_is_stored_as_none(monkeypatch):
    created = _patch(monkeypatch)

    _send(sender_name="   ")

    assert created[0]["sender_display_name"] is None


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"content": "   "}, "Letter content is required"),
        ({"content": "x" * 21}, "Letter is too long (max 20 characters)"),
        ({"content": "  " + "x" * 18 + "  "}, "Letter is too long (max 20 characters)"),
        ({"recipient_username": "  "}, "Recipient not specified"),
    ],
)
def test_send_letter_validation(monkeypatch, overrides, message):
    created = _patch(monkeypatch)

    with pytest.raises(LetterValidationError, match=re.escape(message)):
        _send(**overrides)

    assert created == []


def test_unknown_recipient(monkeypatch):
    _patch(monkeypatch)

    with pytest.raises(RecipientNotFoundError):
        _send(recipient_username="nobody")
