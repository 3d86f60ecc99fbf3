from __future__ import annotations

import asyncio
from uuid import uuid4

import pytest

from lettrly.features.letters import repo as letters_repo
from lettrly.features.letters.errors import LetterValidationError


class _FailingSession:
    async def execute(self, _stmt):
        raise AssertionError("query should not run for an invalid id")


def test_invalid_recipient_id_is_rejected_before_querying():
    with pytest.raises(LetterValidationError, match="Invalid recipient_id."):
        asyncio.run(letters_repo.list_letters_for_recipient(_FailingSession(), "not-a-uuid"))


def test_invalid_letter_id_is_rejected_before_querying():
    with pytest.raises(LetterValidationError, match="Invalid letter_id."):
        asyncio.run(
            letters_repo.get_letter_for_recipient(
                _FailingSession(),
                letter_id="nope",
                recipient_id=uuid4(),
            )
        )
