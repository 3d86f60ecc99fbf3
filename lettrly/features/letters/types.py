from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class LetterPayload(BaseModel):
    """A letter as it travels over the API and the inbox stream.

    Only ``id``, ``created_at`` and ``is_read`` carry meaning for inbox
    synchronization; every other field is passed through untouched, including
    unknown keys added by newer servers.
    """

    model_config = ConfigDict(from_attributes=True, extra="allow")

    id: UUID
    content: str
    sender_id: UUID | None = None
    sender_display_name: str | None = None
    recipient_id: UUID
    is_anonymous: bool = False
    is_read: bool = False
    is_favorited: bool = False
    created_at: datetime
    read_at: datetime | None = None


class SendLetterInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    recipient_username: str = Field(min_length=1, max_length=64)
    content: str
    sender_name: str | None = Field(default=None, max_length=255)
    is_anonymous: bool = False


def to_letter_payloads(rows) -> list[LetterPayload]:
    return [LetterPayload.model_validate(row) for row in rows]
