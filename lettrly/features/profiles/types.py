from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class PublicProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str | None
    display_name: str | None
    avatar_url: str | None


class UpdateProfileInput(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    model_config = ConfigDict(extra="forbid")

    username: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None


class UsernameAvailability(BaseModel):
    username: str
    available: bool
    error: str | None = None


class ProfileStats(BaseModel):
    total_letters: int
    unread_letters: int
    favorited_letters: int
    member_since: datetime | None
