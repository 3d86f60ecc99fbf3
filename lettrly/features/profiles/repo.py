from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lettrly.db.models import Letter, Profile

from .errors import ProfileNotFoundError
from .types import ProfileStats


def normalize_username(username: str) -> str:
    return username.strip().lower()


async def get_profile_by_username(session: AsyncSession, username: str) -> Profile:
    clean_username = normalize_username(username)
    if not clean_username:
        raise ProfileNotFoundError("Profile '' was not found.")
    stmt = select(Profile).where(Profile.username == clean_username)
    profile = (await session.execute(stmt)).scalar_one_or_none()
    if profile is None:
        raise ProfileNotFoundError(f"Profile '{clean_username}' was not found.")
    return profile


async def get_profile(session: AsyncSession, profile_id: UUID) -> Profile:
    profile = await session.get(Profile, profile_id)
    if profile is None:
        raise ProfileNotFoundError(f"Profile '{profile_id}' was not found.")
    return profile


async def is_username_taken(
    session: AsyncSession,
    username: str,
    *,
    exclude_profile_id: UUID,
) -> bool:
    stmt = select(Profile.id).where(
        Profile.username == username,
        Profile.id != exclude_profile_id,
    )
    return (await session.execute(stmt)).first() is not None


async def update_profile_fields(
    session: AsyncSession,
    profile_id: UUID,
    values: dict[str, Any],
) -> Profile:
    profile = await get_profile(session, profile_id)
    for field_name, value in values.items():
        setattr(profile, field_name, value)
    profile.updated_at = datetime.now(timezone.utc)
    await session.commit()
    await session.refresh(profile)
    return profile


async def get_profile_stats(session: AsyncSession, profile_id: UUID) -> ProfileStats:
    def _count(*conditions):
        return (
            select(func.count(Letter.id))
            .where(Letter.recipient_id == profile_id, *conditions)
            .scalar_subquery()
        )

    stmt = select(
        _count().label("total_letters"),
        _count(Letter.is_read.is_(False)).label("unread_letters"),
        _count(Letter.is_favorited.is_(True)).label("favorited_letters"),
        select(Profile.created_at).where(Profile.id == profile_id).scalar_subquery().label("member_since"),
    )
    row = (await session.execute(stmt)).one()
    return ProfileStats(
        total_letters=int(row.total_letters or 0),
        unread_letters=int(row.unread_letters or 0),
        favorited_letters=int(row.favorited_letters or 0),
        member_since=row.member_since,
    )
