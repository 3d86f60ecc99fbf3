from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lettrly.db.models import AuthSession


async def resolve_session_user_id(
    session: AsyncSession,
    *,
    token: str,
    now: datetime | None = None,
) -> UUID | None:
    """Map a session token to its user id, ignoring unknown or expired tokens."""
    clean_token = token.strip()
    if not clean_token:
        return None

    current = now or datetime.now(timezone.utc)
    stmt = select(AuthSession.user_id).where(
        AuthSession.token == clean_token,
        AuthSession.expires_at > current,
    )
    return (await session.execute(stmt)).scalar_one_or_none()
