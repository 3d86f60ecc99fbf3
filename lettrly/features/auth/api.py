from __future__ import annotations

from uuid import UUID

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from lettrly.core.config import get_settings
from lettrly.db.session import get_session_factory
from lettrly.features.shared.errors import unauthorized

from .repo import resolve_session_user_id

_BEARER_PREFIX = "bearer "


def _session_token(request: Request) -> str | None:
    header = request.headers.get("authorization", "")
    if header.lower().startswith(_BEARER_PREFIX):
        token = header[len(_BEARER_PREFIX) :].strip()
        if token:
            return token
    # EventSource cannot send headers, so the stream relies on the cookie.
    cookie = request.cookies.get(get_settings().session_cookie_name)
    if cookie and cookie.strip():
        return cookie.strip()
    return None


async def get_optional_user_id(
    request: Request,
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> UUID | None:
    token = _session_token(request)
    if token is None:
        return None
    async with session_factory() as session:
        return await resolve_session_user_id(session, token=token)


async def require_user_id(
    user_id: UUID | None = Depends(get_optional_user_id),
) -> UUID:
    if user_id is None:
        raise unauthorized()
    return user_id
