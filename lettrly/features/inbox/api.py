from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from lettrly.core.config import get_settings
from lettrly.db.session import get_session_factory
from lettrly.features.auth import require_user_id
from lettrly.features.letters.repo import list_letters_for_recipient
from lettrly.features.letters.types import LetterPayload, to_letter_payloads

from .streaming import stream_inbox_response

router = APIRouter(prefix="/api/letters", tags=["inbox"])


@router.get("/stream")
async def stream_letters(
    request: Request,
    user_id: UUID = Depends(require_user_id),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> StreamingResponse:
    async def _fetch_snapshot() -> list[LetterPayload]:
        async with session_factory() as session:
            rows = await list_letters_for_recipient(session, user_id)
            return to_letter_payloads(rows)

    return await stream_inbox_response(
        _fetch_snapshot,
        request=request,
        poll_interval=get_settings().stream_poll_interval_seconds,
        label=str(user_id),
    )
