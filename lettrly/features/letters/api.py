from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from lettrly.core.config import get_settings
from lettrly.db.session import get_db_session
from lettrly.features.auth import get_optional_user_id, require_user_id
from lettrly.features.shared.ids import parse_uuid

from .errors import LetterNotFoundError, LetterValidationError, RecipientNotFoundError
from .repo import (
    delete_letter,
    get_letter_for_recipient,
    list_letters_for_recipient,
    mark_letter_read,
    toggle_letter_favorite,
)
from .service import send_letter
from .types import LetterPayload, SendLetterInput, to_letter_payloads

router = APIRouter(prefix="/api/letters", tags=["letters"])


def _raise_http_error(exc: Exception) -> None:
    if isinstance(exc, (LetterNotFoundError, RecipientNotFoundError)):
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if isinstance(exc, LetterValidationError):
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    raise exc


@router.get("", response_model=list[LetterPayload])
async def get_letters(
    user_id: UUID = Depends(require_user_id),
    session: AsyncSession = Depends(get_db_session),
) -> list[LetterPayload]:
    rows = await list_letters_for_recipient(session, user_id)
    return to_letter_payloads(rows)


@router.post("", response_model=LetterPayload, status_code=status.HTTP_201_CREATED)
async def post_letter(
    payload: SendLetterInput,
    user_id: UUID | None = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_db_session),
) -> LetterPayload:
    try:
        letter = await send_letter(
            session,
            recipient_username=payload.recipient_username,
            content=payload.content,
            sender_name=payload.sender_name,
            is_anonymous=payload.is_anonymous,
            sender_id=user_id,
            max_length=get_settings().max_letter_length,
        )
    except Exception as exc:
        _raise_http_error(exc)
    return LetterPayload.model_validate(letter)


@router.get("/{letter_id}", response_model=LetterPayload)
async def get_letter_by_id(
    letter_id: str,
    user_id: UUID = Depends(require_user_id),
    session: AsyncSession = Depends(get_db_session),
) -> LetterPayload:
    letter_uuid = parse_uuid(letter_id, field_name="letter_id")
    try:
        letter = await get_letter_for_recipient(session, letter_id=letter_uuid, recipient_id=user_id)
    except Exception as exc:
        _raise_http_error(exc)
    return LetterPayload.model_validate(letter)


@router.post("/{letter_id}/read", response_model=LetterPayload)
async def post_letter_read(
    letter_id: str,
    user_id: UUID = Depends(require_user_id),
    session: AsyncSession = Depends(get_db_session),
) -> LetterPayload:
    letter_uuid = parse_uuid(letter_id, field_name="letter_id")
    try:
        letter = await mark_letter_read(session, letter_id=letter_uuid, recipient_id=user_id)
    except Exception as exc:
        _raise_http_error(exc)
    return LetterPayload.model_validate(letter)


@router.post("/{letter_id}/favorite", response_model=LetterPayload)
async def post_letter_favorite(
    letter_id: str,
    user_id: UUID = Depends(require_user_id),
    session: AsyncSession = Depends(get_db_session),
) -> LetterPayload:
    letter_uuid = parse_uuid(letter_id, field_name="letter_id")
    try:
        letter = await toggle_letter_favorite(session, letter_id=letter_uuid, recipient_id=user_id)
    except Exception as exc:
        _raise_http_error(exc)
    return LetterPayload.model_validate(letter)


@router.delete("/{letter_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_letter(
    letter_id: str,
    user_id: UUID = Depends(require_user_id),
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    letter_uuid = parse_uuid(letter_id, field_name="letter_id")
    try:
        await delete_letter(session, letter_id=letter_uuid, recipient_id=user_id)
    except Exception as exc:
        _raise_http_error(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
