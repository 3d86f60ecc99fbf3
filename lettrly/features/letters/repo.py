from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lettrly.db.models import Letter

from .errors import LetterNotFoundError, LetterValidationError


def _to_uuid(value: UUID | str, *, field_name: str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(value)
    except ValueError as exc:
        raise LetterValidationError(f"Invalid {field_name}.") from exc


async def list_letters_for_recipient(
    session: AsyncSession,
    recipient_id: UUID | str,
) -> list[Letter]:
    recipient_uuid = _to_uuid(recipient_id, field_name="recipient_id")
    stmt = (
        select(Letter)
        .where(Letter.recipient_id == recipient_uuid)
        .order_by(Letter.created_at.desc(), Letter.id.desc())
    )
    return list((await session.execute(stmt)).scalars().all())


async def get_letter_for_recipient(
    session: AsyncSession,
    *,
    letter_id: UUID | str,
    recipient_id: UUID | str,
) -> Letter:
    letter_uuid = _to_uuid(letter_id, field_name="letter_id")
    recipient_uuid = _to_uuid(recipient_id, field_name="recipient_id")
    stmt = select(Letter).where(
        Letter.id == letter_uuid,
        Letter.recipient_id == recipient_uuid,
    )
    letter = (await session.execute(stmt)).scalar_one_or_none()
    if letter is None:
        raise LetterNotFoundError(f"Letter '{letter_id}' was not found.")
    return letter


async def create_letter(
    session: AsyncSession,
    *,
    recipient_id: UUID,
    content: str,
    sender_id: UUID | None,
    sender_display_name: str | None,
    is_anonymous: bool,
) -> Letter:
    letter = Letter(
        recipient_id=recipient_id,
        content=content,
        sender_id=sender_id,
        sender_display_name=sender_display_name,
        is_anonymous=is_anonymous,
    )
    session.add(letter)
    await session.commit()
    await session.refresh(letter)
    return letter


async def mark_letter_read(
    session: AsyncSession,
    *,
    letter_id: UUID | str,
    recipient_id: UUID | str,
) -> Letter:
    letter = await get_letter_for_recipient(session, letter_id=letter_id, recipient_id=recipient_id)
    letter.is_read = True
    letter.read_at = datetime.now(timezone.utc)
    await session.commit()
    await session.refresh(letter)
    return letter


async def toggle_letter_favorite(
    session: AsyncSession,
    *,
    letter_id: UUID | str,
    recipient_id: UUID | str,
) -> Letter:
    letter = await get_letter_for_recipient(session, letter_id=letter_id, recipient_id=recipient_id)
    letter.is_favorited = not letter.is_favorited
    await session.commit()
    await session.refresh(letter)
    return letter


async def delete_letter(
    session: AsyncSession,
    *,
    letter_id: UUID | str,
    recipient_id: UUID | str,
) -> None:
    letter = await get_letter_for_recipient(session, letter_id=letter_id, recipient_id=recipient_id)
    await session.delete(letter)
    await session.commit()
