from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lettrly.db.models import Letter
from lettrly.features.profiles import ProfileNotFoundError, get_profile_by_username
from lettrly.features.shared.text_sanitize import (
    log_sanitization,
    sanitize_optional_text,
    sanitize_text,
)

from .errors import LetterValidationError, RecipientNotFoundError
from .repo import create_letter

logger = logging.getLogger(__name__)


async def send_letter(
    session: AsyncSession,
    *,
    recipient_username: str,
    content: str,
    sender_name: str | None,
    is_anonymous: bool,
    sender_id: UUID | None,
    max_length: int,
) -> Letter:
    clean_content = sanitize_text(content or "", strip=True)
    log_sanitization(logger, location="letters.send_letter.content", result=clean_content)
    if not clean_content.value:
        raise LetterValidationError("Letter content is required")
    # Length is measured on the raw input, surrounding whitespace included.
    if len(content) > max_length:
        raise LetterValidationError(f"Letter is too long (max {max_length} characters)")

    if not recipient_username.strip():
        raise LetterValidationError("Recipient not specified")

    try:
        recipient = await get_profile_by_username(session, recipient_username)
    except ProfileNotFoundError as exc:
        raise RecipientNotFoundError("Recipient not found") from exc

    clean_name = sanitize_optional_text(sender_name, strip=True)
    log_sanitization(logger, location="letters.send_letter.sender_name", result=clean_name)
    display_name = clean_name.value if clean_name is not None and clean_name.value else None

    anonymous = is_anonymous or sender_id is None
    letter = await create_letter(
        session,
        recipient_id=recipient.id,
        content=clean_content.value,
        sender_id=None if is_anonymous else sender_id,
        sender_display_name=display_name,
        is_anonymous=anonymous,
    )
    logger.info("Delivered letter %s to recipient %s.", letter.id, recipient.id)
    return letter
