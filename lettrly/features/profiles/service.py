from __future__ import annotations

import logging
import re
from typing import Any
from urllib.parse import urlsplit
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lettrly.db.models import Profile
from lettrly.features.shared.text_sanitize import log_sanitization, sanitize_text

from .errors import ProfileValidationError, UsernameTakenError
from .repo import is_username_taken, normalize_username, update_profile_fields
from .types import UsernameAvailability

logger = logging.getLogger(__name__)

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
USERNAME_PATTERN = re.compile(r"^[a-z0-9_-]+$")
RESERVED_USERNAMES = frozenset(
    {
        "admin",
        "api",
        "auth",
        "dashboard",
        "login",
        "register",
        "settings",
        "profile",
        "user",
        "users",
        "help",
        "support",
        "about",
        "contact",
        "terms",
        "privacy",
        "lettrly",
    }
)
DISPLAY_NAME_MAX_LENGTH = 50
AVATAR_URL_MAX_LENGTH = 500


def validate_username(username: str | None) -> str:
    """Return the normalized username or raise ``ProfileValidationError``."""
    if not username:
        raise ProfileValidationError("Username is required")
    clean = normalize_username(username)
    if len(clean) < USERNAME_MIN_LENGTH:
        raise ProfileValidationError(f"Username must be at least {USERNAME_MIN_LENGTH} characters")
    if len(clean) > USERNAME_MAX_LENGTH:
        raise ProfileValidationError(
            f"Username must be no more than {USERNAME_MAX_LENGTH} characters"
        )
    if not USERNAME_PATTERN.match(clean):
        raise ProfileValidationError(
            "Username can only contain lowercase letters, numbers, hyphens, and underscores"
        )
    if clean in RESERVED_USERNAMES:
        raise ProfileValidationError("This username is reserved")
    return clean


def validate_display_name(display_name: str | None) -> str | None:
    if display_name is None:
        return None
    clean = sanitize_text(display_name, strip=True)
    log_sanitization(logger, location="profiles.display_name", result=clean)
    if len(clean.value) > DISPLAY_NAME_MAX_LENGTH:
        raise ProfileValidationError(
            f"Display name must be no more than {DISPLAY_NAME_MAX_LENGTH} characters"
        )
    return clean.value or None


def validate_avatar_url(avatar_url: str | None) -> str | None:
    if avatar_url is None or not avatar_url.strip():
        return None
    clean = avatar_url.strip()
    if len(clean) > AVATAR_URL_MAX_LENGTH:
        raise ProfileValidationError("Avatar URL is too long")
    try:
        parts = urlsplit(clean)
    except ValueError as exc:
        raise ProfileValidationError("Invalid avatar URL format") from exc
    if not parts.scheme:
        raise ProfileValidationError("Invalid avatar URL format")
    if parts.scheme.lower() not in {"http", "https"}:
        raise ProfileValidationError("Avatar URL must use HTTP or HTTPS protocol")
    if not parts.netloc:
        raise ProfileValidationError("Invalid avatar URL format")
    return clean


async def update_profile(
    session: AsyncSession,
    *,
    profile_id: UUID,
    changes: dict[str, Any],
) -> Profile:
    if not changes:
        raise ProfileValidationError("No updates provided")

    values: dict[str, Any] = {}
    if "username" in changes:
        username = validate_username(changes["username"])
        if await is_username_taken(session, username, exclude_profile_id=profile_id):
            raise UsernameTakenError("This username is already taken")
        values["username"] = username
    if "display_name" in changes:
        values["display_name"] = validate_display_name(changes["display_name"])
    if "avatar_url" in changes:
        values["avatar_url"] = validate_avatar_url(changes["avatar_url"])

    try:
        profile = await update_profile_fields(session, profile_id, values)
    except IntegrityError as exc:
        await session.rollback()
        raise UsernameTakenError("This username is already taken") from exc

    logger.info("Updated profile %s fields: %s", profile_id, ", ".join(sorted(values)))
    return profile


async def check_username_availability(
    session: AsyncSession,
    *,
    username: str,
    profile_id: UUID,
) -> UsernameAvailability:
    try:
        clean = validate_username(username)
    except ProfileValidationError as exc:
        return UsernameAvailability(
            username=normalize_username(username or ""),
            available=False,
            error=str(exc),
        )
    taken = await is_username_taken(session, clean, exclude_profile_id=profile_id)
    return UsernameAvailability(username=clean, available=not taken)
