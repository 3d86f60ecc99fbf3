from __future__ import annotations

from .errors import (
    ProfileNotFoundError,
    ProfilesDomainError,
    ProfileValidationError,
    UsernameTakenError,
)
from .repo import get_profile, get_profile_by_username, normalize_username
from .types import ProfileStats, PublicProfile, UpdateProfileInput, UsernameAvailability

__all__ = [
    "ProfileNotFoundError",
    "ProfileStats",
    "ProfileValidationError",
    "ProfilesDomainError",
    "PublicProfile",
    "UpdateProfileInput",
    "UsernameAvailability",
    "UsernameTakenError",
    "get_profile",
    "get_profile_by_username",
    "normalize_username",
]
