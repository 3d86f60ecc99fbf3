from __future__ import annotations


class ProfilesDomainError(Exception):
    """Base exception for profile operations."""


class ProfileNotFoundError(ProfilesDomainError):
    pass


class ProfileValidationError(ProfilesDomainError):
    pass


class UsernameTakenError(ProfileValidationError):
    pass
