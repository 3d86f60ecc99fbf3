from __future__ import annotations


class LettersDomainError(Exception):
    """Base exception for letter operations."""


class LetterNotFoundError(LettersDomainError):
    pass


class LetterValidationError(LettersDomainError):
    pass


class RecipientNotFoundError(LettersDomainError):
    pass
