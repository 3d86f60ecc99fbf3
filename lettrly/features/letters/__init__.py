from __future__ import annotations

from .errors import (
    LetterNotFoundError,
    LetterValidationError,
    LettersDomainError,
    RecipientNotFoundError,
)
from .repo import (
    create_letter,
    delete_letter,
    get_letter_for_recipient,
    list_letters_for_recipient,
    mark_letter_read,
    toggle_letter_favorite,
)
from .service import send_letter
from .types import LetterPayload, SendLetterInput, to_letter_payloads

__all__ = [
    "LetterNotFoundError",
    "LetterPayload",
    "LetterValidationError",
    "LettersDomainError",
    "RecipientNotFoundError",
    "SendLetterInput",
    "create_letter",
    "delete_letter",
    "get_letter_for_recipient",
    "list_letters_for_recipient",
    "mark_letter_read",
    "send_letter",
    "to_letter_payloads",
    "toggle_letter_favorite",
]
