from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from lettrly.features.letters.types import LetterPayload

from .client import StreamSnapshot
from .notifications import NotificationState

LIVE_STATUS_TEXT = "Live updates enabled"
RECONNECTING_STATUS_TEXT = "Reconnecting..."


@dataclass(frozen=True)
class InboxView:
    unread: tuple[LetterPayload, ...]
    read: tuple[LetterPayload, ...]
    new_letter_ids: frozenset[UUID]
    show_banner: bool
    pending_count: int
    unread_count: int
    is_connected: bool
    error: str | None

    @property
    def is_empty(self) -> bool:
        return not self.unread and not self.read

    @property
    def status_text(self) -> str:
        return LIVE_STATUS_TEXT if self.is_connected else RECONNECTING_STATUS_TEXT

    def is_new(self, letter_id: UUID) -> bool:
        return letter_id in self.new_letter_ids


def build_inbox_view(stream: StreamSnapshot, notifications: NotificationState) -> InboxView:
    return InboxView(
        unread=tuple(letter for letter in stream.letters if not letter.is_read),
        read=tuple(letter for letter in stream.letters if letter.is_read),
        new_letter_ids=frozenset(letter.id for letter in notifications.pending_letters),
        show_banner=notifications.banner_visible and bool(notifications.pending_letters),
        pending_count=len(notifications.pending_letters),
        unread_count=notifications.unread_count,
        is_connected=stream.is_connected,
        error=stream.error,
    )
