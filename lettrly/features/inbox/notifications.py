from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from lettrly.features.letters.types import LetterPayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationState:
    unread_count: int
    pending_letters: tuple[LetterPayload, ...]
    banner_visible: bool


NotificationListener = Callable[[NotificationState], None]


def count_unread(letters: Sequence[LetterPayload]) -> int:
    return sum(1 for letter in letters if not letter.is_read)


class NotificationAggregator:
    """Unread counter and batched "new letter" banner for one inbox session.

    Owned by a single consumer and mutated only from its message handler, so
    it holds no lock. Each public mutation publishes exactly one
    ``NotificationState`` to subscribers.
    """

    def __init__(self) -> None:
        self._unread_count = 0
        self._pending: tuple[LetterPayload, ...] = ()
        self._banner_visible = False
        self._listeners: list[NotificationListener] = []

    @property
    def unread_count(self) -> int:
        return self._unread_count

    @property
    def pending_letters(self) -> tuple[LetterPayload, ...]:
        return self._pending

    @property
    def banner_visible(self) -> bool:
        return self._banner_visible

    @property
    def state(self) -> NotificationState:
        return NotificationState(
            unread_count=self._unread_count,
            pending_letters=self._pending,
            banner_visible=self._banner_visible,
        )

    def subscribe(self, listener: NotificationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def set_unread_count(self, count: int) -> None:
        self._unread_count = max(0, count)
        self._publish()

    def add_new_letters(self, letters: Sequence[LetterPayload]) -> None:
        self._prepend(letters)
        self._publish()

    def apply_snapshot(
        self,
        letters: Sequence[LetterPayload],
        new_letters: Sequence[LetterPayload] = (),
    ) -> None:
        """Apply the count and the arrivals of one message together."""
        self._unread_count = count_unread(letters)
        self._prepend(new_letters)
        self._publish()

    def clear_new_letters(self) -> None:
        self._pending = ()
        self._banner_visible = False
        self._publish()

    def dismiss_batch_notification(self) -> None:
        self._banner_visible = False
        self._publish()

    @property
    def banner_title(self) -> str | None:
        if not self._banner_visible or not self._pending:
            return None
        if len(self._pending) == 1:
            return "You have a new letter!"
        return f"You have {len(self._pending)} new letters!"

    @property
    def banner_subtitle(self) -> str | None:
        if not self._banner_visible or not self._pending:
            return None
        if len(self._pending) == 1:
            return f"From {self._pending[0].sender_display_name or 'Anonymous'}"
        return f"{len(self._pending)} new messages just arrived"

    def _prepend(self, letters: Sequence[LetterPayload]) -> None:
        if not letters:
            return
        self._pending = (*letters, *self._pending)
        self._banner_visible = True

    def _publish(self) -> None:
        state = self.state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Notification listener %r failed.", listener)
