from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass
from enum import Enum

import httpx
from pydantic import ValidationError

from lettrly.core.config import get_settings
from lettrly.features.letters.types import LetterPayload

from .notifications import NotificationAggregator, count_unread
from .schemas import InitEvent, decode_event

logger = logging.getLogger(__name__)

DEFAULT_STREAM_PATH = "/api/letters/stream"
CONNECTION_LOST_MESSAGE = "Connection lost. Reconnecting..."
UNAUTHORIZED_MESSAGE = "Unauthorized"


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    RECONNECTING = "reconnecting"
    CLOSED = "closed"


class StreamClosedError(Exception):
    """The server ended the event stream."""


@dataclass(frozen=True)
class StreamSnapshot:
    letters: tuple[LetterPayload, ...]
    is_connected: bool
    error: str | None


async def iter_sse_data(lines: AsyncIterator[str]) -> AsyncIterator[str]:
    """Collect the ``data:`` lines of each event; a blank line dispatches the event."""
    buffer: list[str] = []
    async for raw_line in lines:
        line = raw_line.rstrip("\r\n")
        if not line:
            if buffer:
                yield "\n".join(buffer)
                buffer = []
            continue
        if line.startswith(":"):
            continue
        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "data":
            buffer.append(value)


class InboxStreamConsumer:
    """Keeps a recipient's letter list in sync with ``GET /api/letters/stream``.

    At most one transport is alive at a time: ``connect()`` always tears down
    the previous reader before starting a new one. After a transport error a
    single reconnect is scheduled ``reconnect_delay`` seconds later, with no
    backoff growth and no retry cap. ``disconnect()`` cancels both the reader
    and any pending reconnect.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        notifications: NotificationAggregator,
        *,
        url: str = DEFAULT_STREAM_PATH,
        reconnect_delay: float | None = None,
        initial_letters: Sequence[LetterPayload] = (),
        enabled: bool = True,
        retry_unauthorized: bool = True,
    ) -> None:
        self._client = client
        self._notifications = notifications
        self._url = url
        if reconnect_delay is None:
            reconnect_delay = get_settings().stream_reconnect_delay_seconds
        self._reconnect_delay = reconnect_delay
        self._enabled = enabled
        self._retry_unauthorized = retry_unauthorized

        self._letters: tuple[LetterPayload, ...] = tuple(initial_letters)
        self._state = ConnectionState.CLOSED
        self._is_connected = False
        self._error: str | None = None
        self._reader_task: asyncio.Task[None] | None = None
        self._reconnect_task: asyncio.Task[None] | None = None

        if self._letters:
            self._notifications.set_unread_count(count_unread(self._letters))

    @property
    def letters(self) -> tuple[LetterPayload, ...]:
        return self._letters

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._is_connected

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def reconnect_delay(self) -> float:
        return self._reconnect_delay

    @property
    def reconnect_pending(self) -> bool:
        return self._reconnect_task is not None and not self._reconnect_task.done()

    def snapshot(self) -> StreamSnapshot:
        return StreamSnapshot(
            letters=self._letters,
            is_connected=self._is_connected,
            error=self._error,
        )

    async def __aenter__(self) -> InboxStreamConsumer:
        await self.connect()
        return self

    async def __aexit__(self, _exc_type, _exc, _tb) -> bool:
        await self.disconnect()
        return False

    async def connect(self) -> None:
        if not self._enabled:
            return

        await self._close_transport()
        await self._cancel_reconnect()
        self._state = ConnectionState.CONNECTING
        self._is_connected = False
        self._reader_task = asyncio.create_task(self._read_stream())

    async def reconnect(self) -> None:
        await self.connect()

    async def disconnect(self) -> None:
        self._state = ConnectionState.CLOSED
        self._is_connected = False
        await self._cancel_reconnect()
        await self._close_transport()

    def handle_message(self, data: str) -> bool:
        """Apply one stream message. Malformed payloads are logged and dropped."""
        try:
            event = decode_event(data)
        except ValidationError:
            logger.warning("Dropping malformed inbox message: %.200r", data, exc_info=True)
            return False

        self._letters = tuple(event.letters)
        if isinstance(event, InitEvent):
            self._notifications.set_unread_count(count_unread(self._letters))
        else:
            self._notifications.apply_snapshot(self._letters, event.new_letters)
        return True

    def handle_transport_error(self, exc: BaseException | None = None) -> None:
        if self._state is ConnectionState.CLOSED:
            return

        logger.warning("Inbox stream transport failed: %s", exc or "unknown error")
        self._is_connected = False
        self._error = CONNECTION_LOST_MESSAGE
        self._state = ConnectionState.RECONNECTING
        if self.reconnect_pending:
            return
        self._reconnect_task = asyncio.create_task(self._reconnect_after_delay())

    def _handle_open(self) -> None:
        self._state = ConnectionState.OPEN
        self._is_connected = True
        self._error = None

    def _handle_unauthorized(self) -> None:
        logger.warning("Inbox stream rejected as unauthorized; not retrying.")
        self._state = ConnectionState.CLOSED
        self._is_connected = False
        self._error = UNAUTHORIZED_MESSAGE

    async def _read_stream(self) -> None:
        try:
            async with self._client.stream(
                "GET",
                self._url,
                headers={"Accept": "text/event-stream", "Cache-Control": "no-cache"},
            ) as response:
                if response.status_code == 401 and not self._retry_unauthorized:
                    self._handle_unauthorized()
                    return
                response.raise_for_status()
                self._handle_open()
                async for data in iter_sse_data(response.aiter_lines()):
                    self.handle_message(data)
            raise StreamClosedError("Inbox stream ended.")
        except (httpx.HTTPError, httpx.StreamError, StreamClosedError) as exc:
            self.handle_transport_error(exc)
        except Exception as exc:
            logger.exception("Inbox stream reader failed unexpectedly.")
            self.handle_transport_error(exc)

    async def _reconnect_after_delay(self) -> None:
        await asyncio.sleep(self._reconnect_delay)
        self._reconnect_task = None
        await self.connect()

    async def _close_transport(self) -> None:
        task = self._reader_task
        self._reader_task = None
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _cancel_reconnect(self) -> None:
        task = self._reconnect_task
        self._reconnect_task = None
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
