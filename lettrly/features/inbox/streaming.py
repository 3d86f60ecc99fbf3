from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence

from fastapi import HTTPException, Request
from fastapi.responses import StreamingResponse

from lettrly.features.letters.types import LetterPayload

from .diff import diff_snapshot, snapshot_ids
from .schemas import InitEvent, UpdateEvent, encode_sse

logger = logging.getLogger(__name__)

SnapshotFetcher = Callable[[], Awaitable[Sequence[LetterPayload]]]
DisconnectCheck = Callable[[], Awaitable[bool]]

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


async def inbox_event_stream(
    initial_letters: Sequence[LetterPayload],
    fetch_snapshot: SnapshotFetcher,
    *,
    poll_interval: float,
    is_disconnected: DisconnectCheck | None = None,
    label: str = "inbox",
) -> AsyncIterator[str]:
    """Yield one ``init`` frame, then an ``update`` frame for every tick whose id set changed.

    Ticks run one after another inside this generator, so fetches for a single
    connection never overlap; a tick that overruns the interval drops the
    firings it missed instead of queueing them.
    """
    loop = asyncio.get_running_loop()
    baseline = snapshot_ids(initial_letters)
    yield encode_sse(InitEvent(letters=list(initial_letters)))
    logger.debug("Inbox stream %s opened with %d letters.", label, len(initial_letters))

    next_tick = loop.time() + poll_interval
    try:
        while True:
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
            now = loop.time()
            next_tick += poll_interval
            if next_tick <= now:
                missed = int((now - next_tick) // poll_interval) + 1
                next_tick += missed * poll_interval

            if is_disconnected is not None and await is_disconnected():
                break

            try:
                letters = await fetch_snapshot()
            except Exception:
                logger.warning(
                    "Inbox stream %s failed to fetch letters; skipping tick.",
                    label,
                    exc_info=True,
                )
                continue

            delta = diff_snapshot(baseline, letters)
            if delta.is_empty:
                continue

            baseline = delta.current_ids
            yield encode_sse(
                UpdateEvent(
                    letters=list(delta.letters),
                    new_letters=list(delta.new_letters),
                    deleted_ids=list(delta.removed_ids),
                )
            )
    finally:
        logger.debug("Inbox stream %s closed.", label)


async def stream_inbox_response(
    fetch_snapshot: SnapshotFetcher,
    *,
    request: Request,
    poll_interval: float,
    label: str = "inbox",
) -> StreamingResponse:
    try:
        initial_letters = await fetch_snapshot()
    except Exception as exc:
        logger.exception("Inbox stream %s could not load the initial snapshot.", label)
        raise HTTPException(status_code=503, detail="Inbox is temporarily unavailable.") from exc

    return StreamingResponse(
        inbox_event_stream(
            initial_letters,
            fetch_snapshot,
            poll_interval=poll_interval,
            is_disconnected=request.is_disconnected,
            label=label,
        ),
        media_type="text/event-stream",
        headers=STREAM_HEADERS,
    )
