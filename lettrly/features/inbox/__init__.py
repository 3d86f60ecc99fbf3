from __future__ import annotations

from .client import (
    ConnectionState,
    InboxStreamConsumer,
    StreamClosedError,
    StreamSnapshot,
    iter_sse_data,
)
from .diff import SnapshotDelta, diff_snapshot, snapshot_ids
from .notifications import NotificationAggregator, NotificationState, count_unread
from .schemas import InitEvent, UpdateEvent, decode_event, encode_sse, inbox_event_schema
from .streaming import inbox_event_stream, stream_inbox_response
from .view import InboxView, build_inbox_view

__all__ = [
    "ConnectionState",
    "InboxStreamConsumer",
    "InboxView",
    "InitEvent",
    "NotificationAggregator",
    "NotificationState",
    "SnapshotDelta",
    "StreamClosedError",
    "StreamSnapshot",
    "UpdateEvent",
    "build_inbox_view",
    "count_unread",
    "decode_event",
    "diff_snapshot",
    "encode_sse",
    "inbox_event_schema",
    "inbox_event_stream",
    "iter_sse_data",
    "snapshot_ids",
    "stream_inbox_response",
]
