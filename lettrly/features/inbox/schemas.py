from __future__ import annotations

import json
from typing import Annotated, Any, Literal, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from lettrly.features.letters.types import LetterPayload


class InitEvent(BaseModel):
    type: Literal["init"] = "init"
    letters: list[LetterPayload]


class UpdateEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["update"] = "update"
    letters: list[LetterPayload]
    new_letters: list[LetterPayload] = Field(default_factory=list, alias="newLetters")
    deleted_ids: list[UUID] = Field(default_factory=list, alias="deletedIds")


InboxEvent = Annotated[Union[InitEvent, UpdateEvent], Field(discriminator="type")]


_INBOX_EVENT_ADAPTER = TypeAdapter(InboxEvent)


def inbox_event_schema() -> dict[str, Any]:
    return _INBOX_EVENT_ADAPTER.json_schema(by_alias=True)


def encode_sse(event: InitEvent | UpdateEvent) -> str:
    payload = event.model_dump(mode="json", by_alias=True)
    return f"data: {json.dumps(payload, ensure_ascii=True)}\n\n"


def decode_event(data: str) -> InitEvent | UpdateEvent:
    """Parse one ``data:`` payload, restoring UUIDs and datetimes.

    Raises ``pydantic.ValidationError`` on malformed input.
    """
    return _INBOX_EVENT_ADAPTER.validate_json(data)
