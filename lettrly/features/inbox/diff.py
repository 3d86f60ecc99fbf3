from __future__ import annotations

from collections.abc import Hashable, Iterable, Sequence
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar


class HasId(Protocol):
    @property
    def id(self) -> Hashable: ...


LetterT = TypeVar("LetterT", bound=HasId)


@dataclass(frozen=True)
class SnapshotDelta(Generic[LetterT]):
    """Difference between a baseline id set and a freshly fetched snapshot.

    ``letters`` is the whole current snapshot and stays authoritative for field
    values; ``new_letters`` and ``removed_ids`` only say which identities
    appeared or disappeared.
    """

    letters: tuple[LetterT, ...]
    new_letters: tuple[LetterT, ...]
    removed_ids: tuple[Hashable, ...]

    @property
    def is_empty(self) -> bool:
        return not self.new_letters and not self.removed_ids

    @property
    def current_ids(self) -> frozenset[Hashable]:
        return frozenset(letter.id for letter in self.letters)


def snapshot_ids(letters: Iterable[HasId]) -> frozenset[Hashable]:
    return frozenset(letter.id for letter in letters)


def diff_snapshot(
    previous_ids: Iterable[Hashable],
    current: Sequence[LetterT],
) -> SnapshotDelta[LetterT]:
    baseline = frozenset(previous_ids)
    current_ids = snapshot_ids(current)
    new_letters = tuple(letter for letter in current if letter.id not in baseline)
    removed_ids = tuple(sorted(baseline - current_ids, key=str))
    return SnapshotDelta(
        letters=tuple(current),
        new_letters=new_letters,
        removed_ids=removed_ids,
    )
