"""Insertion-ordered UID table holding promoted records and raw entries."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator, Mapping
from enum import StrEnum
from typing import Any

from pbxgraph.domain.records import Node, ObjectRef, PBXObject

Entry = PBXObject | Node


class TieBreak(StrEnum):
    """Secondary ordering for records that share a type when sorting."""

    DISCOVERY = "discovery"
    UID = "uid"


class ObjectStore(Mapping[str, Entry]):
    """UID to record mapping that preserves discovery order.

    Every UID appears at most once. Entries are either :class:`PBXObject`
    records or raw nodes that could not be promoted. Each UID keeps the
    sequence number it was first inserted with, so sorting by type and then
    by discovery order is stable across repeated sorts.
    """

    __slots__ = ("_entries", "_sequence", "_next_sequence")

    def __init__(self, entries: Mapping[str, Entry] | None = None) -> None:
        self._entries: dict[str, Entry] = {}
        self._sequence: dict[str, int] = {}
        self._next_sequence = 0
        if entries is not None:
            for uid, entry in entries.items():
                self.insert(uid, entry)

    def __getitem__(self, uid: str) -> Entry:
        return self._entries[uid]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, uid: object) -> bool:
        return uid in self._entries

    def __repr__(self) -> str:
        return f"ObjectStore(entries={len(self._entries)})"

    def insert(self, uid: str, entry: Entry) -> None:
        """Bind ``uid`` to ``entry``; rebinding an existing UID is rejected."""
        if not isinstance(uid, str) or not uid:
            raise ValueError("uid must be a non-empty string")
        if uid in self._entries:
            raise ValueError(f"uid {uid!r} is already present in the object store")
        self._entries[uid] = entry
        self._sequence[uid] = self._next_sequence
        self._next_sequence += 1

    def put(self, ref: ObjectRef[Any]) -> None:
        """Insert the record bound to ``ref`` under its UID."""
        target = ref.target
        if target is None:
            raise ValueError(f"reference {ref.uid!r} is not bound to a record")
        self.insert(ref.uid, target)

    def remove(self, uid: str) -> Entry:
        entry = self._entries.pop(uid)
        del self._sequence[uid]
        return entry

    def get_record(self, uid: str) -> PBXObject | None:
        """Return the promoted record for ``uid``; raw entries yield ``None``."""
        entry = self._entries.get(uid)
        return entry if isinstance(entry, PBXObject) else None

    def records(self) -> Iterator[tuple[str, PBXObject]]:
        for uid, entry in self._entries.items():
            if isinstance(entry, PBXObject):
                yield uid, entry

    def records_of_type(self, record_type: type[PBXObject]) -> Iterator[tuple[str, PBXObject]]:
        for uid, record in self.records():
            if isinstance(record, record_type):
                yield uid, record

    def uid_of(self, record: PBXObject) -> str | None:
        for uid, entry in self._entries.items():
            if entry is record:
                return uid
        return None

    def type_counts(self) -> dict[str, int]:
        counts = Counter(record.type_name for _, record in self.records())
        return dict(sorted(counts.items()))

    def sort_for_serialization(self, tie_break: TieBreak | str = TieBreak.DISCOVERY) -> None:
        """Reorder entries so records of one type are contiguous.

        Records are ordered by type name, then by ``tie_break``. Raw entries
        follow every record in discovery order. Sorting is idempotent.
        """
        ordered = sorted(self._entries, key=self._sort_key(TieBreak(tie_break)))
        self._entries = {uid: self._entries[uid] for uid in ordered}

    def is_sorted(self, tie_break: TieBreak | str = TieBreak.DISCOVERY) -> bool:
        key = self._sort_key(TieBreak(tie_break))
        keys = [key(uid) for uid in self._entries]
        return all(left <= right for left, right in zip(keys, keys[1:], strict=False))

    def _sort_key(self, tie_break: TieBreak) -> Any:
        def key(uid: str) -> tuple[int, str, str, int]:
            entry = self._entries[uid]
            sequence = self._sequence[uid]
            if not isinstance(entry, PBXObject):
                return (1, "", "", sequence)
            secondary = uid if tie_break is TieBreak.UID else ""
            return (0, entry.type_name, secondary, sequence)

        return key

    def to_node(self) -> dict[str, Node]:
        """Return the table as plain nodes, records unwrapped to their dicts."""
        return {
            uid: entry.fields if isinstance(entry, PBXObject) else entry
            for uid, entry in self._entries.items()
        }


__all__ = ["Entry", "ObjectStore", "TieBreak"]
