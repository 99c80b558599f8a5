"""Type-grouped emission of the ``objects`` table."""

from __future__ import annotations

from collections.abc import Collection, Mapping
from typing import Final

from pbxgraph.constants import OBJECTS_KEY
from pbxgraph.domain.records import Node, PBXObject
from pbxgraph.graph.store import ObjectStore, TieBreak
from pbxgraph.nextstep.writer import NextStepWriter

DEFAULT_INLINE_TYPES: Final[tuple[str, ...]] = ("PBXBuildFile", "PBXFileReference")


def begin_marker(type_name: str) -> str:
    return f"\n/* Begin {type_name} section */\n"


def end_marker(type_name: str) -> str:
    return f"/* End {type_name} section */\n"


class GroupingSerializer:
    """Field printer that brackets each run of same-typed records.

    A run opens with a begin marker when the record type differs from the
    previous entry and closes with an end marker when the next entry has a
    different type or the table ends. Raw entries get no markers. Grouping
    depends only on the order of the table, so callers sort first.
    """

    def __init__(self) -> None:
        self._current: str | None = None

    def initialize(self) -> None:
        self._current = None

    def before_field(self, key: str, value: object, has_next: bool, out: list[str]) -> None:
        type_name = value.type_name if isinstance(value, PBXObject) else None
        if type_name == self._current:
            return
        if self._current is not None:
            out.append(end_marker(self._current))
        if type_name is not None:
            out.append(begin_marker(type_name))
        self._current = type_name

    def after_field(self, key: str, value: object, has_next: bool, out: list[str]) -> None:
        if not has_next and self._current is not None:
            out.append(end_marker(self._current))
            self._current = None


def serialize_document(
    root: Mapping[str, Node],
    store: ObjectStore,
    *,
    tie_break: TieBreak | str = TieBreak.DISCOVERY,
    inline_types: Collection[str] = DEFAULT_INLINE_TYPES,
) -> str:
    """Sort ``store`` by type and render ``root`` with grouped ``objects``.

    ``root`` must hold ``store`` under ``objects``. Repeated calls produce
    identical text.
    """
    store.sort_for_serialization(tie_break)
    writer = NextStepWriter(
        inline_types=inline_types,
        printers={OBJECTS_KEY: GroupingSerializer()},
    )
    return writer.write_document(root)


def serialize_objects(
    store: ObjectStore,
    *,
    tie_break: TieBreak | str = TieBreak.DISCOVERY,
    inline_types: Collection[str] = DEFAULT_INLINE_TYPES,
) -> str:
    """Render only the grouped ``objects`` dictionary of ``store``."""
    store.sort_for_serialization(tie_break)
    writer = NextStepWriter(inline_types=inline_types)
    return writer.format_dictionary(store, printer=GroupingSerializer())


__all__ = [
    "DEFAULT_INLINE_TYPES",
    "GroupingSerializer",
    "begin_marker",
    "end_marker",
    "serialize_document",
    "serialize_objects",
]
