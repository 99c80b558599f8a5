"""Object graph construction: store, promotion, resolution and grouped output."""

from pbxgraph.graph.promoter import promote
from pbxgraph.graph.resolver import DanglingReference, ResolutionReport, resolve_references
from pbxgraph.graph.serializer import (
    DEFAULT_INLINE_TYPES,
    GroupingSerializer,
    serialize_document,
    serialize_objects,
)
from pbxgraph.graph.store import Entry, ObjectStore, TieBreak

__all__ = [
    "DEFAULT_INLINE_TYPES",
    "DanglingReference",
    "Entry",
    "GroupingSerializer",
    "ObjectStore",
    "ResolutionReport",
    "TieBreak",
    "promote",
    "resolve_references",
    "serialize_document",
    "serialize_objects",
]
