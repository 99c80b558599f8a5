"""First build pass: promote raw ``objects`` entries into typed records."""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from pbxgraph.constants import ISA_KEY
from pbxgraph.domain.records import Node, PBXObject
from pbxgraph.domain.registry import DEFAULT_TYPE_REGISTRY, TypeRegistry
from pbxgraph.errors import RegistryError
from pbxgraph.graph.store import ObjectStore

_LOGGER = structlog.get_logger(__name__)


def promote(
    raw_objects: Mapping[str, Node],
    registry: TypeRegistry = DEFAULT_TYPE_REGISTRY,
) -> ObjectStore:
    """Build a new store from ``raw_objects`` in one forward pass.

    Dictionary entries carrying a string ``isa`` become records wrapping the
    same dictionary. Everything else is kept as a raw entry at the same
    position. ``raw_objects`` itself is not modified.
    """
    if raw_objects is None:
        raise ValueError("raw_objects cannot be None")

    store = ObjectStore()
    passthrough = 0
    raw = 0
    for uid, node in raw_objects.items():
        record = _promote_entry(node, registry)
        if record is None:
            store.insert(uid, node)
            raw += 1
            continue
        if not registry.is_known(record.type_name):
            passthrough += 1
        store.insert(uid, record)

    _LOGGER.debug(
        "objects_promoted",
        total=len(store),
        passthrough=passthrough,
        raw=raw,
    )
    return store


def _promote_entry(node: Node, registry: TypeRegistry) -> PBXObject | None:
    if isinstance(node, PBXObject):
        return node
    if not isinstance(node, dict):
        return None
    isa = node.get(ISA_KEY)
    if not isinstance(isa, str) or not isa:
        return None

    record_type = registry.resolve(isa)
    try:
        return record_type(node)
    except Exception as exc:  # noqa: BLE001 - re-raised as a registry invariant failure.
        raise RegistryError(f"failed to instantiate {record_type.__name__} for isa {isa!r}") from exc


__all__ = ["promote"]
