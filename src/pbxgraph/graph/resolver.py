"""Second build pass: bind UID-valued fields to records in the store."""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass

import structlog

from pbxgraph.constants import ROOT_OBJECT_KEY
from pbxgraph.domain.records import Node, ObjectRef, PBXProject
from pbxgraph.graph.store import ObjectStore

_LOGGER = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class DanglingReference:
    """A reference whose UID matched no record when the graph was built."""

    owner: str
    field: str
    uid: str


@dataclass(frozen=True, slots=True)
class ResolutionReport:
    resolved: int
    dangling: tuple[DanglingReference, ...]

    @property
    def unresolved(self) -> int:
        return len(self.dangling)

    @property
    def is_complete(self) -> bool:
        return not self.dangling


def resolve_references(
    store: ObjectStore,
    root: MutableMapping[str, Node] | None = None,
    *,
    project_name: str | None = None,
) -> ResolutionReport:
    """Bind every reference field of every record in ``store``.

    Must run after promotion has completed, since references may point
    forward or backward in storage order. The ``rootObject`` entry of
    ``root`` is bound the same way, and the project record it names
    receives ``project_name``.
    """
    resolved = 0
    dangling: list[DanglingReference] = []

    for uid, record in store.records():
        record.connect_references(store.get_record)
        for field_name, ref in record.iter_references():
            if ref.is_resolved:
                resolved += 1
            else:
                dangling.append(DanglingReference(owner=uid, field=field_name, uid=ref.uid))

    if root is not None:
        root_ref = _bind_root_object(store, root)
        if root_ref is not None:
            if root_ref.is_resolved:
                resolved += 1
            else:
                dangling.append(
                    DanglingReference(owner="", field=ROOT_OBJECT_KEY, uid=root_ref.uid)
                )
            project = root_ref.target
            if isinstance(project, PBXProject):
                project.project_name = project_name

    report = ResolutionReport(resolved=resolved, dangling=tuple(dangling))
    if dangling:
        _LOGGER.warning(
            "unresolved_references",
            count=len(dangling),
            sample=[f"{item.owner}.{item.field}={item.uid}" for item in dangling[:5]],
        )
    _LOGGER.debug("references_resolved", resolved=resolved, unresolved=len(dangling))
    return report


def _bind_root_object(store: ObjectStore, root: MutableMapping[str, Node]) -> ObjectRef | None:
    value = root.get(ROOT_OBJECT_KEY)
    if isinstance(value, str):
        value = ObjectRef(value)
    if not isinstance(value, ObjectRef):
        return None
    value.bind(store.get_record(value.uid))
    root[ROOT_OBJECT_KEY] = value
    return value


__all__ = ["DanglingReference", "ResolutionReport", "resolve_references"]
