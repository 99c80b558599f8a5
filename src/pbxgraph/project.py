"""Project document: parse, build the object graph, mutate and save.

A :class:`ProjectFile` owns the parsed root dictionary, the promoted
:class:`~pbxgraph.graph.store.ObjectStore` (installed back under
``objects``) and the resolved ``rootObject`` reference. It is meant for a
single owner on a single thread.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import IO, Any, TypeVar

import structlog

from pbxgraph.config.schema import DEFAULT_SETTINGS, SerializerSettings
from pbxgraph.constants import (
    ARCHIVE_VERSION_KEY,
    CLASSES_KEY,
    DEFAULT_ARCHIVE_VERSION,
    DEFAULT_OBJECT_VERSION,
    OBJECT_VERSION_KEY,
    OBJECTS_KEY,
    ROOT_OBJECT_KEY,
)
from pbxgraph.domain.ids import generate_uid
from pbxgraph.domain.records import (
    Node,
    ObjectRef,
    PBXBuildFile,
    PBXFileReference,
    PBXGroup,
    PBXObject,
    PBXProject,
    XCBuildConfiguration,
    XCConfigurationList,
)
from pbxgraph.domain.registry import DEFAULT_TYPE_REGISTRY, TypeRegistry
from pbxgraph.errors import ProjectError, ProjectParseError
from pbxgraph.graph.promoter import promote
from pbxgraph.graph.resolver import ResolutionReport, resolve_references
from pbxgraph.graph.serializer import serialize_document
from pbxgraph.graph.store import ObjectStore
from pbxgraph.nextstep.reader import NextStepError, read_file, read_stream, read_string
from pbxgraph.utils.fs import atomic_write, project_file_path, project_name_for, source_root_for

PathLike = str | os.PathLike[str]
TRecord = TypeVar("TRecord", bound=PBXObject)

_LOGGER = structlog.get_logger(__name__)
_PARSE_FAILURE = "failed to parse project file"


class ProjectFile:
    """In-memory Xcode project document."""

    def __init__(
        self,
        root: dict[str, Node] | None = None,
        *,
        path: PathLike | None = None,
        project_name: str | None = None,
        registry: TypeRegistry = DEFAULT_TYPE_REGISTRY,
        serializer: SerializerSettings = DEFAULT_SETTINGS.serializer,
    ) -> None:
        if root is not None and not isinstance(root, dict):
            raise TypeError(f"root must be a dict, got {type(root).__name__}")
        self._root: dict[str, Node] = _empty_root() if root is None else root
        self._path = None if path is None else Path(path)
        self._project_name = project_name
        self._registry = registry
        self._serializer = serializer
        self._store, self._report = self._build()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def empty(cls, **options: Any) -> ProjectFile:
        """Create a document with the structural keys and no objects."""
        return cls(None, **options)

    @classmethod
    def from_path(cls, path: PathLike, **options: Any) -> ProjectFile:
        """Load ``path``, a ``project.pbxproj`` file or an ``.xcodeproj`` bundle."""
        if path is None:
            raise ValueError("path cannot be None")
        project_file = project_file_path(path)
        try:
            root = read_file(project_file)
        except NextStepError as exc:
            raise ProjectParseError(f"{_PARSE_FAILURE}: {project_file}") from exc
        return cls(root, path=project_file, project_name=project_name_for(project_file), **options)

    @classmethod
    def from_stream(cls, stream: IO[str] | IO[bytes], **options: Any) -> ProjectFile:
        if stream is None:
            raise ValueError("stream cannot be None")
        try:
            root = read_stream(stream)
        except NextStepError as exc:
            raise ProjectParseError(_PARSE_FAILURE) from exc
        return cls(root, **options)

    @classmethod
    def from_string(cls, content: str, **options: Any) -> ProjectFile:
        if content is None:
            raise ValueError("content cannot be None")
        try:
            root = read_string(content)
        except NextStepError as exc:
            raise ProjectParseError(_PARSE_FAILURE) from exc
        return cls(root, **options)

    def _build(self) -> tuple[ObjectStore, ResolutionReport]:
        raw_objects = self._root.get(OBJECTS_KEY)
        if not isinstance(raw_objects, Mapping):
            raise ProjectParseError(f"{_PARSE_FAILURE}: missing '{OBJECTS_KEY}' dictionary")

        store = promote(raw_objects, self._registry)
        self._root[OBJECTS_KEY] = store
        report = resolve_references(store, self._root, project_name=self._project_name)
        _LOGGER.debug(
            "project_loaded",
            path=None if self._path is None else str(self._path),
            objects=len(store),
            unresolved=report.unresolved,
        )
        return store, report

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def root(self) -> dict[str, Node]:
        return self._root

    @property
    def objects(self) -> ObjectStore:
        return self._store

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def project_name(self) -> str | None:
        return self._project_name

    @property
    def resolution(self) -> ResolutionReport:
        """Outcome of the reference pass run when the document was built."""
        return self._report

    @property
    def root_object(self) -> ObjectRef[PBXProject] | None:
        value = self._root.get(ROOT_OBJECT_KEY)
        return value if isinstance(value, ObjectRef) else None

    @root_object.setter
    def root_object(self, ref: ObjectRef[PBXProject] | None) -> None:
        if ref is None:
            self._root.pop(ROOT_OBJECT_KEY, None)
            return
        if not isinstance(ref, ObjectRef):
            raise TypeError(f"root_object expects an ObjectRef, got {type(ref).__name__}")
        self._root[ROOT_OBJECT_KEY] = ref

    @property
    def project(self) -> PBXProject | None:
        ref = self.root_object
        target = None if ref is None else ref.target
        return target if isinstance(target, PBXProject) else None

    @property
    def source_root(self) -> Path | None:
        """Directory containing the project bundle, when loaded from disk."""
        if self._path is None:
            return None
        return source_root_for(self._path)

    def get(self, uid: str) -> PBXObject | None:
        return self._store.get_record(uid)

    def resolve(self) -> ResolutionReport:
        """Re-run reference binding, e.g. after inserting records by hand."""
        self._report = resolve_references(
            self._store, self._root, project_name=self._project_name
        )
        return self._report

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def to_string(self) -> str:
        """Sort the object table by type and render the document."""
        return serialize_document(
            self._root,
            self._store,
            tie_break=self._serializer.tie_break,
            inline_types=self._serializer.inline_types,
        )

    def __str__(self) -> str:
        return self.to_string()

    def save(self) -> Path:
        if self._path is None:
            raise ProjectError("project has no path; use save_as()")
        return self.save_as(self._path)

    def save_as(self, path: PathLike) -> Path:
        """Write the document to ``path`` (bundle paths map to their member file)."""
        if path is None:
            raise ValueError("path cannot be None")
        target = project_file_path(path)
        text = self.to_string()
        atomic_write(target, text)
        _LOGGER.debug("project_saved", path=str(target), objects=len(self._store))
        return target

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    def create_reference(self, record: TRecord) -> ObjectRef[TRecord]:
        """Allocate a fresh UID bound to ``record``; the store is not touched."""
        if record is None:
            raise ValueError("record cannot be None")
        if not isinstance(record, PBXObject):
            raise TypeError(f"record must be a PBXObject, got {type(record).__name__}")
        return ObjectRef(generate_uid(self._store), record)

    def add(self, record: TRecord) -> ObjectRef[TRecord]:
        """Create a reference for ``record`` and insert it into the store."""
        ref = self.create_reference(record)
        self._store.put(ref)
        _LOGGER.debug("record_added", uid=ref.uid, isa=record.type_name)
        return ref

    def new_build_file(self, file_ref: ObjectRef[Any]) -> ObjectRef[PBXBuildFile]:
        record = PBXBuildFile()
        record.file_ref = file_ref
        return self.add(record)

    def new_file_reference(
        self,
        *,
        explicit_file_type: str | None = None,
        last_known_file_type: str | None = None,
        include_in_index: str | None = None,
        name: str | None = None,
        path: str | None = None,
        source_tree: str | None = None,
    ) -> ObjectRef[PBXFileReference]:
        record = PBXFileReference()
        record.explicit_file_type = explicit_file_type
        record.last_known_file_type = last_known_file_type
        record.include_in_index = include_in_index
        record.name = name
        record.path = path
        record.source_tree = source_tree
        return self.add(record)

    def new_group(
        self,
        *,
        name: str | None = None,
        path: str | None = None,
        source_tree: str | None = None,
    ) -> ObjectRef[PBXGroup]:
        record = PBXGroup()
        record.children = []
        record.name = name
        record.path = path
        record.source_tree = source_tree
        return self.add(record)

    def new_build_configuration(
        self,
        name: str,
        build_settings: Mapping[str, Node] | None = None,
    ) -> ObjectRef[XCBuildConfiguration]:
        record = XCBuildConfiguration()
        record.build_settings = dict(build_settings or {})
        record.name = name
        return self.add(record)

    def new_configuration_list(
        self,
        configurations: list[ObjectRef[XCBuildConfiguration]],
        *,
        default_name: str | None = None,
        default_visible: bool = False,
    ) -> ObjectRef[XCConfigurationList]:
        record = XCConfigurationList()
        record.build_configurations = configurations
        record.default_configuration_is_visible = "1" if default_visible else "0"
        record.default_configuration_name = default_name
        return self.add(record)


def _empty_root() -> dict[str, Node]:
    return {
        ARCHIVE_VERSION_KEY: DEFAULT_ARCHIVE_VERSION,
        CLASSES_KEY: {},
        OBJECT_VERSION_KEY: DEFAULT_OBJECT_VERSION,
        OBJECTS_KEY: {},
    }


__all__ = ["ProjectFile"]
