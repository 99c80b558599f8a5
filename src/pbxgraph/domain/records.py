"""Typed record views over ``objects`` table entries and UID references.

A record never copies its backing dictionary. Typed accessors read from and
write to the same ``dict`` that the document tree holds, so edits made
through either view are visible through the other.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from enum import StrEnum
from typing import Any, ClassVar, Generic, TypeVar, overload

from pbxgraph.constants import ISA_KEY

Node = Any
"""A tree value: ``str``, ``dict[str, Node]``, ``list[Node]`` or ``ObjectRef``."""

TRecord = TypeVar("TRecord", bound="PBXObject")

RecordLookup = Callable[[str], "PBXObject | None"]


class RefState(StrEnum):
    PENDING = "pending"
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"


class ObjectRef(Generic[TRecord]):
    """A UID plus a lazily bound pointer to the record carrying that UID."""

    __slots__ = ("_uid", "_target", "_state")

    def __init__(self, uid: str, target: TRecord | None = None) -> None:
        if not isinstance(uid, str) or not uid:
            raise ValueError("uid must be a non-empty string")
        self._uid = uid
        self._target: TRecord | None = target
        self._state = RefState.PENDING if target is None else RefState.RESOLVED

    @property
    def uid(self) -> str:
        return self._uid

    @property
    def state(self) -> RefState:
        return self._state

    @property
    def is_resolved(self) -> bool:
        return self._state is RefState.RESOLVED

    @property
    def target(self) -> TRecord | None:
        """The referenced record, or ``None`` while pending or unresolved."""
        if self._state is RefState.RESOLVED:
            return self._target
        return None

    def bind(self, target: TRecord | None) -> None:
        """Point at ``target``, or mark the reference unresolved for ``None``."""
        self._target = target
        self._state = RefState.UNRESOLVED if target is None else RefState.RESOLVED

    def comment(self) -> str | None:
        target = self.target
        return None if target is None else target.comment()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ObjectRef):
            return self._uid == other._uid
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._uid)

    def __str__(self) -> str:
        return self._uid

    def __repr__(self) -> str:
        return f"ObjectRef({self._uid!r}, state={self._state.value})"


# ---------------------------------------------------------------------------
# Field descriptors
# ---------------------------------------------------------------------------


class Scalar:
    """Plain value stored under ``key`` (string, dictionary or array)."""

    def __init__(self, key: str) -> None:
        self.key = key

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    @overload
    def __get__(self, instance: None, owner: type) -> Scalar: ...

    @overload
    def __get__(self, instance: PBXObject, owner: type) -> Node | None: ...

    def __get__(self, instance: PBXObject | None, owner: type) -> Scalar | Node | None:
        if instance is None:
            return self
        return instance.fields.get(self.key)

    def __set__(self, instance: PBXObject, value: Node | None) -> None:
        if value is None:
            instance.fields.pop(self.key, None)
        else:
            instance.fields[self.key] = value


class Reference:
    """A single UID-valued field exposed as an :class:`ObjectRef`."""

    def __init__(self, key: str) -> None:
        self.key = key

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    @overload
    def __get__(self, instance: None, owner: type) -> Reference: ...

    @overload
    def __get__(self, instance: PBXObject, owner: type) -> ObjectRef[Any] | None: ...

    def __get__(
        self, instance: PBXObject | None, owner: type
    ) -> Reference | ObjectRef[Any] | None:
        if instance is None:
            return self
        value = instance.fields.get(self.key)
        if isinstance(value, ObjectRef):
            return value
        if isinstance(value, str):
            ref: ObjectRef[Any] = ObjectRef(value)
            instance.fields[self.key] = ref
            return ref
        return None

    def __set__(self, instance: PBXObject, value: ObjectRef[Any] | None) -> None:
        if value is None:
            instance.fields.pop(self.key, None)
            return
        if not isinstance(value, ObjectRef):
            raise TypeError(f"{self.name} expects an ObjectRef, got {type(value).__name__}")
        instance.fields[self.key] = value


class ReferenceList:
    """An ordered array of UIDs exposed as a tuple of :class:`ObjectRef`."""

    def __init__(self, key: str) -> None:
        self.key = key

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    @overload
    def __get__(self, instance: None, owner: type) -> ReferenceList: ...

    @overload
    def __get__(self, instance: PBXObject, owner: type) -> tuple[ObjectRef[Any], ...]: ...

    def __get__(
        self, instance: PBXObject | None, owner: type
    ) -> ReferenceList | tuple[ObjectRef[Any], ...]:
        if instance is None:
            return self
        value = instance.fields.get(self.key)
        if not isinstance(value, list):
            return ()
        normalized = [_as_ref(item) for item in value]
        instance.fields[self.key] = normalized
        return tuple(item for item in normalized if isinstance(item, ObjectRef))

    def __set__(self, instance: PBXObject, value: Iterable[ObjectRef[Any]] | None) -> None:
        if value is None:
            instance.fields.pop(self.key, None)
            return
        items = list(value)
        for item in items:
            if not isinstance(item, ObjectRef):
                raise TypeError(f"{self.name} expects ObjectRef items, got {type(item).__name__}")
        instance.fields[self.key] = items


def _as_ref(value: Node) -> Node:
    if isinstance(value, str):
        return ObjectRef(value)
    return value


def _bound(value: Node, lookup: RecordLookup) -> Node:
    ref = _as_ref(value)
    if isinstance(ref, ObjectRef):
        ref.bind(lookup(ref.uid))
    return ref


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class PBXObject:
    """Base typed view over one dictionary of the ``objects`` table."""

    isa: ClassVar[str] = ""
    reference_keys: ClassVar[tuple[str, ...]] = ()
    reference_list_keys: ClassVar[tuple[str, ...]] = ()
    scalar_keys: ClassVar[tuple[str, ...]] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        scalars: dict[str, None] = {}
        references: dict[str, None] = {}
        reference_lists: dict[str, None] = {}
        for klass in reversed(cls.__mro__):
            for attribute in vars(klass).values():
                if isinstance(attribute, Scalar):
                    scalars[attribute.key] = None
                elif isinstance(attribute, Reference):
                    references[attribute.key] = None
                elif isinstance(attribute, ReferenceList):
                    reference_lists[attribute.key] = None
        cls.scalar_keys = tuple(scalars)
        cls.reference_keys = tuple(references)
        cls.reference_list_keys = tuple(reference_lists)

    def __init__(self, fields: dict[str, Node] | None = None) -> None:
        if fields is None:
            fields = {ISA_KEY: self.isa} if self.isa else {}
        elif not isinstance(fields, dict):
            raise TypeError(f"record fields must be a dict, got {type(fields).__name__}")
        self._fields = fields

    @property
    def fields(self) -> dict[str, Node]:
        """The live backing dictionary."""
        return self._fields

    @property
    def type_name(self) -> str:
        value = self._fields.get(ISA_KEY)
        if isinstance(value, str) and value:
            return value
        return self.isa or type(self).__name__

    def comment(self) -> str | None:
        """Annotation written next to this record's UID, if any."""
        for key in ("name", "path"):
            value = self._fields.get(key)
            if isinstance(value, str) and value:
                return value
        return None

    def connect_references(self, lookup: RecordLookup) -> None:
        """Rewrite every UID-valued field into a bound :class:`ObjectRef`."""
        for key in self.reference_keys:
            value = self._fields.get(key)
            if isinstance(value, (str, ObjectRef)):
                self._fields[key] = _bound(value, lookup)
        for key in self.reference_list_keys:
            value = self._fields.get(key)
            if isinstance(value, list):
                self._fields[key] = [_bound(item, lookup) for item in value]

    def iter_references(self) -> Iterator[tuple[str, ObjectRef[Any]]]:
        """Yield ``(field, ref)`` pairs for every reference held by this record."""
        for key in self.reference_keys:
            value = self._fields.get(key)
            if isinstance(value, ObjectRef):
                yield key, value
        for key in self.reference_list_keys:
            value = self._fields.get(key)
            if isinstance(value, list):
                for item in value:
                    if isinstance(item, ObjectRef):
                        yield key, item

    def _append_reference(self, key: str, ref: ObjectRef[Any]) -> None:
        if not isinstance(ref, ObjectRef):
            raise TypeError(f"expected an ObjectRef, got {type(ref).__name__}")
        current = self._fields.get(key)
        items = list(current) if isinstance(current, list) else []
        items.append(ref)
        self._fields[key] = items

    def _remove_reference(self, key: str, ref: ObjectRef[Any]) -> bool:
        current = self._fields.get(key)
        if not isinstance(current, list):
            return False
        kept = [item for item in current if _as_ref(item) != ref]
        self._fields[key] = kept
        return len(kept) != len(current)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(isa={self.type_name!r})"


class PassthroughObject(PBXObject):
    """Record of an unrecognized type; exposes no typed fields."""


class PBXBuildFile(PBXObject):
    isa = "PBXBuildFile"

    file_ref = Reference("fileRef")
    product_ref = Reference("productRef")
    settings = Scalar("settings")

    def comment(self) -> str | None:
        # Only one hop: a build file naming another build file gets no comment.
        ref = self.file_ref or self.product_ref
        target = None if ref is None else ref.target
        if target is None or isinstance(target, PBXBuildFile):
            return None
        return target.comment()


class PBXFileReference(PBXObject):
    isa = "PBXFileReference"

    explicit_file_type = Scalar("explicitFileType")
    file_encoding = Scalar("fileEncoding")
    include_in_index = Scalar("includeInIndex")
    last_known_file_type = Scalar("lastKnownFileType")
    name = Scalar("name")
    path = Scalar("path")
    source_tree = Scalar("sourceTree")


class PBXBuildRule(PBXObject):
    isa = "PBXBuildRule"

    compiler_spec = Scalar("compilerSpec")
    file_patterns = Scalar("filePatterns")
    file_type = Scalar("fileType")
    is_editable = Scalar("isEditable")
    name = Scalar("name")
    output_files = Scalar("outputFiles")
    script = Scalar("script")


class PBXContainerItemProxy(PBXObject):
    isa = "PBXContainerItemProxy"

    container_portal = Reference("containerPortal")
    proxy_type = Scalar("proxyType")
    remote_global_id_string = Scalar("remoteGlobalIDString")
    remote_info = Scalar("remoteInfo")

    def comment(self) -> str | None:
        return self.isa


class _BuildPhase(PBXObject):
    default_name: ClassVar[str] = ""

    build_action_mask = Scalar("buildActionMask")
    files = ReferenceList("files")
    name = Scalar("name")
    run_only_for_deployment_postprocessing = Scalar("runOnlyForDeploymentPostprocessing")

    def add_file(self, build_file: ObjectRef[PBXBuildFile]) -> None:
        self._append_reference("files", build_file)

    def remove_file(self, build_file: ObjectRef[PBXBuildFile]) -> bool:
        return self._remove_reference("files", build_file)

    def comment(self) -> str | None:
        name = self.name
        if isinstance(name, str) and name:
            return name
        return self.default_name or None


class PBXCopyFilesBuildPhase(_BuildPhase):
    isa = "PBXCopyFilesBuildPhase"
    default_name = "CopyFiles"

    dst_path = Scalar("dstPath")
    dst_subfolder_spec = Scalar("dstSubfolderSpec")


class PBXFrameworksBuildPhase(_BuildPhase):
    isa = "PBXFrameworksBuildPhase"
    default_name = "Frameworks"


class PBXHeadersBuildPhase(_BuildPhase):
    isa = "PBXHeadersBuildPhase"
    default_name = "Headers"


class PBXResourcesBuildPhase(_BuildPhase):
    isa = "PBXResourcesBuildPhase"
    default_name = "Resources"


class PBXSourcesBuildPhase(_BuildPhase):
    isa = "PBXSourcesBuildPhase"
    default_name = "Sources"


class PBXShellScriptBuildPhase(_BuildPhase):
    isa = "PBXShellScriptBuildPhase"
    default_name = "ShellScript"

    input_file_list_paths = Scalar("inputFileListPaths")
    input_paths = Scalar("inputPaths")
    output_file_list_paths = Scalar("outputFileListPaths")
    output_paths = Scalar("outputPaths")
    shell_path = Scalar("shellPath")
    shell_script = Scalar("shellScript")


class PBXGroup(PBXObject):
    isa = "PBXGroup"

    children = ReferenceList("children")
    name = Scalar("name")
    path = Scalar("path")
    source_tree = Scalar("sourceTree")

    def add_child(self, child: ObjectRef[Any]) -> None:
        self._append_reference("children", child)

    def remove_child(self, child: ObjectRef[Any]) -> bool:
        return self._remove_reference("children", child)


class PBXVariantGroup(PBXGroup):
    isa = "PBXVariantGroup"


class PBXNativeTarget(PBXObject):
    isa = "PBXNativeTarget"

    build_configuration_list = Reference("buildConfigurationList")
    build_phases = ReferenceList("buildPhases")
    build_rules = ReferenceList("buildRules")
    dependencies = ReferenceList("dependencies")
    name = Scalar("name")
    product_name = Scalar("productName")
    product_reference = Reference("productReference")
    product_type = Scalar("productType")

    def add_build_phase(self, phase: ObjectRef[Any]) -> None:
        self._append_reference("buildPhases", phase)


class PBXProject(PBXObject):
    isa = "PBXProject"

    project_reference_keys: ClassVar[tuple[str, ...]] = ("ProductGroup", "ProjectRef")

    attributes = Scalar("attributes")
    build_configuration_list = Reference("buildConfigurationList")
    compatibility_version = Scalar("compatibilityVersion")
    development_region = Scalar("developmentRegion")
    has_scanned_for_encodings = Scalar("hasScannedForEncodings")
    known_regions = Scalar("knownRegions")
    main_group = Reference("mainGroup")
    product_ref_group = Reference("productRefGroup")
    project_dir_path = Scalar("projectDirPath")
    project_references = Scalar("projectReferences")
    project_root = Scalar("projectRoot")
    targets = ReferenceList("targets")

    def __init__(self, fields: dict[str, Node] | None = None) -> None:
        super().__init__(fields)
        self.project_name: str | None = None

    def add_target(self, target: ObjectRef[PBXNativeTarget]) -> None:
        self._append_reference("targets", target)

    def comment(self) -> str | None:
        return "Project object"

    def connect_references(self, lookup: RecordLookup) -> None:
        super().connect_references(lookup)
        for entry in self._project_reference_entries():
            for key in self.project_reference_keys:
                value = entry.get(key)
                if isinstance(value, (str, ObjectRef)):
                    entry[key] = _bound(value, lookup)

    def iter_references(self) -> Iterator[tuple[str, ObjectRef[Any]]]:
        yield from super().iter_references()
        for entry in self._project_reference_entries():
            for key in self.project_reference_keys:
                value = entry.get(key)
                if isinstance(value, ObjectRef):
                    yield f"projectReferences.{key}", value

    def _project_reference_entries(self) -> list[dict[str, Node]]:
        value = self._fields.get("projectReferences")
        if not isinstance(value, list):
            return []
        return [entry for entry in value if isinstance(entry, dict)]


class PBXReferenceProxy(PBXObject):
    isa = "PBXReferenceProxy"

    file_type = Scalar("fileType")
    path = Scalar("path")
    remote_ref = Reference("remoteRef")
    source_tree = Scalar("sourceTree")


class PBXTargetDependency(PBXObject):
    isa = "PBXTargetDependency"

    name = Scalar("name")
    target = Reference("target")
    target_proxy = Reference("targetProxy")

    def comment(self) -> str | None:
        return self.isa


class XCBuildConfiguration(PBXObject):
    isa = "XCBuildConfiguration"

    base_configuration_reference = Reference("baseConfigurationReference")
    build_settings = Scalar("buildSettings")
    name = Scalar("name")


class XCConfigurationList(PBXObject):
    isa = "XCConfigurationList"

    build_configurations = ReferenceList("buildConfigurations")
    default_configuration_is_visible = Scalar("defaultConfigurationIsVisible")
    default_configuration_name = Scalar("defaultConfigurationName")

    def add_build_configuration(self, configuration: ObjectRef[XCBuildConfiguration]) -> None:
        self._append_reference("buildConfigurations", configuration)

    def comment(self) -> str | None:
        return "Build configuration list"


__all__ = [
    "Node",
    "ObjectRef",
    "PBXBuildFile",
    "PBXBuildRule",
    "PBXContainerItemProxy",
    "PBXCopyFilesBuildPhase",
    "PBXFileReference",
    "PBXFrameworksBuildPhase",
    "PBXGroup",
    "PBXHeadersBuildPhase",
    "PBXNativeTarget",
    "PBXObject",
    "PBXProject",
    "PBXReferenceProxy",
    "PBXResourcesBuildPhase",
    "PBXShellScriptBuildPhase",
    "PBXSourcesBuildPhase",
    "PBXTargetDependency",
    "PBXVariantGroup",
    "PassthroughObject",
    "RecordLookup",
    "RefState",
    "Reference",
    "ReferenceList",
    "Scalar",
    "XCBuildConfiguration",
    "XCConfigurationList",
]
