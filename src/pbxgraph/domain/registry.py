"""Static discriminator table mapping ``isa`` strings to record classes."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Final

from pbxgraph.domain.records import (
    PassthroughObject,
    PBXBuildFile,
    PBXBuildRule,
    PBXContainerItemProxy,
    PBXCopyFilesBuildPhase,
    PBXFileReference,
    PBXFrameworksBuildPhase,
    PBXGroup,
    PBXHeadersBuildPhase,
    PBXNativeTarget,
    PBXObject,
    PBXProject,
    PBXReferenceProxy,
    PBXResourcesBuildPhase,
    PBXShellScriptBuildPhase,
    PBXSourcesBuildPhase,
    PBXTargetDependency,
    PBXVariantGroup,
    XCBuildConfiguration,
    XCConfigurationList,
)

SUPPORTED_RECORD_TYPES: Final[tuple[type[PBXObject], ...]] = (
    PBXBuildFile,
    PBXFileReference,
    PBXBuildRule,
    PBXContainerItemProxy,
    PBXCopyFilesBuildPhase,
    PBXFrameworksBuildPhase,
    PBXGroup,
    PBXHeadersBuildPhase,
    PBXNativeTarget,
    PBXProject,
    PBXReferenceProxy,
    PBXResourcesBuildPhase,
    PBXShellScriptBuildPhase,
    PBXSourcesBuildPhase,
    PBXTargetDependency,
    PBXVariantGroup,
    XCBuildConfiguration,
    XCConfigurationList,
)


class TypeRegistry:
    """Closed lookup from discriminator to record class.

    ``resolve`` never fails: unknown discriminators map to the fallback
    class, :class:`PassthroughObject` unless overridden.
    """

    __slots__ = ("_table", "_fallback")

    def __init__(
        self,
        record_types: Iterable[type[PBXObject]],
        *,
        fallback: type[PBXObject] = PassthroughObject,
    ) -> None:
        table: dict[str, type[PBXObject]] = {}
        for record_type in record_types:
            if not (isinstance(record_type, type) and issubclass(record_type, PBXObject)):
                raise ValueError(f"record type must subclass PBXObject, got {record_type!r}")
            if not record_type.isa:
                raise ValueError(f"{record_type.__name__} does not declare an isa discriminator")
            if record_type.isa in table:
                raise ValueError(f"duplicate isa discriminator {record_type.isa!r}")
            table[record_type.isa] = record_type
        self._table: Mapping[str, type[PBXObject]] = MappingProxyType(table)
        self._fallback = fallback

    @property
    def fallback(self) -> type[PBXObject]:
        return self._fallback

    @property
    def discriminators(self) -> tuple[str, ...]:
        return tuple(self._table)

    def resolve(self, isa: str) -> type[PBXObject]:
        return self._table.get(isa, self._fallback)

    def is_known(self, isa: str) -> bool:
        return isa in self._table

    def extended(self, *record_types: type[PBXObject]) -> TypeRegistry:
        """Return a new registry with ``record_types`` added to this table."""
        return TypeRegistry((*self._table.values(), *record_types), fallback=self._fallback)

    def __contains__(self, isa: object) -> bool:
        return isa in self._table

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)


DEFAULT_TYPE_REGISTRY: Final[TypeRegistry] = TypeRegistry(SUPPORTED_RECORD_TYPES)


def resolve_record_type(isa: str) -> type[PBXObject]:
    """Resolve ``isa`` against :data:`DEFAULT_TYPE_REGISTRY`."""
    return DEFAULT_TYPE_REGISTRY.resolve(isa)


__all__ = [
    "DEFAULT_TYPE_REGISTRY",
    "SUPPORTED_RECORD_TYPES",
    "TypeRegistry",
    "resolve_record_type",
]
