"""Unit tests for the isa discriminator registry."""

from __future__ import annotations

import pytest

from pbxgraph.domain.records import PassthroughObject, PBXGroup, PBXObject, PBXProject
from pbxgraph.domain.registry import (
    DEFAULT_TYPE_REGISTRY,
    SUPPORTED_RECORD_TYPES,
    TypeRegistry,
    resolve_record_type,
)


class _SwiftPackageReference(PBXObject):
    isa = "XCRemoteSwiftPackageReference"


def test_default_registry_covers_supported_types() -> None:
    assert len(DEFAULT_TYPE_REGISTRY) == len(SUPPORTED_RECORD_TYPES) == 18
    for record_type in SUPPORTED_RECORD_TYPES:
        assert DEFAULT_TYPE_REGISTRY.resolve(record_type.isa) is record_type
        assert record_type.isa in DEFAULT_TYPE_REGISTRY


def test_unknown_discriminator_falls_back_to_passthrough() -> None:
    assert resolve_record_type("PBXProject") is PBXProject
    assert resolve_record_type("XCSwiftPackageProductDependency") is PassthroughObject
    assert not DEFAULT_TYPE_REGISTRY.is_known("XCSwiftPackageProductDependency")


def test_registry_rejects_duplicates_and_missing_discriminators() -> None:
    class _NoIsa(PBXObject):
        pass

    class _DuplicateGroup(PBXObject):
        isa = "PBXGroup"

    with pytest.raises(ValueError, match="duplicate isa"):
        TypeRegistry([PBXGroup, _DuplicateGroup])
    with pytest.raises(ValueError, match="does not declare"):
        TypeRegistry([_NoIsa])
    with pytest.raises(ValueError, match="must subclass PBXObject"):
        TypeRegistry([dict])  # type: ignore[list-item]


def test_extended_registry_leaves_original_untouched() -> None:
    extended = DEFAULT_TYPE_REGISTRY.extended(_SwiftPackageReference)

    assert extended.resolve("XCRemoteSwiftPackageReference") is _SwiftPackageReference
    assert DEFAULT_TYPE_REGISTRY.resolve("XCRemoteSwiftPackageReference") is PassthroughObject
    assert len(extended) == len(DEFAULT_TYPE_REGISTRY) + 1
    assert extended.fallback is PassthroughObject
