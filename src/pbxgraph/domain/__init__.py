"""Typed record views, the discriminator registry and UID helpers."""

from pbxgraph.domain.ids import generate_uid, is_uid, validate_uid
from pbxgraph.domain.records import (
    ObjectRef,
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
    RefState,
    XCBuildConfiguration,
    XCConfigurationList,
)
from pbxgraph.domain.registry import (
    DEFAULT_TYPE_REGISTRY,
    SUPPORTED_RECORD_TYPES,
    TypeRegistry,
    resolve_record_type,
)

__all__ = [
    "DEFAULT_TYPE_REGISTRY",
    "SUPPORTED_RECORD_TYPES",
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
    "RefState",
    "TypeRegistry",
    "XCBuildConfiguration",
    "XCConfigurationList",
    "generate_uid",
    "is_uid",
    "resolve_record_type",
    "validate_uid",
]
