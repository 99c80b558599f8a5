"""
pbxgraph: read, edit and rewrite Xcode ``project.pbxproj`` files.

Purpose
- Parse the NeXTSTEP property list, promote the ``objects`` table into typed
  records, bind UID references and serialize back with objects grouped by type.

Functional requirements
- Must not have side effects at import time (no config loading, no logging init).

Logging
- Modules emit structlog events (loads, saves and promotion at debug level,
  dangling references as a warning). Applications choose the sink and level,
  e.g. ``pbxgraph.observability.configure_logging("WARNING")``. Unconfigured
  structlog prints every event, debug included, to stdout.
"""

from pbxgraph.domain.records import ObjectRef, PBXObject, RefState
from pbxgraph.domain.registry import DEFAULT_TYPE_REGISTRY, TypeRegistry
from pbxgraph.errors import ProjectError, ProjectParseError, RegistryError
from pbxgraph.project import ProjectFile

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_TYPE_REGISTRY",
    "ObjectRef",
    "PBXObject",
    "ProjectError",
    "ProjectFile",
    "ProjectParseError",
    "RefState",
    "RegistryError",
    "TypeRegistry",
    "__version__",
]
