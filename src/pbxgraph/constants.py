"""Stable constants shared across the document, graph and codec layers."""

from __future__ import annotations

from typing import Final

# Well-known keys of the project document.
ISA_KEY: Final[str] = "isa"
OBJECTS_KEY: Final[str] = "objects"
ROOT_OBJECT_KEY: Final[str] = "rootObject"
ARCHIVE_VERSION_KEY: Final[str] = "archiveVersion"
OBJECT_VERSION_KEY: Final[str] = "objectVersion"
CLASSES_KEY: Final[str] = "classes"

# Defaults for a freshly created document.
DEFAULT_ARCHIVE_VERSION: Final[str] = "1"
DEFAULT_OBJECT_VERSION: Final[str] = "46"

# Project bundle layout.
PROJECT_BUNDLE_SUFFIX: Final[str] = ".xcodeproj"
PROJECT_FILE_NAME: Final[str] = "project.pbxproj"

# Text format.
UTF8_HEADER: Final[str] = "// !$*UTF8*$!"

# Object identifiers.
UID_LENGTH: Final[int] = 24

__all__ = [
    "ARCHIVE_VERSION_KEY",
    "CLASSES_KEY",
    "DEFAULT_ARCHIVE_VERSION",
    "DEFAULT_OBJECT_VERSION",
    "ISA_KEY",
    "OBJECTS_KEY",
    "OBJECT_VERSION_KEY",
    "PROJECT_BUNDLE_SUFFIX",
    "PROJECT_FILE_NAME",
    "ROOT_OBJECT_KEY",
    "UID_LENGTH",
    "UTF8_HEADER",
]
