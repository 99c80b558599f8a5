"""
pbxgraph filesystem utilities

Purpose
- Map project bundle paths to the ``project.pbxproj`` file inside them.
- Write documents atomically, creating parent directories as needed.

Non-functional requirements
- Standard library only and cross-platform behavior where feasible.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path

from pbxgraph.constants import PROJECT_BUNDLE_SUFFIX, PROJECT_FILE_NAME

PathLike = str | os.PathLike[str]

__all__ = [
    "atomic_write",
    "project_file_path",
    "project_name_for",
    "source_root_for",
]


def project_file_path(path: PathLike) -> Path:
    """Return the effective project file for ``path``.

    A ``*.xcodeproj`` bundle maps to its ``project.pbxproj`` member; any
    other path is returned unchanged.
    """

    candidate = Path(path)
    if candidate.suffix == PROJECT_BUNDLE_SUFFIX:
        return candidate / PROJECT_FILE_NAME
    return candidate


def project_name_for(project_file: PathLike) -> str | None:
    """Return the bundle stem (``App`` for ``App.xcodeproj/project.pbxproj``)."""

    parent = Path(project_file).parent
    if parent.name.endswith(PROJECT_BUNDLE_SUFFIX) and len(parent.name) > len(
        PROJECT_BUNDLE_SUFFIX
    ):
        return parent.name[: -len(PROJECT_BUNDLE_SUFFIX)]
    return None


def source_root_for(project_file: PathLike) -> Path:
    """Return the directory that contains the project bundle."""

    return Path(project_file).parent.parent


def atomic_write(path: PathLike, data: str, *, encoding: str = "utf-8") -> None:
    """
    Atomically write ``data`` to ``path``.

    Missing parent directories are created. The text goes to a temp file in
    the destination directory, is flushed and fsynced, then replaces the
    target via ``os.replace``.
    """

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target_parent = target.parent.resolve(strict=True)

    fd, temp_name = tempfile.mkstemp(
        prefix=f".{target.name}.",
        suffix=".tmp",
        dir=str(target_parent),
    )
    temp_path = Path(temp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as file_handle:
            file_handle.write(data)
            file_handle.flush()
            os.fsync(file_handle.fileno())
        os.replace(temp_path, target)
    except Exception:
        with contextlib.suppress(OSError):
            temp_path.unlink(missing_ok=True)
        raise
