"""Utility exports for filesystem helpers."""

from pbxgraph.utils.fs import atomic_write, project_file_path, project_name_for, source_root_for

__all__ = [
    "atomic_write",
    "project_file_path",
    "project_name_for",
    "source_root_for",
]
