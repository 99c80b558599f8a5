"""Typed failures raised by the project document layer."""

from __future__ import annotations


class ProjectError(Exception):
    """Base class for recoverable project document failures."""


class ProjectParseError(ProjectError):
    """Raised when input cannot be read as a project document.

    Covers unreadable files, malformed text and documents without an
    ``objects`` dictionary. The reader's own exception is chained as
    ``__cause__`` and never raised directly.
    """


class RegistryError(RuntimeError):
    """Raised when a registered record class cannot wrap its node.

    This signals an inconsistency between the type registry and the record
    classes, not bad input, and must not be caught and retried.
    """


__all__ = ["ProjectError", "ProjectParseError", "RegistryError"]
