"""Read NeXTSTEP/OpenStep property list text into plain ``dict``/``list``/``str`` trees."""

from __future__ import annotations

import os
from pathlib import Path
from typing import IO, Any

import openstep_parser

PathLike = str | os.PathLike[str]


class NextStepError(ValueError):
    """Raised when text cannot be decoded into a dictionary tree."""


def read_string(content: str) -> dict[str, Any]:
    """Parse ``content`` and return its root dictionary."""
    if not isinstance(content, str):
        raise NextStepError(f"content must be a string, got {type(content).__name__}")
    if not content.strip():
        raise NextStepError("content is empty")
    try:
        tree = openstep_parser.OpenStepDecoder.ParseFromString(content)
    except Exception as exc:  # noqa: BLE001 - decoder raises bare Exception/IndexError.
        raise NextStepError(f"malformed property list: {exc}") from exc
    if not isinstance(tree, dict):
        raise NextStepError(f"root must be a dictionary, got {type(tree).__name__}")
    return tree


def read_stream(stream: IO[str] | IO[bytes], *, encoding: str = "utf-8") -> dict[str, Any]:
    """Read ``stream`` to the end and parse it; bytes are decoded with ``encoding``."""
    try:
        data = stream.read()
    except OSError as exc:
        raise NextStepError(f"failed to read stream: {exc}") from exc
    if isinstance(data, bytes):
        try:
            data = data.decode(encoding)
        except UnicodeDecodeError as exc:
            raise NextStepError(f"stream is not valid {encoding}: {exc}") from exc
    return read_string(data)


def read_file(path: PathLike, *, encoding: str = "utf-8") -> dict[str, Any]:
    try:
        content = Path(path).read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise NextStepError(f"failed to read {os.fspath(path)}: {exc}") from exc
    return read_string(content)


__all__ = ["NextStepError", "read_file", "read_stream", "read_string"]
