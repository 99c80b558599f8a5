"""Executable CLI entrypoint for ``pbxgraph``."""

from __future__ import annotations

import sys
import traceback
from enum import IntEnum
from typing import TYPE_CHECKING

from pbxgraph.config import ConfigLoadError, ConfigValidationError
from pbxgraph.errors import ProjectError

if TYPE_CHECKING:
    from collections.abc import Sequence


class ExitCode(IntEnum):
    """Deterministic process exit-code contract."""

    SUCCESS = 0
    CHECK_FAILED = 1
    INPUT_ERROR = 2
    INTERNAL_ERROR = 4


_INPUT_ERRORS = (ConfigLoadError, ConfigValidationError, ProjectError, OSError, ValueError)


def cli_entrypoint(argv: Sequence[str] | None = None) -> int:
    """Entrypoint used by ``python -m pbxgraph`` and the console script.

    Command handlers report expected failures through their return code.
    Anything that escapes them is mapped here: bad input to
    ``ExitCode.INPUT_ERROR`` with a one-line message, everything else to
    ``ExitCode.INTERNAL_ERROR`` with a traceback.
    """

    from pbxgraph.ui.cli import run_cli

    try:
        return int(run_cli(argv))
    except SystemExit as exc:
        # argparse: None for --help, 2 for usage errors.
        if exc.code is None:
            return int(ExitCode.SUCCESS)
        return exc.code if isinstance(exc.code, int) else int(ExitCode.INTERNAL_ERROR)
    except Exception as exc:  # noqa: BLE001 - CLI boundary normalization.
        if _is_input_error(exc):
            sys.stderr.write(f"error: {str(exc).strip() or type(exc).__name__}\n")
            return int(ExitCode.INPUT_ERROR)
        traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)
        return int(ExitCode.INTERNAL_ERROR)


def _is_input_error(exc: BaseException) -> bool:
    cause = exc.__cause__
    return isinstance(exc, _INPUT_ERRORS) or isinstance(cause, _INPUT_ERRORS)


__all__ = ["ExitCode", "cli_entrypoint"]
