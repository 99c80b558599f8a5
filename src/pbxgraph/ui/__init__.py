"""UI package exports for the command line and its plain-text rendering."""

from pbxgraph.ui.cli import CLIError, build_parser, run_cli
from pbxgraph.ui.render import CLIRenderer, create_renderer

__all__ = [
    "CLIError",
    "CLIRenderer",
    "build_parser",
    "create_renderer",
    "run_cli",
]
