"""NeXTSTEP property list text codec used for ``project.pbxproj`` files."""

from pbxgraph.nextstep.reader import NextStepError, read_file, read_stream, read_string
from pbxgraph.nextstep.writer import FieldPrinter, NextStepWriter, format_comment, quote_string

__all__ = [
    "FieldPrinter",
    "NextStepError",
    "NextStepWriter",
    "format_comment",
    "quote_string",
    "read_file",
    "read_stream",
    "read_string",
]
