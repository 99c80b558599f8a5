"""Write dictionary trees back to Xcode-flavoured NeXTSTEP text.

Output follows Xcode's layout: tab indentation, ``key = value;`` entries,
``UID /* comment */`` annotations for references and record keys, and
optional one-line rendering for selected record types.
"""

from __future__ import annotations

import re
from collections.abc import Collection, Mapping, Sequence
from typing import Final, Protocol

from pbxgraph.constants import UTF8_HEADER
from pbxgraph.domain.records import Node, ObjectRef, PBXObject

_UNQUOTED_RE: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9_$./]+$")
_ESCAPES: Final[tuple[tuple[str, str], ...]] = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("\n", "\\n"),
    ("\t", "\\t"),
)


class FieldPrinter(Protocol):
    """Hooks run around each entry of one dictionary while it is written."""

    def initialize(self) -> None: ...

    def before_field(self, key: str, value: object, has_next: bool, out: list[str]) -> None: ...

    def after_field(self, key: str, value: object, has_next: bool, out: list[str]) -> None: ...


def quote_string(value: str) -> str:
    """Return ``value`` bare when it is a plain token, quoted otherwise."""
    if value and _UNQUOTED_RE.fullmatch(value) and "//" not in value and "___" not in value:
        return value
    escaped = value
    for raw, replacement in _ESCAPES:
        escaped = escaped.replace(raw, replacement)
    return f'"{escaped}"'


def format_comment(text: str | None) -> str:
    if not text:
        return ""
    return f" /* {text.replace('*/', '* /')} */"


class NextStepWriter:
    """Render a document root; top-level keys may get a :class:`FieldPrinter`."""

    def __init__(
        self,
        *,
        indent: str = "\t",
        inline_types: Collection[str] = (),
        printers: Mapping[str, FieldPrinter] | None = None,
    ) -> None:
        self._indent = indent
        self._inline_types = frozenset(inline_types)
        self._printers = dict(printers or {})

    def write_document(self, root: Mapping[str, Node]) -> str:
        out: list[str] = [UTF8_HEADER, "\n"]
        self._write_dict(root, 0, out, top_level=True)
        out.append("\n")
        return "".join(out)

    def format_dictionary(
        self,
        node: Mapping[str, Node],
        level: int = 0,
        *,
        printer: FieldPrinter | None = None,
    ) -> str:
        out: list[str] = []
        self._write_dict(node, level, out, printer=printer)
        return "".join(out)

    def format_value(self, value: Node, level: int = 0) -> str:
        out: list[str] = []
        self._write_value(value, level, out)
        return "".join(out)

    def _write_value(self, value: Node, level: int, out: list[str]) -> None:
        if isinstance(value, PBXObject):
            if value.type_name in self._inline_types:
                self._write_inline(value.fields, out)
            else:
                self._write_dict(value.fields, level, out)
        elif isinstance(value, ObjectRef):
            out.append(quote_string(value.uid))
            out.append(format_comment(value.comment()))
        elif isinstance(value, str):
            out.append(quote_string(value))
        elif isinstance(value, Mapping):
            self._write_dict(value, level, out)
        elif isinstance(value, Sequence):
            self._write_list(value, level, out)
        elif isinstance(value, int) and not isinstance(value, bool):
            out.append(str(value))
        else:
            raise TypeError(f"unsupported node type: {type(value).__name__}")

    def _write_dict(
        self,
        node: Mapping[str, Node],
        level: int,
        out: list[str],
        *,
        printer: FieldPrinter | None = None,
        top_level: bool = False,
    ) -> None:
        closing_indent = self._indent * level
        if not node:
            out.append("{\n" + closing_indent + "}")
            return

        inner_indent = self._indent * (level + 1)
        out.append("{\n")
        if printer is not None:
            printer.initialize()

        items = list(node.items())
        last = len(items) - 1
        for index, (key, value) in enumerate(items):
            has_next = index < last
            if printer is not None:
                printer.before_field(key, value, has_next, out)
            out.append(inner_indent)
            out.append(self._format_key(key, value))
            out.append(" = ")
            child_printer = self._printers.get(key) if top_level else None
            if child_printer is not None and isinstance(value, Mapping):
                self._write_dict(value, level + 1, out, printer=child_printer)
            else:
                self._write_value(value, level + 1, out)
            out.append(";\n")
            if printer is not None:
                printer.after_field(key, value, has_next, out)
        out.append(closing_indent + "}")

    def _write_list(self, items: Sequence[Node], level: int, out: list[str]) -> None:
        closing_indent = self._indent * level
        if not items:
            out.append("(\n" + closing_indent + ")")
            return
        inner_indent = self._indent * (level + 1)
        out.append("(\n")
        for item in items:
            out.append(inner_indent)
            self._write_value(item, level + 1, out)
            out.append(",\n")
        out.append(closing_indent + ")")

    def _write_inline(self, value: Node, out: list[str]) -> None:
        if isinstance(value, PBXObject):
            self._write_inline(value.fields, out)
        elif isinstance(value, Mapping):
            out.append("{")
            for key, item in value.items():
                out.append(self._format_key(key, item))
                out.append(" = ")
                self._write_inline(item, out)
                out.append("; ")
            out.append("}")
        elif isinstance(value, (str, ObjectRef)) or not isinstance(value, Sequence):
            self._write_value(value, 0, out)
        else:
            out.append("(")
            for item in value:
                self._write_inline(item, out)
                out.append(", ")
            out.append(")")

    def _format_key(self, key: str, value: Node) -> str:
        comment = value.comment() if isinstance(value, PBXObject) else None
        return quote_string(str(key)) + format_comment(comment)


__all__ = ["FieldPrinter", "NextStepWriter", "format_comment", "quote_string"]
