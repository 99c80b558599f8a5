"""Command-line interface router for pbxgraph."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final

import structlog
import yaml

from pbxgraph.config import ConfigLoadError, Settings, load_config
from pbxgraph.domain.records import Node, ObjectRef, PBXGroup, PBXObject
from pbxgraph.errors import ProjectError
from pbxgraph.graph.store import TieBreak
from pbxgraph.observability import configure_logging
from pbxgraph.project import ProjectFile
from pbxgraph.ui.render import create_renderer
from pbxgraph.utils.fs import project_file_path

EXIT_SUCCESS: Final[int] = 0
EXIT_CHECK_FAILED: Final[int] = 1
EXIT_INPUT_ERROR: Final[int] = 2

_LOGGER = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = EXIT_INPUT_ERROR

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router for all supported CLI workflows."""

    parser = argparse.ArgumentParser(
        prog="pbxgraph",
        description=(
            "pbxgraph: inspect and edit Xcode project.pbxproj files.\n\n"
            "Common workflows:\n"
            "  pbxgraph info App.xcodeproj          Summarize the object table\n"
            "  pbxgraph check App.xcodeproj         Report dangling references\n"
            "  pbxgraph normalize App.xcodeproj     Re-sort and rewrite the file\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to pbxgraph TOML config (default: ./pbxgraph.toml if present).",
    )
    common.add_argument(
        "--log-level",
        default=None,
        help="Override logging.level (DEBUG, INFO, WARNING, ERROR).",
    )
    common.add_argument(
        "--tie-break",
        choices=tuple(item.value for item in TieBreak),
        default=None,
        help="Order of same-typed records when sorting (default from config).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # info ----------------------------------------------------------------
    info_parser = subparsers.add_parser(
        "info", parents=[common], help="Summarize a project's object table"
    )
    info_parser.add_argument("project", help="Path to a .xcodeproj bundle or project.pbxproj")
    info_parser.add_argument("--json", action="store_true", help="Emit deterministic JSON output")
    info_parser.set_defaults(handler=_cmd_info)

    # check ---------------------------------------------------------------
    check_parser = subparsers.add_parser(
        "check",
        parents=[common],
        help="Report references whose UID matches no object",
    )
    check_parser.add_argument("project", help="Path to a .xcodeproj bundle or project.pbxproj")
    check_parser.add_argument("--json", action="store_true", help="Emit deterministic JSON output")
    check_parser.set_defaults(handler=_cmd_check)

    # normalize -----------------------------------------------------------
    normalize_parser = subparsers.add_parser(
        "normalize",
        parents=[common],
        help="Sort the object table by type and rewrite the project",
        description=(
            "Re-serialize a project with its objects grouped by type.\n\n"
            "Examples:\n"
            "  pbxgraph normalize App.xcodeproj\n"
            "  pbxgraph normalize App.xcodeproj --check\n"
            "  pbxgraph normalize project.pbxproj --output sorted.pbxproj\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    normalize_parser.add_argument("project", help="Path to a .xcodeproj bundle or project.pbxproj")
    normalize_parser.add_argument("--output", default=None, help="Write to this path instead")
    normalize_parser.add_argument(
        "--check",
        action="store_true",
        help="Do not write; exit 1 when the file is not already normalized",
    )
    normalize_parser.set_defaults(handler=_cmd_normalize)

    # add-file ------------------------------------------------------------
    add_parser = subparsers.add_parser(
        "add-file",
        parents=[common],
        help="Register a file reference and save the project",
    )
    add_parser.add_argument("project", help="Path to a .xcodeproj bundle or project.pbxproj")
    add_parser.add_argument("file_path", help="Path of the file relative to its source tree")
    add_parser.add_argument("--name", default=None, help="Display name (default: none)")
    add_parser.add_argument("--file-type", default=None, help="lastKnownFileType value")
    add_parser.add_argument(
        "--source-tree", default="<group>", help="sourceTree value (default: <group>)"
    )
    add_parser.add_argument(
        "--group",
        default=None,
        help="UID of the group to append to (default: the project's main group)",
    )
    add_parser.set_defaults(handler=_cmd_add_file)

    # dump ----------------------------------------------------------------
    dump_parser = subparsers.add_parser(
        "dump", parents=[common], help="Emit the object table as JSON or YAML"
    )
    dump_parser.add_argument("project", help="Path to a .xcodeproj bundle or project.pbxproj")
    dump_parser.add_argument("--format", choices=("json", "yaml"), default="json")
    dump_parser.set_defaults(handler=_cmd_dump)

    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return EXIT_INPUT_ERROR

    try:
        result = handler(namespace)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    return int(result)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_info(args: argparse.Namespace) -> int:
    settings = _prepare(args)
    document = _load_project(args.project, settings)
    project = document.project
    root_ref = document.root_object
    counts = document.objects.type_counts()

    if args.json:
        payload = {
            "path": str(document.path),
            "project_name": document.project_name,
            "root_object": None if root_ref is None else root_ref.uid,
            "objects": len(document.objects),
            "types": counts,
            "targets": _target_names(document),
            "unresolved": document.resolution.unresolved,
        }
        _emit_json(payload)
        return EXIT_SUCCESS

    renderer = create_renderer()
    renderer.kv("Project", document.project_name or "(unnamed)")
    renderer.kv("File", document.path)
    renderer.kv("Root object", "(none)" if root_ref is None else root_ref.uid)
    renderer.kv("Objects", len(document.objects))
    if project is not None:
        renderer.kv("Targets", ", ".join(_target_names(document)) or "(none)")
    renderer.kv("Unresolved references", document.resolution.unresolved)
    renderer.table(
        ("Type", "Count"),
        [(type_name, str(count)) for type_name, count in counts.items()],
        title="Objects by type:",
    )
    return EXIT_SUCCESS


def _cmd_check(args: argparse.Namespace) -> int:
    settings = _prepare(args)
    document = _load_project(args.project, settings)
    dangling = document.resolution.dangling

    if args.json:
        _emit_json(
            {
                "path": str(document.path),
                "dangling": [
                    {"owner": item.owner, "field": item.field, "uid": item.uid}
                    for item in dangling
                ],
            }
        )
    else:
        renderer = create_renderer()
        if not dangling:
            renderer.text(f"OK  {document.path}: all references resolve")
        else:
            renderer.text(f"FAIL  {document.path}: {len(dangling)} unresolved reference(s)")
            renderer.items(
                [f"{item.owner or '<root>'} {item.field} -> {item.uid}" for item in dangling]
            )
    return EXIT_CHECK_FAILED if dangling else EXIT_SUCCESS


def _cmd_normalize(args: argparse.Namespace) -> int:
    settings = _prepare(args)
    source = project_file_path(args.project)
    document = _load_project(args.project, settings)
    rendered = document.to_string()

    if args.check:
        current = source.read_text(encoding="utf-8")
        if current == rendered:
            create_renderer().text(f"OK  {source}")
            return EXIT_SUCCESS
        create_renderer().text(f"would reformat {source}")
        return EXIT_CHECK_FAILED

    try:
        target = document.save_as(args.output) if args.output else document.save()
    except OSError as exc:
        raise CLIError(f"unable to write project: {exc}") from exc
    create_renderer().text(f"normalized {target}")
    return EXIT_SUCCESS


def _cmd_add_file(args: argparse.Namespace) -> int:
    settings = _prepare(args)
    document = _load_project(args.project, settings)
    group = _target_group(document, args.group)

    ref = document.new_file_reference(
        last_known_file_type=args.file_type,
        name=args.name,
        path=args.file_path,
        source_tree=args.source_tree,
    )
    if group is not None:
        group.add_child(ref)

    try:
        document.save()
    except OSError as exc:
        raise CLIError(f"unable to write project: {exc}") from exc
    _LOGGER.info("file_reference_added", uid=ref.uid, path=args.file_path)
    create_renderer().text(ref.uid)
    return EXIT_SUCCESS


def _cmd_dump(args: argparse.Namespace) -> int:
    settings = _prepare(args)
    document = _load_project(args.project, settings)
    document.objects.sort_for_serialization(settings.serializer.tie_break)
    payload = {uid: _plain(entry) for uid, entry in document.objects.items()}

    if args.format == "yaml":
        sys.stdout.write(yaml.safe_dump(payload, sort_keys=False, allow_unicode=True))
    else:
        _emit_json(payload, sort_keys=False)
    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _prepare(args: argparse.Namespace) -> Settings:
    overrides: dict[str, object] = {
        "logging.level": args.log_level,
        "serializer.tie_break": args.tie_break,
    }
    try:
        settings = load_config(args.config_path, cli_overrides=overrides)
    except ConfigLoadError as exc:
        raise CLIError(f"config error: {exc}") from exc
    configure_logging(settings.logging.level, json_output=settings.logging.json)
    return settings


def _load_project(path: str, settings: Settings) -> ProjectFile:
    try:
        return ProjectFile.from_path(path, serializer=settings.serializer)
    except ProjectError as exc:
        cause = exc.__cause__
        detail = f" ({cause})" if cause is not None else ""
        raise CLIError(f"{exc}{detail}") from exc


def _target_group(document: ProjectFile, uid: str | None) -> PBXGroup | None:
    if uid is None:
        project = document.project
        main_group = None if project is None else project.main_group
        target = None if main_group is None else main_group.target
        return target if isinstance(target, PBXGroup) else None

    record = document.get(uid)
    if not isinstance(record, PBXGroup):
        raise CLIError(f"{uid} is not a group in {document.path}")
    return record


def _target_names(document: ProjectFile) -> list[str]:
    project = document.project
    if project is None:
        return []
    names: list[str] = []
    for ref in project.targets:
        target = ref.target
        name = None if target is None else target.fields.get("name")
        names.append(name if isinstance(name, str) else ref.uid)
    return names


def _plain(value: Node) -> Any:
    if isinstance(value, ObjectRef):
        return value.uid
    if isinstance(value, PBXObject):
        return _plain(value.fields)
    if isinstance(value, Mapping):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


def _emit_json(payload: object, *, sort_keys: bool = True) -> None:
    sys.stdout.write(json.dumps(payload, sort_keys=sort_keys, indent=2, ensure_ascii=False))
    sys.stdout.write("\n")


__all__ = ["CLIError", "build_parser", "run_cli"]
