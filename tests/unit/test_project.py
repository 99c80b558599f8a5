"""Unit tests for the ProjectFile document API."""

from __future__ import annotations

import io
import shutil
from pathlib import Path

import openstep_parser
import pytest

from pbxgraph.config import SerializerSettings
from pbxgraph.constants import OBJECTS_KEY
from pbxgraph.domain.ids import is_uid
from pbxgraph.domain.registry import TypeRegistry
from pbxgraph.domain.records import (
    ObjectRef,
    PassthroughObject,
    PBXBuildFile,
    PBXFileReference,
    PBXGroup,
    PBXNativeTarget,
    PBXProject,
    RefState,
    XCConfigurationList,
)
from pbxgraph.errors import ProjectError, ProjectParseError
from pbxgraph.graph.store import TieBreak
from pbxgraph.nextstep.reader import read_file
from pbxgraph.project import ProjectFile

FIXTURE_BUNDLE = Path(__file__).resolve().parents[1] / "fixtures" / "App.xcodeproj"
FIXTURE_FILE = FIXTURE_BUNDLE / "project.pbxproj"

PROJECT_UID = "0A0000000000000000000001"
MAIN_GROUP_UID = "0A0000000000000000000002"
MAIN_SWIFT_UID = "0A0000000000000000000004"
BUILD_FILE_UID = "0A0000000000000000000006"
TARGET_UID = "0A0000000000000000000008"
PACKAGE_UID = "0A000000000000000000000E"


def _copy_bundle(tmp_path: Path) -> Path:
    bundle = tmp_path / "App.xcodeproj"
    shutil.copytree(FIXTURE_BUNDLE, bundle)
    return bundle


def test_load_bundle_promotes_and_resolves_every_object() -> None:
    document = ProjectFile.from_path(FIXTURE_BUNDLE)

    assert document.path == FIXTURE_FILE
    assert document.project_name == "App"
    assert document.source_root == FIXTURE_BUNDLE.parent
    assert document.resolution.is_complete
    assert len(document.objects) == 16
    assert isinstance(document.get(TARGET_UID), PBXNativeTarget)
    assert isinstance(document.get(BUILD_FILE_UID), PBXBuildFile)

    package = document.get(PACKAGE_UID)
    assert isinstance(package, PassthroughObject)
    assert package.type_name == "XCRemoteSwiftPackageReference"


def test_root_object_points_at_the_named_project() -> None:
    document = ProjectFile.from_path(FIXTURE_FILE)

    root_ref = document.root_object
    assert root_ref is not None
    assert root_ref.uid == PROJECT_UID
    project = document.project
    assert isinstance(project, PBXProject)
    assert project.project_name == "App"
    assert [target.uid for target in project.targets] == [TARGET_UID]
    configuration_list = project.build_configuration_list
    assert configuration_list is not None
    assert isinstance(configuration_list.target, XCConfigurationList)


def test_records_alias_the_document_tree() -> None:
    document = ProjectFile.from_path(FIXTURE_BUNDLE)
    record = document.get(MAIN_SWIFT_UID)
    assert isinstance(record, PBXFileReference)

    record.path = "App.swift"

    assert document.root["objects"] is document.objects
    assert document.objects[MAIN_SWIFT_UID].fields["path"] == "App.swift"
    assert f"{MAIN_SWIFT_UID} /* App.swift */ = {{isa = PBXFileReference;" in document.to_string()


def test_serialization_groups_types_and_reaches_a_fixed_point() -> None:
    document = ProjectFile.from_path(FIXTURE_BUNDLE)

    first = document.to_string()
    reparsed = ProjectFile.from_string(first)

    assert reparsed.to_string() == first
    assert document.to_string() == first
    assert first.startswith("// !$*UTF8*$!\n{\n")
    sections = [line for line in first.splitlines() if line.startswith("/* Begin ")]
    assert sections == [
        "/* Begin PBXBuildFile section */",
        "/* Begin PBXFileReference section */",
        "/* Begin PBXFrameworksBuildPhase section */",
        "/* Begin PBXGroup section */",
        "/* Begin PBXNativeTarget section */",
        "/* Begin PBXProject section */",
        "/* Begin PBXSourcesBuildPhase section */",
        "/* Begin XCBuildConfiguration section */",
        "/* Begin XCConfigurationList section */",
        "/* Begin XCRemoteSwiftPackageReference section */",
    ]
    assert "\trootObject = 0A0000000000000000000001 /* Project object */;\n" in first


def test_uid_tie_break_orders_same_typed_records() -> None:
    document = ProjectFile.empty(serializer=SerializerSettings(tie_break=TieBreak.UID))
    for index in range(20):
        document.new_group(name=f"Group{index}")
        document.new_file_reference(path=f"file{index}.swift")

    document.to_string()

    groups = [uid for uid, _ in document.objects.records_of_type(PBXGroup)]
    files = [uid for uid, _ in document.objects.records_of_type(PBXFileReference)]
    assert groups == sorted(groups)
    assert files == sorted(files)
    assert list(document.objects) == files + groups


def test_dangling_reference_survives_a_round_trip() -> None:
    text = FIXTURE_FILE.read_text(encoding="utf-8").replace(
        "0A0000000000000000000003 /* Products */,\n\t\t\t);",
        "0A0000000000000000000003 /* Products */,\n\t\t\t\tDEADBEEF,\n\t\t\t);",
    )
    document = ProjectFile.from_string(text)

    assert document.resolution.unresolved == 1
    group = document.get(MAIN_GROUP_UID)
    assert isinstance(group, PBXGroup)
    assert group.children[-1].state is RefState.UNRESOLVED
    assert "\t\t\t\tDEADBEEF,\n" in document.to_string()


def test_empty_document_has_structural_keys() -> None:
    document = ProjectFile.empty()

    assert len(document.objects) == 0
    assert document.root_object is None
    assert document.project is None
    text = document.to_string()
    assert "archiveVersion = 1;" in text
    assert "objectVersion = 46;" in text
    assert "Begin" not in text


def test_factories_allocate_fresh_uids_and_insert() -> None:
    document = ProjectFile.empty()

    group_ref = document.new_group(name="Sources", source_tree="<group>")
    file_ref = document.new_file_reference(
        last_known_file_type="sourcecode.swift", path="main.swift", source_tree="<group>"
    )
    build_ref = document.new_build_file(file_ref)
    debug = document.new_build_configuration("Debug", {"SWIFT_VERSION": "5.0"})
    config_list = document.new_configuration_list([debug], default_name="Debug")

    group = group_ref.target
    assert isinstance(group, PBXGroup)
    group.add_child(file_ref)

    uids = [group_ref.uid, file_ref.uid, build_ref.uid, debug.uid, config_list.uid]
    assert all(is_uid(uid) for uid in uids)
    assert len(set(uids)) == len(uids)
    assert list(document.objects) == uids
    assert file_ref.target is not None and file_ref.target.fields == {
        "isa": "PBXFileReference",
        "lastKnownFileType": "sourcecode.swift",
        "path": "main.swift",
        "sourceTree": "<group>",
    }

    text = document.to_string()
    assert f"{build_ref.uid} /* main.swift */ = {{isa = PBXBuildFile; fileRef = {file_ref.uid} /* main.swift */; }};" in text
    assert "defaultConfigurationIsVisible = 0;" in text


def test_create_reference_does_not_insert() -> None:
    document = ProjectFile.empty()
    record = PBXGroup()

    ref = document.create_reference(record)

    assert ref.target is record
    assert ref.uid not in document.objects

    document.objects.put(ref)
    assert document.get(ref.uid) is record


def test_create_reference_preconditions() -> None:
    document = ProjectFile.empty()

    with pytest.raises(ValueError, match="cannot be None"):
        document.create_reference(None)  # type: ignore[arg-type]
    with pytest.raises(TypeError, match="must be a PBXObject"):
        document.create_reference({"isa": "PBXGroup"})  # type: ignore[arg-type]


def test_uids_never_collide_with_existing_entries() -> None:
    document = ProjectFile.from_path(FIXTURE_BUNDLE)
    existing = set(document.objects)

    created = {document.add(PBXGroup()).uid for _ in range(1000)}

    assert len(created) == 1000
    assert not created & existing
    assert len(document.objects) == len(existing) + 1000


def test_save_as_writes_bundle_member_and_save_reuses_path(tmp_path: Path) -> None:
    document = ProjectFile.from_path(FIXTURE_BUNDLE)

    written = document.save_as(tmp_path / "Copy.xcodeproj")

    assert written == tmp_path / "Copy.xcodeproj" / "project.pbxproj"
    assert written.read_text(encoding="utf-8") == document.to_string()

    bundle = _copy_bundle(tmp_path)
    editable = ProjectFile.from_path(bundle)
    editable.new_group(name="Extra")
    assert editable.save() == bundle / "project.pbxproj"
    assert ProjectFile.from_path(bundle).objects.type_counts()["PBXGroup"] == 3


def test_save_without_path_is_an_error() -> None:
    with pytest.raises(ProjectError, match="no path"):
        ProjectFile.empty().save()


def test_stream_and_string_constructors() -> None:
    text = FIXTURE_FILE.read_text(encoding="utf-8")

    from_stream = ProjectFile.from_stream(io.BytesIO(text.encode("utf-8")))
    from_string = ProjectFile.from_string(text)

    assert list(from_stream.objects) == list(from_string.objects)
    assert from_string.path is None
    assert from_string.project_name is None


@pytest.mark.parametrize(
    "content",
    [
        "",
        "{ archiveVersion = 1; }",
        "{ archiveVersion = 1; objects = ( ); }",
    ],
)
def test_unusable_documents_raise_parse_error(content: str) -> None:
    with pytest.raises(ProjectParseError, match="failed to parse project file"):
        ProjectFile.from_string(content)


def test_missing_file_raises_parse_error_with_cause(tmp_path: Path) -> None:
    with pytest.raises(ProjectParseError) as excinfo:
        ProjectFile.from_path(tmp_path / "Missing.xcodeproj")
    assert excinfo.value.__cause__ is not None


def test_constructor_preconditions() -> None:
    with pytest.raises(ValueError, match="cannot be None"):
        ProjectFile.from_string(None)  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="cannot be None"):
        ProjectFile.from_path(None)  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="cannot be None"):
        ProjectFile.from_stream(None)  # type: ignore[arg-type]
    with pytest.raises(TypeError, match="root must be a dict"):
        ProjectFile("objects")  # type: ignore[arg-type]


def test_root_object_setter() -> None:
    document = ProjectFile.empty()
    project_ref = document.add(PBXProject())

    document.root_object = project_ref
    assert document.project is project_ref.target
    assert document.resolve().is_complete

    document.root_object = None
    assert "rootObject" not in document.root
    with pytest.raises(TypeError, match="expects an ObjectRef"):
        document.root_object = project_ref.uid  # type: ignore[assignment]
    assert isinstance(project_ref, ObjectRef)


def test_empty_objects_table_with_root_object() -> None:
    document = ProjectFile.from_string(
        "{ archiveVersion = 1; classes = { }; objectVersion = 46; objects = { }; "
        "rootObject = 0A0000000000000000000001; }"
    )

    assert len(document.objects) == 0
    root_ref = document.root_object
    assert root_ref is not None
    assert root_ref.state is RefState.UNRESOLVED
    assert document.project is None
    text = document.to_string()
    assert "objectVersion = 46;" in text
    assert "rootObject = 0A0000000000000000000001;" in text
    assert "/* Begin" not in text


def test_single_file_reference_entry() -> None:
    document = ProjectFile.from_string(
        "{ objects = { F0 = { isa = PBXFileReference; path = a.m; sourceTree = GROUP; }; }; }"
    )

    assert len(document.objects) == 1
    record = document.get("F0")
    assert isinstance(record, PBXFileReference)
    assert record.path == "a.m"
    assert record.source_tree == "GROUP"


def test_factory_record_lands_in_its_type_block() -> None:
    document = ProjectFile.from_path(FIXTURE_BUNDLE)
    existing = set(document.objects)

    ref = document.new_file_reference(path="New.swift", source_tree="<group>")
    text = document.to_string()

    assert ref.uid not in existing
    begin = text.index("/* Begin PBXFileReference section */")
    end = text.index("/* End PBXFileReference section */")
    assert begin < text.index(f"\t\t{ref.uid} /* New.swift */") < end


def test_build_files_referencing_build_files_serialize() -> None:
    document = ProjectFile.from_string(
        "{ objects = { "
        "A1 = { isa = PBXBuildFile; fileRef = B1; }; "
        "B1 = { isa = PBXBuildFile; fileRef = A1; }; "
        "C1 = { isa = PBXBuildFile; productRef = C1; }; "
        "}; }"
    )

    assert document.resolution.is_complete
    record = document.get("C1")
    assert isinstance(record, PBXBuildFile)
    assert record.comment() is None

    text = document.to_string()
    assert "\t\tA1 = {isa = PBXBuildFile; fileRef = B1; };\n" in text
    assert "\t\tB1 = {isa = PBXBuildFile; fileRef = A1; };\n" in text
    assert "\t\tC1 = {isa = PBXBuildFile; productRef = C1; };\n" in text
    assert ProjectFile.from_string(text).to_string() == text


def test_unknown_types_round_trip_their_original_content() -> None:
    original = read_file(FIXTURE_FILE)[OBJECTS_KEY]
    document = ProjectFile.from_path(FIXTURE_BUNDLE, registry=TypeRegistry(()))

    assert len(document.objects) == len(original)
    assert all(isinstance(entry, PassthroughObject) for entry in document.objects.values())

    rewritten = openstep_parser.OpenStepDecoder.ParseFromString(document.to_string())[OBJECTS_KEY]
    assert rewritten == original
