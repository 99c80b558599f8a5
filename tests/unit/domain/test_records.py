"""Unit tests for typed record views and ObjectRef binding."""

from __future__ import annotations

import pytest

from pbxgraph.domain.records import (
    ObjectRef,
    PassthroughObject,
    PBXBuildFile,
    PBXFileReference,
    PBXGroup,
    PBXNativeTarget,
    PBXObject,
    PBXProject,
    PBXSourcesBuildPhase,
    PBXVariantGroup,
    RefState,
    XCConfigurationList,
)

FILE_UID = "0A0000000000000000000004"
GROUP_UID = "0A0000000000000000000002"


def test_record_aliases_its_backing_dictionary() -> None:
    fields = {"isa": "PBXFileReference", "path": "main.swift"}
    record = PBXFileReference(fields)

    record.path = "other.swift"
    assert fields["path"] == "other.swift"

    fields["name"] = "Other"
    assert record.name == "Other"

    record.name = None
    assert "name" not in fields
    assert record.fields is fields


def test_new_record_carries_its_discriminator() -> None:
    record = PBXGroup()
    assert record.fields == {"isa": "PBXGroup"}
    assert record.type_name == "PBXGroup"


def test_record_rejects_non_dict_fields() -> None:
    with pytest.raises(TypeError, match="must be a dict"):
        PBXGroup(["isa", "PBXGroup"])  # type: ignore[arg-type]


def test_reference_field_converts_uid_string_in_place() -> None:
    fields = {"isa": "PBXBuildFile", "fileRef": FILE_UID}
    record = PBXBuildFile(fields)

    ref = record.file_ref

    assert isinstance(ref, ObjectRef)
    assert ref.uid == FILE_UID
    assert ref.state is RefState.PENDING
    assert fields["fileRef"] is ref
    assert record.file_ref is ref


def test_reference_field_rejects_plain_strings_on_assignment() -> None:
    record = PBXBuildFile()
    with pytest.raises(TypeError, match="expects an ObjectRef"):
        record.file_ref = FILE_UID  # type: ignore[assignment]


def test_reference_list_normalizes_and_preserves_order() -> None:
    fields = {"isa": "PBXGroup", "children": [FILE_UID, GROUP_UID]}
    group = PBXGroup(fields)

    children = group.children

    assert [child.uid for child in children] == [FILE_UID, GROUP_UID]
    assert all(isinstance(item, ObjectRef) for item in fields["children"])


def test_group_add_and_remove_child() -> None:
    group = PBXGroup()
    ref = ObjectRef(FILE_UID)

    group.add_child(ref)
    group.add_child(ObjectRef(GROUP_UID))
    assert [child.uid for child in group.children] == [FILE_UID, GROUP_UID]

    assert group.remove_child(ObjectRef(FILE_UID)) is True
    assert group.remove_child(ObjectRef(FILE_UID)) is False
    assert [child.uid for child in group.children] == [GROUP_UID]


def test_connect_references_binds_and_marks_missing_targets() -> None:
    target = PBXFileReference({"isa": "PBXFileReference", "path": "main.swift"})
    build_file = PBXBuildFile({"isa": "PBXBuildFile", "fileRef": FILE_UID})
    phase = PBXSourcesBuildPhase(
        {"isa": "PBXSourcesBuildPhase", "files": ["0A0000000000000000000006", "DEADBEEF"]}
    )
    table = {FILE_UID: target, "0A0000000000000000000006": build_file}

    build_file.connect_references(table.get)
    phase.connect_references(table.get)

    assert build_file.file_ref is not None
    assert build_file.file_ref.target is target
    assert build_file.comment() == "main.swift"

    resolved, missing = phase.files
    assert resolved.target is build_file
    assert missing.state is RefState.UNRESOLVED
    assert missing.target is None
    assert missing.comment() is None


def test_iter_references_reports_single_and_list_fields() -> None:
    target = PBXNativeTarget(
        {
            "isa": "PBXNativeTarget",
            "buildConfigurationList": "C0",
            "buildPhases": ["P0", "P1"],
            "name": "App",
        }
    )
    target.connect_references(lambda _uid: None)

    pairs = [(field, ref.uid) for field, ref in target.iter_references()]

    assert pairs == [("buildConfigurationList", "C0"), ("buildPhases", "P0"), ("buildPhases", "P1")]


def test_project_binds_nested_project_references() -> None:
    group = PBXGroup({"isa": "PBXGroup", "name": "Products"})
    project = PBXProject(
        {
            "isa": "PBXProject",
            "projectReferences": [{"ProductGroup": "G0", "ProjectRef": "F0"}],
        }
    )

    project.connect_references({"G0": group}.get)

    fields = dict(project.iter_references())
    assert fields["projectReferences.ProductGroup"].target is group
    assert fields["projectReferences.ProjectRef"].state is RefState.UNRESOLVED
    assert project.comment() == "Project object"


def test_field_keys_are_collected_across_subclasses() -> None:
    assert PBXVariantGroup.reference_list_keys == ("children",)
    assert "sourceTree" in PBXVariantGroup.scalar_keys
    assert XCConfigurationList.reference_list_keys == ("buildConfigurations",)
    assert PassthroughObject.reference_keys == ()


def test_passthrough_reports_its_own_type_name() -> None:
    record = PassthroughObject({"isa": "XCRemoteSwiftPackageReference"})
    assert record.type_name == "XCRemoteSwiftPackageReference"
    assert isinstance(record, PBXObject)


def test_object_ref_identity_is_its_uid() -> None:
    first = ObjectRef(FILE_UID)
    second = ObjectRef(FILE_UID, PBXFileReference())

    assert first == second
    assert hash(first) == hash(second)
    assert str(first) == FILE_UID
    assert first.state is RefState.PENDING
    assert second.is_resolved

    second.bind(None)
    assert second.state is RefState.UNRESOLVED

    with pytest.raises(ValueError, match="non-empty"):
        ObjectRef("")
