from __future__ import annotations

from typing import TYPE_CHECKING

from artifacts.models import ContractArtifact
from artifacts.write import ArtifactWriter
from contract.validation import validate_artifacts
from registry.models import Bytecode

if TYPE_CHECKING:
    from pathlib import Path


def _artifact() -> ContractArtifact:
    return ContractArtifact(
        abi=[],
        bytecode=Bytecode(object="6080"),
        deployed_bytecode=Bytecode(object="60aa"),
        raw_metadata="",
    )


def test_written_artifacts_validate(tmp_path: Path) -> None:
    writer = ArtifactWriter(tmp_path)
    writer.write("Basic.sol", "Basic", _artifact())
    writer.write("deps/Dependency.sol", "Dependency", _artifact())

    result = validate_artifacts(tmp_path)

    assert result.ok
    assert result.checked == 2
    assert result.warnings == []


def test_missing_artifacts_dir_is_an_error(tmp_path: Path) -> None:
    result = validate_artifacts(tmp_path / "missing")

    assert not result.ok
    assert result.errors[0].message == "Artifacts directory does not exist."


def test_missing_out_dir_is_an_error(tmp_path: Path) -> None:
    result = validate_artifacts(tmp_path)

    assert [e.message for e in result.errors] == [
        "Artifact output directory is missing."
    ]


def test_invalid_json_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "out" / "A.sol" / "A.json"
    path.parent.mkdir(parents=True)
    path.write_text("{not json", encoding="utf-8")

    result = validate_artifacts(tmp_path)

    assert len(result.errors) == 1
    assert result.errors[0].artifact == "A.sol/A.json"
    assert result.errors[0].message.startswith("Invalid JSON")


def test_schema_violation_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "out" / "A.sol" / "A.json"
    path.parent.mkdir(parents=True)
    path.write_text('{"abi": [], "unexpected": 1}', encoding="utf-8")

    result = validate_artifacts(tmp_path)

    assert len(result.errors) == 1
    assert result.errors[0].message.startswith("Schema validation failed")
    assert result.errors[0].to_dict()["artifact"] == "A.sol/A.json"


def test_non_object_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "out" / "A.sol" / "A.json"
    path.parent.mkdir(parents=True)
    path.write_text("[]", encoding="utf-8")

    result = validate_artifacts(tmp_path)

    assert result.errors[0].message == "Expected JSON object for contract artifact."


def test_artifact_outside_source_dir_warns(tmp_path: Path) -> None:
    writer = ArtifactWriter(tmp_path)
    path = writer.write("A.sol", "A", _artifact())
    stray = tmp_path / "out" / "A.json"
    stray.write_bytes(path.read_bytes())

    result = validate_artifacts(tmp_path)

    assert result.ok
    assert [w.artifact for w in result.warnings] == ["A.json"]
