from __future__ import annotations

from typing import TYPE_CHECKING

import orjson
import pytest
from conftest import FakeCompiler, FakeVersionManager, bump_mtime, write_source

from config.settings import BuildConfig
from errors import (
    CompilerError,
    InputError,
    UnresolvedImportError,
    VersionMismatchError,
)
from pipeline.diff import FileDiffType
from pipeline.project import Project

if TYPE_CHECKING:
    from pathlib import Path

    from conftest import ProjectHarness


def _write_fixture(contracts_dir: Path) -> None:
    write_source(
        contracts_dir,
        "Basic.sol",
        'import "./deps/Dependency.sol";\ncontract Basic {}',
    )
    write_source(contracts_dir, "deps/Dependency.sol", "contract Dependency {}")
    write_source(contracts_dir, "Standalone.sol", "contract Standalone {}")


def test_first_build_compiles_every_component(harness: ProjectHarness) -> None:
    _write_fixture(harness.contracts_dir)

    result = harness.project.compile()

    assert sorted(result.contracts) == [
        "Basic.sol:Basic",
        "Standalone.sol:Standalone",
        "deps/Dependency.sol:Dependency",
    ]
    assert sorted(harness.calls) == [
        ["Basic.sol", "deps/Dependency.sol"],
        ["Standalone.sol"],
    ]
    assert [run.components for run in result.runs] == harness.calls
    assert all(run.execution_time >= 0 for run in result.runs)
    assert harness.svm.requested == ["0.8.4", "0.8.4"]


def test_artifacts_are_written_per_contract(harness: ProjectHarness) -> None:
    _write_fixture(harness.contracts_dir)

    harness.project.compile()

    artifact_path = (
        harness.contracts_dir / "out" / "deps" / "Dependency.sol" / "Dependency.json"
    )
    artifact = orjson.loads(artifact_path.read_bytes())
    assert artifact["deployedBytecode"]["object"] == "Dependency"
    assert artifact["rawMetadata"] == '{"source":"deps/Dependency.sol"}'
    assert artifact["metadata"] == {"source": "deps/Dependency.sol"}
    assert artifact["ast"] == {"absolutePath": "deps/Dependency.sol"}
    assert (harness.contracts_dir / "out" / "Basic.sol" / "Basic.json").is_file()


def test_unchanged_project_compiles_nothing(harness: ProjectHarness) -> None:
    _write_fixture(harness.contracts_dir)
    harness.project.compile()

    result = harness.project.compile()

    assert result.contracts == []
    assert result.runs == []
    assert result.diffs == []
    assert len(harness.calls) == 2


def test_edit_rebuilds_only_the_touched_component(harness: ProjectHarness) -> None:
    _write_fixture(harness.contracts_dir)
    project = harness.project
    project.compile()
    registry = project.registry
    basic_before = registry.get_contract("Basic.sol", "Basic")
    standalone_before = registry.get_contract("Standalone.sol", "Standalone")
    standalone_artifact = (
        harness.contracts_dir / "out" / "Standalone.sol" / "Standalone.json"
    )
    artifact_bytes = standalone_artifact.read_bytes()

    path = write_source(
        harness.contracts_dir, "deps/Dependency.sol", "contract Dependency { }"
    )
    bump_mtime(path)
    result = project.compile()

    assert harness.calls[-1] == ["Basic.sol", "deps/Dependency.sol"]
    assert len(result.runs) == 1
    assert sorted(result.contracts) == [
        "Basic.sol:Basic",
        "deps/Dependency.sol:Dependency",
    ]
    assert registry.get_contract("Standalone.sol", "Standalone") is standalone_before
    assert registry.get_contract("Basic.sol", "Basic") is not basic_before
    assert standalone_artifact.read_bytes() == artifact_bytes


def test_compiler_errors_surface_and_commit_nothing(harness: ProjectHarness) -> None:
    write_source(
        harness.contracts_dir,
        "Broken.sol",
        "contract Broken {}\n// fail: first problem\n// fail: second problem",
    )

    with pytest.raises(CompilerError) as excinfo:
        harness.project.compile()

    assert excinfo.value.messages == [
        "Broken.sol: first problem",
        "Broken.sol: second problem",
    ]
    assert harness.project.registry.list_contracts() == []
    assert not (harness.contracts_dir / "out").exists()


def test_failed_component_is_rebuilt_on_next_call(harness: ProjectHarness) -> None:
    path = write_source(
        harness.contracts_dir, "Broken.sol", "contract Broken {}\n// fail: oops"
    )
    with pytest.raises(CompilerError):
        harness.project.compile()

    write_source(harness.contracts_dir, "Broken.sol", "contract Broken {}")
    bump_mtime(path)
    result = harness.project.compile()

    assert result.contracts == ["Broken.sol:Broken"]


def test_failed_component_stays_pending_without_edits(
    harness: ProjectHarness, monkeypatch: pytest.MonkeyPatch
) -> None:
    write_source(harness.contracts_dir, "A.sol", "contract A {}")

    def fail(_self: FakeCompiler, _descriptor: object) -> None:
        msg = "transient failure"
        raise CompilerError([msg])

    with monkeypatch.context() as patch:
        patch.setattr(FakeCompiler, "compile", fail)
        with pytest.raises(CompilerError):
            harness.project.compile()

    result = harness.project.compile()

    assert result.diffs == []
    assert result.contracts == ["A.sol:A"]


def test_deleted_source_is_retired(harness: ProjectHarness) -> None:
    _write_fixture(harness.contracts_dir)
    harness.project.compile()

    (harness.contracts_dir / "Standalone.sol").unlink()
    result = harness.project.compile()

    assert [(d.path, d.type) for d in result.diffs] == [
        ("Standalone.sol", FileDiffType.DEL)
    ]
    assert result.runs == []
    registry = harness.project.registry
    assert registry.get_source("Standalone.sol") is None
    assert registry.get_contract("Standalone.sol", "Standalone") is None
    assert not (harness.contracts_dir / "out" / "Standalone.sol").exists()
    assert harness.project.compile().diffs == []


def test_removed_contract_declaration_drops_its_artifact(
    harness: ProjectHarness,
) -> None:
    path = write_source(
        harness.contracts_dir, "A.sol", "contract A {}\ncontract Old {}"
    )
    harness.project.compile()
    old_artifact = harness.contracts_dir / "out" / "A.sol" / "Old.json"
    assert old_artifact.is_file()

    write_source(harness.contracts_dir, "A.sol", "contract A {}")
    bump_mtime(path)
    harness.project.compile()

    assert harness.project.registry.get_contract("A.sol", "Old") is None
    assert not old_artifact.exists()


def test_version_mismatch_stops_before_fetching(
    tmp_path: Path, contracts_dir: Path
) -> None:
    write_source(contracts_dir, "Old.sol", "contract Old {}", pragma="^0.6.0")
    svm = FakeVersionManager(tmp_path / "svm")
    calls: list[list[str]] = []
    project = Project(
        contracts_dir,
        svm=svm,
        compiler_factory=lambda _exe: FakeCompiler(contracts_dir, calls),
    )

    with pytest.raises(VersionMismatchError):
        project.compile()

    assert svm.requested == []
    assert calls == []


def test_configured_version_and_artifacts_dir(
    tmp_path: Path, contracts_dir: Path
) -> None:
    write_source(contracts_dir, "A.sol", "contract A {}", pragma="0.8.19")
    svm = FakeVersionManager(tmp_path / "svm")
    artifacts_dir = tmp_path / "build"
    calls: list[list[str]] = []
    project = Project(
        contracts_dir,
        artifacts_dir=artifacts_dir,
        config=BuildConfig(solidity_version="0.8.19"),
        svm=svm,
        compiler_factory=lambda _exe: FakeCompiler(contracts_dir, calls),
    )

    project.compile()

    assert svm.requested == ["0.8.19"]
    assert (artifacts_dir / "out" / "A.sol" / "A.json").is_file()
    assert not (contracts_dir / "out").exists()


def test_missing_pragma_fails_detection(harness: ProjectHarness) -> None:
    (harness.contracts_dir / "NoPragma.sol").write_text(
        "contract X {}\n", encoding="utf-8"
    )

    with pytest.raises(InputError):
        harness.project.compile()


def test_from_root_uses_configured_directories(tmp_path: Path) -> None:
    (tmp_path / "solbuild.toml").write_text(
        'contracts_dir = "src"\nartifacts_dir = "artifacts"\n', encoding="utf-8"
    )
    (tmp_path / "src").mkdir()

    project = Project.from_root(tmp_path)

    assert project.contracts_dir == (tmp_path / "src").resolve()
    assert project.artifacts_dir == (tmp_path / "artifacts").resolve()


def test_deleting_an_imported_file_does_not_block_other_components(
    harness: ProjectHarness,
) -> None:
    write_source(harness.contracts_dir, "A.sol", 'import "./D.sol";\ncontract A {}')
    dependency = write_source(harness.contracts_dir, "D.sol", "contract D {}")
    standalone = write_source(harness.contracts_dir, "B.sol", "contract B {}")
    harness.project.compile()

    dependency.unlink()
    write_source(harness.contracts_dir, "B.sol", "contract B { }")
    bump_mtime(standalone)
    result = harness.project.compile()

    assert harness.calls[-1] == ["B.sol"]
    assert result.contracts == ["B.sol:B"]
    assert harness.project.registry.get_source("D.sol") is None
    assert not (harness.contracts_dir / "out" / "D.sol").exists()
    assert harness.project.registry.get_contract("A.sol", "A") is not None


def test_editing_importer_of_deleted_file_reports_input_error(
    harness: ProjectHarness,
) -> None:
    importer = write_source(
        harness.contracts_dir, "A.sol", 'import "./D.sol";\ncontract A {}'
    )
    dependency = write_source(harness.contracts_dir, "D.sol", "contract D {}")
    harness.project.compile()
    calls_before = len(harness.calls)

    dependency.unlink()
    harness.project.compile()
    bump_mtime(importer)

    with pytest.raises(UnresolvedImportError) as excinfo:
        harness.project.compile()

    assert isinstance(excinfo.value, InputError)
    assert str(excinfo.value) == "A.sol: import 'D.sol' is not a known source"
    assert len(harness.calls) == calls_before


def test_missing_package_import_fails_before_compiling(
    harness: ProjectHarness,
) -> None:
    write_source(harness.contracts_dir, "A.sol", "contract A {}")
    write_source(
        harness.contracts_dir, "B.sol", 'import "@oz/Missing.sol";\ncontract B {}'
    )

    with pytest.raises(UnresolvedImportError) as excinfo:
        harness.project.compile()

    assert excinfo.value.path == "B.sol"
    assert excinfo.value.target == "@oz/Missing.sol"
    assert harness.calls == []
    assert harness.project.registry.list_contracts() == []
