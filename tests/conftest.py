from __future__ import annotations

import os
import re
from typing import TYPE_CHECKING

import orjson
import pytest

from compiler.solc import decode_output
from pipeline.project import Project

if TYPE_CHECKING:
    from pathlib import Path

    from compiler.models import CompilerInput, CompilerOutput

_CONTRACT_RE = re.compile(r"\bcontract\s+(?P<name>\w+)")
_FAIL_RE = re.compile(r"//\s*fail:\s*(?P<message>.+)")


def write_source(
    root: Path,
    rel_path: str,
    body: str = "",
    *,
    pragma: str = ">=0.8.0 <0.9.0",
    mod_time: int | None = None,
) -> Path:
    """Write a Solidity file and optionally pin its mtime (ns)."""
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"pragma solidity {pragma};\n{body}\n", encoding="utf-8")
    if mod_time is not None:
        os.utime(path, ns=(mod_time, mod_time))
    return path


def bump_mtime(path: Path) -> None:
    """Move a file's mtime one second forward regardless of clock resolution."""
    mod_time = path.stat().st_mtime_ns + 1_000_000_000
    os.utime(path, ns=(mod_time, mod_time))


class FakeVersionManager:
    def __init__(self, root: Path) -> None:
        self.root = root
        self.requested: list[str] = []

    def resolve(self, version: str) -> Path:
        self.requested.append(version)
        return self.root / f"solidity-{version}"


class FakeCompiler:
    """Compiles each ``contract X`` declaration into a deterministic artifact.

    A ``// fail: <message>`` line makes the compiler report that error.
    """

    def __init__(self, base_path: Path, calls: list[list[str]]) -> None:
        self.base_path = base_path
        self.calls = calls

    def compile(self, descriptor: CompilerInput) -> CompilerOutput:
        paths = sorted(descriptor.sources)
        self.calls.append(paths)

        errors: list[dict[str, str]] = []
        contracts: dict[str, dict[str, object]] = {}
        sources: dict[str, object] = {}
        for index, path in enumerate(paths):
            text = (self.base_path / path).read_text(encoding="utf-8")
            errors.extend(
                {
                    "severity": "error",
                    "type": "TypeError",
                    "formattedMessage": f"{path}: {match.group('message')}",
                }
                for match in _FAIL_RE.finditer(text)
            )
            sources[path] = {"id": index, "ast": {"absolutePath": path}}
            contracts[path] = {
                match.group("name"): {
                    "abi": [],
                    "evm": {
                        "bytecode": {"object": f"{match.group('name')}:{len(text)}"},
                        "deployedBytecode": {"object": match.group("name")},
                        "methodIdentifiers": {},
                    },
                    "metadata": orjson.dumps({"source": path}).decode(),
                }
                for match in _CONTRACT_RE.finditer(text)
            }

        raw: dict[str, object] = {"errors": errors}
        if not errors:
            raw["contracts"] = contracts
            raw["sources"] = sources
        return decode_output(orjson.dumps(raw))


class ProjectHarness:
    def __init__(self, contracts_dir: Path, svm: FakeVersionManager) -> None:
        self.contracts_dir = contracts_dir
        self.svm = svm
        self.calls: list[list[str]] = []
        self.project = Project(
            contracts_dir,
            svm=svm,
            compiler_factory=lambda _executable: FakeCompiler(
                contracts_dir, self.calls
            ),
        )


@pytest.fixture
def contracts_dir(tmp_path: Path) -> Path:
    path = tmp_path / "contracts"
    path.mkdir()
    return path


@pytest.fixture
def harness(tmp_path: Path, contracts_dir: Path) -> ProjectHarness:
    return ProjectHarness(contracts_dir, FakeVersionManager(tmp_path / "svm"))
