"""Incremental compilation of a Solidity project."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from artifacts.write import ArtifactWriter
from compiler.input import build_input
from compiler.solc import SolcCompiler
from config.settings import BuildConfig, load_config, resolve_project_dir
from graph.algos import build_dependency_graph, find_components
from pipeline.assemble import ResultAssembler
from pipeline.diff import ChangeDetector, changed_paths, deleted_paths
from pipeline.scheduler import select_components
from pipeline.versions import resolve_version
from registry.store import Registry
from svm.manager import SolidityVersionManager

if TYPE_CHECKING:
    from collections.abc import Callable

    from compiler.solc import Compiler
    from pipeline.diff import FileDiff

logger = logging.getLogger(__name__)


class VersionManager(Protocol):
    def resolve(self, version: str) -> Path: ...


@dataclass
class CompilationRun:
    """One component's build."""

    components: list[str]
    execution_time: float


@dataclass
class CompilationResult:
    """Outcome of :meth:`Project.compile`."""

    contracts: list[str] = field(default_factory=list)
    runs: list[CompilationRun] = field(default_factory=list)
    diffs: list[FileDiff] = field(default_factory=list)


class Project:
    """A Solidity project compiled incrementally across calls.

    The registry lives as long as the project object; each :meth:`compile`
    call rebuilds only the components touched since the previous successful
    call. Changes seen by a failed call stay pending and are rebuilt by the
    next one.
    """

    def __init__(
        self,
        contracts_dir: Path,
        *,
        artifacts_dir: Path | None = None,
        config: BuildConfig | None = None,
        registry: Registry | None = None,
        svm: VersionManager | None = None,
        compiler_factory: Callable[[Path], Compiler] | None = None,
    ) -> None:
        self.config = config or BuildConfig()
        self.contracts_dir = contracts_dir
        # artifacts default to the contracts directory
        self.artifacts_dir = artifacts_dir or contracts_dir
        self.registry = registry or Registry()
        if svm is None:
            svm_dir = (
                Path(self.config.svm_dir).expanduser() if self.config.svm_dir else None
            )
            svm = SolidityVersionManager(svm_dir)
        self.svm = svm
        self.compiler_factory = compiler_factory or self._solc_compiler
        # changed paths not yet covered by a successful compile
        self._pending: set[str] = set()

        self.detector = ChangeDetector(
            contracts_dir,
            self.registry,
            include_patterns=self.config.include or None,
            exclude_patterns=self.config.exclude or None,
            nested_gitignore=self.config.nested_gitignore,
        )
        self.assembler = ResultAssembler(
            self.registry, ArtifactWriter(self.artifacts_dir)
        )

    @classmethod
    def from_root(
        cls,
        root: Path,
        config: BuildConfig | None = None,
        *,
        contracts_dir: Path | None = None,
        artifacts_dir: Path | None = None,
    ) -> Project:
        """Create a project from a root directory and its solbuild.toml.

        Explicit directories take precedence over the configured ones and
        are not required to live under the root.
        """
        if config is None:
            config = load_config(root)
        if contracts_dir is None:
            contracts_dir = resolve_project_dir(
                root, config.contracts_dir, label="contracts_dir"
            )
        if artifacts_dir is None and config.artifacts_dir is not None:
            artifacts_dir = resolve_project_dir(
                root, config.artifacts_dir, label="artifacts_dir"
            )
        return cls(contracts_dir, artifacts_dir=artifacts_dir, config=config)

    def _solc_compiler(self, executable: Path) -> Compiler:
        return SolcCompiler(executable, self.contracts_dir)

    def compile(self) -> CompilationResult:
        """Rebuild every component that changed since the last call.

        Returns:
            The qualified names of the contracts compiled in this call and
            one run record per rebuilt component.

        Raises:
            BuildError: On the first failure; nothing from the failing
                component is committed.
            UnresolvedImportError: If a selected source imports a path that
                is not in the project; checked before anything is compiled.
        """
        diffs = self.detector.detect()
        self._pending.update(changed_paths(diffs))
        deleted = deleted_paths(diffs)

        graph = build_dependency_graph(self.registry.list_sources(), exclude=deleted)
        components = find_components(graph)
        selected = select_components(components, self._pending)
        logger.info(
            "%d of %d component(s) need rebuilding", len(selected), len(components)
        )
        for component in selected:
            graph.check_imports(component)

        result = CompilationResult(diffs=diffs)
        for component in selected:
            version = resolve_version(
                [graph.vertices[path] for path in component],
                self.config.solidity_version,
            )
            executable = self.svm.resolve(str(version))
            compiler = self.compiler_factory(executable)

            started = time.perf_counter()
            output = compiler.compile(build_input(component, self.config))
            elapsed = time.perf_counter() - started

            result.runs.append(
                CompilationRun(components=component, execution_time=elapsed)
            )
            result.contracts.extend(self.assembler.commit(output))
            logger.info(
                "Compiled %d source(s) in %.2fs: %s",
                len(component),
                elapsed,
                ", ".join(component),
            )

        self.assembler.retire(deleted)
        self.assembler.write_artifacts(result.contracts)
        self._pending.clear()
        return result


__all__ = [
    "CompilationResult",
    "CompilationRun",
    "Project",
    "VersionManager",
]
