"""Merging of compiler output into the registry and artifact emission."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from artifacts.models import ContractArtifact
from artifacts.utils import _load_json_metadata
from errors import ConsistencyError
from registry.models import Contract
from utils import qualified_name, split_qualified_name

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from artifacts.write import ArtifactWriter
    from compiler.models import CompilerOutput
    from registry.store import Registry

logger = logging.getLogger(__name__)


class ResultAssembler:
    """Commits successful compilations and writes their artifacts."""

    def __init__(self, registry: Registry, writer: ArtifactWriter) -> None:
        self.registry = registry
        self.writer = writer

    def commit(self, output: CompilerOutput) -> list[str]:
        """Upsert every contract of a successful compilation.

        Contracts are replaced by identity, contracts no longer produced by
        a compiled source are dropped, and the AST of each compiled source
        is updated. Output naming an unknown source is rejected
        before anything is written to the registry.

        Returns:
            Qualified names (``<sourcePath>:<ContractName>``) in output order.
        """
        unknown = sorted(
            path
            for path in {*output.sources, *output.contracts}
            if self.registry.get_source(path) is None
        )
        if unknown:
            msg = f"compiler output names unknown source(s): {', '.join(unknown)}"
            raise ConsistencyError(msg)

        for source_path in output.sources:
            produced = output.contracts.get(source_path, {})
            for stale in self.registry.contracts_for(source_path):
                if stale.name not in produced:
                    self.registry.remove_contract(stale.source, stale.name)
                    self.writer.remove(stale.source, stale.name)

        names: list[str] = []
        for source_path, contracts in output.contracts.items():
            for contract_name, compiled in contracts.items():
                self.registry.upsert_contract(
                    Contract(
                        name=contract_name,
                        source=source_path,
                        abi=compiled.abi,
                        bytecode=compiled.evm.bytecode,
                        deployed_bytecode=compiled.evm.deployed_bytecode,
                        metadata=compiled.metadata,
                        method_identifiers=dict(compiled.evm.method_identifiers),
                    )
                )
                names.append(qualified_name(source_path, contract_name))

        for source_path, compiled_source in output.sources.items():
            source = self.registry.get_source(source_path)
            if source is not None:
                source.ast = compiled_source.ast

        return names

    def build_artifact(self, name: str) -> ContractArtifact:
        """Join a compiled contract with the AST of its source.

        Raises:
            ConsistencyError: If the contract or its source is not registered.
        """
        source_path, _ = split_qualified_name(name)
        contract = self.registry.find_contract(name)
        if contract is None:
            msg = f"compiled contract {name} missing from registry"
            raise ConsistencyError(msg)
        source = self.registry.get_source(source_path)
        if source is None:
            msg = f"source {source_path} of contract {name} missing from registry"
            raise ConsistencyError(msg)

        return ContractArtifact(
            abi=contract.abi,
            bytecode=contract.bytecode,
            deployed_bytecode=contract.deployed_bytecode,
            method_identifiers=contract.method_identifiers,
            raw_metadata=contract.metadata,
            metadata=_load_json_metadata(contract.metadata),
            ast=source.ast,
        )

    def write_artifacts(self, names: Iterable[str]) -> list[Path]:
        """Emit one artifact per compiled contract."""
        paths: list[Path] = []
        for name in names:
            artifact = self.build_artifact(name)
            source_path, contract_name = split_qualified_name(name)
            paths.append(self.writer.write(source_path, contract_name, artifact))
        if paths:
            logger.info(
                "Wrote %d artifact(s) to %s", len(paths), self.writer.artifacts_dir
            )
        return paths

    def retire(self, paths: Iterable[str]) -> None:
        """Forget deleted sources, their contracts and their artifacts."""
        for path in paths:
            removed = self.registry.remove_source(path)
            self.writer.remove_source(path)
            logger.info("Retired %s (%d contract(s))", path, len(removed))


__all__ = ["ResultAssembler"]
