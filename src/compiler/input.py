"""Construction of the compiler input descriptor."""

from __future__ import annotations

from typing import TYPE_CHECKING

from compiler.models import (
    CompilerInput,
    CompilerSettings,
    MetadataSettings,
    OptimizerSettings,
    SourceUrls,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from config.settings import BuildConfig

CONTRACT_OUTPUTS = [
    "abi",
    "evm.bytecode",
    "evm.deployedBytecode",
    "evm.methodIdentifiers",
    "metadata",
]

SOURCE_OUTPUTS = ["ast"]


def default_output_selection() -> dict[str, dict[str, list[str]]]:
    return {"*": {"": list(SOURCE_OUTPUTS), "*": list(CONTRACT_OUTPUTS)}}


def build_input(paths: Iterable[str], config: BuildConfig) -> CompilerInput:
    """Describe a component for ``solc --standard-json``.

    Every source is referenced by URL (its path relative to the contracts
    directory) so the compiler reads it from disk under its base path.
    """
    return CompilerInput(
        sources={path: SourceUrls(urls=[path]) for path in paths},
        settings=CompilerSettings(
            optimizer=OptimizerSettings(
                enabled=config.optimizer.enabled,
                runs=config.optimizer.runs,
            ),
            metadata=MetadataSettings(
                bytecode_hash=config.metadata.bytecode_hash,
                append_cbor=config.metadata.append_cbor,
            ),
            output_selection=default_output_selection(),
        ),
    )


__all__ = ["CONTRACT_OUTPUTS", "build_input", "default_output_selection"]
