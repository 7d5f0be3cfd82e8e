"""Schema of the solc standard-JSON input and output."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from registry.models import Bytecode


class _Camel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SourceUrls(_Camel):
    urls: list[str]


class OptimizerSettings(_Camel):
    enabled: bool = False
    runs: int = 200


class MetadataSettings(_Camel):
    bytecode_hash: str = Field(default="ipfs", alias="bytecodeHash")
    append_cbor: bool | None = Field(default=None, alias="appendCBOR")


class CompilerSettings(_Camel):
    optimizer: OptimizerSettings = Field(default_factory=OptimizerSettings)
    metadata: MetadataSettings = Field(default_factory=MetadataSettings)
    output_selection: dict[str, dict[str, list[str]]] = Field(
        default_factory=dict, alias="outputSelection"
    )


class CompilerInput(_Camel):
    """Standard-JSON input descriptor for one component."""

    language: str = "Solidity"
    sources: dict[str, SourceUrls]
    settings: CompilerSettings = Field(default_factory=CompilerSettings)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class CompilerDiagnostic(_Camel):
    """One entry of the output ``errors`` list (errors and warnings)."""

    formatted_message: str = Field(default="", alias="formattedMessage")
    message: str = ""
    severity: str = "error"
    type: str | None = None

    @property
    def is_error(self) -> bool:
        return self.severity == "error"

    def text(self) -> str:
        return self.formatted_message or self.message


class EvmOutput(_Camel):
    bytecode: Bytecode | None = None
    deployed_bytecode: Bytecode | None = Field(default=None, alias="deployedBytecode")
    opcodes: str = ""
    source_map: str = Field(default="", alias="sourceMap")
    method_identifiers: dict[str, str] = Field(
        default_factory=dict, alias="methodIdentifiers"
    )


class ContractOutput(_Camel):
    abi: Any = None
    evm: EvmOutput = Field(default_factory=EvmOutput)
    metadata: str = ""


class SourceOutput(_Camel):
    id: int | None = None
    ast: Any = None


class CompilerOutput(_Camel):
    """Decoded standard-JSON output."""

    errors: list[CompilerDiagnostic] = Field(default_factory=list)
    contracts: dict[str, dict[str, ContractOutput]] = Field(default_factory=dict)
    sources: dict[str, SourceOutput] = Field(default_factory=dict)
    version: str | None = None

    def error_messages(self) -> list[str]:
        return [diag.text() for diag in self.errors if diag.is_error]

    def warning_messages(self) -> list[str]:
        return [diag.text() for diag in self.errors if not diag.is_error]


__all__ = [
    "CompilerDiagnostic",
    "CompilerInput",
    "CompilerOutput",
    "CompilerSettings",
    "ContractOutput",
    "EvmOutput",
    "MetadataSettings",
    "OptimizerSettings",
    "SourceOutput",
    "SourceUrls",
]
