"""Per-contract build artifact model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from registry.models import Bytecode


class ContractArtifact(BaseModel):
    """The persisted build output of one compiled contract.

    Joins the contract's ABI, bytecode and metadata with the AST of the
    source it was compiled from.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    abi: Any
    bytecode: Bytecode | None
    deployed_bytecode: Bytecode | None = Field(alias="deployedBytecode")
    method_identifiers: dict[str, str] = Field(
        default_factory=dict, alias="methodIdentifiers"
    )
    raw_metadata: str = Field(alias="rawMetadata")
    metadata: Any = None
    ast: Any = None


__all__ = ["ContractArtifact"]
