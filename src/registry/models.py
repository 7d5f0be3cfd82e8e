"""Records held by the source and contract registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from utils import join_source_path, qualified_name


class Bytecode(BaseModel):
    """Object code emitted by the compiler for one contract."""

    model_config = ConfigDict(populate_by_name=True)

    object: str = ""
    source_map: str = Field(default="", alias="sourceMap")
    link_references: dict[str, Any] = Field(
        default_factory=dict, alias="linkReferences"
    )


@dataclass
class Source:
    """A tracked Solidity file and the metadata parsed from it."""

    dir: str
    filename: str
    mod_time: int = 0
    versions: list[str] = field(default_factory=list)
    imports: list[str] = field(default_factory=list)
    ast: Any = None

    @property
    def path(self) -> str:
        """Path relative to the contracts directory; the source identity."""
        return join_source_path(self.dir, self.filename)


@dataclass(frozen=True)
class Contract:
    """A compiled unit produced from a source."""

    name: str
    source: str
    abi: Any = None
    bytecode: Bytecode | None = None
    deployed_bytecode: Bytecode | None = None
    metadata: str = ""
    method_identifiers: dict[str, str] = field(default_factory=dict)

    @property
    def key(self) -> tuple[str, str]:
        return (self.source, self.name)

    @property
    def full_name(self) -> str:
        return qualified_name(self.source, self.name)


__all__ = ["Bytecode", "Contract", "Source"]
