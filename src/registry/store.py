"""In-memory registry of known sources and compiled contracts."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from utils import split_qualified_name

if TYPE_CHECKING:
    from registry.models import Contract, Source

logger = logging.getLogger(__name__)


class Registry:
    """Store of sources keyed by path and contracts keyed by (source, name).

    Upsert is the only way to add or change a record; an upsert with an
    existing identity replaces the stored record in place and keeps its
    original position, so listing order is first-observation order.
    """

    def __init__(self) -> None:
        self._sources: dict[str, Source] = {}
        self._contracts: dict[tuple[str, str], Contract] = {}

    def list_sources(self) -> list[Source]:
        return list(self._sources.values())

    def list_contracts(self) -> list[Contract]:
        return list(self._contracts.values())

    def get_source(self, path: str) -> Source | None:
        return self._sources.get(path)

    def get_contract(self, source: str, name: str) -> Contract | None:
        return self._contracts.get((source, name))

    def find_contract(self, full_name: str) -> Contract | None:
        """Look up a contract by its ``<sourcePath>:<ContractName>`` name."""
        try:
            source, name = split_qualified_name(full_name)
        except ValueError:
            return None
        return self._contracts.get((source, name))

    def contracts_for(self, source: str) -> list[Contract]:
        return [c for c in self._contracts.values() if c.source == source]

    def upsert_source(self, source: Source) -> None:
        self._sources[source.path] = source

    def upsert_contract(self, contract: Contract) -> None:
        self._contracts[contract.key] = contract

    def remove_contract(self, source: str, name: str) -> None:
        self._contracts.pop((source, name), None)

    def remove_source(self, path: str) -> list[Contract]:
        """Forget a source and every contract compiled from it.

        Returns:
            The contracts that were removed.
        """
        removed = self.contracts_for(path)
        for contract in removed:
            del self._contracts[contract.key]
        if self._sources.pop(path, None) is not None:
            logger.debug("Removed source %s (%d contracts)", path, len(removed))
        return removed


__all__ = ["Registry"]
