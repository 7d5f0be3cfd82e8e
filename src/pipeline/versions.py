"""Version constraint resolution for a component."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from semantic_version import NpmSpec, Version

from errors import PragmaError, VersionMismatchError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from registry.models import Source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VersionRequirement:
    """The combined pragma constraint of a component."""

    clauses: tuple[str, ...]
    specs: tuple[NpmSpec, ...]

    @property
    def expression(self) -> str:
        """Human-readable AND of the distinct clauses."""
        return " && ".join(self.clauses)

    def admits(self, version: Version) -> bool:
        return all(spec.match(version) for spec in self.specs)


def combine_constraints(sources: Iterable[Source]) -> VersionRequirement:
    """Intersect the first pragma constraint of each source.

    Raises:
        PragmaError: If a source has no pragma or one that cannot be parsed.
    """
    clauses: dict[str, str] = {}
    for source in sources:
        if not source.versions:
            raise PragmaError(source.path, "pragma solidity not found")
        clauses.setdefault(source.versions[0], source.path)

    specs: list[NpmSpec] = []
    for clause, path in clauses.items():
        try:
            specs.append(NpmSpec(clause))
        except ValueError as exc:
            msg = f"invalid pragma solidity '{clause}': {exc}"
            raise PragmaError(path, msg) from exc

    return VersionRequirement(clauses=tuple(clauses), specs=tuple(specs))


def resolve_version(sources: list[Source], solidity_version: str) -> Version:
    """Check that the configured compiler satisfies a component.

    Args:
        sources: Every source of the component
        solidity_version: Configured compiler version

    Returns:
        The configured version, parsed.

    Raises:
        PragmaError: If a pragma cannot be parsed.
        VersionMismatchError: If the combined constraint rejects the
            configured version.
    """
    version = Version(solidity_version)
    requirement = combine_constraints(sources)
    if not requirement.admits(version):
        raise VersionMismatchError(
            solidity_version,
            requirement.expression,
            [source.path for source in sources],
        )
    logger.debug("solc %s satisfies %s", version, requirement.expression)
    return version


__all__ = [
    "VersionRequirement",
    "combine_constraints",
    "resolve_version",
]
