"""Change detection between the contracts directory and the registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from errors import InputError
from parse.sources import parse_source
from scan.files import find_source_files

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from registry.models import Source
    from registry.store import Registry
    from scan.files import FileRef

logger = logging.getLogger(__name__)


class FileDiffType(str, Enum):
    """Kind of change observed for one file."""

    ADD = "add"
    MOD = "mod"
    DEL = "del"


@dataclass(frozen=True)
class FileDiff:
    """A file update detected since the last scan."""

    path: str
    type: FileDiffType
    mod_time: int
    content: bytes | None = None


def calc_diff(
    sources: Iterable[Source],
    contracts_dir: Path,
    files: Iterable[FileRef],
) -> list[FileDiff]:
    """Compare an on-disk listing with the known sources.

    Files are compared by modification time only: a touched file with
    unchanged content is reported as modified.

    Args:
        sources: Sources currently in the registry
        contracts_dir: Directory the listing paths are relative to
        files: Current listing of the contracts directory

    Returns:
        Added and modified entries in listing order, then deleted entries in
        registry order.
    """
    known = {source.path: source for source in sources}

    diff: list[FileDiff] = []
    visited: set[str] = set()
    for file in files:
        visited.add(file.path)

        source = known.get(file.path)
        if source is None:
            kind = FileDiffType.ADD
        elif source.mod_time != file.mod_time:
            kind = FileDiffType.MOD
        else:
            continue

        diff.append(
            FileDiff(
                path=file.path,
                type=kind,
                mod_time=file.mod_time,
                content=(contracts_dir / file.path).read_bytes(),
            )
        )

    diff.extend(
        FileDiff(path=path, type=FileDiffType.DEL, mod_time=0)
        for path in known
        if path not in visited
    )
    return diff


class ChangeDetector:
    """Scans the contracts directory and keeps the registry's sources current."""

    def __init__(
        self,
        contracts_dir: Path,
        registry: Registry,
        *,
        include_patterns: list[str] | None = None,
        exclude_patterns: list[str] | None = None,
        nested_gitignore: bool = False,
    ) -> None:
        self.contracts_dir = contracts_dir
        self.registry = registry
        self.include_patterns = include_patterns
        self.exclude_patterns = exclude_patterns
        self.nested_gitignore = nested_gitignore

    def detect(self) -> list[FileDiff]:
        """Return the changes since the last call and upsert changed sources.

        Every added or modified file is parsed and upserted into the registry
        before this returns, so the registry reflects the latest content
        whether or not a build follows. Deleted files are only reported.
        If any changed file fails to parse the registry is left untouched.

        Raises:
            InputError: If the contracts directory is missing, or a changed
                file has no valid pragma or an import that escapes the
                contracts directory.
        """
        if not self.contracts_dir.is_dir():
            raise InputError(
                str(self.contracts_dir), "contracts directory does not exist"
            )

        files = find_source_files(
            self.contracts_dir,
            include_patterns=self.include_patterns,
            exclude_patterns=self.exclude_patterns,
            nested_gitignore=self.nested_gitignore,
        )
        diffs = calc_diff(self.registry.list_sources(), self.contracts_dir, files)

        parsed: list[Source] = []
        for diff in diffs:
            if diff.type is FileDiffType.DEL or diff.content is None:
                continue
            source = parse_source(diff.content, diff.path)
            source.mod_time = diff.mod_time
            parsed.append(source)
            logger.debug("%s %s", diff.type.value, diff.path)

        for source in parsed:
            self.registry.upsert_source(source)

        if diffs:
            logger.info(
                "Detected %d change(s) in %s", len(diffs), self.contracts_dir
            )
        return diffs


def changed_paths(diffs: Iterable[FileDiff]) -> list[str]:
    """Paths of added and modified files."""
    return [diff.path for diff in diffs if diff.type is not FileDiffType.DEL]


def deleted_paths(diffs: Iterable[FileDiff]) -> list[str]:
    return [diff.path for diff in diffs if diff.type is FileDiffType.DEL]


__all__ = [
    "ChangeDetector",
    "FileDiff",
    "FileDiffType",
    "calc_diff",
    "changed_paths",
    "deleted_paths",
]
