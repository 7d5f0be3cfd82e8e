"""Regex-based scanning of Solidity sources.

Only two features of the language are needed by the build: the import
statements that create dependency edges and the ``pragma solidity`` constraint
that selects a compiler.
"""

from __future__ import annotations

import posixpath
import re

from errors import ImportEscapeError, InputError, PragmaError
from registry.models import Source
from utils import normalize_path, split_source_path

# import "a.sol"; import "a.sol" as A; import * as A from "a.sol";
# import {X, Y as Z} from 'a.sol';
_IMPORT_RE = re.compile(r"""\bimport\s+(?:[^;"']*?\bfrom\s+)?(["'])(?P<path>.+?)\1""")

_PRAGMA_RE = re.compile(r"\bpragma\s+solidity\s+(?P<constraint>[^;]*);")


def parse_imports(content: str) -> list[str]:
    """Return the raw import targets of a source, in declaration order.

    Examples:
        >>> parse_imports('import "../Basic.sol";')
        ['../Basic.sol']
        >>> parse_imports("import {A} from './A.sol';")
        ['./A.sol']
    """
    return [match.group("path") for match in _IMPORT_RE.finditer(content)]


def parse_pragma(content: str, path: str) -> list[str]:
    """Return every ``pragma solidity`` constraint declared in a source.

    Raises:
        PragmaError: If the source declares no pragma or an empty one.
    """
    constraints = [
        " ".join(match.group("constraint").split())
        for match in _PRAGMA_RE.finditer(content)
    ]
    if not constraints:
        raise PragmaError(path, "pragma solidity not found")
    if not all(constraints):
        raise PragmaError(path, "empty pragma solidity constraint")
    return constraints


def resolve_relative_imports(
    imports: list[str],
    directory: str,
    *,
    origin: str | None = None,
) -> list[str]:
    """Resolve relative import targets against the importing file's directory.

    Targets starting with ``.`` are joined with ``directory`` and normalized;
    any other target is already canonical and passes through unchanged.
    ``origin`` names the importing file in error messages.

    Raises:
        ImportEscapeError: If a relative target resolves outside the root.

    Examples:
        >>> resolve_relative_imports(["./file1", "../file2"], "path/")
        ['path/file1', 'file2']
    """
    resolved: list[str] = []
    for target in imports:
        if not target.startswith("."):
            resolved.append(target)
            continue

        full_path = normalize_path(posixpath.join(directory, target))
        if full_path == ".." or full_path.startswith("../"):
            msg = f"import '{target}' escapes the contracts directory"
            raise ImportEscapeError(origin or directory, msg)
        resolved.append(full_path)
    return resolved


def parse_source(content: bytes | str, path: str) -> Source:
    """Build a :class:`Source` record from raw file content.

    Args:
        content: File content as read from disk
        path: Path of the file relative to the contracts directory

    Returns:
        Source with imports and pragma filled in; ``mod_time`` and ``ast``
        are left for the caller.
    """
    if isinstance(content, bytes):
        try:
            text = content.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InputError(path, f"invalid UTF-8 ({exc})") from exc
    else:
        text = content

    directory, filename = split_source_path(path)

    imports = resolve_relative_imports(parse_imports(text), directory, origin=path)

    return Source(
        dir=directory,
        filename=filename,
        versions=parse_pragma(text, path),
        imports=imports,
    )


__all__ = [
    "parse_imports",
    "parse_pragma",
    "parse_source",
    "resolve_relative_imports",
]
