"""Shared path utilities."""

from __future__ import annotations

import posixpath
from pathlib import Path

SOURCE_SUFFIX = ".sol"


def normalize_path(path: str | Path) -> str:
    """Normalize a project-relative path to its canonical POSIX form.

    Examples:
        >>> normalize_path("path/../Basic.sol")
        'Basic.sol'
        >>> normalize_path("./deps/Dependency.sol")
        'deps/Dependency.sol'
        >>> normalize_path(Path("a") / "b.sol")
        'a/b.sol'
    """
    path_str = path.as_posix() if isinstance(path, Path) else str(path)
    return posixpath.normpath(path_str.replace("\\", "/"))


def split_source_path(path: str) -> tuple[str, str]:
    """Split a relative source path into ``(directory, filename)``.

    Files at the root of the contracts directory live in directory ``"."``.
    """
    normalized = normalize_path(path)
    directory, filename = posixpath.split(normalized)
    return directory or ".", filename


def join_source_path(directory: str, filename: str) -> str:
    """Inverse of :func:`split_source_path`."""
    return normalize_path(posixpath.join(directory, filename))


def qualified_name(source_path: str, contract_name: str) -> str:
    """Return the ``<sourcePath>:<ContractName>`` identifier of a contract."""
    return f"{source_path}:{contract_name}"


def split_qualified_name(name: str) -> tuple[str, str]:
    """Inverse of :func:`qualified_name`."""
    source_path, sep, contract_name = name.rpartition(":")
    if not sep:
        msg = f"Not a qualified contract name: {name!r}"
        raise ValueError(msg)
    return source_path, contract_name
