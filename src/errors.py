"""Error taxonomy for the build pipeline.

Every failure raised while compiling a project derives from ``BuildError`` so
callers can catch one type at the top level. Subclasses separate the kinds of
failure: bad input files, a configured compiler that does not satisfy a
component's pragmas, a failed toolchain download, compiler diagnostics, and
internal invariant violations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class BuildError(Exception):
    """Base class for errors raised while building a project."""


class InputError(BuildError):
    """Raised when a source file cannot be interpreted."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")


class PragmaError(InputError):
    """Raised when a source has a missing or malformed version pragma."""


class ImportEscapeError(InputError):
    """Raised when a relative import resolves outside the contracts root."""


class UnresolvedImportError(InputError):
    """Raised when an import names a source that is not in the project."""

    def __init__(self, source: str, target: str) -> None:
        self.source = source
        self.target = target
        super().__init__(source, f"import '{target}' is not a known source")


class VersionMismatchError(BuildError):
    """Raised when the configured compiler does not satisfy a component."""

    def __init__(self, version: str, constraint: str, paths: Iterable[str]) -> None:
        self.version = version
        self.constraint = constraint
        self.paths = tuple(paths)
        super().__init__(
            f"solc {version} does not satisfy '{constraint}' "
            f"required by {', '.join(self.paths)}"
        )


class FetchError(BuildError):
    """Raised when a compiler binary cannot be downloaded or installed."""


class CompilerError(BuildError):
    """Raised when the compiler reports errors; carries every message."""

    def __init__(self, messages: Iterable[str]) -> None:
        self.messages = [message.strip() for message in messages]
        super().__init__("\n".join(self.messages))


class ConsistencyError(BuildError):
    """Raised when an internal invariant is violated; indicates a bug."""


__all__ = [
    "BuildError",
    "CompilerError",
    "ConsistencyError",
    "FetchError",
    "ImportEscapeError",
    "InputError",
    "PragmaError",
    "UnresolvedImportError",
    "VersionMismatchError",
]
