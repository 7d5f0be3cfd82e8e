"""Build artifact layout definitions.

This module defines the stable on-disk layout of build artifacts: one JSON
document per compiled contract at ``out/<sourcePath>/<ContractName>.json``
under the artifacts directory.
"""

from __future__ import annotations

from pathlib import PurePosixPath

# Directory under the artifacts directory that holds contract artifacts.
ARTIFACTS_OUT_DIR = "out"

ARTIFACT_SUFFIX = ".json"


def artifact_relpath(source_path: str, contract_name: str) -> PurePosixPath:
    """Return the artifact path of a contract relative to the artifacts dir.

    Examples:
        >>> str(artifact_relpath("deps/Dependency.sol", "Dependency"))
        'out/deps/Dependency.sol/Dependency.json'
    """
    return PurePosixPath(
        ARTIFACTS_OUT_DIR, source_path, contract_name + ARTIFACT_SUFFIX
    )


def source_artifacts_relpath(source_path: str) -> PurePosixPath:
    """Return the directory holding every artifact of one source."""
    return PurePosixPath(ARTIFACTS_OUT_DIR, source_path)


__all__ = [
    "ARTIFACTS_OUT_DIR",
    "ARTIFACT_SUFFIX",
    "artifact_relpath",
    "source_artifacts_relpath",
]
