"""Stable build output contract for solbuild.

This module exposes the artifact layout and schema that downstream tools
(deployment scripts, test harnesses) depend on.
"""

from contract.artifacts import (
    ARTIFACT_SUFFIX,
    ARTIFACTS_OUT_DIR,
    artifact_relpath,
    source_artifacts_relpath,
)


def __getattr__(name: str) -> object:
    if name == "ContractArtifact":
        from contract.models import ContractArtifact

        return ContractArtifact

    if name in {"ValidationMessage", "ValidationResult", "validate_artifacts"}:
        from contract.validation import (
            ValidationMessage,
            ValidationResult,
            validate_artifacts,
        )

        return {
            "ValidationMessage": ValidationMessage,
            "ValidationResult": ValidationResult,
            "validate_artifacts": validate_artifacts,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "ARTIFACTS_OUT_DIR",
    "ARTIFACT_SUFFIX",
    "ContractArtifact",
    "ValidationMessage",
    "ValidationResult",
    "artifact_relpath",
    "source_artifacts_relpath",
    "validate_artifacts",
]
