"""Validation helpers for build artifacts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from contract.artifacts import ARTIFACT_SUFFIX, ARTIFACTS_OUT_DIR
from contract.models import ContractArtifact
from utils import SOURCE_SUFFIX

if TYPE_CHECKING:
    from pathlib import Path


@dataclass(frozen=True)
class ValidationMessage:
    artifact: str
    path: Path
    message: str

    def location(self) -> str:
        return str(self.path)

    def to_dict(self) -> dict[str, object]:
        return {
            "artifact": self.artifact,
            "path": str(self.path),
            "message": self.message,
        }


@dataclass
class ValidationResult:
    errors: list[ValidationMessage] = field(default_factory=list)
    warnings: list[ValidationMessage] = field(default_factory=list)
    checked: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors


def validate_artifacts(artifacts_dir: Path) -> ValidationResult:
    """Check every contract artifact under ``<artifacts_dir>/out``.

    Problems are collected into the result; bad content never raises.
    """
    result = ValidationResult()

    if not artifacts_dir.exists():
        result.errors.append(
            ValidationMessage(
                artifact="artifacts_dir",
                path=artifacts_dir,
                message="Artifacts directory does not exist.",
            )
        )
        return result

    if not artifacts_dir.is_dir():
        result.errors.append(
            ValidationMessage(
                artifact="artifacts_dir",
                path=artifacts_dir,
                message="Artifacts path is not a directory.",
            )
        )
        return result

    out_dir = artifacts_dir / ARTIFACTS_OUT_DIR
    if not out_dir.is_dir():
        result.errors.append(
            ValidationMessage(
                artifact="out",
                path=out_dir,
                message="Artifact output directory is missing.",
            )
        )
        return result

    for path in sorted(out_dir.rglob(f"*{ARTIFACT_SUFFIX}")):
        if not path.is_file():
            continue
        artifact_name = path.relative_to(out_dir).as_posix()
        _validate_contract_artifact(artifact_name, path, result)
        result.checked += 1

    return result


def _validate_contract_artifact(
    artifact_name: str, path: Path, result: ValidationResult
) -> None:
    if not path.parent.name.endswith(SOURCE_SUFFIX):
        result.warnings.append(
            ValidationMessage(
                artifact=artifact_name,
                path=path,
                message=(
                    "Artifact is not inside a source directory "
                    f"(expected out/<source>{SOURCE_SUFFIX}/<Contract>.json)."
                ),
            )
        )

    try:
        data = orjson.loads(path.read_bytes())
    except OSError as exc:
        result.errors.append(
            ValidationMessage(
                artifact=artifact_name,
                path=path,
                message=f"Failed to read file: {exc}.",
            )
        )
        return
    except orjson.JSONDecodeError as exc:
        result.errors.append(
            ValidationMessage(
                artifact=artifact_name,
                path=path,
                message=f"Invalid JSON: {exc}.",
            )
        )
        return

    if not isinstance(data, dict):
        result.errors.append(
            ValidationMessage(
                artifact=artifact_name,
                path=path,
                message="Expected JSON object for contract artifact.",
            )
        )
        return

    try:
        ContractArtifact.model_validate(data)
    except ValidationError as exc:
        result.errors.append(
            ValidationMessage(
                artifact=artifact_name,
                path=path,
                message=f"Schema validation failed: {exc}.",
            )
        )


__all__ = [
    "ValidationMessage",
    "ValidationResult",
    "validate_artifacts",
]
