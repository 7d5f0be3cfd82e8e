from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from semantic_version import Version

CONFIG_FILENAME = "solbuild.toml"

DEFAULT_SOLIDITY_VERSION = "0.8.4"

DEFAULT_SVM_DIRNAME = ".solc-svm"

BytecodeHash = Literal["ipfs", "bzzr1", "none"]


class OptimizerConfig(BaseModel):
    """Optimizer settings passed to the compiler."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = Field(default=False, description="Enable the solc optimizer")
    runs: int = Field(
        default=200,
        ge=0,
        description="Expected number of executions of each opcode",
    )


class MetadataConfig(BaseModel):
    """Metadata settings passed to the compiler."""

    model_config = ConfigDict(extra="forbid")

    bytecode_hash: BytecodeHash = Field(
        default="ipfs",
        description="Hash method appended to the bytecode metadata",
    )
    append_cbor: bool | None = Field(
        default=None,
        description="Append the CBOR metadata (solc >= 0.8.18); omitted when unset",
    )


class BuildConfig(BaseModel):
    """Configuration for a Solidity project build."""

    model_config = ConfigDict(extra="forbid")

    contracts_dir: str = Field(
        default=".",
        description="Directory holding the Solidity sources, relative to the root",
    )
    artifacts_dir: str | None = Field(
        default=None,
        description="Directory for build artifacts (default: contracts_dir)",
    )
    solidity_version: str = Field(
        default=DEFAULT_SOLIDITY_VERSION,
        description="Version of solc used for every component",
    )
    svm_dir: str | None = Field(
        default=None,
        description=f"Compiler cache directory (default: ~/{DEFAULT_SVM_DIRNAME})",
    )
    optimizer: OptimizerConfig = Field(default_factory=OptimizerConfig)
    metadata: MetadataConfig = Field(default_factory=MetadataConfig)
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for sources to include (empty = all .sol files)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for sources to exclude",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )

    @field_validator("solidity_version")
    @classmethod
    def validate_solidity_version(cls, v: str) -> str:
        """Reject versions that are not exact semantic versions (e.g. ``0.8``)."""
        try:
            Version(v)
        except ValueError as exc:
            msg = f"Invalid solidity_version '{v}': expected MAJOR.MINOR.PATCH"
            raise ValueError(msg) from exc
        return v


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_project_dir(root: Path, value: str, *, label: str) -> Path:
    """Resolve a config-provided directory safely within the project root.

    The value must be a non-empty relative path that remains within the root
    after resolution. Absolute paths and paths that escape the root are
    rejected.
    """
    if not value:
        msg = f"{label} must be a non-empty relative path"
        raise ConfigError(msg)

    if value.startswith("~") or Path(value).is_absolute():
        msg = f"{label} must be a relative path within the project root"
        raise ConfigError(msg)

    try:
        resolved_root = root.resolve()
        resolved = (resolved_root / value).resolve()
    except OSError as exc:
        msg = f"Failed to resolve {label} '{value}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"{label} '{value}' escapes the project root"
        raise ConfigError(msg) from exc

    return resolved


def default_svm_dir() -> Path:
    return Path.home() / DEFAULT_SVM_DIRNAME


def load_config(root: Path) -> BuildConfig:
    """Load configuration from solbuild.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return BuildConfig()

    try:
        with config_path.open("rb") as f:
            data: dict[str, Any] = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"Failed to read {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return BuildConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
