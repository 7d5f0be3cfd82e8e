"""Project configuration."""

from config.settings import (
    CONFIG_FILENAME,
    DEFAULT_SOLIDITY_VERSION,
    BuildConfig,
    ConfigError,
    MetadataConfig,
    OptimizerConfig,
    default_svm_dir,
    load_config,
    resolve_project_dir,
)

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_SOLIDITY_VERSION",
    "BuildConfig",
    "ConfigError",
    "MetadataConfig",
    "OptimizerConfig",
    "default_svm_dir",
    "load_config",
    "resolve_project_dir",
]
