"""Command-line interface for solbuild."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from config.settings import ConfigError, default_svm_dir, load_config
from contract.validation import validate_artifacts
from errors import BuildError
from pipeline.project import Project
from svm.manager import SolidityVersionManager


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[
            RichHandler(console=Console(stderr=True), show_path=False, show_time=False)
        ],
    )


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Project root holding solbuild.toml (default: .)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="solbuild")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser("build", help="Compile changed contracts")
    _add_common_paths(build_parser)
    build_parser.add_argument(
        "--contracts-dir",
        default=None,
        help="Directory of Solidity sources (default: config contracts_dir)",
    )
    build_parser.add_argument(
        "--artifacts-dir",
        default=None,
        help="Output directory for artifacts (default: the contracts directory)",
    )
    build_parser.add_argument(
        "--solc-version",
        default=None,
        help="Compiler version (default: config solidity_version)",
    )
    build_parser.add_argument(
        "--svm-dir",
        default=None,
        help="Compiler cache directory (default: ~/.solc-svm)",
    )

    validate_parser = subparsers.add_parser("validate", help="Validate artifacts")
    _add_common_paths(validate_parser)
    validate_parser.add_argument(
        "--artifacts-dir",
        default=None,
        help="Artifacts directory (default: config artifacts dir)",
    )

    versions_parser = subparsers.add_parser(
        "versions", help="List cached compiler versions"
    )
    versions_parser.add_argument(
        "--svm-dir",
        default=None,
        help="Compiler cache directory (default: ~/.solc-svm)",
    )

    return parser


def _resolve_path(value: str | None) -> Path | None:
    if value is None:
        return None
    return Path(value).expanduser().resolve()


def _handle_build(root: Path, args: argparse.Namespace) -> int:
    try:
        config = load_config(root)
        updates: dict[str, str] = {}
        if args.solc_version is not None:
            updates["solidity_version"] = args.solc_version
        if args.svm_dir is not None:
            updates["svm_dir"] = str(_resolve_path(args.svm_dir))
        if updates:
            config = config.model_validate({**config.model_dump(), **updates})

        project = Project.from_root(
            root,
            config,
            contracts_dir=_resolve_path(args.contracts_dir),
            artifacts_dir=_resolve_path(args.artifacts_dir),
        )

        result = project.compile()
    except (BuildError, ConfigError, ValidationError, OSError) as exc:
        sys.stderr.write(f"error: failed to compile: {exc}\n")
        return 1

    sys.stdout.write(f"Compiled contracts: {','.join(result.contracts)}\n")
    return 0


def _handle_validate(root: Path, artifacts_dir: str | None) -> int:
    resolved = _resolve_path(artifacts_dir)
    if resolved is None:
        try:
            resolved = Project.from_root(root).artifacts_dir
        except ConfigError as exc:
            sys.stderr.write(f"error: {exc}\n")
            return 2
    result = validate_artifacts(resolved)
    for warning in result.warnings:
        sys.stderr.write(f"warning: {warning.location()}: {warning.message}\n")
    if result.errors:
        for error in result.errors:
            sys.stderr.write(f"{error.location()}: {error.message}\n")
        return 1
    return 0


def _handle_versions(svm_dir: str | None) -> int:
    manager = SolidityVersionManager(_resolve_path(svm_dir) or default_svm_dir())
    for version in manager.installed():
        sys.stdout.write(f"{version}\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    if args.command == "versions":
        return _handle_versions(args.svm_dir)

    root = Path(args.root).expanduser().resolve()

    if args.command == "build":
        return _handle_build(root, args)

    if args.command == "validate":
        return _handle_validate(root, args.artifacts_dir)

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
