"""Invocation of the solc executable over its standard-JSON protocol."""

from __future__ import annotations

import logging
import subprocess
from typing import TYPE_CHECKING, Protocol

import orjson
from pydantic import ValidationError

from compiler.models import CompilerOutput
from errors import CompilerError

if TYPE_CHECKING:
    from pathlib import Path

    from compiler.models import CompilerInput

logger = logging.getLogger(__name__)


class Compiler(Protocol):
    """Anything able to compile a component descriptor."""

    def compile(self, descriptor: CompilerInput) -> CompilerOutput: ...


def decode_output(raw: bytes) -> CompilerOutput:
    """Decode compiler stdout and fail on any reported error.

    Warnings are logged and do not fail the build.

    Raises:
        CompilerError: If the output is not valid JSON of the expected shape,
            or if it reports errors. Every error message is kept.
    """
    try:
        output = CompilerOutput.model_validate(orjson.loads(raw))
    except (orjson.JSONDecodeError, ValidationError) as exc:
        msg = f"Invalid compiler output: {exc}"
        raise CompilerError([msg]) from exc

    for warning in output.warning_messages():
        logger.warning("%s", warning.strip())

    errors = output.error_messages()
    if errors:
        raise CompilerError(errors)
    return output


class SolcCompiler:
    """Runs ``solc --standard-json`` with the contracts directory as base path."""

    def __init__(self, executable: Path, base_path: Path) -> None:
        self.executable = executable
        self.base_path = base_path

    def command(self) -> list[str]:
        base = str(self.base_path.resolve())
        return [
            str(self.executable),
            "--standard-json",
            "--base-path",
            base,
            "--allow-paths",
            base,
        ]

    def compile(self, descriptor: CompilerInput) -> CompilerOutput:
        payload = orjson.dumps(descriptor.to_payload())
        try:
            proc = subprocess.run(  # noqa: S603
                self.command(),
                input=payload,
                capture_output=True,
                check=False,
            )
        except OSError as exc:
            msg = f"failed to run {self.executable}: {exc}"
            raise CompilerError([msg]) from exc

        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="replace").strip()
            msg = f"failed to compile (exit {proc.returncode}): {stderr}"
            raise CompilerError([msg])

        return decode_output(proc.stdout)


__all__ = ["Compiler", "SolcCompiler", "decode_output"]
