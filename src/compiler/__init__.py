"""Adapter for the external solc compiler."""

from compiler.input import build_input
from compiler.models import CompilerInput, CompilerOutput
from compiler.solc import Compiler, SolcCompiler, decode_output

__all__ = [
    "Compiler",
    "CompilerInput",
    "CompilerOutput",
    "SolcCompiler",
    "build_input",
    "decode_output",
]
