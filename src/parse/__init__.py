"""Parsing utilities for Solidity sources."""

from parse.sources import (
    parse_imports,
    parse_pragma,
    parse_source,
    resolve_relative_imports,
)

__all__ = [
    "parse_imports",
    "parse_pragma",
    "parse_source",
    "resolve_relative_imports",
]
