"""Incremental build pipeline."""

from pipeline.diff import ChangeDetector, FileDiff, FileDiffType
from pipeline.project import CompilationResult, CompilationRun, Project

__all__ = [
    "ChangeDetector",
    "CompilationResult",
    "CompilationRun",
    "FileDiff",
    "FileDiffType",
    "Project",
]
