"""Bootstrap a yearly Advent of Code workspace from a template checkout."""

from advent_setup.config import Config, TemplateNames
from advent_setup.errors import (
    IOFailure,
    ScaffoldError,
    SourceMissing,
    TargetConflict,
    VCSUnavailable,
)
from advent_setup.scaffolder import ScaffoldResult, WorkspaceGenerator, scaffold

__version__ = "0.1.0"

__all__ = [
    "Config",
    "IOFailure",
    "ScaffoldError",
    "ScaffoldResult",
    "SourceMissing",
    "TargetConflict",
    "TemplateNames",
    "VCSUnavailable",
    "WorkspaceGenerator",
    "scaffold",
]
