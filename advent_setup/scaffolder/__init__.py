"""advent-setup scaffolder -- assembles an Advent of Code workspace.

This module takes a ``Config`` describing where the templates live and where
the workspace goes, copies the fixed top-level files and CI workflows, and
generates one Cargo crate per day from the placeholder templates.

Quick usage::

    from advent_setup.config import Config
    from advent_setup.scaffolder import WorkspaceGenerator

    config = Config(template_root="../advent", target_root=".", day_count=25)
    result = await WorkspaceGenerator(config).generate()
"""

from advent_setup.scaffolder.generator import (
    PlannedStep,
    ScaffoldResult,
    StepKind,
    WorkspaceGenerator,
    scaffold,
)
from advent_setup.scaffolder.templates import PlaceholderRenderer, day_name

__all__ = [
    "PlaceholderRenderer",
    "PlannedStep",
    "ScaffoldResult",
    "StepKind",
    "WorkspaceGenerator",
    "day_name",
    "scaffold",
]
