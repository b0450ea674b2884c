"""Command-line entry point for advent-setup.

Usage::

    advent-setup                       # ../advent -> current directory
    advent-setup -t ~/src/advent -o ./aoc2026 --days 12
    python -m advent_setup --dry-run
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from advent_setup.config import Config
from advent_setup.errors import ScaffoldError
from advent_setup.scaffolder import WorkspaceGenerator
from advent_setup.scaffolder.generator import PlannedStep
from advent_setup.utils import (
    console,
    format_duration,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="advent-setup",
        description="Bootstrap an Advent of Code workspace from a template checkout",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  advent-setup\n"
            "  advent-setup -t ../advent -o ./aoc2026\n"
            "  advent-setup --days 3 --no-stage --dry-run\n"
        ),
    )
    parser.add_argument(
        "--template-root", "-t",
        default=None,
        help="Directory holding the template files (default: ../advent)",
    )
    parser.add_argument(
        "--target", "-o",
        default=None,
        help="Directory to scaffold into (default: current directory)",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="Number of day crates to generate (default: 25)",
    )
    parser.add_argument(
        "--placeholder",
        default=None,
        help="Token replaced by the day name in the per-day templates (default: dayXX)",
    )
    parser.add_argument(
        "--no-stage",
        action="store_true",
        help="Do not stage generated files with git",
    )
    parser.add_argument(
        "--stage-gitignore",
        action="store_true",
        help="Also stage the copied .gitignore",
    )
    parser.add_argument(
        "--stage-workflows",
        action="store_true",
        help="Also stage the copied workflow files",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="JSON config file (overrides AOC_* environment variables)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the planned steps without touching the filesystem",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Report every created and staged path",
    )
    return parser


def resolve_config(args: argparse.Namespace) -> Config:
    """Merge config file / environment with command-line overrides."""
    base = Config.load(Path(args.config)) if args.config else Config.from_env()

    overrides: dict[str, Any] = {}
    if args.template_root is not None:
        overrides["template_root"] = Path(args.template_root)
    if args.target is not None:
        overrides["target_root"] = Path(args.target)
    if args.days is not None:
        overrides["day_count"] = args.days
    if args.placeholder is not None:
        overrides["placeholder"] = args.placeholder
    if args.no_stage:
        overrides["stage"] = False
    if args.stage_gitignore:
        overrides["stage_gitignore"] = True
    if args.stage_workflows:
        overrides["stage_workflows"] = True
    if args.verbose:
        overrides["verbose"] = True

    return Config.model_validate({**base.model_dump(), **overrides})


def _print_plan(steps: list[PlannedStep]) -> None:
    from rich.table import Table

    table = Table(title="Planned steps", show_header=True, header_style="bold cyan")
    table.add_column("Step", style="dim", no_wrap=True)
    table.add_column("Path")
    table.add_column("Source", style="dim")
    table.add_column("Staged", justify="center")

    for step in steps:
        table.add_row(step.kind.value, step.path, step.source, "yes" if step.staged else "")

    console.print(table)


def _describe_failure(exc: ScaffoldError) -> str:
    parts = [f"Error ({exc.kind}): {exc}"]
    if exc.operation and exc.path is not None:
        parts.append(f"  while trying to {exc.operation}: {exc.path}")
    if exc.day is not None:
        completed = exc.day - 1
        if completed:
            parts.append(f"  stopped after creating day{completed}")
        else:
            parts.append("  stopped before any day directory was completed")
    return "\n".join(parts)


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point for ``advent-setup`` / ``python -m advent_setup``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = resolve_config(args)
    except (ValidationError, ValueError, OSError) as exc:
        print_error(f"Error: invalid configuration: {exc}")
        sys.exit(2)

    generator = WorkspaceGenerator(config)

    if args.dry_run:
        _print_plan(generator.plan())
        return

    try:
        result = asyncio.run(generator.generate())
    except ScaffoldError as exc:
        print_error(_describe_failure(exc))
        print_warning("Files created so far were left in place.")
        sys.exit(1)

    print_summary_table(
        {
            "Target": str(result.target_root),
            "Day crates": str(result.day_count),
            "Paths created": str(len(result.created)),
            "Paths staged": str(len(result.staged)),
            "Duration": format_duration(result.duration_seconds),
        },
        title="Workspace ready",
    )
    print_success("Workspace scaffolded successfully!")


if __name__ == "__main__":
    main()
