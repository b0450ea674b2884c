"""Main scaffolding orchestrator.

Takes a ``Config`` and assembles an Advent of Code workspace in the target
root: the fixed top-level files, the cargo configuration, the CI workflows
and one Cargo crate per day, staging the generated files with git.

The run is a straight line. The first failure aborts it and nothing that
was already created is removed.
"""

from __future__ import annotations

import asyncio
import shutil
import time
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, computed_field

from ..config import Config
from ..errors import IOFailure, ScaffoldError, SourceMissing, from_os_error
from ..utils import console, create_progress
from ..vcs import GitStager
from .templates import PlaceholderRenderer, day_name


# ---------------------------------------------------------------------------
# Target layout
# ---------------------------------------------------------------------------

RUN_SCRIPT = Path("run.sh")
GITIGNORE = Path(".gitignore")
TOP_LEVEL_MANIFEST = Path("Cargo.toml")
CARGO_DIR = Path(".cargo")
TOOL_CONFIG = CARGO_DIR / "config.toml"
GITHUB_DIR = Path(".github")
WORKFLOWS_DIR = GITHUB_DIR / "workflows"

DAY_MANIFEST = "Cargo.toml"
DAY_SOURCE = Path("src") / "main.rs"


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class StepKind(str, Enum):
    MKDIR = "mkdir"
    COPY = "copy"
    COPY_TREE = "copy-tree"
    RENDER = "render"


class PlannedStep(BaseModel):
    """One filesystem operation of a run, as reported by ``plan()``."""

    kind: StepKind
    path: str = Field(..., description="Target path relative to the target root")
    source: str = Field(default="", description="Template path the step reads from")
    staged: bool = Field(default=False)
    day: Optional[int] = Field(default=None)


class ScaffoldResult(BaseModel):
    """Outcome of a successful run."""

    target_root: Path
    created: list[str] = Field(default_factory=list)
    staged: list[str] = Field(default_factory=list)
    days: list[int] = Field(default_factory=list)
    duration_seconds: float = Field(default=0.0, ge=0.0)

    @computed_field  # type: ignore[misc]
    @property
    def day_count(self) -> int:
        return len(self.days)


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class WorkspaceGenerator:
    """Scaffolds one workspace as described by a ``Config``.

    Given a template root containing the run script, gitignore, manifests,
    cargo config, workflow directory and the two placeholder-bearing
    per-day templates, ``generate()`` produces::

        run.sh
        .gitignore
        Cargo.toml
        .cargo/config.toml
        .github/workflows/...
        day1/Cargo.toml
        day1/src/main.rs
        ...
    """

    def __init__(self, config: Config, stager: GitStager | None = None) -> None:
        self.config = config
        self.target_root = Path(config.target_root)
        self.renderer = PlaceholderRenderer(config.placeholder)
        self.stager = stager or GitStager(
            self.target_root,
            timeout=config.git_timeout,
            verbose=config.verbose,
        )
        self._created: list[str] = []
        self._staged: list[str] = []
        self._days: list[int] = []

    # -- Public API --------------------------------------------------------

    async def generate(self) -> ScaffoldResult:
        """Run every scaffolding step in order.

        Returns:
            A ``ScaffoldResult`` listing created and staged paths.

        Raises:
            ScaffoldError: On the first failing step. Errors raised while
                building a day directory carry that day in ``exc.day``.
        """
        started = time.monotonic()

        await self._preflight()

        # 1. Top-level files
        await self._copy_file(self.config.run_script_source, RUN_SCRIPT, stage=True)
        await self._copy_file(
            self.config.gitignore_source, GITIGNORE, stage=self.config.stage_gitignore
        )
        await self._copy_file(
            self.config.top_level_manifest_source, TOP_LEVEL_MANIFEST, stage=True
        )

        # 2. Cargo configuration
        await self._mkdir(CARGO_DIR)
        await self._copy_file(self.config.tool_config_source, TOOL_CONFIG, stage=True)

        # 3. CI workflows
        await self._mkdir(GITHUB_DIR)
        await self._mkdir(WORKFLOWS_DIR)
        copied = await self._copy_tree(self.config.workflows_source, WORKFLOWS_DIR)
        if self.config.stage_workflows:
            await self._stage(*copied)

        # 4. Day crates
        await self._generate_days()

        return ScaffoldResult(
            target_root=self.target_root,
            created=list(self._created),
            staged=list(self._staged),
            days=list(self._days),
            duration_seconds=time.monotonic() - started,
        )

    def plan(self) -> list[PlannedStep]:
        """Return the ordered steps ``generate()`` would perform.

        Touches neither the filesystem nor git.
        """
        cfg = self.config
        steps = [
            PlannedStep(kind=StepKind.COPY, path=RUN_SCRIPT.as_posix(),
                        source=str(cfg.run_script_source), staged=self._stages(True)),
            PlannedStep(kind=StepKind.COPY, path=GITIGNORE.as_posix(),
                        source=str(cfg.gitignore_source),
                        staged=self._stages(cfg.stage_gitignore)),
            PlannedStep(kind=StepKind.COPY, path=TOP_LEVEL_MANIFEST.as_posix(),
                        source=str(cfg.top_level_manifest_source), staged=self._stages(True)),
            PlannedStep(kind=StepKind.MKDIR, path=CARGO_DIR.as_posix()),
            PlannedStep(kind=StepKind.COPY, path=TOOL_CONFIG.as_posix(),
                        source=str(cfg.tool_config_source), staged=self._stages(True)),
            PlannedStep(kind=StepKind.MKDIR, path=GITHUB_DIR.as_posix()),
            PlannedStep(kind=StepKind.MKDIR, path=WORKFLOWS_DIR.as_posix()),
            PlannedStep(kind=StepKind.COPY_TREE, path=WORKFLOWS_DIR.as_posix(),
                        source=str(cfg.workflows_source),
                        staged=self._stages(cfg.stage_workflows)),
        ]
        for day in cfg.day_range():
            day_dir = Path(day_name(day))
            steps.extend([
                PlannedStep(kind=StepKind.MKDIR, path=day_dir.as_posix(), day=day),
                PlannedStep(kind=StepKind.MKDIR, path=(day_dir / "src").as_posix(), day=day),
                PlannedStep(kind=StepKind.RENDER, path=(day_dir / DAY_MANIFEST).as_posix(),
                            source=str(cfg.day_manifest_source),
                            staged=self._stages(True), day=day),
                PlannedStep(kind=StepKind.RENDER, path=(day_dir / DAY_SOURCE).as_posix(),
                            source=str(cfg.day_source_source),
                            staged=self._stages(True), day=day),
            ])
        return steps

    # -- Preflight ---------------------------------------------------------

    async def _preflight(self) -> None:
        """Validate templates, target root and repository before any write."""
        cfg = self.config

        if not cfg.template_root.is_dir():
            raise SourceMissing(
                f"Template root not found: {cfg.template_root}",
                path=cfg.template_root,
                operation="locate templates",
            )
        for source in cfg.required_files():
            if not source.is_file():
                raise SourceMissing(
                    f"Template file not found: {source}",
                    path=source,
                    operation="locate templates",
                )
        if not cfg.workflows_source.is_dir():
            raise SourceMissing(
                f"Workflow template directory not found: {cfg.workflows_source}",
                path=cfg.workflows_source,
                operation="locate templates",
            )

        if not self.target_root.is_dir():
            raise IOFailure(
                f"Target root is not a directory: {self.target_root}",
                path=self.target_root,
                operation="open target",
            )

        self.renderer.load("manifest", cfg.day_manifest_source)
        self.renderer.load("source", cfg.day_source_source)

        if cfg.stage:
            await self.stager.ensure_repository()

    # -- Days --------------------------------------------------------------

    async def _generate_days(self) -> None:
        days = list(self.config.day_range())
        with create_progress() as progress:
            task = progress.add_task("Creating day crates", total=len(days))
            for day in days:
                progress.update(task, description=f"Creating {day_name(day)}")
                try:
                    await self._generate_day(day)
                except ScaffoldError as exc:
                    exc.attach_day(day)
                    raise
                self._days.append(day)
                progress.advance(task)

    async def _generate_day(self, day: int) -> None:
        day_dir = Path(day_name(day))
        await self._mkdir(day_dir)
        await self._mkdir(day_dir / "src")

        manifest = day_dir / DAY_MANIFEST
        source = day_dir / DAY_SOURCE
        await self.renderer.render_to_file("manifest", self.target_root / manifest, day)
        self._record(manifest)
        await self.renderer.render_to_file("source", self.target_root / source, day)
        self._record(source)

        await self._stage(manifest, source)

    # -- Filesystem primitives ---------------------------------------------

    async def _mkdir(self, rel: Path) -> None:
        target = self.target_root / rel
        try:
            await asyncio.to_thread(target.mkdir)
        except OSError as exc:
            raise from_os_error(exc, "create directory", target) from exc
        self._record(rel)

    async def _copy_file(self, source: Path, rel: Path, stage: bool) -> None:
        target = self.target_root / rel
        await asyncio.to_thread(_copy_new_file, source, target)
        self._record(rel)
        if stage:
            await self._stage(rel)

    async def _copy_tree(self, source_dir: Path, rel_dir: Path) -> list[Path]:
        """Copy the contents of *source_dir* into the existing *rel_dir*.

        Top-level entries whose name starts with a dot are skipped, as a
        shell ``*`` glob would. Returns the copied files relative to the
        target root.
        """
        entries = await asyncio.to_thread(_walk_tree, source_dir)
        copied: list[Path] = []
        for entry in entries:
            rel = rel_dir / entry.relative_to(source_dir)
            if entry.is_dir():
                await self._mkdir(rel)
            else:
                await asyncio.to_thread(_copy_new_file, entry, self.target_root / rel)
                self._record(rel)
                copied.append(rel)
        return copied

    async def _stage(self, *rels: Path) -> None:
        if not self.config.stage or not rels:
            return
        self._staged.extend(await self.stager.stage(*rels))

    # -- Bookkeeping -------------------------------------------------------

    def _record(self, rel: Path) -> None:
        self._created.append(rel.as_posix())
        if self.config.verbose:
            console.print(f"[green]created[/green] {rel.as_posix()}")

    def _stages(self, flag: bool) -> bool:
        return self.config.stage and flag


# ---------------------------------------------------------------------------
# Convenience entry point
# ---------------------------------------------------------------------------


def scaffold(
    template_root: str | Path,
    target_root: str | Path,
    **overrides: Any,
) -> ScaffoldResult:
    """Synchronously scaffold *target_root* from *template_root*.

    Extra keyword arguments are passed to ``Config`` (e.g. ``day_count=3``,
    ``stage=False``).
    """
    config = Config(
        template_root=Path(template_root),
        target_root=Path(target_root),
        **overrides,
    )
    return asyncio.run(WorkspaceGenerator(config).generate())


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _walk_tree(source_dir: Path) -> list[Path]:
    """List *source_dir* recursively, parents before children."""
    entries: list[Path] = []
    for top in sorted(source_dir.iterdir()):
        if top.name.startswith("."):
            continue
        entries.append(top)
        if top.is_dir():
            entries.extend(sorted(top.rglob("*")))
    return entries


def _copy_new_file(source: Path, target: Path) -> None:
    """Copy *source* to *target* with its metadata; *target* must not exist."""
    try:
        with source.open("rb") as src, target.open("xb") as dst:
            shutil.copyfileobj(src, dst)
        shutil.copystat(source, target)
    except FileNotFoundError as exc:
        if not source.exists():
            raise SourceMissing(
                f"Template file not found: {source}",
                path=source,
                operation="copy file",
            ) from exc
        raise from_os_error(exc, "copy file", target) from exc
    except OSError as exc:
        raise from_os_error(exc, "copy file", target) from exc
