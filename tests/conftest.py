"""Shared pytest fixtures for the advent-setup test suite.

Provides reusable fixtures for:
- A complete template root mirroring the ``advent`` checkout layout
- Empty target directories and real temporary git repositories
- Mock subprocess helpers
- Ready-made ``Config`` objects
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from advent_setup.config import Config


# ---------------------------------------------------------------------------
# Template content
# ---------------------------------------------------------------------------

DAY_MANIFEST_TEMPLATE = """\
[package]
name = "dayXX"
version = "0.1.0"
edition = "2021"

[dependencies]
grid = { path = "../grid" }

[[bin]]
name = "dayXX"
path = "src/main.rs"
"""

DAY_SOURCE_TEMPLATE = "// solution for dayXX\nfn main() {}\n"

RUN_SCRIPT = "#!/bin/sh\ncargo run --release --bin \"$1\" -- \"$@\"\n"

WORKFLOW_FILES = {
    "rust.yml": "name: Rust\non: [push]\njobs:\n  build:\n    runs-on: ubuntu-latest\n",
    "clippy.yml": "name: Clippy\non: [pull_request]\n",
}


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def template_root(tmp_path: Path) -> Path:
    """A complete template root with every asset the scaffolder reads."""
    root = tmp_path / "advent"
    root.mkdir()

    run_script = root / "run.sh"
    run_script.write_text(RUN_SCRIPT, encoding="utf-8")
    run_script.chmod(0o755)

    (root / "template-gitignore").write_text("target/\n*.swp\n", encoding="utf-8")
    (root / "template-top-level-Cargo.toml").write_text(
        '[workspace]\nmembers = ["day*"]\nresolver = "2"\n', encoding="utf-8"
    )
    (root / "config.toml").write_text(
        '[build]\nrustflags = ["-C", "target-cpu=native"]\n', encoding="utf-8"
    )
    (root / "template-Cargo.toml").write_text(DAY_MANIFEST_TEMPLATE, encoding="utf-8")
    (root / "template.rs").write_text(DAY_SOURCE_TEMPLATE, encoding="utf-8")

    github = root / "github"
    github.mkdir()
    for name, content in WORKFLOW_FILES.items():
        (github / name).write_text(content, encoding="utf-8")

    return root


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    """Empty directory to scaffold into (no git repository)."""
    target = tmp_path / "aoc"
    target.mkdir()
    yield target


def _git(*args: str, cwd: Path) -> None:
    subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Temporary git repository with an initial commit.

    Creates a real git repo so that tests depending on staging have a valid
    index to add to.
    """
    repo_dir = tmp_path / "aoc-repo"
    repo_dir.mkdir()
    _git("init", cwd=repo_dir)
    _git("config", "user.email", "test@advent.local", cwd=repo_dir)
    _git("config", "user.name", "Advent Test", cwd=repo_dir)
    _git("config", "commit.gpgsign", "false", cwd=repo_dir)
    # Initial commit so the index can be diffed against HEAD
    (repo_dir / "README.md").write_text("# Advent of Code\n", encoding="utf-8")
    _git("add", "README.md", cwd=repo_dir)
    _git("commit", "-m", "Initial commit", cwd=repo_dir)
    yield repo_dir


# ---------------------------------------------------------------------------
# Configs
# ---------------------------------------------------------------------------

@pytest.fixture
def unstaged_config(template_root: Path, target_dir: Path) -> Config:
    """Config that scaffolds three days without touching git."""
    return Config(
        template_root=template_root,
        target_root=target_dir,
        day_count=3,
        stage=False,
    )


# ---------------------------------------------------------------------------
# Mock subprocess
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing git execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="true", returncode=0)
            with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory


@pytest.fixture
def fake_stager():
    """A GitStager stand-in that records staged paths without running git."""
    stager = MagicMock()
    stager.calls = []

    async def _stage(*paths):
        rel = [Path(p).as_posix() for p in paths]
        stager.calls.append(rel)
        return rel

    stager.stage = AsyncMock(side_effect=_stage)
    stager.ensure_repository = AsyncMock(return_value=None)
    return stager
