"""Git staging for generated workspace files.

Registers scaffolded paths with the git index of the target repository.
Every git call runs as an asyncio subprocess; failures surface as
``VCSUnavailable`` carrying the command and git's stderr.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from .errors import VCSUnavailable
from .utils import console


async def _run_git(
    *args: str,
    cwd: str | Path | None = None,
    timeout: float = 60.0,
) -> tuple[str, str]:
    """Run a git command asynchronously and return (stdout, stderr).

    Raises VCSUnavailable if git is not installed, the command times out, or
    it exits with a non-zero code.
    """
    cmd = ["git"] + list(args)
    cmd_str = " ".join(cmd)

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
        )
    except FileNotFoundError as exc:
        raise VCSUnavailable(
            "git executable not found on PATH",
            path=cwd,
            operation="run git",
            command=cmd_str,
        ) from exc

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise VCSUnavailable(
            f"Git command timed out after {timeout}s: {cmd_str}",
            path=cwd,
            operation="run git",
            command=cmd_str,
        )

    stdout = stdout_bytes.decode("utf-8", errors="replace").strip()
    stderr = stderr_bytes.decode("utf-8", errors="replace").strip()

    if process.returncode != 0:
        raise VCSUnavailable(
            f"Git command failed (exit {process.returncode}): {cmd_str}\n{stderr}",
            path=cwd,
            operation="run git",
            command=cmd_str,
            stderr=stderr,
        )

    return stdout, stderr


class GitStager:
    """Stages files in the git repository that contains ``repo_path``.

    Paths handed to :meth:`stage` are interpreted relative to ``repo_path``,
    which is also the working directory of every git call.
    """

    def __init__(self, repo_path: str | Path, timeout: float = 60.0, verbose: bool = False):
        self.repo_path = Path(repo_path)
        self.timeout = timeout
        self.verbose = verbose
        self.staged: list[str] = []

    async def ensure_repository(self) -> None:
        """Check that ``repo_path`` lies inside a git work tree.

        Raises:
            VCSUnavailable: If git is missing or the directory is not part of
                a repository.
        """
        try:
            stdout, _ = await _run_git(
                "rev-parse", "--is-inside-work-tree",
                cwd=self.repo_path,
                timeout=self.timeout,
            )
        except VCSUnavailable as exc:
            if not exc.stderr:
                # git missing or timed out
                raise
            raise VCSUnavailable(
                f"Not a git repository: {self.repo_path}. "
                "Run 'git init' before scaffolding or disable staging.",
                path=self.repo_path,
                operation="check repository",
                command=exc.command,
                stderr=exc.stderr,
            ) from exc

        if stdout != "true":
            raise VCSUnavailable(
                f"Not inside a git work tree: {self.repo_path}",
                path=self.repo_path,
                operation="check repository",
            )

    async def stage(self, *paths: str | Path) -> list[str]:
        """Add *paths* to the index.

        Returns:
            The staged paths as POSIX strings, in the order given.

        Raises:
            VCSUnavailable: If ``git add`` fails.
        """
        if not paths:
            return []

        rel_paths = [Path(p).as_posix() for p in paths]
        await _run_git("add", "--", *rel_paths, cwd=self.repo_path, timeout=self.timeout)
        self.staged.extend(rel_paths)

        if self.verbose:
            console.print(f"[dim]staged[/dim] {' '.join(rel_paths)}")
        return rel_paths

    async def staged_files(self) -> list[str]:
        """Return the paths currently staged in the index (``git diff --cached``)."""
        stdout, _ = await _run_git(
            "diff", "--cached", "--name-only",
            cwd=self.repo_path,
            timeout=self.timeout,
        )
        return [line for line in stdout.splitlines() if line.strip()]
