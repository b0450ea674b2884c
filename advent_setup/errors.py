"""Exceptions raised while scaffolding a workspace."""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for every scaffolding failure.

    Carries the offending path and the operation that was being attempted so
    the CLI can report both. ``day`` is set when the failure happened while
    building a day directory.
    """

    kind = "scaffold error"

    def __init__(
        self,
        message: str,
        path: str | Path | None = None,
        operation: str = "",
        day: int | None = None,
    ) -> None:
        self.path = Path(path) if path is not None else None
        self.operation = operation
        self.day = day
        super().__init__(message)

    def attach_day(self, day: int) -> None:
        """Record *day* as the failing day and prefix it to the message."""
        if self.day is None and self.args:
            self.args = (f"day{day}: {self.args[0]}",) + self.args[1:]
        self.day = day


class SourceMissing(ScaffoldError):
    """A required template file or directory does not exist."""

    kind = "source missing"


class TargetConflict(ScaffoldError):
    """A target file or directory already exists."""

    kind = "target conflict"


class IOFailure(ScaffoldError):
    """Permission, disk or other filesystem failure."""

    kind = "I/O failure"


class VCSUnavailable(ScaffoldError):
    """git is missing, the target is not a repository, or staging failed."""

    kind = "VCS unavailable"

    def __init__(
        self,
        message: str,
        path: str | Path | None = None,
        operation: str = "",
        day: int | None = None,
        command: str = "",
        stderr: str = "",
    ) -> None:
        self.command = command
        self.stderr = stderr
        super().__init__(message, path=path, operation=operation, day=day)


def from_os_error(exc: OSError, operation: str, path: str | Path) -> ScaffoldError:
    """Map an ``OSError`` raised by a filesystem call onto the error taxonomy."""
    if isinstance(exc, FileExistsError):
        return TargetConflict(
            f"Cannot {operation}: {path} already exists",
            path=path,
            operation=operation,
        )
    reason = exc.strerror or str(exc)
    return IOFailure(
        f"Cannot {operation} {path}: {reason}",
        path=path,
        operation=operation,
    )
