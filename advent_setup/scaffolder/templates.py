"""Placeholder rendering for the per-day templates.

Provides the PlaceholderRenderer class which loads the per-day manifest and
source templates and produces day-specific text by literal replacement of a
single placeholder token.  There is deliberately no template language: the
only transformation is a byte-level ``replace``.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from ..config import DEFAULT_PLACEHOLDER
from ..errors import SourceMissing, from_os_error


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------


def day_name(day: int) -> str:
    """Directory name for *day*: ``day1`` .. ``day25`` (never zero-padded)."""
    if day < 1:
        raise ValueError(f"Day index must be >= 1, got {day}")
    return f"day{day}"


# ---------------------------------------------------------------------------
# PlaceholderRenderer
# ---------------------------------------------------------------------------


class PlaceholderRenderer:
    """Renders per-day templates by replacing the placeholder token.

    Templates are read once via :meth:`load` and cached by name as raw bytes,
    so a run over many days touches each template file a single time and
    every byte other than the placeholder (line endings, non-UTF-8 text)
    reaches the output unchanged.
    """

    def __init__(self, placeholder: str = DEFAULT_PLACEHOLDER) -> None:
        if not placeholder:
            raise ValueError("Placeholder token must not be empty")
        self.placeholder = placeholder
        self._token = placeholder.encode("utf-8")
        self._cache: dict[str, bytes] = {}

    # -- Loading -----------------------------------------------------------

    def load(self, name: str, path: str | Path) -> bytes:
        """Read the template at *path* and cache it under *name*."""
        try:
            data = Path(path).read_bytes()
        except FileNotFoundError as exc:
            raise SourceMissing(
                f"Template file not found: {path}",
                path=path,
                operation="read template",
            ) from exc
        except OSError as exc:
            raise from_os_error(exc, "read template", path) from exc
        self._cache[name] = data
        return data

    def template(self, name: str) -> bytes:
        """Return a previously loaded template."""
        try:
            return self._cache[name]
        except KeyError:
            raise KeyError(f"Template '{name}' has not been loaded") from None

    # -- Rendering ---------------------------------------------------------

    def render(self, text: str | bytes, day: int) -> str | bytes:
        """Replace every occurrence of the placeholder in *text* with ``dayN``.

        Bytes in, bytes out; ``str`` in, ``str`` out.
        """
        if isinstance(text, bytes):
            return text.replace(self._token, day_name(day).encode("ascii"))
        return text.replace(self.placeholder, day_name(day))

    def render_template(self, name: str, day: int) -> bytes:
        """Render the cached template *name* for *day*."""
        return self.render(self.template(name), day)

    async def render_to_file(self, name: str, output_path: str | Path, day: int) -> Path:
        """Render template *name* for *day* and write it to *output_path*.

        The file is created exclusively: an existing file raises
        ``TargetConflict`` instead of being overwritten.  The parent
        directory must already exist.
        """
        content = self.render_template(name, day)
        out = Path(output_path)
        await asyncio.to_thread(_write_new_file, out, content)
        return out


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_new_file(path: Path, content: bytes) -> None:
    """Synchronous helper: write *content* to a file that must not exist yet."""
    try:
        with path.open("xb") as handle:
            handle.write(content)
    except OSError as exc:
        raise from_os_error(exc, "write file", path) from exc
