"""advent-setup configuration.

Typed configuration for a scaffolding run. All settings use Pydantic v2
models so they are validated at construction time and can be serialised
to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_DAY_COUNT = 25
DEFAULT_PLACEHOLDER = "dayXX"

_TRUTHY = {"1", "true", "yes", "on"}


class TemplateNames(BaseModel):
    """File names of the template assets, relative to the template root."""

    run_script: str = Field(default="run.sh")
    gitignore: str = Field(default="template-gitignore")
    top_level_manifest: str = Field(default="template-top-level-Cargo.toml")
    tool_config: str = Field(default="config.toml")
    workflows_dir: str = Field(default="github")
    day_manifest: str = Field(default="template-Cargo.toml")
    day_source: str = Field(default="template.rs")

    def as_dict(self) -> dict[str, str]:
        """Return a plain ``{role: file name}`` mapping."""
        return self.model_dump()


class Config(BaseModel):
    """Settings for one scaffolding run.

    The defaults reproduce the historical invocation: templates are read from
    a sibling ``advent`` checkout and the workspace is assembled in the
    current directory.
    """

    template_root: Path = Field(default=Path("../advent"))
    target_root: Path = Field(default=Path("."))
    day_count: int = Field(default=DEFAULT_DAY_COUNT, ge=1)
    placeholder: str = Field(default=DEFAULT_PLACEHOLDER, min_length=1)
    templates: TemplateNames = Field(default_factory=TemplateNames)

    # Staging control. The defaults mirror the files the original setup
    # script registered with git.
    stage: bool = Field(default=True)
    stage_gitignore: bool = Field(default=False)
    stage_workflows: bool = Field(default=False)
    git_timeout: float = Field(default=60.0, gt=0, description="Per git call timeout in seconds")

    verbose: bool = Field(default=False)

    # ------------------------------------------------------------------
    # Template source paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def run_script_source(self) -> Path:
        return self.template_root / self.templates.run_script

    @property
    def gitignore_source(self) -> Path:
        return self.template_root / self.templates.gitignore

    @property
    def top_level_manifest_source(self) -> Path:
        return self.template_root / self.templates.top_level_manifest

    @property
    def tool_config_source(self) -> Path:
        return self.template_root / self.templates.tool_config

    @property
    def workflows_source(self) -> Path:
        """Directory whose contents are copied into ``.github/workflows``."""
        return self.template_root / self.templates.workflows_dir

    @property
    def day_manifest_source(self) -> Path:
        return self.template_root / self.templates.day_manifest

    @property
    def day_source_source(self) -> Path:
        return self.template_root / self.templates.day_source

    def required_files(self) -> list[Path]:
        """Every template file that must exist before a run starts."""
        return [
            self.run_script_source,
            self.gitignore_source,
            self.top_level_manifest_source,
            self.tool_config_source,
            self.day_manifest_source,
            self.day_source_source,
        ]

    def day_range(self) -> range:
        """Day indices to generate, ``1..=day_count``."""
        return range(1, self.day_count + 1)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Parent directories are created.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            AOC_TEMPLATE_ROOT, AOC_TARGET_ROOT, AOC_DAY_COUNT,
            AOC_PLACEHOLDER, AOC_STAGE, AOC_STAGE_GITIGNORE,
            AOC_STAGE_WORKFLOWS.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("AOC_TEMPLATE_ROOT"):
            kwargs["template_root"] = Path(os.environ["AOC_TEMPLATE_ROOT"])
        if os.environ.get("AOC_TARGET_ROOT"):
            kwargs["target_root"] = Path(os.environ["AOC_TARGET_ROOT"])
        if os.environ.get("AOC_DAY_COUNT"):
            kwargs["day_count"] = int(os.environ["AOC_DAY_COUNT"])
        if os.environ.get("AOC_PLACEHOLDER"):
            kwargs["placeholder"] = os.environ["AOC_PLACEHOLDER"]

        for env_name, field_name in (
            ("AOC_STAGE", "stage"),
            ("AOC_STAGE_GITIGNORE", "stage_gitignore"),
            ("AOC_STAGE_WORKFLOWS", "stage_workflows"),
        ):
            value = os.environ.get(env_name)
            if value:
                kwargs[field_name] = value.strip().lower() in _TRUTHY

        return cls(**kwargs)
