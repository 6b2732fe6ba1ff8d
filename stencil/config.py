"""stencil configuration.

Centralised, typed configuration for the scaffolder.  Settings use a Pydantic
v2 model so they are validated at construction time; ``from_env`` reads
overrides from ``STENCIL_*`` environment variables.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field, field_validator


class Config(BaseModel):
    """Global scaffolder configuration.

    Instances are typically created once by the CLI entry point and then
    passed to the source resolver and the ``BlueprintGenerator``.
    """

    template_extension: str = Field(
        default="j2",
        min_length=1,
        description="Marker extension (without dot) for files whose content is rendered",
    )
    questions_file: str = Field(
        default="blueprint.toml",
        min_length=1,
        description="Per-blueprint question definition file, never copied to the output",
    )
    registry_file: str = Field(
        default="blueprints.toml",
        min_length=1,
        description="Registry mapping blueprint names to directories inside a source",
    )
    clone_timeout: int = Field(default=120, ge=10, description="git clone timeout in seconds")
    verbose: bool = Field(default=False)

    @field_validator("template_extension")
    @classmethod
    def _bare_extension(cls, value: str) -> str:
        value = value.strip()
        if not value or "." in value or "/" in value or "\\" in value:
            raise ValueError("template_extension must be a bare extension such as 'j2'")
        return value

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def template_suffix(self) -> str:
        """The marker as a filename suffix, e.g. ``".j2"``."""
        return f".{self.template_extension}"

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            STENCIL_TEMPLATE_EXTENSION, STENCIL_QUESTIONS_FILE,
            STENCIL_REGISTRY_FILE, STENCIL_CLONE_TIMEOUT, STENCIL_VERBOSE.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("STENCIL_TEMPLATE_EXTENSION"):
            kwargs["template_extension"] = os.environ["STENCIL_TEMPLATE_EXTENSION"]
        if os.environ.get("STENCIL_QUESTIONS_FILE"):
            kwargs["questions_file"] = os.environ["STENCIL_QUESTIONS_FILE"]
        if os.environ.get("STENCIL_REGISTRY_FILE"):
            kwargs["registry_file"] = os.environ["STENCIL_REGISTRY_FILE"]
        if os.environ.get("STENCIL_CLONE_TIMEOUT"):
            kwargs["clone_timeout"] = int(os.environ["STENCIL_CLONE_TIMEOUT"])
        if os.environ.get("STENCIL_VERBOSE"):
            kwargs["verbose"] = os.environ["STENCIL_VERBOSE"].strip().lower() in ("1", "true", "yes")
        return cls(**kwargs)
