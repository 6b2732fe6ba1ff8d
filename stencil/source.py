"""Blueprint source resolution.

A source reference is either a local directory or a git remote.  Remote
references are cloned into a caller-provided working directory.  Either way
the source root must contain a registry file mapping blueprint names to
their directories::

    [python]
    path = "./python"

    [rust-cli]
    path = "templates/rust-cli"

Short-hand references are expanded before cloning:

    gh:owner/repo            -> https://github.com/owner/repo.git
    gl:owner/repo            -> https://gitlab.com/owner/repo.git
    git+https://host/x.git   -> https://host/x.git
    git@host:owner/repo.git  -> used as-is
"""

from __future__ import annotations

import logging
import re
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from stencil.config import Config
from stencil.errors import (
    BlueprintNotFoundError,
    FileFormat,
    FileOperation,
    FileOperationError,
    ParseError,
    SourceError,
)
from stencil.utils import normalize_path, run_command

logger = logging.getLogger(__name__)

_GIT_REFERENCE = re.compile(
    r"""^(?:
        gh:[^/]+/[^/]+                              # gh:account/repo
      | gl:[^/]+/[^/]+                              # gl:account/repo
      | git@[A-Za-z0-9._-]+:[^/]+/[^/]+\.git        # git@host:account/repo.git
      | git\+https?://.*                            # git+http(s)://...
    )$""",
    re.VERBOSE,
)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class BlueprintInfo(BaseModel):
    """Registry entry for a single blueprint."""
    path: str = Field(..., min_length=1, description="Blueprint directory relative to the source root")


class Source(BaseModel):
    """A resolved source: its local root and its blueprint registry."""

    root: Path
    blueprints: dict[str, BlueprintInfo] = Field(default_factory=dict)

    def names(self) -> list[str]:
        """Blueprint names in registry order."""
        return list(self.blueprints)

    def blueprint_dir(self, name: str) -> Path:
        """Local directory of the blueprint called *name*.

        Raises:
            BlueprintNotFoundError: If *name* is not in the registry.
        """
        info = self.blueprints.get(name)
        if info is None:
            raise BlueprintNotFoundError(name, self.names())
        return self.root / normalize_path(info.path)


# ---------------------------------------------------------------------------
# Reference handling
# ---------------------------------------------------------------------------

def is_git_reference(reference: str) -> bool:
    """Return ``True`` if *reference* names a git remote."""
    return bool(_GIT_REFERENCE.match(reference))


def expand_git_url(reference: str) -> str:
    """Expand a short-hand git reference into a clonable URL.

    Raises:
        SourceError: If *reference* is not a recognised git reference.
    """
    if reference.startswith("gh:"):
        return f"https://github.com/{reference[3:]}.git"
    if reference.startswith("gl:"):
        return f"https://gitlab.com/{reference[3:]}.git"
    if reference.startswith("git+"):
        return reference[4:]
    if reference.startswith("git@"):
        return reference
    raise SourceError(reference, "invalid git prefix (expected gh:, gl:, git@ or git+http(s)://)")


async def clone_repository(reference: str, target: Path, timeout: int = 120) -> Path:
    """Shallow-clone *reference* into *target*.

    Raises:
        SourceError: If git fails or times out.
    """
    url = expand_git_url(reference)
    logger.debug("Cloning %s into %s", url, target)
    returncode, _, stderr = await run_command(
        ["git", "clone", "--depth", "1", url, str(target)],
        timeout=timeout,
    )
    if returncode != 0:
        raise SourceError(reference, stderr or f"git clone exited with {returncode}")
    return target


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def load_registry(path: str | Path) -> dict[str, BlueprintInfo]:
    """Parse a registry file, keeping declaration order.

    Raises:
        FileOperationError: If the file cannot be read.
        ParseError: If the file is not valid TOML or an entry is malformed.
    """
    registry_path = Path(path)
    try:
        raw = registry_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(FileOperation.READ, registry_path, exc) from exc

    try:
        data = tomllib.loads(raw)
        return {name: BlueprintInfo.model_validate(entry) for name, entry in data.items()}
    except (tomllib.TOMLDecodeError, ValidationError) as exc:
        raise ParseError(FileFormat.TOML, registry_path, exc) from exc


async def resolve_source(reference: str, workdir: str | Path, config: Config | None = None) -> Source:
    """Resolve *reference* to a local root plus its blueprint registry.

    Args:
        reference: Local directory or git reference.
        workdir: Scratch directory that receives remote clones.  The caller
            owns its lifetime.
        config: Scaffolder configuration (registry filename, clone timeout).
    """
    config = config or Config()
    if is_git_reference(reference):
        root = await clone_repository(
            reference, Path(workdir) / "source", timeout=config.clone_timeout
        )
    else:
        root = Path(reference).expanduser()

    blueprints = load_registry(root / config.registry_file)
    logger.debug("Loaded %d blueprint(s) from %s", len(blueprints), root)
    return Source(root=root, blueprints=blueprints)
