"""Vault configuration model threaded through store, builder and assembler."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from gitvault.models.objects import Author

DEFAULT_VAULT_DIR = Path(".gitvault")
OBJECTS_DIR_NAME = "objects"


class WalkPolicy(str, Enum):
    """What the snapshot builder does when one child cannot be built."""

    STRICT = "strict"  # abort the whole build
    BEST_EFFORT = "best_effort"  # omit the child, record it in the report


class VaultConfig(BaseModel):
    """Explicit configuration for one vault.

    Built from ``VaultSettings`` (environment) by the CLI, or directly in
    code and tests.
    """

    model_config = ConfigDict(frozen=True)

    vault_dir: Path = DEFAULT_VAULT_DIR
    compression_level: int = Field(default=-1, ge=-1, le=9)  # -1: zlib default
    fsync_writes: bool = False
    walk_policy: WalkPolicy = WalkPolicy.BEST_EFFORT
    ignored_names: tuple[str, ...] = ()
    default_author: Author = Author(name="gitvault", email="gitvault@localhost")

    @property
    def objects_dir(self) -> Path:
        return self.vault_dir / OBJECTS_DIR_NAME

    @property
    def excluded_names(self) -> frozenset[str]:
        """Directory entries the snapshot builder never descends into."""
        return frozenset((self.vault_dir.name, *self.ignored_names))
