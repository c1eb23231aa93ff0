"""Environment-driven settings.

Centralized config using pydantic-settings for environment variable
support. Reads from a .env file and GITVAULT_* environment variables and
produces the explicit ``VaultConfig`` that the store, builder and
assembler receive.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from gitvault.models.config import DEFAULT_VAULT_DIR, VaultConfig, WalkPolicy
from gitvault.models.objects import Author


class VaultSettings(BaseSettings):
    """Vault settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export GITVAULT_VAULT_DIR=/data/vault
        export GITVAULT_WALK_POLICY=strict
        export GITVAULT_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="GITVAULT_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "WARNING"

    # Storage
    vault_dir: Path = DEFAULT_VAULT_DIR
    compression_level: int = -1
    fsync_writes: bool = False

    # Snapshot builds
    walk_policy: WalkPolicy = WalkPolicy.BEST_EFFORT
    ignored_names: tuple[str, ...] = ()

    # Default commit identity
    author_name: str = "gitvault"
    author_email: str = "gitvault@localhost"

    def to_vault_config(self, **overrides: object) -> VaultConfig:
        """Build the frozen ``VaultConfig``; keyword overrides win."""
        values: dict[str, object] = {
            "vault_dir": self.vault_dir,
            "compression_level": self.compression_level,
            "fsync_writes": self.fsync_writes,
            "walk_policy": self.walk_policy,
            "ignored_names": self.ignored_names,
            "default_author": Author(name=self.author_name, email=self.author_email),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return VaultConfig(**values)
