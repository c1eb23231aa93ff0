"""Shared helpers for CLI commands: vault construction and error reporting."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from gitvault.config import VaultSettings
from gitvault.core.codec import DecodeError
from gitvault.core.object_store import StoreError
from gitvault.core.revision_assembler import MissingReferenceError
from gitvault.core.snapshot_builder import SnapshotBuildError
from gitvault.core.vault import ObjectVault
from gitvault.models.config import VaultConfig, WalkPolicy

err_console = Console(stderr=True, soft_wrap=True)

VAULT_DIR_OPTION = typer.Option(
    None,
    "--vault-dir",
    "-d",
    help="Vault directory (default: $GITVAULT_VAULT_DIR or .gitvault).",
)


def load_config(
    vault_dir: Path | None = None,
    walk_policy: WalkPolicy | None = None,
) -> VaultConfig:
    """Resolve settings from the environment, then apply CLI overrides."""
    return VaultSettings().to_vault_config(vault_dir=vault_dir, walk_policy=walk_policy)


def open_vault(vault_dir: Path | None = None, walk_policy: WalkPolicy | None = None) -> ObjectVault:
    return ObjectVault(load_config(vault_dir, walk_policy))


@contextmanager
def reporting_errors() -> Iterator[None]:
    """Turn domain errors into a red message and exit code 1."""
    try:
        yield
    except (
        StoreError,
        DecodeError,
        SnapshotBuildError,
        MissingReferenceError,
        ValidationError,
    ) as exc:
        err_console.print(f"[bold red]error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
