"""``gitvault hash-object PATH`` — address (and optionally store) one file."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from gitvault.cli.commands._vault import VAULT_DIR_OPTION, open_vault, reporting_errors
from gitvault.core.snapshot_builder import SnapshotBuildError
from gitvault.models.objects import ContentObject


def hash_object_cmd(
    path: Path = typer.Argument(..., help="File whose contents to address."),
    write: bool = typer.Option(
        False, "--write", "-w", help="Store the object in the vault."
    ),
    vault_dir: Optional[Path] = VAULT_DIR_OPTION,
) -> None:
    """Print the content address of a file; with --write, also store it."""
    with reporting_errors():
        if write:
            address = open_vault(vault_dir).store_file(path)
        else:
            try:
                data = path.read_bytes()
            except OSError as exc:
                raise SnapshotBuildError(f"Cannot read {path}: {exc}", path=path) from exc
            address = ContentObject(data=data).address
    typer.echo(address)
