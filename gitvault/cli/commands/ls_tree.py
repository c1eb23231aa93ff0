"""``gitvault ls-tree ADDRESS`` — list a snapshot's entries."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gitvault.cli.commands._vault import (
    VAULT_DIR_OPTION,
    err_console,
    open_vault,
    reporting_errors,
)
from gitvault.models.objects import RevisionObject, SnapshotObject

console = Console()


def ls_tree_cmd(
    address: str = typer.Argument(..., help="Snapshot or revision address."),
    vault_dir: Optional[Path] = VAULT_DIR_OPTION,
) -> None:
    """List the entries of a snapshot (a revision lists its snapshot)."""
    with reporting_errors():
        vault = open_vault(vault_dir)
        obj = vault.load(address)
        if isinstance(obj, RevisionObject):
            obj = vault.load(obj.snapshot_address)

    if not isinstance(obj, SnapshotObject):
        err_console.print(
            f"[bold red]error:[/bold red] {escape(address)} is a {obj.kind.value}, not a tree"
        )
        raise typer.Exit(code=1)

    if not obj.entries:
        console.print("[dim]Empty snapshot.[/dim]")
        return

    table = Table(title=f"Snapshot {obj.address}")
    table.add_column("Mode", style="cyan")
    table.add_column("Kind")
    table.add_column("Address", style="green")
    table.add_column("Name")
    for entry in obj.entries:
        table.add_row(
            entry.mode.zfill(6), entry.child_kind.value, entry.child_address, escape(entry.name)
        )
    console.print(table)
