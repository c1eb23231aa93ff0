"""``gitvault verify [ADDRESS...]`` — check stored objects for corruption.

Each object is decompressed, decoded and re-hashed; any object whose bytes
no longer match its address is reported.  With no arguments every object
in the vault is checked.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from gitvault.cli.commands._vault import VAULT_DIR_OPTION, open_vault, reporting_errors

console = Console()


def verify_cmd(
    addresses: Optional[list[str]] = typer.Argument(
        None, help="Addresses to verify (default: all stored objects)."
    ),
    vault_dir: Optional[Path] = VAULT_DIR_OPTION,
) -> None:
    """Verify object integrity; exits 1 if any object fails."""
    with reporting_errors():
        store = open_vault(vault_dir).store
        targets = list(addresses) if addresses else list(store.iter_addresses())
        results = [(address, store.verify(address)) for address in targets]

    if not results:
        console.print("[dim]No objects to verify.[/dim]")
        return

    table = Table(title="Object Verification")
    table.add_column("Address", style="cyan")
    table.add_column("Status", justify="center")
    for address, ok in results:
        table.add_row(address, "[green]OK[/green]" if ok else "[red]CORRUPT[/red]")
    console.print(table)

    failed = sum(1 for _, ok in results if not ok)
    if failed:
        console.print(f"[bold red]{failed} of {len(results)} objects failed verification.[/bold red]")
        raise typer.Exit(code=1)
    console.print(f"[bold green]All {len(results)} objects verified.[/bold green]")
