"""``gitvault write-tree [PATH]`` — snapshot a directory into the vault.

Every file and subdirectory under PATH is stored; the vault directory
itself is never included.  Prints the snapshot address.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from gitvault.cli.commands._vault import (
    VAULT_DIR_OPTION,
    err_console,
    open_vault,
    reporting_errors,
)
from gitvault.models.config import WalkPolicy


def write_tree_cmd(
    path: Path = typer.Argument(Path("."), help="Directory to snapshot."),
    strict: Optional[bool] = typer.Option(
        None,
        "--strict/--best-effort",
        help="Abort on the first unreadable entry, or skip it and report. "
        "Defaults to $GITVAULT_WALK_POLICY.",
    ),
    vault_dir: Optional[Path] = VAULT_DIR_OPTION,
) -> None:
    """Build and store the snapshot of a directory tree."""
    policy = None
    if strict is not None:
        policy = WalkPolicy.STRICT if strict else WalkPolicy.BEST_EFFORT

    with reporting_errors():
        vault = open_vault(vault_dir, policy)
        address = vault.store_snapshot(path)

    report = vault.last_report
    if report is not None:
        for skipped in report.skipped:
            err_console.print(
                f"[yellow]skipped[/yellow] {escape(str(skipped.path))}: {escape(skipped.reason)}"
            )
    typer.echo(address)
