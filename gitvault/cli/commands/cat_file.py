"""``gitvault cat-file ADDRESS`` — print a stored object."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from gitvault.cli.commands._vault import VAULT_DIR_OPTION, open_vault, reporting_errors
from gitvault.core.codec import encode_payload
from gitvault.core.vault import render_object


def cat_file_cmd(
    address: str = typer.Argument(..., help="Object address (40 hex characters)."),
    show_type: bool = typer.Option(False, "--type", "-t", help="Print the object kind."),
    show_size: bool = typer.Option(False, "--size", "-s", help="Print the payload size."),
    vault_dir: Optional[Path] = VAULT_DIR_OPTION,
) -> None:
    """Pretty-print the object stored under ADDRESS."""
    with reporting_errors():
        obj = open_vault(vault_dir).load(address)
        if show_type:
            typer.echo(obj.kind.value)
        elif show_size:
            typer.echo(len(encode_payload(obj)))
        else:
            typer.echo(render_object(obj), nl=False)
