"""``gitvault init`` — create the vault directory layout."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from rich.console import Console

from gitvault.cli.commands._vault import VAULT_DIR_OPTION, load_config, reporting_errors
from gitvault.core.vault import init_vault

console = Console()


def init_cmd(vault_dir: Optional[Path] = VAULT_DIR_OPTION) -> None:
    """Create ``<vault-dir>/objects``. Safe to run twice."""
    with reporting_errors():
        config = load_config(vault_dir)
        created = init_vault(config.vault_dir)
    location = config.vault_dir.resolve()
    if created:
        console.print(f"[green]Initialized empty vault in[/green] {location}")
    else:
        console.print(f"[yellow]Vault already exists in[/yellow] {location}")
