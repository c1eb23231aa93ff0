"""Main Typer application — imports and registers all CLI commands.

Entry point: ``gitvault`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from gitvault.cli.commands.cat_file import cat_file_cmd
from gitvault.cli.commands.commit_tree import commit_tree_cmd
from gitvault.cli.commands.hash_object import hash_object_cmd
from gitvault.cli.commands.init_cmd import init_cmd
from gitvault.cli.commands.ls_tree import ls_tree_cmd
from gitvault.cli.commands.verify_cmd import verify_cmd
from gitvault.cli.commands.write_tree import write_tree_cmd
from gitvault.config import VaultSettings

app = typer.Typer(
    name="gitvault",
    help="gitvault: content-addressed object store in git's loose-object format.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level (default: $GITVAULT_LOG_LEVEL or WARNING)."
    ),
) -> None:
    """Configure logging before any subcommand runs."""
    level = (log_level or VaultSettings().log_level).upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


# Register subcommands
app.command(name="init", help="Create an empty vault.")(init_cmd)
app.command(name="hash-object", help="Compute a file's address, optionally storing it.")(hash_object_cmd)
app.command(name="write-tree", help="Store a directory snapshot.")(write_tree_cmd)
app.command(name="commit-tree", help="Create a revision for a snapshot.")(commit_tree_cmd)
app.command(name="cat-file", help="Print a stored object.")(cat_file_cmd)
app.command(name="ls-tree", help="List a snapshot's entries.")(ls_tree_cmd)
app.command(name="verify", help="Check stored objects for corruption.")(verify_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
