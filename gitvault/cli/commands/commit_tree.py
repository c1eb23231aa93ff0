"""``gitvault commit-tree SNAPSHOT -m MESSAGE`` — record a revision."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from gitvault.cli.commands._vault import VAULT_DIR_OPTION, load_config, reporting_errors
from gitvault.core.object_store import ObjectStore
from gitvault.core.revision_assembler import RevisionAssembler
from gitvault.models.objects import Author


def commit_tree_cmd(
    snapshot: str = typer.Argument(..., help="Address of the snapshot to commit."),
    message: str = typer.Option(..., "--message", "-m", help="Commit message."),
    parent: Optional[str] = typer.Option(
        None, "--parent", "-p", help="Address of the parent revision."
    ),
    author_name: Optional[str] = typer.Option(None, help="Override the author name."),
    author_email: Optional[str] = typer.Option(None, help="Override the author email."),
    check_refs: bool = typer.Option(
        False,
        "--check-refs",
        help="Refuse to commit unless the snapshot and parent are stored.",
    ),
    vault_dir: Optional[Path] = VAULT_DIR_OPTION,
) -> None:
    """Create a revision pointing at SNAPSHOT and print its address."""
    with reporting_errors():
        config = load_config(vault_dir)
        author = None
        if author_name or author_email:
            author = Author(
                name=author_name or config.default_author.name,
                email=author_email or config.default_author.email,
            )
        assembler = RevisionAssembler(
            ObjectStore(config), config, require_references=check_refs
        )
        revision = assembler.commit(snapshot, message, parent_address=parent, author=author)
    typer.echo(revision.address)
