"""gitvault CLI — Typer-based command-line interface.

Provides the ``gitvault`` command with subcommands for initializing a
vault, storing files and directory snapshots, committing snapshots and
inspecting stored objects.

All output uses Rich for formatted terminal display.
"""
