"""Read-only filesystem access used by the snapshot builder.

Defines the ``FilesystemReader`` Protocol and the default ``LocalFilesystem``
implementation backed by ``pathlib``.  Tests and embedders can substitute
any object with the same methods.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class FilesystemReader(Protocol):
    """Protocol for the read-only filesystem collaborator.

    Both read operations raise ``OSError`` (``FileNotFoundError``,
    ``PermissionError``, ...) when the path is inaccessible.
    """

    def read_file(self, path: Path) -> bytes:
        """Return the full contents of a regular file."""
        ...

    def list_directory(self, path: Path) -> list[Path]:
        """Return the immediate children of a directory as full paths."""
        ...

    def is_file(self, path: Path) -> bool:
        ...

    def is_dir(self, path: Path) -> bool:
        ...


class LocalFilesystem:
    """``FilesystemReader`` over the local disk. Follows symlinks."""

    def read_file(self, path: Path) -> bytes:
        return Path(path).read_bytes()

    def list_directory(self, path: Path) -> list[Path]:
        return sorted(Path(path).iterdir())

    def is_file(self, path: Path) -> bool:
        return Path(path).is_file()

    def is_dir(self, path: Path) -> bool:
        return Path(path).is_dir()
