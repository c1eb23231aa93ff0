"""ObjectVault — the single entry point callers use.

Wires the object store, snapshot builder and revision assembler around one
``VaultConfig`` and exposes address-in / address-out operations.
"""

from __future__ import annotations

import logging
from pathlib import Path

from gitvault.core.codec import encode_payload
from gitvault.core.fs_reader import FilesystemReader, LocalFilesystem
from gitvault.core.object_store import ObjectStore, StoreIOError
from gitvault.core.revision_assembler import RevisionAssembler
from gitvault.core.snapshot_builder import SnapshotBuildError, SnapshotBuilder
from gitvault.models.config import VaultConfig, WalkPolicy
from gitvault.models.objects import (
    Author,
    ContentObject,
    RevisionObject,
    SnapshotObject,
    VaultObject,
)
from gitvault.models.reports import BuildReport

logger = logging.getLogger(__name__)


def init_vault(vault_dir: Path | str) -> bool:
    """Create the vault directory layout.

    Returns True if the objects directory was created, False if it already
    existed.  Raises ``StoreIOError`` when the directory cannot be created.
    """
    objects_dir = VaultConfig(vault_dir=Path(vault_dir)).objects_dir
    if objects_dir.is_dir():
        return False
    try:
        objects_dir.mkdir(parents=True)
    except OSError as exc:
        raise StoreIOError(
            f"Cannot create vault objects directory {objects_dir}: {exc}", path=objects_dir
        ) from exc
    logger.info("Initialized vault in %s", Path(vault_dir).resolve())
    return True


class ObjectVault:
    """Content-addressed object vault.

    Parameters
    ----------
    config:
        Vault configuration. Defaults to ``VaultConfig()``.
    fs:
        Read-only filesystem collaborator for snapshot builds.
    """

    def __init__(
        self,
        config: VaultConfig | None = None,
        fs: FilesystemReader | None = None,
    ) -> None:
        self.config = config or VaultConfig()
        self._fs = fs or LocalFilesystem()
        self.store = ObjectStore(self.config)
        self.builder = SnapshotBuilder(self.store, self.config, self._fs)
        self.assembler = RevisionAssembler(self.store, self.config)
        self.last_report: BuildReport | None = None

    # ------------------------------------------------------------------
    # Store
    # ------------------------------------------------------------------

    def store_content(self, data: bytes) -> str:
        """Store raw bytes as a content object and return its address."""
        return self.store.write(ContentObject(data=data)).address

    def store_file(self, path: Path | str) -> str:
        """Store one file's bytes as a content object."""
        path = Path(path)
        try:
            data = self._fs.read_file(path)
        except OSError as exc:
            raise SnapshotBuildError(f"Cannot read {path}: {exc}", path=path) from exc
        return self.store_content(data)

    def store_snapshot(
        self, root_path: Path | str, *, policy: WalkPolicy | None = None
    ) -> str:
        """Build and persist the whole subtree under *root_path*.

        The build report is kept on ``last_report``.
        """
        result = self.builder.build(root_path, policy=policy)
        self.last_report = result.report
        return result.address

    def store_revision(
        self,
        snapshot_address: str,
        parent_address: str | None = None,
        message: str = "",
        author: Author | None = None,
    ) -> str:
        """Commit a snapshot and return the revision's address."""
        return self.assembler.commit(
            snapshot_address, message, parent_address=parent_address, author=author
        ).address

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    def load(self, address: str) -> VaultObject:
        """Return the typed object stored under *address*."""
        return self.store.read(address)

    def render(self, address: str) -> str:
        """Return the textual form of a stored object for display."""
        return render_object(self.load(address))


def render_object(obj: VaultObject) -> str:
    """Human-readable form of an object.

    Content renders as its UTF-8 text, snapshots as one
    ``<mode> <kind> <address>\\t<name>`` line per entry, revisions as their
    payload text.
    """
    if isinstance(obj, ContentObject):
        return obj.text
    if isinstance(obj, SnapshotObject):
        return "\n".join(
            f"{e.mode.zfill(6)} {e.child_kind.value} {e.child_address}\t{e.name}"
            for e in obj.entries
        )
    if isinstance(obj, RevisionObject):
        return encode_payload(obj).decode("utf-8")
    raise TypeError(f"not a vault object: {obj!r}")
