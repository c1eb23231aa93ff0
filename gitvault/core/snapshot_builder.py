"""Snapshot builder — turns a filesystem subtree into stored objects.

Files become ``ContentObject`` leaves, directories become ``SnapshotObject``
nodes whose entries are sorted byte-wise by name.  Objects are written
depth-first as they are produced, so every address a snapshot references
is already in the store when the snapshot itself is written.

The walk policy decides what happens when one child cannot be built:

- ``WalkPolicy.STRICT`` raises ``SnapshotBuildError`` for the first failure.
- ``WalkPolicy.BEST_EFFORT`` leaves the child out, logs a warning and
  records it in ``BuildReport.skipped``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from gitvault.core.fs_reader import FilesystemReader, LocalFilesystem
from gitvault.core.object_store import ObjectStore
from gitvault.models.config import VaultConfig, WalkPolicy
from gitvault.models.objects import (
    DIRECTORY_MODE,
    FILE_MODE,
    ContentObject,
    ObjectKind,
    SnapshotEntry,
    SnapshotObject,
    VaultObject,
)
from gitvault.models.reports import BuildReport, BuildResult, SkippedEntry, WriteStatus

logger = logging.getLogger(__name__)


class SnapshotBuildError(RuntimeError):
    """Raised when a path cannot be turned into an object."""

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(message)
        self.path = path


class _BuildState:
    """Mutable bookkeeping for a single ``build`` call."""

    def __init__(self) -> None:
        self.written = 0
        self.existing = 0
        self.skipped: list[SkippedEntry] = []
        self.active_dirs: set[Path] = set()


class SnapshotBuilder:
    """Recursively builds and persists the object graph for a path.

    Parameters
    ----------
    store:
        Where produced objects are written.
    config:
        Supplies the default walk policy and the excluded entry names.
    fs:
        Read-only filesystem collaborator. Defaults to ``LocalFilesystem``.
    """

    def __init__(
        self,
        store: ObjectStore,
        config: VaultConfig,
        fs: FilesystemReader | None = None,
    ) -> None:
        self._store = store
        self._config = config
        self._fs = fs or LocalFilesystem()

    def build(
        self,
        path: Path | str,
        *,
        policy: WalkPolicy | None = None,
        write: bool = True,
    ) -> BuildResult:
        """Build the object for *path* and, unless ``write=False``, store it.

        With ``write=False`` nothing touches the store; the returned root
        keeps in-memory child references so ``ObjectStore.write_graph`` can
        persist it later.
        """
        root = Path(path)
        policy = policy or self._config.walk_policy
        state = _BuildState()

        if not (self._fs.is_file(root) or self._fs.is_dir(root)):
            raise SnapshotBuildError(
                f"Cannot snapshot {root}: not a regular file or directory", path=root
            )

        obj = self._build_path(root, state, policy, write)
        report = BuildReport(
            root=root,
            root_address=obj.address,
            objects_written=state.written,
            objects_existing=state.existing,
            skipped=tuple(state.skipped),
        )
        logger.info(
            "Built %s %s from %s (%d written, %d existing, %d skipped)",
            obj.kind.value,
            obj.address,
            root,
            report.objects_written,
            report.objects_existing,
            len(report.skipped),
        )
        return BuildResult(root=obj, report=report)

    # ------------------------------------------------------------------
    # Recursion
    # ------------------------------------------------------------------

    def _build_path(
        self, path: Path, state: _BuildState, policy: WalkPolicy, write: bool
    ) -> VaultObject:
        if self._fs.is_file(path):
            obj: VaultObject = self._build_content(path)
        elif self._fs.is_dir(path):
            obj = self._build_snapshot(path, state, policy, write)
        else:
            raise SnapshotBuildError(
                f"{path} is not a regular file or directory", path=path
            )

        if write:
            result = self._store.write(obj)
            if result.status is WriteStatus.STORED:
                state.written += 1
            else:
                state.existing += 1
        return obj

    def _build_content(self, path: Path) -> ContentObject:
        try:
            data = self._fs.read_file(path)
        except OSError as exc:
            raise SnapshotBuildError(f"Cannot read {path}: {exc}", path=path) from exc
        return ContentObject(data=data)

    def _build_snapshot(
        self, path: Path, state: _BuildState, policy: WalkPolicy, write: bool
    ) -> SnapshotObject:
        key = path.resolve()
        if key in state.active_dirs:
            raise SnapshotBuildError(
                f"{path} loops back to a directory already being built", path=path
            )

        try:
            children = self._fs.list_directory(path)
        except OSError as exc:
            raise SnapshotBuildError(f"Cannot list {path}: {exc}", path=path) from exc

        excluded = self._config.excluded_names
        entries: list[SnapshotEntry] = []
        state.active_dirs.add(key)
        try:
            for child_path in children:
                if child_path.name in excluded:
                    continue
                try:
                    entries.append(self._build_entry(child_path, state, policy, write))
                except SnapshotBuildError as exc:
                    if policy is WalkPolicy.STRICT:
                        raise
                    logger.warning("Skipping %s: %s", exc.path, exc)
                    state.skipped.append(SkippedEntry(path=exc.path, reason=str(exc)))
        finally:
            state.active_dirs.discard(key)

        return SnapshotObject.from_entries(entries)

    def _build_entry(
        self, path: Path, state: _BuildState, policy: WalkPolicy, write: bool
    ) -> SnapshotEntry:
        name = path.name
        try:
            name.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise SnapshotBuildError(
                f"Entry name {name!r} is not valid UTF-8", path=path
            ) from exc

        child = self._build_path(path, state, policy, write)
        mode = DIRECTORY_MODE if child.kind is ObjectKind.SNAPSHOT else FILE_MODE
        try:
            return SnapshotEntry.for_child(name, mode, child)
        except ValidationError as exc:
            raise SnapshotBuildError(
                f"Entry name {name!r} cannot be stored: {exc}", path=path
            ) from exc
