"""Commit assembler — composes and stores revision objects."""

from __future__ import annotations

import logging

from gitvault.core.object_store import ObjectNotFoundError, ObjectStore
from gitvault.models.config import VaultConfig
from gitvault.models.objects import Author, ObjectKind, RevisionObject

logger = logging.getLogger(__name__)


class MissingReferenceError(LookupError):
    """A revision would point at an object that is absent or of the wrong kind."""


class RevisionAssembler:
    """Builds ``RevisionObject`` records on top of stored snapshots.

    By default the snapshot and parent addresses are trusted as given;
    pass ``require_references=True`` to check them against the store.
    """

    def __init__(
        self,
        store: ObjectStore,
        config: VaultConfig,
        *,
        require_references: bool = False,
    ) -> None:
        self._store = store
        self._config = config
        self._require_references = require_references

    def assemble(
        self,
        snapshot_address: str,
        message: str,
        parent_address: str | None = None,
        author: Author | None = None,
    ) -> RevisionObject:
        """Construct the revision in memory without writing it."""
        if self._require_references:
            self._check_reference(snapshot_address, ObjectKind.SNAPSHOT)
            if parent_address is not None:
                self._check_reference(parent_address, ObjectKind.REVISION)
        return RevisionObject(
            snapshot_address=snapshot_address,
            parent_address=parent_address,
            author=author or self._config.default_author,
            message=message,
        )

    def commit(
        self,
        snapshot_address: str,
        message: str,
        parent_address: str | None = None,
        author: Author | None = None,
    ) -> RevisionObject:
        """Construct the revision and persist it.

        Re-committing identical fields yields the same address and is
        reported by the store as already existing, not as an error.
        """
        revision = self.assemble(snapshot_address, message, parent_address, author)
        result = self._store.write(revision)
        logger.info(
            "Revision %s on snapshot %s (%s)",
            revision.address,
            snapshot_address,
            result.status.value,
        )
        return revision

    def _check_reference(self, address: str, expected: ObjectKind) -> None:
        try:
            obj = self._store.read(address)
        except ObjectNotFoundError as exc:
            raise MissingReferenceError(
                f"{expected.value} {address} is not in the store"
            ) from exc
        if obj.kind is not expected:
            raise MissingReferenceError(
                f"{address} is a {obj.kind.value}, expected a {expected.value}"
            )
