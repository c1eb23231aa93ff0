"""Content-addressed, immutable loose-object store.

Storage layout: {vault_dir}/objects/{address[0:2]}/{address[2:40]}
Each file holds the zlib-compressed canonical encoding of one object.
There is no delete method: objects are immutable once stored.
"""

from __future__ import annotations

import errno
import logging
import os
import tempfile
import zlib
from collections.abc import Iterator
from pathlib import Path

from gitvault.core.codec import DecodeError, decode_object, encode_object
from gitvault.core.hasher import is_address, sha1_hex
from gitvault.models.config import VaultConfig
from gitvault.models.objects import ObjectKind, VaultObject
from gitvault.models.reports import WriteResult, WriteStatus

logger = logging.getLogger(__name__)

# Errors from os.link that mean "hard links are not available here".
_NO_LINK_ERRNOS = frozenset(
    {errno.EPERM, errno.EXDEV, errno.EMLINK, errno.ENOTSUP, errno.EOPNOTSUPP}
)


class StoreError(RuntimeError):
    """Base class for object store failures.

    Carries the address and on-disk path involved, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        address: str | None = None,
        path: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.address = address
        self.path = path


class InvalidAddressError(StoreError):
    """The address is not exactly 40 lowercase hex characters."""


class ObjectNotFoundError(StoreError):
    """No object file exists for a well-formed address."""


class CorruptObjectError(StoreError):
    """Stored bytes cannot be decompressed, decoded, or do not hash to their address."""


class ObjectExistsError(StoreError):
    """An object is already stored under the address (raised only when asked to)."""


class StoreIOError(StoreError):
    """The filesystem failed while opening, creating or reading an object."""


class ObjectStore:
    """SHA-1 keyed, zlib-compressed, immutable object store.

    Writing the same object twice is reported as ``WriteStatus.EXISTING``
    rather than an error; the address proves the bytes are already stored.

    Parameters
    ----------
    config:
        The vault configuration; ``config.objects_dir`` is the store root.
    """

    def __init__(self, config: VaultConfig) -> None:
        self._config = config
        self._root = Path(config.objects_dir)

    @property
    def root(self) -> Path:
        return self._root

    # ------------------------------------------------------------------
    # Addressing
    # ------------------------------------------------------------------

    @staticmethod
    def validate_address(address: str) -> str:
        """Return *address* unchanged or raise ``InvalidAddressError``."""
        if not is_address(address):
            raise InvalidAddressError(
                f"Invalid object address {address!r}: expected 40 lowercase hex "
                f"characters, got {len(address) if isinstance(address, str) else 0}",
                address=address if isinstance(address, str) else None,
            )
        return address

    def path_for(self, address: str) -> Path:
        """Compute the storage path for an address.

        Layout: {root}/{address[0:2]}/{address[2:]}
        """
        self.validate_address(address)
        return self._root / address[:2] / address[2:]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def write(self, obj: VaultObject, *, exist_ok: bool = True) -> WriteResult:
        """Persist an object under its address.

        Returns a ``WriteResult`` whose status is ``STORED`` for a new file
        and ``EXISTING`` when the address was already present.  With
        ``exist_ok=False`` an existing object raises ``ObjectExistsError``.
        """
        data = encode_object(obj)
        address = sha1_hex(data)
        path = self.path_for(address)

        if path.exists():
            created = False
        else:
            try:
                created = self._write_new(path, data)
            except OSError as exc:
                raise StoreIOError(
                    f"Failed to write object {address} to {path}: {exc}",
                    address=address,
                    path=path,
                ) from exc

        if not created and not exist_ok:
            raise ObjectExistsError(
                f"Object already exists with address {address}",
                address=address,
                path=path,
            )

        status = WriteStatus.STORED if created else WriteStatus.EXISTING
        logger.debug("Wrote %s %s (%s)", obj.kind.value, address, status.value)
        return WriteResult(address=address, kind=obj.kind, status=status, path=path)

    def write_graph(self, obj: VaultObject) -> list[WriteResult]:
        """Write *obj* and every in-memory child reachable from it.

        Children are reached through ``SnapshotEntry.child`` and written
        depth-first before their parent, so a stored snapshot never
        references a missing object.  Entries without an in-memory child
        are assumed to be stored already.
        """
        results: list[WriteResult] = []
        if obj.kind is ObjectKind.SNAPSHOT:
            for entry in obj.entries:
                if entry.child is not None:
                    results.extend(self.write_graph(entry.child))
        results.append(self.write(obj))
        return results

    def _write_new(self, path: Path, data: bytes) -> bool:
        """Compress *data* into a temp file and publish it at *path*.

        Returns False if another writer published the same address first.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        compressed = zlib.compress(data, self._config.compression_level)

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-")
        tmp = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(compressed)
                if self._config.fsync_writes:
                    fh.flush()
                    os.fsync(fh.fileno())
            tmp.chmod(0o444)
            return self._publish(tmp, path)
        finally:
            tmp.unlink(missing_ok=True)

    @staticmethod
    def _publish(tmp: Path, path: Path) -> bool:
        """Atomically create *path* from *tmp* if it does not exist yet."""
        try:
            os.link(tmp, path)
            return True
        except FileExistsError:
            return False
        except OSError as exc:
            if exc.errno not in _NO_LINK_ERRNOS:
                raise
        # No hard links on this filesystem: the rename is still atomic, and a
        # racing writer can only replace the file with identical bytes.
        os.replace(tmp, path)
        return True

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def read(self, address: str) -> VaultObject:
        """Load and decode the object stored under *address*."""
        path = self.path_for(address)
        raw = self._inflate(address, path)
        try:
            obj = decode_object(raw)
        except DecodeError as exc:
            raise CorruptObjectError(
                f"Object {address} at {path} cannot be decoded: {exc}",
                address=address,
                path=path,
            ) from exc
        self._check_digest(address, path, raw)
        logger.debug("Read %s %s", obj.kind.value, address)
        return obj

    def read_raw(self, address: str) -> bytes:
        """Return the decompressed canonical bytes (header + payload)."""
        path = self.path_for(address)
        raw = self._inflate(address, path)
        self._check_digest(address, path, raw)
        return raw

    def _inflate(self, address: str, path: Path) -> bytes:
        try:
            compressed = path.read_bytes()
        except FileNotFoundError as exc:
            raise ObjectNotFoundError(
                f"Object not found: {address}", address=address, path=path
            ) from exc
        except OSError as exc:
            raise StoreIOError(
                f"Failed to read object {address} at {path}: {exc}",
                address=address,
                path=path,
            ) from exc
        try:
            return zlib.decompress(compressed)
        except zlib.error as exc:
            raise CorruptObjectError(
                f"Object {address} at {path} is not valid zlib data: {exc}",
                address=address,
                path=path,
            ) from exc

    @staticmethod
    def _check_digest(address: str, path: Path, raw: bytes) -> None:
        found = sha1_hex(raw)
        if found != address:
            raise CorruptObjectError(
                f"Object at {path} hashes to {found}, expected {address}",
                address=address,
                path=path,
            )

    # ------------------------------------------------------------------
    # Check and verify
    # ------------------------------------------------------------------

    def exists(self, address: str) -> bool:
        """Check if an object is stored under *address*."""
        if not is_address(address):
            return False
        return self.path_for(address).is_file()

    def verify(self, address: str) -> bool:
        """Re-read the object and confirm it decodes and hashes to *address*."""
        try:
            self.read(address)
        except (ObjectNotFoundError, CorruptObjectError):
            return False
        return True

    def iter_addresses(self) -> Iterator[str]:
        """Yield every stored address in sorted order."""
        if not self._root.is_dir():
            return
        for fanout in sorted(self._root.iterdir()):
            if not fanout.is_dir():
                continue
            for entry in sorted(fanout.iterdir()):
                address = fanout.name + entry.name
                if is_address(address) and entry.is_file():
                    yield address
