"""Adversarial tests — tampered and malformed object files.

These tests verify that the object store detects:
1. Files that are not zlib data
2. Decompressed bytes with no header NUL
3. Valid objects copied under the wrong address
4. Truncated snapshot payloads and bogus commit fields
and that every such failure surfaces as CorruptObjectError, never a crash.
"""

from __future__ import annotations

import zlib
from pathlib import Path

import pytest

from gitvault.core.codec import DecodeError
from gitvault.core.object_store import CorruptObjectError, ObjectStore
from gitvault.models.objects import ContentObject
from tests.known_values import EMPTY_TREE_ADDRESS, HELLO_ADDRESS


def _plant(store: ObjectStore, address: str, file_bytes: bytes) -> Path:
    """Write arbitrary bytes where *address* would be stored."""
    path = store.path_for(address)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        path.chmod(0o644)
    path.write_bytes(file_bytes)
    return path


class TestCorruptFiles:
    def test_not_zlib(self, object_store: ObjectStore):
        _plant(object_store, HELLO_ADDRESS, b"definitely not deflate")
        with pytest.raises(CorruptObjectError, match="not valid zlib"):
            object_store.read(HELLO_ADDRESS)

    def test_truncated_zlib_stream(self, object_store: ObjectStore):
        full = zlib.compress(b"blob 6\0hello\n")
        _plant(object_store, HELLO_ADDRESS, full[: len(full) // 2])
        with pytest.raises(CorruptObjectError):
            object_store.read(HELLO_ADDRESS)

    def test_missing_nul_is_corrupt(self, object_store: ObjectStore):
        _plant(object_store, HELLO_ADDRESS, zlib.compress(b"blob 6 hello\n"))
        with pytest.raises(CorruptObjectError) as info:
            object_store.read(HELLO_ADDRESS)
        assert isinstance(info.value.__cause__, DecodeError)
        assert info.value.address == HELLO_ADDRESS

    def test_unknown_kind(self, object_store: ObjectStore):
        _plant(object_store, HELLO_ADDRESS, zlib.compress(b"tag 1\0x"))
        with pytest.raises(CorruptObjectError, match="unknown object kind"):
            object_store.read(HELLO_ADDRESS)

    def test_truncated_snapshot_entry(self, object_store: ObjectStore):
        payload = b"100644 hello.txt\0" + bytes.fromhex(HELLO_ADDRESS)[:10]
        _plant(
            object_store,
            EMPTY_TREE_ADDRESS,
            zlib.compress(f"tree {len(payload)}".encode() + b"\0" + payload),
        )
        with pytest.raises(CorruptObjectError, match="hash bytes"):
            object_store.read(EMPTY_TREE_ADDRESS)

    def test_unknown_commit_field(self, object_store: ObjectStore):
        payload = f"tree {EMPTY_TREE_ADDRESS}\nsignature xyz\n\nm\n".encode()
        _plant(
            object_store,
            HELLO_ADDRESS,
            zlib.compress(f"commit {len(payload)}".encode() + b"\0" + payload),
        )
        with pytest.raises(CorruptObjectError, match="unknown commit field"):
            object_store.read(HELLO_ADDRESS)


class TestAddressMismatch:
    def test_valid_object_under_wrong_address(self, object_store: ObjectStore):
        """A well-formed object copied to another address must not be trusted."""
        _plant(object_store, EMPTY_TREE_ADDRESS, zlib.compress(b"blob 6\0hello\n"))
        with pytest.raises(CorruptObjectError, match=f"hashes to {HELLO_ADDRESS}"):
            object_store.read(EMPTY_TREE_ADDRESS)
        with pytest.raises(CorruptObjectError):
            object_store.read_raw(EMPTY_TREE_ADDRESS)
        assert object_store.verify(EMPTY_TREE_ADDRESS) is False

    def test_swapped_content_detected(self, object_store: ObjectStore):
        result = object_store.write(ContentObject(data=b"hello\n"))
        _plant(object_store, result.address, zlib.compress(b"blob 6\0HELLO\n"))
        assert object_store.verify(result.address) is False

    def test_existing_tampered_file_is_not_rewritten(self, object_store: ObjectStore):
        """Writes trust existing files; verification is a separate step."""
        path = _plant(object_store, HELLO_ADDRESS, b"garbage")
        object_store.write(ContentObject(data=b"hello\n"))
        assert path.read_bytes() == b"garbage"
        assert object_store.verify(HELLO_ADDRESS) is False
