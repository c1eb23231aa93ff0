"""Address helpers for content addressing.

An address is the lowercase SHA-1 hex digest of an object's canonical
encoding (header + payload).  Every object kind goes through the same
digest function so addresses stay bit-exact with git's loose objects.
"""

from __future__ import annotations

import hashlib
import re

ADDRESS_LENGTH = 40
RAW_ADDRESS_LENGTH = 20

_ADDRESS_RE = re.compile(r"[0-9a-f]{40}")


def sha1_hex(data: bytes) -> str:
    """Return the SHA-1 hex digest of raw bytes."""
    return hashlib.sha1(data).hexdigest()


def frame_header(kind: str, payload_length: int) -> bytes:
    """Build the ``<kind> <length>\\0`` header that precedes every payload."""
    return f"{kind} {payload_length}".encode("ascii") + b"\0"


def is_address(value: str) -> bool:
    """Whether *value* is exactly 40 lowercase hex characters."""
    return isinstance(value, str) and _ADDRESS_RE.fullmatch(value) is not None


def address_to_raw(address: str) -> bytes:
    """Decode a hex address to the 20 raw bytes stored in snapshot entries."""
    return bytes.fromhex(address)


def raw_to_address(raw: bytes) -> str:
    """Render 20 raw digest bytes as a lowercase hex address."""
    return raw.hex()
