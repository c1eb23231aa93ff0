"""Canonical encoder and decoder for vault objects.

Every object is framed as ``<kind> <payload length>\\0<payload>``; the SHA-1
of that framing is the object's address.  Payloads per kind:

- blob:   the raw bytes.
- tree:   ``<mode> <name>\\0<20 raw address bytes>`` per entry, in stored order.
- commit: ``tree``/``parent``/``author`` lines, a blank line, the message
  and a trailing newline.

Pure functions only; no I/O happens here.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from pydantic import ValidationError

from gitvault.core.hasher import (
    RAW_ADDRESS_LENGTH,
    address_to_raw,
    frame_header,
    raw_to_address,
    sha1_hex,
)
from gitvault.models.objects import (
    Author,
    ContentObject,
    ObjectKind,
    RevisionObject,
    SnapshotEntry,
    SnapshotObject,
    VaultObject,
)

_SNAPSHOT_LINE = "tree"
_PARENT_LINE = "parent"
_AUTHOR_LINE = "author"
_FIELD_ORDER = (_SNAPSHOT_LINE, _PARENT_LINE, _AUTHOR_LINE)

_AUTHOR_RE = re.compile(r"(?P<name>.*) <(?P<email>[^<>]*)>")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class DecodeError(ValueError):
    """Raised when stored bytes are not a well-formed canonical encoding."""


class MissingHeaderError(DecodeError):
    """No NUL byte separates the header from the payload."""


class MalformedHeaderError(DecodeError):
    """The header is not ``<kind> <decimal length>``."""


class UnknownKindError(DecodeError):
    """The header names a kind other than blob, tree or commit."""


class LengthMismatchError(DecodeError):
    """The declared payload length disagrees with the actual payload."""


class TruncatedError(DecodeError):
    """A delimiter or a raw hash is missing from the payload."""


class InvalidEncodingError(DecodeError):
    """Bytes that must be UTF-8 text are not."""


class UnknownFieldError(DecodeError):
    """A commit header line is not tree, parent or author."""


class MissingFieldError(DecodeError):
    """A commit lacks its tree or author line."""


class DuplicateFieldError(DecodeError):
    """A commit header line appears more than once."""


class FieldOrderError(DecodeError):
    """Commit header lines are not in tree, parent, author order."""


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def _encode_content(obj: ContentObject) -> bytes:
    return obj.data


def _encode_snapshot(obj: SnapshotObject) -> bytes:
    parts: list[bytes] = []
    for entry in obj.entries:
        parts.append(entry.mode.encode("ascii"))
        parts.append(b" ")
        parts.append(entry.name.encode("utf-8"))
        parts.append(b"\0")
        parts.append(address_to_raw(entry.child_address))
    return b"".join(parts)


def _encode_revision(obj: RevisionObject) -> bytes:
    lines = [f"{_SNAPSHOT_LINE} {obj.snapshot_address}\n"]
    if obj.parent_address is not None:
        lines.append(f"{_PARENT_LINE} {obj.parent_address}\n")
    lines.append(f"{_AUTHOR_LINE} {obj.author}\n")
    lines.append("\n")
    lines.append(obj.message)
    lines.append("\n")
    return "".join(lines).encode("utf-8")


_PAYLOAD_ENCODERS: dict[ObjectKind, Callable[..., bytes]] = {
    ObjectKind.CONTENT: _encode_content,
    ObjectKind.SNAPSHOT: _encode_snapshot,
    ObjectKind.REVISION: _encode_revision,
}


def encode_payload(obj: VaultObject) -> bytes:
    """Return the kind-specific payload (everything after the header)."""
    return _PAYLOAD_ENCODERS[obj.kind](obj)


def encode_object(obj: VaultObject) -> bytes:
    """Return the full canonical encoding: header followed by payload."""
    payload = encode_payload(obj)
    return frame_header(obj.kind.value, len(payload)) + payload


def object_address(obj: VaultObject) -> str:
    """SHA-1 hex digest of the canonical encoding."""
    return sha1_hex(encode_object(obj))


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _decode_text(data: bytes, what: str) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidEncodingError(f"{what} is not valid UTF-8: {exc}") from exc


def _decode_content(payload: bytes) -> ContentObject:
    return ContentObject(data=payload)


def _decode_snapshot(payload: bytes) -> SnapshotObject:
    entries: list[SnapshotEntry] = []
    idx = 0
    end = len(payload)
    while idx < end:
        mode_end = payload.find(b" ", idx)
        if mode_end < 0:
            raise TruncatedError(f"tree entry at offset {idx}: missing space after mode")
        mode = _decode_text(payload[idx:mode_end], "tree entry mode")
        idx = mode_end + 1

        name_end = payload.find(b"\0", idx)
        if name_end < 0:
            raise TruncatedError(f"tree entry at offset {idx}: missing NUL after name")
        name = _decode_text(payload[idx:name_end], "tree entry name")
        idx = name_end + 1

        if idx + RAW_ADDRESS_LENGTH > end:
            raise TruncatedError(
                f"tree entry {name!r}: expected {RAW_ADDRESS_LENGTH} hash bytes, "
                f"found {end - idx}"
            )
        child_address = raw_to_address(payload[idx:idx + RAW_ADDRESS_LENGTH])
        idx += RAW_ADDRESS_LENGTH

        try:
            entries.append(SnapshotEntry(mode=mode, name=name, child_address=child_address))
        except ValidationError as exc:
            raise DecodeError(f"tree entry {name!r} is invalid: {exc}") from exc
    return SnapshotObject(entries=tuple(entries))


def _parse_author(value: str) -> Author:
    match = _AUTHOR_RE.fullmatch(value)
    if match is None:
        raise DecodeError(f"author line is not 'name <email>': {value!r}")
    return Author(name=match["name"], email=match["email"])


def _decode_revision(payload: bytes) -> RevisionObject:
    text = _decode_text(payload, "commit payload")
    fields: dict[str, str] = {}
    last_rank = -1
    idx = 0
    while True:
        line_end = text.find("\n", idx)
        if line_end < 0:
            raise TruncatedError("commit header is not terminated by a blank line")
        line = text[idx:line_end]
        idx = line_end + 1
        if not line:
            break
        key, _, value = line.partition(" ")
        if key not in _FIELD_ORDER:
            raise UnknownFieldError(f"unknown commit field: {line!r}")
        if key in fields:
            raise DuplicateFieldError(f"commit field {key!r} appears more than once")
        rank = _FIELD_ORDER.index(key)
        if rank < last_rank:
            raise FieldOrderError(
                f"commit field {key!r} follows {_FIELD_ORDER[last_rank]!r}; "
                f"expected order is {', '.join(_FIELD_ORDER)}"
            )
        last_rank = rank
        fields[key] = value

    for required in (_SNAPSHOT_LINE, _AUTHOR_LINE):
        if required not in fields:
            raise MissingFieldError(f"commit has no {required!r} line")

    message = text[idx:]
    if not message.endswith("\n"):
        raise TruncatedError("commit message is not terminated by a newline")
    message = message[:-1]

    try:
        return RevisionObject(
            snapshot_address=fields[_SNAPSHOT_LINE],
            parent_address=fields.get(_PARENT_LINE),
            author=_parse_author(fields[_AUTHOR_LINE]),
            message=message,
        )
    except ValidationError as exc:
        raise DecodeError(f"commit fields are invalid: {exc}") from exc


_PAYLOAD_DECODERS: dict[ObjectKind, Callable[[bytes], VaultObject]] = {
    ObjectKind.CONTENT: _decode_content,
    ObjectKind.SNAPSHOT: _decode_snapshot,
    ObjectKind.REVISION: _decode_revision,
}


def parse_header(header: bytes) -> tuple[ObjectKind, int]:
    """Parse ``<kind> <length>`` into a kind and a declared payload length."""
    try:
        kind_token, length_token = header.decode("ascii").split(" ")
    except (UnicodeDecodeError, ValueError) as exc:
        raise MalformedHeaderError(f"malformed object header: {header!r}") from exc
    try:
        kind = ObjectKind(kind_token)
    except ValueError as exc:
        raise UnknownKindError(f"unknown object kind: {kind_token!r}") from exc
    if not length_token.isdigit():
        raise MalformedHeaderError(f"object length is not a decimal number: {length_token!r}")
    if len(length_token) > 1 and length_token.startswith("0"):
        raise MalformedHeaderError(f"object length has leading zeros: {length_token!r}")
    return kind, int(length_token)


def split_object(raw: bytes) -> tuple[ObjectKind, bytes]:
    """Split raw canonical bytes into a kind and a length-checked payload."""
    nul = raw.find(b"\0")
    if nul < 0:
        raise MissingHeaderError("object has no NUL byte terminating its header")
    kind, declared = parse_header(raw[:nul])
    payload = raw[nul + 1:]
    if declared != len(payload):
        raise LengthMismatchError(
            f"{kind.value} header declares {declared} bytes, payload has {len(payload)}"
        )
    return kind, payload


def decode_payload(kind: ObjectKind, payload: bytes) -> VaultObject:
    """Decode a kind-specific payload into its typed object."""
    return _PAYLOAD_DECODERS[kind](payload)


def decode_object(raw: bytes) -> VaultObject:
    """Decode full canonical bytes (header + payload) into a typed object."""
    kind, payload = split_object(raw)
    return decode_payload(kind, payload)
