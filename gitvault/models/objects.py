"""Vault object models — Content, Snapshot and Revision (all immutable).

The three kinds form a closed, discriminated union on ``kind``.  Addresses
are derived from the canonical encoding and never stored on the model, so
two models with the same logical fields always share an address.
"""

from __future__ import annotations

from enum import Enum
from functools import cached_property
from typing import Annotated, Any, Literal, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PrivateAttr

from gitvault.core.hasher import is_address

FILE_MODE = "100644"
DIRECTORY_MODE = "40000"


class ObjectKind(str, Enum):
    """Kind tag written at the start of every object header."""

    CONTENT = "blob"
    SNAPSHOT = "tree"
    REVISION = "commit"


def _check_address(value: str) -> str:
    if not is_address(value):
        raise ValueError(f"expected 40 lowercase hex characters, got {value!r}")
    return value


def _check_entry_name(value: str) -> str:
    if not value:
        raise ValueError("entry name must not be empty")
    if "/" in value or "\0" in value:
        raise ValueError(f"entry name must not contain '/' or NUL: {value!r}")
    return value


def _check_mode(value: str) -> str:
    if not value or any(c not in "01234567" for c in value):
        raise ValueError(f"mode must be an octal token, got {value!r}")
    return value


def _check_identity_part(value: str) -> str:
    if any(c in value for c in "<>\n\0"):
        raise ValueError(f"author fields must not contain '<', '>', newline or NUL: {value!r}")
    return value


def _check_message(value: str) -> str:
    if "\0" in value:
        raise ValueError("message must not contain NUL")
    return value


Address = Annotated[str, AfterValidator(_check_address)]


class _AddressedObject(BaseModel):
    """Shared behaviour: the address is a pure function of the encoding."""

    model_config = ConfigDict(frozen=True)

    @cached_property
    def address(self) -> str:
        from gitvault.core.codec import object_address

        return object_address(self)  # type: ignore[arg-type]


class ContentObject(_AddressedObject):
    """Leaf object holding raw file bytes."""

    kind: Literal[ObjectKind.CONTENT] = ObjectKind.CONTENT
    data: bytes

    @property
    def text(self) -> str:
        """The payload decoded as UTF-8.

        Raises ``InvalidEncodingError`` when the bytes are not UTF-8.
        """
        from gitvault.core.codec import InvalidEncodingError

        try:
            return self.data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidEncodingError(f"content is not valid UTF-8: {exc}") from exc


class SnapshotEntry(BaseModel):
    """One named child of a snapshot.

    ``child`` is an in-memory reference to the object the builder produced
    for this entry.  It is never encoded, serialized or read back.
    """

    model_config = ConfigDict(frozen=True)

    mode: Annotated[str, AfterValidator(_check_mode)]
    name: Annotated[str, AfterValidator(_check_entry_name)]
    child_address: Address

    _child: Any = PrivateAttr(default=None)

    @classmethod
    def for_child(cls, name: str, mode: str, child: VaultObject) -> SnapshotEntry:
        """Build an entry pointing at an already-constructed child object."""
        entry = cls(mode=mode, name=name, child_address=child.address)
        entry._child = child
        return entry

    @property
    def child(self) -> VaultObject | None:
        return self._child

    # Equality and hashing follow the encoded fields only; the child link
    # does not survive a store round trip.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SnapshotEntry):
            return NotImplemented
        return (self.mode, self.name, self.child_address) == (
            other.mode,
            other.name,
            other.child_address,
        )

    def __hash__(self) -> int:
        return hash((self.mode, self.name, self.child_address))

    @property
    def is_directory(self) -> bool:
        return self.mode == DIRECTORY_MODE

    @property
    def child_kind(self) -> ObjectKind:
        """Kind of object the entry points at, as implied by its mode."""
        if self.mode == DIRECTORY_MODE:
            return ObjectKind.SNAPSHOT
        if self.mode == "160000":
            return ObjectKind.REVISION
        return ObjectKind.CONTENT


def entry_sort_key(entry: SnapshotEntry) -> bytes:
    """Byte-wise ordering key for snapshot entries."""
    return entry.name.encode("utf-8")


class SnapshotObject(_AddressedObject):
    """Directory listing.

    Entries are encoded in the order they are stored; build snapshots with
    :meth:`from_entries` to get the canonical, name-sorted order.
    """

    kind: Literal[ObjectKind.SNAPSHOT] = ObjectKind.SNAPSHOT
    entries: tuple[SnapshotEntry, ...] = ()

    @classmethod
    def from_entries(cls, entries: list[SnapshotEntry] | tuple[SnapshotEntry, ...]) -> SnapshotObject:
        """Construct a snapshot with entries sorted byte-wise by name."""
        return cls(entries=tuple(sorted(entries, key=entry_sort_key)))

    @property
    def is_sorted(self) -> bool:
        keys = [entry_sort_key(e) for e in self.entries]
        return keys == sorted(keys)

    def entry(self, name: str) -> SnapshotEntry | None:
        """Look up an entry by name."""
        for e in self.entries:
            if e.name == name:
                return e
        return None


class Author(BaseModel):
    """Commit identity rendered as ``name <email>``."""

    model_config = ConfigDict(frozen=True)

    name: Annotated[str, AfterValidator(_check_identity_part)]
    email: Annotated[str, AfterValidator(_check_identity_part)]

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


class RevisionObject(_AddressedObject):
    """Commit pointing at a snapshot and at most one parent (linear history)."""

    kind: Literal[ObjectKind.REVISION] = ObjectKind.REVISION
    snapshot_address: Address
    parent_address: Address | None = None
    author: Author
    message: Annotated[str, AfterValidator(_check_message)]


VaultObject = Annotated[
    Union[ContentObject, SnapshotObject, RevisionObject],
    Field(discriminator="kind"),
]
