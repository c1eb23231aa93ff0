"""Tests for vault object models — validation, immutability, transient children."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from gitvault.core.codec import InvalidEncodingError, encode_object
from gitvault.models.objects import (
    DIRECTORY_MODE,
    FILE_MODE,
    Author,
    ContentObject,
    ObjectKind,
    RevisionObject,
    SnapshotEntry,
    SnapshotObject,
)
from tests.known_values import EMPTY_TREE_ADDRESS, HELLO_ADDRESS


class TestContentObject:
    def test_kind(self):
        assert ContentObject(data=b"x").kind is ObjectKind.CONTENT

    def test_frozen(self):
        obj = ContentObject(data=b"x")
        with pytest.raises(ValidationError):
            obj.data = b"y"

    def test_text(self):
        assert ContentObject(data=b"hello\n").text == "hello\n"

    def test_text_rejects_non_utf8(self):
        with pytest.raises(InvalidEncodingError):
            ContentObject(data=b"\xff\xfe").text


class TestSnapshotEntry:
    @pytest.mark.parametrize("name", ["", "a/b", "nul\0name"])
    def test_rejects_bad_names(self, name: str):
        with pytest.raises(ValidationError):
            SnapshotEntry(mode=FILE_MODE, name=name, child_address=HELLO_ADDRESS)

    @pytest.mark.parametrize(
        "address", ["", "abc", HELLO_ADDRESS.upper(), HELLO_ADDRESS + "0", "g" * 40]
    )
    def test_rejects_bad_addresses(self, address: str):
        with pytest.raises(ValidationError):
            SnapshotEntry(mode=FILE_MODE, name="f", child_address=address)

    def test_rejects_non_octal_mode(self):
        with pytest.raises(ValidationError):
            SnapshotEntry(mode="10064x", name="f", child_address=HELLO_ADDRESS)

    def test_child_kind_from_mode(self):
        file_entry = SnapshotEntry(mode=FILE_MODE, name="f", child_address=HELLO_ADDRESS)
        dir_entry = SnapshotEntry(mode=DIRECTORY_MODE, name="d", child_address=EMPTY_TREE_ADDRESS)
        assert file_entry.child_kind is ObjectKind.CONTENT
        assert dir_entry.child_kind is ObjectKind.SNAPSHOT
        assert dir_entry.is_directory and not file_entry.is_directory

    def test_transient_child_is_not_encoded(self):
        child = ContentObject(data=b"hello\n")
        with_child = SnapshotEntry.for_child("hello.txt", FILE_MODE, child)
        plain = SnapshotEntry(mode=FILE_MODE, name="hello.txt", child_address=HELLO_ADDRESS)
        assert with_child.child is child
        assert plain.child is None
        assert with_child.child_address == HELLO_ADDRESS
        assert "child" not in with_child.model_dump()
        assert encode_object(SnapshotObject(entries=(with_child,))) == encode_object(
            SnapshotObject(entries=(plain,))
        )

    def test_transient_child_does_not_affect_equality(self):
        with_child = SnapshotEntry.for_child("hello.txt", FILE_MODE, ContentObject(data=b"hello\n"))
        plain = SnapshotEntry(mode=FILE_MODE, name="hello.txt", child_address=HELLO_ADDRESS)
        assert with_child == plain
        assert hash(with_child) == hash(plain)
        assert len({with_child, plain}) == 1
        assert SnapshotObject(entries=(with_child,)) == SnapshotObject(entries=(plain,))
        assert plain != SnapshotEntry(mode=DIRECTORY_MODE, name="hello.txt", child_address=HELLO_ADDRESS)


class TestSnapshotObject:
    def test_from_entries_sorts_bytewise(self):
        names = ["b", "B", "a.txt", "a", "Z", "é"]
        entries = [
            SnapshotEntry(mode=FILE_MODE, name=n, child_address=HELLO_ADDRESS) for n in names
        ]
        snapshot = SnapshotObject.from_entries(entries)
        assert [e.name for e in snapshot.entries] == ["B", "Z", "a", "a.txt", "b", "é"]
        assert snapshot.is_sorted

    def test_unsorted_construction_is_allowed(self):
        entries = (
            SnapshotEntry(mode=FILE_MODE, name="b", child_address=HELLO_ADDRESS),
            SnapshotEntry(mode=FILE_MODE, name="a", child_address=HELLO_ADDRESS),
        )
        assert not SnapshotObject(entries=entries).is_sorted

    def test_entry_lookup(self):
        snapshot = SnapshotObject.from_entries(
            [SnapshotEntry(mode=FILE_MODE, name="f", child_address=HELLO_ADDRESS)]
        )
        assert snapshot.entry("f").child_address == HELLO_ADDRESS
        assert snapshot.entry("missing") is None


class TestRevisionObject:
    def test_author_str(self):
        assert str(Author(name="Ada Lovelace", email="ada@example.org")) == (
            "Ada Lovelace <ada@example.org>"
        )

    @pytest.mark.parametrize("name", ["a<b", "a>b", "a\nb"])
    def test_author_rejects_delimiters(self, name: str):
        with pytest.raises(ValidationError):
            Author(name=name, email="x@y")

    def test_message_rejects_nul(self):
        with pytest.raises(ValidationError):
            RevisionObject(
                snapshot_address=EMPTY_TREE_ADDRESS,
                author=Author(name="a", email="b"),
                message="bad\0message",
            )

    def test_parent_is_optional(self):
        revision = RevisionObject(
            snapshot_address=EMPTY_TREE_ADDRESS,
            author=Author(name="a", email="b"),
            message="m",
        )
        assert revision.parent_address is None

    def test_address_is_stable(self):
        kwargs = dict(
            snapshot_address=EMPTY_TREE_ADDRESS,
            author=Author(name="a", email="b"),
            message="m",
        )
        assert RevisionObject(**kwargs).address == RevisionObject(**kwargs).address
