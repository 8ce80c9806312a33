"""Tests for revision key parsing."""

from __future__ import annotations

import pytest

from k8sexport.core.errors import RevisionKeyError
from k8sexport.core.revision import REVISION_KEY_SIZE, is_tombstone, parse_revision
from k8sexport.models.revision import Revision


class TestParseRevision:
    def test_main_and_sub(self, revkey):
        assert parse_revision(revkey(5, 0)) == Revision(main=5, sub=0)
        assert parse_revision(revkey(1_234_567, 42)) == Revision(main=1_234_567, sub=42)

    def test_separator_byte_not_validated(self, revkey):
        key = bytearray(revkey(7, 3))
        key[8] = 0xFF
        assert parse_revision(bytes(key)) == Revision(main=7, sub=3)

    def test_values_are_signed(self):
        key = b"\xff" * 8 + b"_" + b"\xff" * 8
        assert parse_revision(key) == Revision(main=-1, sub=-1)

    def test_trailing_bytes_ignored(self, revkey):
        assert parse_revision(revkey(9, 1, tombstone=True)) == Revision(main=9, sub=1)

    def test_deterministic(self, revkey):
        key = revkey(88, 2)
        assert parse_revision(key) == parse_revision(bytes(key))

    @pytest.mark.parametrize("length", [0, 1, 8, 9, REVISION_KEY_SIZE - 1])
    def test_short_key_rejected(self, length):
        with pytest.raises(RevisionKeyError, match="need at least 17"):
            parse_revision(bytes(length))


class TestTombstone:
    def test_tombstone_marker(self, revkey):
        assert is_tombstone(revkey(3, 0, tombstone=True)) is True

    def test_plain_key(self, revkey):
        assert is_tombstone(revkey(3, 0)) is False


class TestRevisionModel:
    def test_suffix(self):
        assert Revision(main=5, sub=0).suffix == "-5-0"

    def test_ordering(self):
        assert Revision(main=1, sub=9) < Revision(main=2, sub=0)
        assert Revision(main=2, sub=0) < Revision(main=2, sub=1)
        assert not Revision(main=2, sub=1) < Revision(main=2, sub=1)

    def test_frozen(self):
        rev = Revision(main=1, sub=0)
        with pytest.raises(Exception):
            rev.main = 2  # type: ignore[misc]
