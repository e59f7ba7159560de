"""Unit tests for pair keys and their on-disk encoding.

WHY: The dedup index is only as correct as its keys. Two different pairs
must never map to the same key, in memory or in the snapshot file, even
when identifiers contain the separator.

HOW: Tests cover value semantics of PairKey, the legacy-compatible encoding
for plain filenames, escaping of separator characters, and decoder errors.
"""

import pytest

from segment_combinator.core.keys import (
    PairKey,
    compose_key,
    decode_pair_key,
    encode_pair_key,
)


class TestPairKey:
    """PairKey is an order-sensitive value type."""

    def test_equal_by_value(self):
        assert compose_key("a.mp4", "b.mp4") == PairKey("a.mp4", "b.mp4")

    def test_order_sensitive(self):
        assert compose_key("a", "b") != compose_key("b", "a")

    def test_separator_in_identifier_does_not_collide(self):
        left = compose_key("a|||b", "c")
        right = compose_key("a", "b|||c")
        assert left != right
        assert len({left, right}) == 2


class TestEncoding:
    """encode_pair_key / decode_pair_key."""

    def test_plain_identifiers_match_legacy_format(self):
        assert encode_pair_key(PairKey("front_01.mp4", "mid_02.mp4")) == "front_01.mp4|||mid_02.mp4"

    def test_decodes_legacy_entry(self):
        assert decode_pair_key("intro.mp4|||body.mp4") == PairKey("intro.mp4", "body.mp4")

    def test_pipes_are_escaped(self):
        encoded = encode_pair_key(PairKey("a|||b", "c"))
        assert encoded == "a\\|\\|\\|b|||c"
        assert decode_pair_key(encoded) == PairKey("a|||b", "c")

    def test_escaped_encodings_are_distinct(self):
        left = encode_pair_key(PairKey("a|||b", "c"))
        right = encode_pair_key(PairKey("a", "b|||c"))
        assert left != right
        assert decode_pair_key(right) == PairKey("a", "b|||c")

    def test_backslashes_survive(self):
        key = PairKey("C:\\clips\\a.mp4", "b\\")
        assert decode_pair_key(encode_pair_key(key)) == key

    def test_empty_identifiers(self):
        assert decode_pair_key("|||") == PairKey("", "")

    def test_missing_separator_rejected(self):
        with pytest.raises(ValueError, match="Missing separator"):
            decode_pair_key("just-a-name.mp4")

    def test_stray_pipe_rejected(self):
        with pytest.raises(ValueError, match="Ambiguous"):
            decode_pair_key("a||||b")

    def test_legacy_backslash_kept_literally(self):
        assert decode_pair_key("C:\\clips\\a.mp4|||m") == PairKey("C:\\clips\\a.mp4", "m")

    def test_trailing_backslash_kept_literally(self):
        assert decode_pair_key("a|||b\\") == PairKey("a", "b\\")
