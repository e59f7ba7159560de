"""Pair keys for the dedup index and their on-disk string encoding.

WHY: Deduplication is defined over adjacent pairs of segment identifiers.
Joining two identifiers with a separator string is ambiguous as soon as an
identifier contains the separator ("a|||b" + "c" vs "a" + "b|||c"). Keeping
the key structural in memory removes that collision class; escaping on disk
keeps the persisted file unambiguous too.

HOW: PairKey is a NamedTuple, so it is hashable and compared by value. For
the snapshot file each identifier is escaped (backslash and pipe get a
backslash prefix) and the two halves are joined with PAIR_SEPARATOR. The
decoder walks the string once, honouring escapes, and splits on the first
unescaped separator.

RULES:
- PairKey is order-sensitive: PairKey("a", "b") != PairKey("b", "a")
- Identifiers without "|" or "\\" encode exactly like the legacy format
- Legacy entries with single backslashes (Windows paths) decode as written;
  legacy identifiers containing "|" or a doubled backslash do not round-trip
- decode_pair_key raises ValueError on anything it cannot split unambiguously
"""

from __future__ import annotations

from typing import NamedTuple

from segment_combinator.config import PAIR_SEPARATOR

_ESCAPE = "\\"
_PIPE = "|"


class PairKey(NamedTuple):
    """An ordered (first, second) pair of segment identifiers."""

    first: str
    second: str


def compose_key(first: str, second: str) -> PairKey:
    return PairKey(first, second)


def _escape(identifier: str) -> str:
    return identifier.replace(_ESCAPE, _ESCAPE * 2).replace(_PIPE, _ESCAPE + _PIPE)


def encode_pair_key(key: PairKey) -> str:
    """Encode a PairKey as ``<first>|||<second>`` with escaped halves."""
    return "{}{}{}".format(_escape(key.first), PAIR_SEPARATOR, _escape(key.second))


def decode_pair_key(encoded: str) -> PairKey:
    """Parse a string produced by encode_pair_key (or the legacy format).

    RULES:
    - A backslash before "\\" or "|" makes that character literal
    - Any other backslash (including a trailing one) is kept as written
    - Exactly one unescaped separator must be present
    - Any other unescaped "|" is malformed
    """
    parts = [[], []]  # type: list
    half = 0
    i = 0
    length = len(encoded)
    while i < length:
        ch = encoded[i]
        if ch == _ESCAPE and i + 1 < length and encoded[i + 1] in (_ESCAPE, _PIPE):
            parts[half].append(encoded[i + 1])
            i += 2
            continue
        if ch == _PIPE:
            if half == 0 and encoded.startswith(PAIR_SEPARATOR, i):
                half = 1
                i += len(PAIR_SEPARATOR)
                continue
            raise ValueError("Ambiguous separator in pair key: {!r}".format(encoded))
        parts[half].append(ch)
        i += 1

    if half != 1:
        raise ValueError("Missing separator in pair key: {!r}".format(encoded))
    return PairKey("".join(parts[0]), "".join(parts[1]))
