"""In-memory dedup index over adjacent segment pairs.

WHY: A combination (front, mid, end) may be assigned only if neither its
front→mid pair nor its mid→end pair has been used before. Checking both
pairs must be O(1) per probe because the enumerator probes up to the whole
cross product of the asset lists.

HOW: Two sets of PairKey, one per adjacent position. record() returns which
keys it actually inserted so a caller can undo exactly its own change when
the durable flush fails.

RULES:
- The front→mid check runs before the mid→end check
- Recording is idempotent
- Only clear() shrinks the sets (forget/restore exist for rollback)
- Non-adjacent reuse (front == end) is never checked
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Optional, Set, Tuple

from segment_combinator.core.keys import PairKey, compose_key


class UnavailableReason(str, enum.Enum):
    """Why a combination cannot be assigned."""

    FRONT_MID_EXISTS = "front_mid_exists"
    MID_END_EXISTS = "mid_end_exists"


@dataclass(frozen=True)
class Availability:
    available: bool
    reason: Optional[UnavailableReason] = None


AVAILABLE = Availability(available=True)


class DedupIndex:
    """Sets of used front→mid and mid→end pairs."""

    def __init__(
        self,
        front_mid: Optional[Iterable[PairKey]] = None,
        mid_end: Optional[Iterable[PairKey]] = None,
    ) -> None:
        self.front_mid = set(front_mid or ())  # type: Set[PairKey]
        self.mid_end = set(mid_end or ())  # type: Set[PairKey]

    def is_available(self, front: str, mid: str, end: str) -> Availability:
        if compose_key(front, mid) in self.front_mid:
            return Availability(False, UnavailableReason.FRONT_MID_EXISTS)
        if compose_key(mid, end) in self.mid_end:
            return Availability(False, UnavailableReason.MID_END_EXISTS)
        return AVAILABLE

    def record(self, front: str, mid: str, end: str) -> Tuple[Optional[PairKey], Optional[PairKey]]:
        """Insert both adjacent pairs.

        Returns the keys that were newly added (None for a key that was
        already present), which is what forget() needs to undo the call.
        """
        front_mid_key = compose_key(front, mid)
        mid_end_key = compose_key(mid, end)

        added_front_mid = None
        added_mid_end = None
        if front_mid_key not in self.front_mid:
            self.front_mid.add(front_mid_key)
            added_front_mid = front_mid_key
        if mid_end_key not in self.mid_end:
            self.mid_end.add(mid_end_key)
            added_mid_end = mid_end_key
        return added_front_mid, added_mid_end

    def forget(self, front_mid_key: Optional[PairKey], mid_end_key: Optional[PairKey]) -> None:
        if front_mid_key is not None:
            self.front_mid.discard(front_mid_key)
        if mid_end_key is not None:
            self.mid_end.discard(mid_end_key)

    def clear(self) -> None:
        self.front_mid.clear()
        self.mid_end.clear()

    def restore(self, front_mid: Set[PairKey], mid_end: Set[PairKey]) -> None:
        self.front_mid = set(front_mid)
        self.mid_end = set(mid_end)
