"""Engine modules: pair keys, snapshot store, dedup index, enumerator, service.

WHY: The core package holds everything with real invariants. The server
and CLI are thin adapters over CombinationService and must not reach into
the index or the store directly.

HOW: keys.py defines the structural pair key and its on-disk encoding,
store.py persists snapshots atomically, index.py answers availability,
enumerator.py maps the cursor to triples, service.py ties them together.
"""

from segment_combinator.core.index import Availability, UnavailableReason
from segment_combinator.core.service import (
    CombinationService,
    CombinationStats,
    NextCombination,
)
from segment_combinator.core.store import SnapshotWriteError

__all__ = [
    "Availability",
    "CombinationService",
    "CombinationStats",
    "NextCombination",
    "SnapshotWriteError",
    "UnavailableReason",
]
