"""Combination service: the single entry point to the engine.

WHY: Callers (HTTP API, CLI, tests) need check/record/next/stats/clear/reset
operations without knowing about the dedup index, the enumerator, or the
snapshot file. Every mutation interleaves an in-memory change with a disk
flush, so the service is also the place that serializes access and keeps
memory and disk consistent when a flush fails.

HOW: A CombinationService instance owns one DedupIndex, one cursor, one
SnapshotStore, and one threading.Lock. The snapshot is loaded once when the
service is constructed. Each mutating method records what it is about to
change, applies the change, flushes, and rolls the change back if the flush
raises SnapshotWriteError.

RULES:
- All public methods acquire self._lock (readers never see a half-flush)
- record/clear/reset_index/get_next-on-hit flush after mutating
- A failed flush restores the previous in-memory state, then re-raises
- get_next on exhaustion does not touch the cursor and does not flush
- used_combinations is len(front_mid), an approximation of assignments
- total_records in stats sums two different key spaces (heuristic)
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from segment_combinator.config import data_file_path
from segment_combinator.core.enumerator import scan
from segment_combinator.core.index import Availability, DedupIndex
from segment_combinator.core.store import Snapshot, SnapshotStore, SnapshotWriteError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NextCombination:
    """Result of get_next(); front/mid/end are None unless found."""

    found: bool
    current_index: int
    exhausted: bool
    total_combinations: int
    used_combinations: int
    front: Optional[str] = None
    mid: Optional[str] = None
    end: Optional[str] = None


@dataclass(frozen=True)
class CombinationStats:
    front_mid_count: int
    mid_end_count: int
    total_records: int


class CombinationService:
    """Thread-safe façade over the dedup index, enumerator, and store."""

    def __init__(self, store: SnapshotStore) -> None:
        self._store = store
        self._lock = threading.Lock()

        snapshot = store.load()
        self._index = DedupIndex(snapshot.front_mid, snapshot.mid_end)
        self._cursor = snapshot.current_index

    @classmethod
    def open(cls, path: Optional[Path] = None) -> "CombinationService":
        """Create a service backed by ``path`` (default: configured data file)."""
        return cls(SnapshotStore(path if path is not None else data_file_path()))

    @property
    def data_file(self) -> Path:
        return self._store.path

    # ------------------------------------------------------------------
    # Read-only operations
    # ------------------------------------------------------------------

    def check(self, front: str, mid: str, end: str) -> Availability:
        with self._lock:
            return self._index.is_available(front, mid, end)

    def get_stats(self) -> CombinationStats:
        with self._lock:
            front_mid_count = len(self._index.front_mid)
            mid_end_count = len(self._index.mid_end)
        return CombinationStats(
            front_mid_count=front_mid_count,
            mid_end_count=mid_end_count,
            total_records=front_mid_count + mid_end_count,
        )

    def get_index(self) -> int:
        with self._lock:
            return self._cursor

    # ------------------------------------------------------------------
    # Mutating operations
    # ------------------------------------------------------------------

    def record(self, front: str, mid: str, end: str) -> None:
        with self._lock:
            added = self._index.record(front, mid, end)
            try:
                self._flush()
            except SnapshotWriteError:
                self._index.forget(*added)
                raise
        logger.info("Recorded combination: front=%s, mid=%s, end=%s", front, mid, end)

    def get_next(
        self,
        front_assets: Sequence[str],
        mid_assets: Sequence[str],
        end_assets: Sequence[str],
        current_index: Optional[int] = None,
    ) -> NextCombination:
        """Find the next combination whose adjacent pairs are both unused.

        HOW: Scans from ``current_index`` when given, otherwise from the
        persisted cursor. On a hit the cursor advances past the hit and is
        flushed; the combination itself is not recorded (callers record it
        once the composed media has actually been produced).
        """
        with self._lock:
            start = self._cursor if current_index is None else current_index
            result = scan(
                front_assets,
                mid_assets,
                end_assets,
                start,
                lambda f, m, e: self._index.is_available(f, m, e).available,
            )

            if result.found:
                previous = self._cursor
                self._cursor = result.next_index
                try:
                    self._flush()
                except SnapshotWriteError:
                    self._cursor = previous
                    raise

            used = len(self._index.front_mid) if result.total_combinations else 0
            return NextCombination(
                found=result.found,
                current_index=result.current_index,
                exhausted=result.exhausted,
                total_combinations=result.total_combinations,
                used_combinations=used,
                front=result.front,
                mid=result.mid,
                end=result.end,
            )

    def clear(self) -> None:
        with self._lock:
            previous_front_mid = set(self._index.front_mid)
            previous_mid_end = set(self._index.mid_end)
            previous_cursor = self._cursor

            self._index.clear()
            self._cursor = 0
            try:
                self._flush()
            except SnapshotWriteError:
                self._index.restore(previous_front_mid, previous_mid_end)
                self._cursor = previous_cursor
                raise
        logger.info("All combination records cleared")

    def reset_index(self) -> None:
        with self._lock:
            previous = self._cursor
            self._cursor = 0
            try:
                self._flush()
            except SnapshotWriteError:
                self._cursor = previous
                raise
        logger.info("Iteration index reset")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _flush(self) -> None:
        snapshot = Snapshot(
            front_mid=self._index.front_mid,
            mid_end=self._index.mid_end,
            current_index=self._cursor,
        )
        try:
            self._store.save(snapshot)
        except SnapshotWriteError as exc:
            logger.error("Failed to save combination snapshot: %s", exc)
            raise
