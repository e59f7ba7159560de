"""Linear enumeration and cyclic scan over front × mid × end.

WHY: Assignment is round-robin over the cross product of three asset lists.
A single integer cursor is enough to remember where the last assignment
stopped, as long as the mapping from cursor to (front, mid, end) is fixed.

HOW: index_to_coordinates() maps a linear index front-major, middle-next,
end-minor. scan() probes up to ``total`` consecutive indices starting at the
given cursor (wrapping modulo total) and returns the first one whose triple
the supplied predicate accepts.

RULES:
- total == 0 (any empty list) → not found, exhausted, total 0
- Every index in [0, total) is probed at most once per scan
- On a hit the next cursor is (found + 1) % total
- On exhaustion the start cursor is reported unchanged and no next cursor
  is produced
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

AvailabilityPredicate = Callable[[str, str, str], bool]


@dataclass(frozen=True)
class ScanResult:
    found: bool
    current_index: int
    exhausted: bool
    total_combinations: int
    front: Optional[str] = None
    mid: Optional[str] = None
    end: Optional[str] = None
    next_index: Optional[int] = None


def total_combinations(
    front_assets: Sequence[str],
    mid_assets: Sequence[str],
    end_assets: Sequence[str],
) -> int:
    return len(front_assets) * len(mid_assets) * len(end_assets)


def index_to_coordinates(index: int, mid_count: int, end_count: int) -> Tuple[int, int, int]:
    """Map a linear index to (front_idx, mid_idx, end_idx)."""
    plane = mid_count * end_count
    front_idx = index // plane
    mid_idx = (index % plane) // end_count
    end_idx = index % end_count
    return front_idx, mid_idx, end_idx


def scan(
    front_assets: Sequence[str],
    mid_assets: Sequence[str],
    end_assets: Sequence[str],
    start_index: int,
    is_available: AvailabilityPredicate,
) -> ScanResult:
    total = total_combinations(front_assets, mid_assets, end_assets)
    if total == 0:
        return ScanResult(
            found=False,
            current_index=0,
            exhausted=True,
            total_combinations=0,
        )

    for offset in range(total):
        idx = (start_index + offset) % total
        front_idx, mid_idx, end_idx = index_to_coordinates(
            idx, len(mid_assets), len(end_assets)
        )
        front = front_assets[front_idx]
        mid = mid_assets[mid_idx]
        end = end_assets[end_idx]
        if is_available(front, mid, end):
            return ScanResult(
                found=True,
                current_index=idx,
                exhausted=False,
                total_combinations=total,
                front=front,
                mid=mid,
                end=end,
                next_index=(idx + 1) % total,
            )

    return ScanResult(
        found=False,
        current_index=start_index,
        exhausted=True,
        total_combinations=total,
    )
