"""Segment Combinator: pair-deduplicated assignment of media segment triples.

WHY: Sequentially composed videos are built from a front, a middle, and an
end segment. Reusing the same front→middle or middle→end pair makes two
outputs look alike, so every assignment must avoid adjacent pairs that were
already used, across restarts.

HOW: A CombinationService combines a persisted dedup index of used pairs
with a wrapping cursor over the front × mid × end cross product. The engine
is exposed through an HTTP API (FastAPI) and a command-line interface.

RULES:
- Only adjacent pairs are deduplicated; non-adjacent reuse is allowed
- The service is the only writer of the snapshot file
- Every mutation is flushed atomically or rolled back
"""

__version__ = "0.1.0"
