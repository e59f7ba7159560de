"""Durable snapshot storage for the combination engine.

WHY: The dedup index and the iteration cursor must survive process restarts.
A crash halfway through a write must never leave a truncated file behind,
and a damaged file must not stop the application from starting.

HOW: Snapshot is a plain dataclass mirroring the JSON document. SnapshotStore
reads the file once per load, validates it against SNAPSHOT_SCHEMA with
jsonschema, and decodes the pair keys. save() writes to a temporary file in
the target directory, fsyncs it, and os.replace()s it over the target.

RULES:
- load() never raises: missing → empty snapshot, corrupt → warning + empty
- save() wraps any OSError or encoding error in SnapshotWriteError, no retries
- currentIndex must be a JSON integer; 1.0 is treated as corrupt
- The temporary file is removed when the write fails
- Undecodable pair entries are skipped with a warning, the rest still load
- updatedAt is stamped in UTC at save time
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Set

import jsonschema

from segment_combinator.core.keys import PairKey, decode_pair_key, encode_pair_key

logger = logging.getLogger(__name__)

SNAPSHOT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "frontMid": {"type": "array", "items": {"type": "string"}},
        "midEnd": {"type": "array", "items": {"type": "string"}},
        "currentIndex": {"type": "integer", "minimum": 0},
        "updatedAt": {"type": "string"},
    },
}


class SnapshotWriteError(OSError):
    """Raised when the snapshot cannot be written to disk.

    WHY: Write failures (permissions, full disk) must reach the caller so it
    can decide whether to retry. A dedicated type lets the service and the
    HTTP layer tell them apart from programming errors.
    """

    def __init__(self, path: Path, cause: Exception) -> None:
        self.path = path
        self.cause = cause
        super().__init__("Failed to write snapshot {}: {}".format(path, cause))


@dataclass
class Snapshot:
    """Full durable state of the engine."""

    front_mid: Set[PairKey] = field(default_factory=set)
    mid_end: Set[PairKey] = field(default_factory=set)
    current_index: int = 0
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "frontMid": sorted(encode_pair_key(k) for k in self.front_mid),
            "midEnd": sorted(encode_pair_key(k) for k in self.mid_end),
            "currentIndex": self.current_index,
            "updatedAt": self.updated_at,
        }


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _decode_entries(entries: list, label: str, path: Path) -> Set[PairKey]:
    keys = set()  # type: Set[PairKey]
    for raw in entries:
        try:
            keys.add(decode_pair_key(raw))
        except ValueError as exc:
            logger.warning("Skipping %s entry in %s: %s", label, path, exc)
    return keys


class SnapshotStore:
    """Load and save a Snapshot at a single file path."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> Snapshot:
        if not self.path.exists():
            logger.info("Snapshot %s not found, starting with empty state", self.path)
            return Snapshot()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            jsonschema.validate(data, SNAPSHOT_SCHEMA)
            current_index = data.get("currentIndex", 0)
            if not isinstance(current_index, int):
                raise ValueError("currentIndex is not an integer: {!r}".format(current_index))
        except (OSError, ValueError, jsonschema.ValidationError) as exc:
            logger.warning(
                "Snapshot %s is unreadable, starting with empty state: %s",
                self.path, exc,
            )
            return Snapshot()

        snapshot = Snapshot(
            front_mid=_decode_entries(data.get("frontMid", []), "frontMid", self.path),
            mid_end=_decode_entries(data.get("midEnd", []), "midEnd", self.path),
            current_index=current_index,
            updated_at=data.get("updatedAt"),
        )
        logger.info(
            "Loaded snapshot: front_mid=%d, mid_end=%d, index=%d",
            len(snapshot.front_mid), len(snapshot.mid_end), snapshot.current_index,
        )
        return snapshot

    def save(self, snapshot: Snapshot) -> None:
        """Atomically replace the snapshot file.

        HOW: NamedTemporaryFile(delete=False) in the target directory, json
        dump, flush + fsync, then os.replace onto the target path.
        """
        snapshot.updated_at = _utc_now_iso()

        temp_path = None  # type: Optional[str]
        try:
            payload = json.dumps(snapshot.to_dict(), indent=2)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=self.path.name + ".",
                suffix=".tmp",
                delete=False,
            ) as temp_file:
                temp_path = temp_file.name
                temp_file.write(payload)
                temp_file.flush()
                os.fsync(temp_file.fileno())
            os.replace(temp_path, self.path)
        except (OSError, ValueError) as exc:
            if temp_path is not None:
                try:
                    os.unlink(temp_path)
                except OSError:
                    pass
            raise SnapshotWriteError(self.path, exc) from exc
