"""Shared fixtures for the segment_combinator test suite.

WHY: Nearly every test needs a snapshot path that nobody else touches and a
fresh CombinationService on top of it. Centralizing them keeps tests
independent and free of the real per-user data directory.

HOW: Fixtures build paths under pytest's tmp_path. The scenario asset lists
are the small front/mid/end lists used throughout the engine's documentation.

RULES:
- Each test gets its own snapshot file (no shared mutable state)
- No test ever writes to the real user data directory
"""

from pathlib import Path

import pytest

from segment_combinator.core.service import CombinationService

FRONT_ASSETS = ["f1", "f2"]
MID_ASSETS = ["m1"]
END_ASSETS = ["e1", "e2"]


@pytest.fixture
def data_file(tmp_path) -> Path:
    """Snapshot path inside a not-yet-existing subdirectory."""
    return tmp_path / "appdata" / "video-combinations.json"


@pytest.fixture
def service(data_file) -> CombinationService:
    return CombinationService.open(data_file)


@pytest.fixture
def scenario_assets():
    """(front, mid, end) asset lists: 2 × 1 × 2 = 4 combinations."""
    return list(FRONT_ASSETS), list(MID_ASSETS), list(END_ASSETS)


@pytest.fixture(autouse=True)
def _isolate_data_dir(monkeypatch, tmp_path):
    """Point the default data file at tmp_path so nothing leaks to $HOME."""
    monkeypatch.setenv("COMBINATION_DATA_FILE", str(tmp_path / "default" / "combos.json"))
