"""Configuration constants, data-file location, and .env loading.

WHY: Centralizes every configurable value (where the combination snapshot
lives, which host/port the HTTP API binds to, the log level) so they are easy
to find and override. Nothing here is buried in engine logic.

HOW: python-dotenv loads the .env file on import. Constants are module-level
strings. The accessor functions read os.environ at call time so tests and the
CLI can override values with monkeypatch or flags.

RULES:
- The snapshot lives at a fixed per-user application-data location
- COMBINATION_DATA_FILE overrides the location entirely
- All defaults can be overridden via environment variables
- Invalid numeric values raise ValueError with a readable message
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Snapshot file
# ---------------------------------------------------------------------------

APP_DIR_NAME = "segment-combinator"
DATA_FILE_NAME = "video-combinations.json"

PAIR_SEPARATOR = "|||"
"""Separator between the two escaped identifiers of an on-disk pair key."""

# ---------------------------------------------------------------------------
# Server and logging defaults
# ---------------------------------------------------------------------------

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_LOG_LEVEL = "INFO"


def user_data_dir() -> Path:
    """Return the per-user application-data directory for this platform.

    RULES:
    - Windows: %APPDATA% (falls back to ~/AppData/Roaming)
    - macOS: ~/Library/Application Support
    - Everything else: $XDG_DATA_HOME or ~/.local/share
    """
    if sys.platform.startswith("win"):
        base = os.getenv("APPDATA")
        root = Path(base) if base else Path.home() / "AppData" / "Roaming"
    elif sys.platform == "darwin":
        root = Path.home() / "Library" / "Application Support"
    else:
        base = os.getenv("XDG_DATA_HOME")
        root = Path(base) if base else Path.home() / ".local" / "share"
    return root / APP_DIR_NAME


def data_file_path() -> Path:
    """Resolve the snapshot path, honouring COMBINATION_DATA_FILE."""
    override = os.getenv("COMBINATION_DATA_FILE", "").strip()
    if override:
        return Path(override).expanduser()
    return user_data_dir() / DATA_FILE_NAME


def server_host() -> str:
    return os.getenv("COMBINATION_HOST", DEFAULT_HOST)


def server_port() -> int:
    """Read the API port from COMBINATION_PORT.

    RULES:
    - Raises ValueError if the value is not an integer in 1..65535
    """
    raw = os.getenv("COMBINATION_PORT", str(DEFAULT_PORT)).strip()
    try:
        port = int(raw)
    except ValueError:
        raise ValueError(
            "COMBINATION_PORT must be an integer, got '{}'".format(raw)
        )
    if not 0 < port < 65536:
        raise ValueError("COMBINATION_PORT out of range: {}".format(port))
    return port


def log_level() -> str:
    return os.getenv("COMBINATION_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
