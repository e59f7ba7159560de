"""Command-line interface for the segment combination engine.

WHY: Operators need to inspect and manipulate the combination history from
a terminal (check a triple, pull the next one, wipe the history) and to
start the HTTP API, without writing a client.

HOW: argparse with one subcommand per engine operation plus ``serve``.
Each command opens a CombinationService on the chosen snapshot file, runs
one operation, and prints the result as JSON on stdout.

RULES:
- --data-file overrides COMBINATION_DATA_FILE and the per-user default
- Results go to stdout as JSON; status and errors go to stderr
- Storage-write failures exit with code 1
- Logging is configured here, at the process boundary, not in the library
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from segment_combinator import __version__
from segment_combinator.config import data_file_path, log_level, server_host, server_port
from segment_combinator.core.service import CombinationService
from segment_combinator.core.store import SnapshotWriteError


def _status(msg: str) -> None:
    """Print a status message to stderr."""
    print(msg, file=sys.stderr, flush=True)


def _emit(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _add_triple_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("front", help="Front segment identifier")
    parser.add_argument("mid", help="Middle segment identifier")
    parser.add_argument("end", help="End segment identifier")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="segment-combinator",
        description="Assign (front, mid, end) segment combinations without repeating adjacent pairs.",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--data-file",
        type=Path,
        default=None,
        help="Snapshot file (default: COMBINATION_DATA_FILE or the per-user data dir)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: COMBINATION_LOG_LEVEL or INFO)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    _add_triple_arguments(sub.add_parser("check", help="Check whether a combination is available"))
    _add_triple_arguments(sub.add_parser("record", help="Record a used combination"))

    next_parser = sub.add_parser("next", help="Find the next available combination")
    next_parser.add_argument("--front", nargs="*", default=[], help="Front asset list")
    next_parser.add_argument("--mid", nargs="*", default=[], help="Middle asset list")
    next_parser.add_argument("--end", nargs="*", default=[], help="End asset list")
    next_parser.add_argument(
        "--index",
        type=_non_negative_int,
        default=None,
        help="Start scanning at this linear index instead of the persisted cursor",
    )

    sub.add_parser("stats", help="Show recorded pair counts")
    sub.add_parser("clear", help="Clear all recorded combinations and reset the cursor")
    sub.add_parser("reset-index", help="Reset the iteration cursor to 0")
    sub.add_parser("index", help="Show the persisted iteration cursor")

    serve_parser = sub.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=None, help="Bind host (default: COMBINATION_HOST)")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port (default: COMBINATION_PORT)")

    return parser


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError("index must be >= 0, got {}".format(number))
    return number


def _run_command(args: argparse.Namespace, service: CombinationService) -> None:
    command = args.command
    if command == "check":
        result = service.check(args.front, args.mid, args.end)
        payload = {"available": result.available}  # type: Dict[str, Any]
        if result.reason is not None:
            payload["reason"] = result.reason.value
        _emit(payload)
    elif command == "record":
        service.record(args.front, args.mid, args.end)
        _status("Recorded {} / {} / {}".format(args.front, args.mid, args.end))
    elif command == "next":
        result = service.get_next(args.front, args.mid, args.end, current_index=args.index)
        _emit({k: v for k, v in asdict(result).items() if v is not None})
    elif command == "stats":
        _emit(asdict(service.get_stats()))
    elif command == "clear":
        service.clear()
        _status("All combination records cleared")
    elif command == "reset-index":
        service.reset_index()
        _status("Iteration index reset")
    elif command == "index":
        _emit({"current_index": service.get_index()})


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=(args.log_level or log_level()).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    data_file = args.data_file if args.data_file is not None else data_file_path()

    if args.command == "serve":
        from segment_combinator.server.app import run_api

        try:
            port = args.port if args.port is not None else server_port()
        except ValueError as exc:
            _status("Error: {}".format(exc))
            return 2
        host = args.host or server_host()
        _status("Serving on http://{}:{} (snapshot: {})".format(host, port, data_file))
        run_api(host, port, data_file)
        return 0

    service = CombinationService.open(data_file)
    try:
        _run_command(args, service)
    except SnapshotWriteError as exc:
        _status("Error: {}".format(exc))
        return 1
    return 0
