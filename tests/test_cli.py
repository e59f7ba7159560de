"""Tests for the command-line interface.

HOW: main() is called with an argv list and a --data-file under tmp_path;
stdout is parsed as JSON via capsys.
"""

import json
from unittest.mock import patch

import pytest

from segment_combinator.cli import build_parser, main


def _run(data_file, *args):
    return main(["--data-file", str(data_file)] + list(args))


class TestCommands:

    def test_next_prints_combination(self, data_file, capsys):
        code = _run(data_file, "next", "--front", "f1", "f2", "--mid", "m1", "--end", "e1", "e2")
        assert code == 0
        out = json.loads(capsys.readouterr().out)
        assert out["found"] is True
        assert (out["front"], out["mid"], out["end"]) == ("f1", "m1", "e1")
        assert out["current_index"] == 0

    def test_record_then_check(self, data_file, capsys):
        assert _run(data_file, "record", "f1", "m1", "e1") == 0
        capsys.readouterr()

        assert _run(data_file, "check", "f2", "m1", "e1") == 0
        out = json.loads(capsys.readouterr().out)
        assert out == {"available": False, "reason": "mid_end_exists"}

    def test_stats_and_clear(self, data_file, capsys):
        _run(data_file, "record", "f1", "m1", "e1")
        capsys.readouterr()

        _run(data_file, "stats")
        assert json.loads(capsys.readouterr().out)["total_records"] == 2

        _run(data_file, "clear")
        captured = capsys.readouterr()
        assert "cleared" in captured.err

        _run(data_file, "stats")
        assert json.loads(capsys.readouterr().out)["total_records"] == 0

    def test_index_and_reset(self, data_file, capsys):
        _run(data_file, "next", "--front", "a", "--mid", "b", "--end", "c", "d")
        capsys.readouterr()

        _run(data_file, "index")
        assert json.loads(capsys.readouterr().out) == {"current_index": 1}

        _run(data_file, "reset-index")
        capsys.readouterr()
        _run(data_file, "index")
        assert json.loads(capsys.readouterr().out) == {"current_index": 0}

    def test_next_with_empty_list_is_exhausted(self, data_file, capsys):
        _run(data_file, "next", "--front", "f1", "--mid", "--end", "e1")
        out = json.loads(capsys.readouterr().out)
        assert out["exhausted"] is True
        assert out["total_combinations"] == 0
        assert "front" not in out

    def test_write_failure_exits_1(self, data_file, capsys):
        with patch("segment_combinator.core.store.os.replace", side_effect=OSError("disk full")):
            code = _run(data_file, "record", "f1", "m1", "e1")
        assert code == 1
        assert "disk full" in capsys.readouterr().err


class TestParser:

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_negative_index_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["next", "--index", "-2"])

    def test_serve_uses_run_api(self, data_file, monkeypatch):
        calls = []
        monkeypatch.setattr(
            "segment_combinator.server.app.run_api",
            lambda host, port, path: calls.append((host, port, path)),
        )
        code = _run(data_file, "serve", "--host", "0.0.0.0", "--port", "9001")
        assert code == 0
        assert calls == [("0.0.0.0", 9001, data_file)]
