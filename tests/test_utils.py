"""Tests for _utils.py — diagnostics, timestamps, and file helpers."""

from datetime import datetime, timezone

from slackcli import config
from slackcli._utils import (
    format_file_size,
    format_relative_time,
    format_ts_for_json,
    format_ts_iso,
    format_ts_pretty,
    log_debug,
    log_warning,
    unique_path,
)

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)
NOW_TS = NOW.timestamp()


class TestLogging:
    def test_warning_printed(self, capsys):
        log_warning("careful")
        assert capsys.readouterr().err == "[WARN] careful\n"

    def test_warning_quiet(self, monkeypatch, capsys):
        monkeypatch.setattr(config, "RUNTIME_QUIET", True)
        log_warning("careful")
        assert capsys.readouterr().err == ""

    def test_debug_only_verbose(self, monkeypatch, capsys):
        log_debug("hidden")
        assert capsys.readouterr().err == ""
        monkeypatch.setattr(config, "RUNTIME_VERBOSE", True)
        log_debug("shown")
        assert capsys.readouterr().err == "[DEBUG] shown\n"


class TestTimestamps:
    def test_iso(self):
        assert format_ts_iso("1700000000.000100") == "2023-11-14T22:13:20Z"

    def test_relative(self):
        assert format_relative_time(NOW_TS - 10, NOW) == "just now"
        assert format_relative_time(NOW_TS - 60, NOW) == "1 minute ago"
        assert format_relative_time(NOW_TS - 3 * 3600, NOW) == "3 hours ago"
        assert format_relative_time(NOW_TS - 86400, NOW) == "1 day ago"
        assert format_relative_time(NOW_TS - 90 * 86400, NOW) == "3 months ago"
        assert format_relative_time(NOW_TS - 3 * 365 * 86400, NOW) == "3 years ago"
        assert format_relative_time(NOW_TS + 100, NOW) == "in the future"

    def test_pretty(self):
        assert format_ts_pretty(str(NOW_TS - 7200), NOW) == "2023-12-31T22:00:00Z (2 hours ago)"
        assert format_ts_pretty(None) == ""
        assert format_ts_pretty("garbage") == "garbage"

    def test_for_json(self):
        out = format_ts_for_json(str(NOW_TS), NOW)
        assert out == {
            "timestamp_unix": NOW_TS,
            "timestamp_iso": "2024-01-01T00:00:00Z",
            "relative_time": "just now",
        }
        assert format_ts_for_json("nope") is None
        assert format_ts_for_json("") is None


class TestFiles:
    def test_file_size(self):
        assert format_file_size(None) == "unknown"
        assert format_file_size(512) == "512 B"
        assert format_file_size(1536) == "1.5 KB"
        assert format_file_size(5 * 1024 * 1024) == "5.0 MB"
        assert format_file_size(3 * 1024**3) == "3.0 GB"

    def test_unique_path(self, tmp_path):
        first = unique_path(str(tmp_path), "report.pdf")
        assert first == str(tmp_path / "report.pdf")
        (tmp_path / "report.pdf").write_text("x")
        (tmp_path / "report-1.pdf").write_text("x")
        assert unique_path(str(tmp_path), "report.pdf") == str(tmp_path / "report-2.pdf")

    def test_unique_path_strips_directories(self, tmp_path):
        assert unique_path(str(tmp_path), "../../etc/passwd") == str(tmp_path / "passwd")
        assert unique_path(str(tmp_path), None) == str(tmp_path / "file")
