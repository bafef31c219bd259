"""Tests for threads.py — thread linkage and search query building."""

from slackcli import config
from slackcli.threads import (
    NONE,
    REPLY,
    ROOT,
    build_search_query,
    classify,
    reconstruct,
    thread_ts_from_permalink,
)

PERMALINK = "https://acme.slack.com/archives/C1/p1700000000000100?thread_ts=1699999999.000100"


class TestReconstruct:
    def test_reply_from_permalink(self):
        out = reconstruct({"ts": "1700000000.000100", "permalink": PERMALINK})
        assert out["thread_ts"] == "1699999999.000100"
        assert out["thread_role"] == REPLY
        assert out["is_thread_reply"] is True

    def test_root_from_permalink(self):
        out = reconstruct({"ts": "1699999999.000100", "permalink": PERMALINK})
        assert out["thread_role"] == ROOT
        assert out["is_thread_reply"] is False

    def test_no_permalink(self):
        out = reconstruct({"ts": "1700000000.000100"})
        assert out["thread_role"] == NONE
        assert "thread_ts" not in out

    def test_permalink_without_thread_ts_is_silent(self, capsys):
        out = reconstruct({"ts": "1.0", "permalink": "https://acme.slack.com/archives/C1/p1"})
        assert out["thread_role"] == NONE
        assert capsys.readouterr().err == ""

    def test_permalink_without_thread_ts_verbose(self, monkeypatch, capsys):
        monkeypatch.setattr(config, "RUNTIME_VERBOSE", True)
        reconstruct({"ts": "1.0", "permalink": "https://acme.slack.com/archives/C1/p1"})
        assert "[DEBUG]" in capsys.readouterr().err

    def test_explicit_thread_ts_wins(self):
        out = reconstruct({"ts": "5.0", "thread_ts": "4.0", "permalink": PERMALINK})
        assert out["thread_ts"] == "4.0"
        assert out["thread_role"] == REPLY

    def test_input_not_mutated(self):
        match = {"ts": "1700000000.000100", "permalink": PERMALINK}
        reconstruct(match)
        assert "thread_role" not in match


class TestClassify:
    def test_cases(self):
        assert classify("1.0", None) == NONE
        assert classify("1.0", "1.0") == ROOT
        assert classify("2.0", "1.0") == REPLY


class TestPermalink:
    def test_ampersand_param(self):
        assert thread_ts_from_permalink("https://x/p1?cid=C1&thread_ts=12.5") == "12.5"

    def test_none(self):
        assert thread_ts_from_permalink(None) is None


class TestBuildSearchQuery:
    def test_adds_is_thread(self):
        assert build_search_query("deploy") == "deploy is:thread"

    def test_top_level_only(self):
        assert build_search_query("deploy", top_level_only=True) == "deploy"

    def test_shortcuts(self):
        q = build_search_query("deploy", from_user="alice", channel="ops")
        assert q == "deploy from:@alice in:#ops is:thread"

    def test_shortcuts_keep_prefixes(self):
        q = build_search_query("x", from_user="@bob", channel="#eng", top_level_only=True)
        assert q == "x from:@bob in:#eng"

    def test_no_duplicate_modifier(self):
        assert build_search_query("x is:thread") == "x is:thread"
