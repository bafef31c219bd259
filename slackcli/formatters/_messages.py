"""Formatters for message mutations and message search."""

from slackcli._utils import format_ts_pretty
from slackcli.formatters._table import _one_line, _table, _trunc


def format_message_sent(result):
    return (
        f"Message sent to {result.get('channel')} "
        f"(ts {result.get('ts')}, {format_ts_pretty(result.get('ts'))})"
    )


def format_reaction(result):
    verb = "Added" if result.get("action") == "add" else "Removed"
    prep = "to" if result.get("action") == "add" else "from"
    return (
        f"{verb} :{result.get('emoji')}: {prep} message {result.get('timestamp')} "
        f"in {result.get('channel')}"
    )


_ROLE_LABELS = {"none": "", "root": "thread", "reply": "reply"}


def format_search_results(result):
    """Format search matches with thread role and location."""
    matches = result.get("messages", [])
    if not matches:
        return f"No messages found for: {result.get('query')}"
    cols = [("When", 20), ("Channel", 18), ("From", 14), ("Thread", 7), ("Text", 0)]
    rows = []
    for m in matches:
        channel = m.get("channel") or {}
        rows.append(
            (
                format_ts_pretty(m.get("ts")).split(" ")[0],
                _trunc("#" + (channel.get("name") or channel.get("id") or "?"), 18),
                _trunc(m.get("username") or m.get("user") or "?", 14),
                _ROLE_LABELS.get(m.get("thread_role"), ""),
                _one_line(m.get("text"), 80),
            )
        )
    footer = (
        f"Showing {len(matches)} of {result.get('total', len(matches))} matches "
        f"(page {result.get('page', 1)}/{result.get('page_count', 1)})"
    )
    return _table(cols, rows, footer)
