"""Conversation formatters: channel listing and message history."""

from slackcli._utils import format_ts_pretty
from slackcli.formatters._table import _one_line, _sanitize_str, _table, _trunc

_TYPE_LABELS = {
    "public_channel": "public",
    "private_channel": "private",
    "mpim": "group DM",
    "im": "DM",
}


def _conversation_label(conv):
    if conv.get("type") == "im":
        user = conv.get("user") or {}
        who = user.get("real_name") or user.get("name") or conv.get("user_id") or "?"
        return f"@{who}"
    if conv.get("type") in ("public_channel", "private_channel"):
        return f"#{conv.get('name') or conv.get('id')}"
    return conv.get("name") or conv.get("id", "")


def format_conversations_table(result):
    """Format conversations as a table; DMs show the other person's name."""
    conversations = result.get("channels", [])
    if not conversations:
        return "No conversations found."
    cols = [("Name", 32), ("Type", 9), ("Arch", 5), ("Topic", 34), ("ID", 0)]
    rows = []
    for conv in conversations:
        rows.append(
            (
                _trunc(_conversation_label(conv), 32),
                _TYPE_LABELS.get(conv.get("type"), conv.get("type") or "?"),
                "yes" if conv.get("is_archived") else "",
                _one_line(conv.get("topic"), 34),
                conv.get("id", ""),
            )
        )
    footer = f"Total: {len(conversations)} conversations"
    if result.get("has_more"):
        footer += f" (more available, --cursor {result.get('next_cursor')})"
    return _table(cols, rows, footer)


def _author(msg, users):
    if msg.get("username"):
        return msg["username"]
    user_id = msg.get("user")
    if user_id and user_id in users:
        return users[user_id].get("real_name") or users[user_id].get("name") or user_id
    return user_id or msg.get("bot_id") or "unknown"


def format_conversation_read(result):
    """Format message history oldest-first, replies indented under their root."""
    messages = result.get("messages", [])
    if not messages:
        return "No messages found."
    users = result.get("users") or {}
    lines = [f"Conversation {result.get('channel_id')} ({len(messages)} messages)", ""]
    for msg in messages:
        is_reply = msg.get("thread_ts") and msg.get("thread_ts") != msg.get("ts")
        indent = "    " if is_reply else ""
        lines.append(f"{indent}{_author(msg, users)}  {format_ts_pretty(msg.get('ts'))}")
        for text_line in (_sanitize_str(msg.get("text")) or "").splitlines() or [""]:
            lines.append(f"{indent}  {text_line}")
        extras = []
        if msg.get("reply_count"):
            extras.append(f"{msg['reply_count']} replies (thread {msg.get('ts')})")
        for reaction in msg.get("reactions") or []:
            extras.append(f":{reaction.get('name')}: {reaction.get('count', 0)}")
        for f in msg.get("files") or []:
            extras.append(f"file {f.get('name')} ({f.get('id')})")
        if extras:
            lines.append(f"{indent}  [{', '.join(extras)}]")
        lines.append("")
    downloaded = result.get("downloaded_files") or []
    if downloaded:
        lines.append(f"Downloaded {len(downloaded)} files:")
        lines.extend(f"  {d.get('path')}" for d in downloaded)
    for err in result.get("download_errors") or []:
        lines.append(f"  failed {err.get('file_id')}: {err.get('error')}")
    if result.get("has_more"):
        lines.append(f"More messages available: --cursor {result.get('next_cursor')}")
    return "\n".join(lines).rstrip()
