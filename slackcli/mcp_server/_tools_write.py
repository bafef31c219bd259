"""Write tools: post messages and reactions (2 tools)."""

from __future__ import annotations

from slackcli.exceptions import CliError
from slackcli.mcp_server._core import _call, _contract_error, _finalize_tool_result
from slackcli.mcp_server._security import _validate_input


def send_message(
    recipient_id: str,
    message: str,
    thread_ts: str | None = None,
    workspace: str | None = None,
) -> dict:
    """Post a message to a channel, or to a user's DM when recipient_id is a U... id.

    Workspaces with an allowed_targets list only accept those recipients.

    Args:
        recipient_id: Channel id (C.../G.../D...) or user id (U...).
        message: Message text (max 40000 chars).
        thread_ts: Root ts to reply in a thread.

    Returns:
        Dict with ok, channel, ts, ts_formatted.
    """
    try:
        message = _validate_input(message, "message")
    except CliError as e:
        return _finalize_tool_result(_contract_error(str(e), "error"))
    return _finalize_tool_result(
        _call(
            "send_message",
            workspace=workspace,
            recipient_id=recipient_id,
            text=message,
            thread_ts=thread_ts,
        )
    )


def add_reaction(
    channel_id: str, timestamp: str, emoji: str, workspace: str | None = None
) -> dict:
    """Add an emoji reaction (name without colons, e.g. thumbsup) to a message."""
    try:
        emoji = _validate_input(emoji, "emoji")
    except CliError as e:
        return _finalize_tool_result(_contract_error(str(e), "error"))
    return _finalize_tool_result(
        _call(
            "react",
            workspace=workspace,
            channel_id=channel_id,
            timestamp=timestamp,
            emoji=emoji,
        )
    )


def register(mcp):
    """Register all write tools with the FastMCP instance."""
    mcp.tool()(send_message)
    mcp.tool()(add_reaction)
