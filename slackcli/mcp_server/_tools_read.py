"""Read tools: workspaces, conversations, search, users, files (9 tools)."""

from __future__ import annotations

from typing import Literal

from slackcli.exceptions import CliError
from slackcli.mcp_server import _core
from slackcli.mcp_server._core import (
    _call,
    _contract_error,
    _finalize_tool_result,
)
from slackcli.mcp_server._security import (
    _sanitize_conversations,
    _sanitize_messages,
    _validate_input,
)


def _is_error(result) -> bool:
    return isinstance(result, dict) and result.get("ok") is False


def list_workspaces() -> dict:
    """List authenticated workspaces (id, name, auth type, default flag).

    Returns:
        Dict with workspaces (list).
    """
    try:
        store = _core._get_store()
        default_id = store.default_id()
        rows = [
            {
                "workspace_id": ws.workspace_id,
                "workspace_name": ws.workspace_name,
                "auth_type": ws.auth_type,
                "is_default": ws.workspace_id == default_id,
            }
            for ws in store.all()
        ]
    except CliError as e:
        return _finalize_tool_result(_contract_error(str(e), "setup"))
    return _finalize_tool_result({"workspaces": rows})


def list_conversations(
    types: str | None = None,
    limit: int = 100,
    exclude_archived: bool = False,
    cursor: str | None = None,
    fetch_all: bool = False,
    workspace: str | None = None,
) -> dict:
    """List channels, private channels, group DMs and DMs. DMs include the other user.

    Args:
        types: Comma-separated. Values: public_channel, private_channel, mpim, im.
        limit: Page size (default 100).
        cursor: next_cursor from a previous call.
        fetch_all: Follow cursors until the last page.
        workspace: Workspace id or name (default workspace when omitted).

    Returns:
        Dict with channels, has_more, next_cursor, users.
    """
    result = _call(
        "list_conversations",
        workspace=workspace,
        types=types,
        limit=limit,
        exclude_archived=exclude_archived,
        cursor=cursor,
        fetch_all=fetch_all,
    )
    if _is_error(result):
        return _finalize_tool_result(result)
    return _finalize_tool_result(_sanitize_conversations(result))


def read_conversation(
    channel_id: str,
    thread_ts: str | None = None,
    exclude_replies: bool = False,
    limit: int = 100,
    oldest: str | None = None,
    latest: str | None = None,
    cursor: str | None = None,
    workspace: str | None = None,
) -> dict:
    """Read channel history (oldest first), or one thread when thread_ts is given.

    Args:
        channel_id: Channel, group or DM id (C..., G..., D...).
        thread_ts: Root message ts to read a single thread.
        exclude_replies: Drop thread replies from channel history.
        oldest/latest: Slack ts bounds.

    Returns:
        Dict with channel_id, message_count, messages, has_more, users.
    """
    result = _call(
        "read_conversation",
        workspace=workspace,
        channel_id=channel_id,
        thread_ts=thread_ts,
        exclude_replies=exclude_replies,
        limit=limit,
        oldest=oldest,
        latest=latest,
        cursor=cursor,
    )
    if _is_error(result):
        return _finalize_tool_result(result)
    return _finalize_tool_result(_sanitize_messages(result))


def search_messages(
    query: str,
    from_user: str | None = None,
    channel: str | None = None,
    sort: Literal["score", "timestamp"] = "timestamp",
    sort_dir: Literal["asc", "desc"] = "desc",
    count: int = 20,
    page: int = 1,
    top_level_only: bool = False,
    workspace: str | None = None,
) -> dict:
    """Search messages. Matches inside threads are included unless top_level_only.

    Args:
        query: Slack search query; supports from:@user, in:#channel, after:YYYY-MM-DD.
        from_user: Shortcut for from:@user.
        channel: Shortcut for in:#channel.

    Returns:
        Dict with query, messages (each with thread_role none/root/reply), total,
        page, page_count.
    """
    try:
        query = _validate_input(query, "query")
    except CliError as e:
        return _finalize_tool_result(_contract_error(str(e), "error"))
    result = _call(
        "search_messages",
        workspace=workspace,
        query=query,
        from_user=from_user,
        channel=channel,
        sort=sort,
        sort_dir=sort_dir,
        count=count,
        page=page,
        top_level_only=top_level_only,
    )
    if _is_error(result):
        return _finalize_tool_result(result)
    return _finalize_tool_result(_sanitize_messages(result))


def list_users(
    limit: int = 100,
    cursor: str | None = None,
    include_bots: bool = False,
    include_deleted: bool = False,
    workspace: str | None = None,
) -> dict:
    """List workspace members (bots and deactivated users hidden by default).

    Returns:
        Dict with users, total_count, has_more, next_cursor.
    """
    return _finalize_tool_result(
        _call(
            "list_users",
            workspace=workspace,
            limit=limit,
            cursor=cursor,
            include_bots=include_bots,
            include_deleted=include_deleted,
        )
    )


def search_users(
    query: str,
    include_bots: bool = False,
    include_deleted: bool = False,
    workspace: str | None = None,
) -> dict:
    """Find users whose handle, name, display name or email contains query."""
    return _finalize_tool_result(
        _call(
            "search_users",
            workspace=workspace,
            query=query,
            include_bots=include_bots,
            include_deleted=include_deleted,
        )
    )


def get_users(user_ids: list[str], workspace: str | None = None) -> dict:
    """Full profiles for user ids (U...)."""
    return _finalize_tool_result(_call("get_users", workspace=workspace, user_ids=user_ids))


def get_file(file_id: str, workspace: str | None = None) -> dict:
    """File metadata (name, type, size, permalink)."""
    return _finalize_tool_result(_call("get_file", workspace=workspace, file_id=file_id))


def list_files(
    channel_id: str,
    limit: int = 20,
    types: str | None = None,
    page: int = 1,
    workspace: str | None = None,
) -> dict:
    """Files shared in a channel, one page at a time."""
    return _finalize_tool_result(
        _call(
            "list_files",
            workspace=workspace,
            channel_id=channel_id,
            limit=limit,
            types=types,
            page=page,
        )
    )


def register(mcp):
    """Register all read tools with the FastMCP instance."""
    mcp.tool()(list_workspaces)
    mcp.tool()(list_conversations)
    mcp.tool()(read_conversation)
    mcp.tool()(search_messages)
    mcp.tool()(list_users)
    mcp.tool()(search_users)
    mcp.tool()(get_users)
    mcp.tool()(get_file)
    mcp.tool()(list_files)
