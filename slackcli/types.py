"""Typed output shapes for slackcli commands.

These TypedDicts document the JSON each command prints. They are also the
source of ``--format schema``: ``json_schema()`` turns a shape into a JSON
Schema document with pydantic, so the descriptor can never drift from the
declared shape. Runtime values stay plain dicts.
"""

from __future__ import annotations

from typing import Literal

from pydantic import TypeAdapter
from typing_extensions import NotRequired, TypedDict

# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class WorkspaceRow(TypedDict):
    workspace_id: str
    workspace_name: str
    auth_type: Literal["standard", "browser"]
    is_default: bool


class WorkspaceListOutput(TypedDict):
    workspaces: list[WorkspaceRow]


class ParseCurlOutput(TypedDict):
    workspace_name: str
    workspace_url: str
    xoxd_token: str
    xoxc_token: str


class LoginOutput(TypedDict):
    ok: bool
    workspace_id: str
    workspace_name: str
    auth_type: Literal["standard", "browser"]
    is_default: bool
    token_type: NotRequired[str]
    workspace_url: NotRequired[str]


class AuthActionOutput(TypedDict):
    ok: bool
    action: Literal["set-default", "remove", "logout"]
    workspace_id: NotRequired[str | None]


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserSummary(TypedDict):
    id: str
    name: NotRequired[str | None]
    real_name: NotRequired[str | None]
    email: NotRequired[str | None]


class UserProfile(TypedDict):
    id: str
    name: NotRequired[str | None]
    real_name: NotRequired[str | None]
    display_name: NotRequired[str | None]
    email: NotRequired[str | None]
    title: NotRequired[str | None]
    is_bot: NotRequired[bool | None]
    is_admin: NotRequired[bool | None]
    deleted: NotRequired[bool | None]
    tz: NotRequired[str | None]


class UserListOutput(TypedDict):
    users: list[UserProfile]
    total_count: int
    has_more: bool
    next_cursor: NotRequired[str | None]


class UserSearchOutput(TypedDict):
    query: str
    users: list[UserProfile]
    match_count: int


class UserInfoOutput(TypedDict):
    users: list[UserProfile]


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


class FileRow(TypedDict):
    id: str
    name: str
    title: NotRequired[str | None]
    mimetype: NotRequired[str | None]
    filetype: NotRequired[str | None]
    size: NotRequired[int | None]
    url_private: NotRequired[str | None]
    url_private_download: NotRequired[str | None]
    permalink: NotRequired[str | None]
    mode: NotRequired[str | None]
    created: NotRequired[int | None]
    user: NotRequired[str | None]


class DownloadedFile(TypedDict):
    file_id: str
    name: str
    path: str
    size: int
    mimetype: NotRequired[str | None]


class DownloadFailure(TypedDict):
    file_id: str
    error: str


class FileInfoOutput(TypedDict):
    file: FileRow


class FileListOutput(TypedDict):
    channel_id: str
    files: list[FileRow]
    total: int
    page: int
    page_count: int


class FileDownloadOutput(TypedDict):
    output_dir: str
    downloads: list[DownloadedFile]
    errors: NotRequired[list[DownloadFailure]]


# ---------------------------------------------------------------------------
# Conversations
# ---------------------------------------------------------------------------


class ConversationRow(TypedDict):
    id: str
    name: str | None
    type: Literal["public_channel", "private_channel", "mpim", "im"]
    is_archived: NotRequired[bool | None]
    topic: NotRequired[str | None]
    user_id: NotRequired[str | None]
    user: NotRequired[UserSummary]


class ConversationListOutput(TypedDict):
    channels: list[ConversationRow]
    users: NotRequired[dict[str, UserSummary]]
    has_more: bool
    next_cursor: NotRequired[str | None]


class Reaction(TypedDict):
    name: str
    count: int


class MessageRow(TypedDict):
    ts: str
    text: str
    type: str
    thread_ts: NotRequired[str | None]
    user: NotRequired[str | None]
    username: NotRequired[str | None]
    reply_count: NotRequired[int | None]
    reactions: NotRequired[list[Reaction]]
    bot_id: NotRequired[str | None]
    files: NotRequired[list[FileRow]]


class ConversationReadOutput(TypedDict):
    channel_id: str
    message_count: int
    messages: list[MessageRow]
    has_more: bool
    next_cursor: NotRequired[str | None]
    users: NotRequired[dict[str, UserSummary]]
    downloaded_files: NotRequired[list[DownloadedFile]]
    download_errors: NotRequired[list[DownloadFailure]]


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class TimestampInfo(TypedDict):
    timestamp_unix: float
    timestamp_iso: str
    relative_time: str


class SentMessage(TypedDict):
    text: str
    ts: str


class MessageSendOutput(TypedDict):
    ok: bool
    channel: str
    ts: str
    ts_formatted: NotRequired[TimestampInfo | None]
    message: NotRequired[SentMessage]


class MessageReactOutput(TypedDict):
    ok: bool
    channel: str
    timestamp: str
    timestamp_formatted: NotRequired[TimestampInfo | None]
    emoji: str
    action: Literal["add", "remove"]


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


class ChannelRef(TypedDict):
    id: str
    name: NotRequired[str | None]


class SearchMatchRow(TypedDict):
    ts: str
    text: str
    channel: ChannelRef
    username: NotRequired[str | None]
    user: NotRequired[str | None]
    permalink: NotRequired[str | None]
    thread_ts: NotRequired[str | None]
    reply_count: NotRequired[int | None]
    is_thread_reply: bool
    thread_role: Literal["none", "root", "reply"]


class SearchMessagesOutput(TypedDict):
    query: str
    messages: list[SearchMatchRow]
    total: int
    page: int
    page_count: int


def json_schema(shape) -> dict:
    """JSON Schema document describing *shape*."""
    schema = TypeAdapter(shape).json_schema()
    schema.setdefault("$schema", "https://json-schema.org/draft/2020-12/schema")
    return schema
