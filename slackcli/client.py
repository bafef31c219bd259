"""
SlackClient — public Python API for reading and posting to Slack workspaces.

Single entry point shared by the CLI commands and the MCP server.
All high-level methods return flat dicts suitable for JSON serialization
(shapes documented in slackcli.types). Raises CliError subclasses on failure.
"""

from __future__ import annotations

import os
import tempfile
from concurrent.futures import ThreadPoolExecutor

# TypedDict return types live in slackcli.types for documentation.
# Method signatures use plain dict[str, Any] like the rest of the package.
from typing import Any

from slackcli import config, pagination, threads
from slackcli._utils import format_ts_for_json, log_debug, log_warning, unique_path
from slackcli.api import Dispatcher
from slackcli.exceptions import CliError, ConfigError, DownloadError
from slackcli.models import BrowserAuth, TokenAuth, WorkspaceConfig

# ---------------------------------------------------------------------------
# Row builders
# ---------------------------------------------------------------------------


def _conversation_type(channel):
    if channel.get("is_im"):
        return "im"
    if channel.get("is_mpim"):
        return "mpim"
    if channel.get("is_private"):
        return "private_channel"
    return "public_channel"


def _user_summary(user):
    profile = user.get("profile") or {}
    return {
        "id": user.get("id"),
        "name": user.get("name"),
        "real_name": user.get("real_name") or profile.get("real_name"),
        "email": profile.get("email"),
    }


def _user_row(user):
    profile = user.get("profile") or {}
    return {
        "id": user.get("id"),
        "name": user.get("name"),
        "real_name": user.get("real_name") or profile.get("real_name"),
        "display_name": profile.get("display_name"),
        "email": profile.get("email"),
        "title": profile.get("title"),
        "is_bot": user.get("is_bot"),
        "is_admin": user.get("is_admin"),
        "deleted": user.get("deleted"),
        "tz": user.get("tz"),
    }


def _file_row(f):
    return {
        "id": f.get("id"),
        "name": f.get("name"),
        "title": f.get("title"),
        "mimetype": f.get("mimetype"),
        "filetype": f.get("filetype"),
        "size": f.get("size"),
        "url_private": f.get("url_private"),
        "url_private_download": f.get("url_private_download"),
        "permalink": f.get("permalink"),
        "mode": f.get("mode"),
        "created": f.get("created"),
        "user": f.get("user"),
    }


def _message_row(msg, users):
    row = {
        "ts": msg.get("ts"),
        "thread_ts": msg.get("thread_ts"),
        "user": msg.get("user"),
        "text": msg.get("text") or "",
        "type": msg.get("type") or "message",
        "reply_count": msg.get("reply_count"),
        "bot_id": msg.get("bot_id"),
    }
    user = users.get(msg.get("user")) if msg.get("user") else None
    if user:
        row["username"] = user.get("real_name") or user.get("name")
    elif msg.get("username"):
        row["username"] = msg["username"]
    if msg.get("reactions"):
        row["reactions"] = [
            {"name": r.get("name"), "count": r.get("count", 0)} for r in msg["reactions"]
        ]
    if msg.get("files"):
        row["files"] = [_file_row(f) for f in msg["files"]]
    return row


def _search_row(match):
    channel = match.get("channel") or {}
    row = {
        "ts": match.get("ts"),
        "text": match.get("text") or "",
        "username": match.get("username"),
        "user": match.get("user"),
        "channel": {"id": channel.get("id") or "", "name": channel.get("name")},
        "permalink": match.get("permalink"),
        "thread_ts": match.get("thread_ts"),
        "reply_count": match.get("reply_count"),
    }
    return threads.reconstruct(row)


def _keep_user(user, include_bots, include_deleted):
    if not include_bots and (user.get("is_bot") or user.get("is_app_user")):
        return False
    if not include_deleted and user.get("deleted"):
        return False
    return True


def _matches_user_query(user, needle):
    profile = user.get("profile") or {}
    haystack = (
        user.get("name"),
        user.get("real_name"),
        profile.get("display_name"),
        profile.get("email"),
    )
    return any(needle in (value or "").lower() for value in haystack)


def _policy(fetch_all):
    return pagination.ALL if fetch_all else pagination.SINGLE


def _ts_key(msg):
    try:
        return float(msg.get("ts") or 0)
    except (TypeError, ValueError):
        return 0.0


def _resolve_output_dir(output_dir):
    """Create *output_dir*, or a fresh temp directory when none was given."""
    try:
        if output_dir:
            path = os.path.abspath(os.path.expanduser(output_dir))
            os.makedirs(path, exist_ok=True)
            return path
        return tempfile.mkdtemp(prefix="slackcli-downloads-")
    except OSError as e:
        raise DownloadError(f"[ERROR] Cannot create output directory: {e}") from e


def _discard(path):
    """Remove a partially written download, if any."""
    try:
        os.remove(path)
    except OSError:
        pass


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------


def authenticate(credential, workspace_name=None, dispatcher=None) -> WorkspaceConfig:
    """Verify *credential* with ``auth.test`` and return the workspace it belongs to.

    Args:
        credential: TokenAuth or BrowserAuth.
        workspace_name: Label to store; defaults to the team name reported
            by Slack.
        dispatcher: Optional pre-built Dispatcher (tests).

    Returns:
        WorkspaceConfig keyed by the team id. Nothing is persisted here.
    """
    provisional = WorkspaceConfig(
        workspace_id="pending",
        workspace_name=workspace_name or "pending",
        credential=credential,
    )
    dispatcher = dispatcher or Dispatcher(provisional)
    info = dispatcher.execute("auth.test")
    team_id = info.get("team_id")
    if not team_id:
        raise ConfigError("[ERROR] auth.test did not return a team_id.")
    return WorkspaceConfig(
        workspace_id=team_id,
        workspace_name=workspace_name or info.get("team") or team_id,
        credential=credential,
    )


def login_output(workspace, is_default) -> dict[str, Any]:
    out = {
        "ok": True,
        "workspace_id": workspace.workspace_id,
        "workspace_name": workspace.workspace_name,
        "auth_type": workspace.auth_type,
        "is_default": is_default,
    }
    if isinstance(workspace.credential, TokenAuth):
        out["token_type"] = workspace.credential.token_type
    elif isinstance(workspace.credential, BrowserAuth):
        out["workspace_url"] = workspace.credential.workspace_url
    return out


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class SlackClient:
    """Public API surface for one Slack workspace.

    High-level methods use keyword-only options and return plain dicts
    suitable for JSON serialization. Raises CliError/RemoteError on failure.
    """

    def __init__(self, workspace, *, dispatcher=None):
        self.workspace = workspace
        self.dispatcher = dispatcher or Dispatcher(workspace)

    def execute(self, method: str, params: dict | None = None) -> dict[str, Any]:
        """Run one Web API method and return its (ok) envelope."""
        return self.dispatcher.execute(method, params)

    # -------------------------------------------------------------------
    # Enrichment
    # -------------------------------------------------------------------

    def get_users_info(self, user_ids) -> dict[str, dict]:
        """Look up users concurrently; lookups that fail are left out.

        At most ``config.ENRICH_MAX_WORKERS`` requests run at once. The
        returned mapping only holds users that resolved.
        """
        ids = list(dict.fromkeys(uid for uid in user_ids if uid))
        if not ids:
            return {}

        def _lookup(uid):
            try:
                return uid, self.execute("users.info", {"user": uid}).get("user")
            except CliError as e:
                log_debug(f"users.info {uid} failed: {e}")
                return uid, None

        workers = min(config.ENRICH_MAX_WORKERS, len(ids))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(_lookup, ids))
        return {uid: user for uid, user in results if user}

    # -------------------------------------------------------------------
    # Conversations
    # -------------------------------------------------------------------

    def list_conversations(
        self,
        *,
        types: str | None = None,
        limit: int = 100,
        exclude_archived: bool = False,
        cursor: str | None = None,
        fetch_all: bool = False,
    ) -> dict[str, Any]:
        """List conversations, enriching DMs with the other user's profile.

        Returns:
            dict with channels, has_more, next_cursor and (when any DM
            was listed) a users map keyed by user id.
        """
        types = types or "public_channel,private_channel,mpim,im"
        unknown = [t for t in types.split(",") if t.strip() not in config.VALID_CONVERSATION_TYPES]
        if unknown:
            raise CliError(
                f"[ERROR] Invalid conversation type(s): {', '.join(unknown)}. "
                f"Use: {', '.join(sorted(config.VALID_CONVERSATION_TYPES))}"
            )

        def _fetch(page_cursor):
            response = self.execute(
                "conversations.list",
                {
                    "types": types,
                    "limit": limit,
                    "exclude_archived": exclude_archived or None,
                    "cursor": page_cursor,
                },
            )
            return pagination.cursor_page(response, "channels")

        result = pagination.walk(_fetch, _policy(fetch_all), cursor)
        dm_user_ids = [
            ch.get("user") for ch in result.items if ch.get("is_im") and ch.get("user")
        ]
        users = self.get_users_info(dm_user_ids) if dm_user_ids else {}

        rows = []
        for ch in result.items:
            row = {
                "id": ch.get("id"),
                "name": ch.get("name") or None,
                "type": _conversation_type(ch),
                "is_archived": ch.get("is_archived"),
                "topic": (ch.get("topic") or {}).get("value"),
                "user_id": ch.get("user"),
            }
            if row["type"] == "im" and ch.get("user") in users:
                row["user"] = _user_summary(users[ch["user"]])
            rows.append(row)
        out = {
            "channels": rows,
            "has_more": result.has_more,
            "next_cursor": result.next_cursor,
        }
        if dm_user_ids:
            out["users"] = {uid: _user_summary(u) for uid, u in users.items()}
        return out

    def read_conversation(
        self,
        channel_id: str,
        *,
        thread_ts: str | None = None,
        exclude_replies: bool = False,
        limit: int = 100,
        oldest: str | None = None,
        latest: str | None = None,
        cursor: str | None = None,
        fetch_all: bool = False,
        download_files: bool = False,
        output_dir: str | None = None,
    ) -> dict[str, Any]:
        """Read channel history, or one thread when *thread_ts* is given.

        Messages come back oldest-first with author names resolved.
        ``exclude_replies`` drops thread replies from channel history
        (thread roots stay). With ``download_files`` every attachment is
        saved and reported under downloaded_files / download_errors.
        """
        method = "conversations.replies" if thread_ts else "conversations.history"

        def _fetch(page_cursor):
            response = self.execute(
                method,
                {
                    "channel": channel_id,
                    "ts": thread_ts,
                    "limit": limit,
                    "oldest": oldest,
                    "latest": latest,
                    "cursor": page_cursor,
                },
            )
            return pagination.cursor_page(response, "messages")

        result = pagination.walk(_fetch, _policy(fetch_all), cursor)
        messages = result.items
        if exclude_replies and not thread_ts:
            messages = [
                m for m in messages if not m.get("thread_ts") or m["thread_ts"] == m.get("ts")
            ]
        messages = sorted(messages, key=_ts_key)

        users = self.get_users_info([m.get("user") for m in messages])
        out = {
            "channel_id": channel_id,
            "message_count": len(messages),
            "messages": [_message_row(m, users) for m in messages],
            "has_more": result.has_more,
            "next_cursor": result.next_cursor,
        }
        if users:
            out["users"] = {uid: _user_summary(u) for uid, u in users.items()}

        if download_files:
            files = [f for m in messages for f in (m.get("files") or [])]
            if files:
                directory = _resolve_output_dir(output_dir)
                downloads, errors = self._download_batch(files, directory)
                out["downloaded_files"] = downloads
                if errors:
                    out["download_errors"] = errors
        return out

    # -------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------

    def send_message(
        self, recipient_id: str, text: str, *, thread_ts: str | None = None
    ) -> dict[str, Any]:
        """Post *text* to a channel, or to a user's DM when given a ``U...`` id.

        Raises CliError when the workspace has an allow-list that does not
        contain *recipient_id*.
        """
        if not text:
            raise CliError("[ERROR] Message text cannot be empty.")
        if not self.workspace.allows_target(recipient_id):
            raise CliError(
                f"[ERROR] Posting to {recipient_id} is not allowed by workspace configuration.\n"
                f"  Allowed targets: {', '.join(self.workspace.allowed_targets)}\n"
                f"  Edit allowed_targets in {config.WORKSPACES_PATH} to change this."
            )
        channel_id = recipient_id
        if recipient_id.startswith("U"):
            opened = self.execute("conversations.open", {"users": recipient_id})
            channel_id = (opened.get("channel") or {}).get("id") or recipient_id
        response = self.execute(
            "chat.postMessage", {"channel": channel_id, "text": text, "thread_ts": thread_ts}
        )
        ts = response.get("ts")
        out = {
            "ok": True,
            "channel": response.get("channel") or channel_id,
            "ts": ts,
            "ts_formatted": format_ts_for_json(ts),
        }
        message = response.get("message")
        if message:
            out["message"] = {"text": message.get("text") or text, "ts": message.get("ts") or ts}
        return out

    def react(
        self, channel_id: str, timestamp: str, emoji: str, *, remove: bool = False
    ) -> dict[str, Any]:
        """Add (or with ``remove=True`` take back) an emoji reaction."""
        name = emoji.strip(":")
        if not name:
            raise CliError("[ERROR] Emoji name cannot be empty.")
        self.execute(
            "reactions.remove" if remove else "reactions.add",
            {"channel": channel_id, "timestamp": timestamp, "name": name},
        )
        return {
            "ok": True,
            "channel": channel_id,
            "timestamp": timestamp,
            "timestamp_formatted": format_ts_for_json(timestamp),
            "emoji": name,
            "action": "remove" if remove else "add",
        }

    # -------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------

    def search_messages(
        self,
        query: str,
        *,
        from_user: str | None = None,
        channel: str | None = None,
        sort: str = "timestamp",
        sort_dir: str = "desc",
        count: int = 20,
        page: int = 1,
        highlight: bool = False,
        top_level_only: bool = False,
        fetch_all: bool = False,
    ) -> dict[str, Any]:
        """Search messages; each match carries its thread linkage.

        The query is widened with ``is:thread`` unless *top_level_only*.
        With *fetch_all* every page from *page* on is collected.
        """
        if not query or not query.strip():
            raise CliError("[ERROR] Search query cannot be empty.")
        if sort not in config.VALID_SEARCH_SORTS:
            raise CliError(f"[ERROR] Invalid sort '{sort}'. Use: score, timestamp")
        if sort_dir not in config.VALID_SORT_DIRS:
            raise CliError(f"[ERROR] Invalid sort direction '{sort_dir}'. Use: asc, desc")
        full_query = threads.build_search_query(query, from_user, channel, top_level_only)
        totals = {}

        def _fetch(page_number):
            response = self.execute(
                "search.messages",
                {
                    "query": full_query,
                    "sort": sort,
                    "sort_dir": sort_dir,
                    "count": count,
                    "page": page_number,
                    "highlight": highlight or None,
                },
            )
            body = response.get("messages") or {}
            paging = body.get("pagination") or body.get("paging") or {}
            totals.setdefault("total", body.get("total") or 0)
            totals.setdefault("page", paging.get("page") or page_number)
            totals["page_count"] = paging.get("page_count") or paging.get("pages") or 1
            return pagination.numbered_page(response, "matches", container="messages")

        result = pagination.walk(_fetch, _policy(fetch_all), page)
        return {
            "query": full_query,
            "messages": [_search_row(m) for m in result.items],
            "total": totals.get("total", len(result.items)),
            "page": totals.get("page", page),
            "page_count": totals.get("page_count", 1),
        }

    # -------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------

    def list_users(
        self,
        *,
        limit: int = 100,
        cursor: str | None = None,
        fetch_all: bool = False,
        include_bots: bool = False,
        include_deleted: bool = False,
    ) -> dict[str, Any]:
        """List workspace members, hiding bots and deactivated users by default."""

        def _fetch(page_cursor):
            response = self.execute("users.list", {"limit": limit, "cursor": page_cursor})
            return pagination.cursor_page(response, "members")

        result = pagination.walk(_fetch, _policy(fetch_all), cursor)
        members = [u for u in result.items if _keep_user(u, include_bots, include_deleted)]
        return {
            "users": [_user_row(u) for u in members],
            "total_count": len(members),
            "has_more": result.has_more,
            "next_cursor": result.next_cursor,
        }

    def search_users(
        self, query: str, *, include_bots: bool = False, include_deleted: bool = False
    ) -> dict[str, Any]:
        """Case-insensitive substring match on handle, names, and email.

        There is no server-side user search, so every page of ``users.list``
        is fetched and filtered locally.
        """
        needle = (query or "").strip().lower()
        if not needle:
            raise CliError("[ERROR] User search query cannot be empty.")

        def _fetch(page_cursor):
            response = self.execute("users.list", {"limit": 200, "cursor": page_cursor})
            return pagination.cursor_page(response, "members")

        members = pagination.walk(_fetch, pagination.ALL).items
        matches = [
            u
            for u in members
            if _matches_user_query(u, needle) and _keep_user(u, include_bots, include_deleted)
        ]
        return {
            "query": query,
            "users": [_user_row(u) for u in matches],
            "match_count": len(matches),
        }

    def get_users(self, user_ids: list[str]) -> dict[str, Any]:
        """Full profiles for the given ids; any failed lookup is an error."""
        if not user_ids:
            raise CliError("[ERROR] At least one user ID is required.")
        users = []
        for uid in user_ids:
            user = self.execute("users.info", {"user": uid}).get("user") or {}
            users.append(_user_row(user))
        return {"users": users}

    # -------------------------------------------------------------------
    # Files
    # -------------------------------------------------------------------

    def get_file(self, file_id: str) -> dict[str, Any]:
        response = self.execute("files.info", {"file": file_id})
        return {"file": _file_row(response.get("file") or {})}

    def list_files(
        self,
        channel_id: str,
        *,
        limit: int = 20,
        types: str | None = None,
        page: int = 1,
        fetch_all: bool = False,
    ) -> dict[str, Any]:
        """List files shared in a channel (page-number pagination)."""
        totals = {}

        def _fetch(page_number):
            response = self.execute(
                "files.list",
                {"channel": channel_id, "types": types, "count": limit, "page": page_number},
            )
            paging = response.get("paging") or {}
            totals.setdefault("total", paging.get("total"))
            totals.setdefault("page", paging.get("page") or page_number)
            totals["page_count"] = paging.get("pages") or 1
            return pagination.numbered_page(response, "files")

        result = pagination.walk(_fetch, _policy(fetch_all), page)
        files = [_file_row(f) for f in result.items]
        return {
            "channel_id": channel_id,
            "files": files,
            "total": totals.get("total") or len(files),
            "page": totals.get("page", page),
            "page_count": totals.get("page_count", 1),
        }

    def download_files(
        self, file_ids: list[str], *, output_dir: str | None = None
    ) -> dict[str, Any]:
        """Download files by id into *output_dir* (or a fresh temp directory).

        Each id either lands in ``downloads`` or in ``errors``; one failure
        does not stop the batch.
        """
        if not file_ids:
            raise CliError("[ERROR] At least one file ID is required.")
        directory = _resolve_output_dir(output_dir)
        files, errors = [], []
        for file_id in file_ids:
            try:
                files.append(self.execute("files.info", {"file": file_id}).get("file") or {})
            except CliError as e:
                errors.append({"file_id": file_id, "error": getattr(e, "message", None) or str(e)})
        downloads, failures = self._download_batch(files, directory)
        out = {"output_dir": directory, "downloads": downloads}
        if errors or failures:
            out["errors"] = errors + failures
        return out

    def _download_batch(self, files, directory):
        """Save each file sequentially. Returns (downloads, errors)."""
        downloads, errors = [], []
        for f in files:
            file_id = f.get("id") or "?"
            url = f.get("url_private_download") or f.get("url_private")
            if f.get("mode") == "external":
                errors.append(
                    {"file_id": file_id, "error": "External files cannot be downloaded directly"}
                )
                continue
            if not url:
                errors.append({"file_id": file_id, "error": "No download URL available"})
                continue
            path = unique_path(directory, f.get("name") or file_id)
            try:
                size, _content_type = self.dispatcher.download(url, path)
            except CliError as e:
                _discard(path)
                if isinstance(e, DownloadError):
                    log_warning(f"Failed to save {f.get('name')}: {e}")
                errors.append({"file_id": file_id, "error": getattr(e, "message", None) or str(e)})
                continue
            downloads.append(
                {
                    "file_id": file_id,
                    "name": f.get("name") or file_id,
                    "path": path,
                    "size": size,
                    "mimetype": f.get("mimetype"),
                }
            )
        return downloads, errors
