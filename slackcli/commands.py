"""
Command implementations for slackcli.
Each cmd_*() function receives an argparse.Namespace and handles one CLI command.

Business logic lives in client.py (SlackClient). These thin wrappers
handle argparse → keyword args, format selection, and formatter dispatch.
``--format schema`` is answered before any workspace is resolved, so it
never touches the network or the credential store.
"""

import sys

from slackcli import input_sources
from slackcli.client import SlackClient, authenticate, login_output
from slackcli.curl_parser import looks_like_curl_command, parse_curl_command
from slackcli.exceptions import CliError, NotCurlCommandError
from slackcli.formatters import (
    emit_schema,
    format_conversation_read,
    format_conversations_table,
    format_download_report,
    format_file_info,
    format_files_table,
    format_login,
    format_message_sent,
    format_parse_curl,
    format_reaction,
    format_search_results,
    format_user_info,
    format_user_search,
    format_users_table,
    format_workspaces_table,
    render,
)
from slackcli.models import BrowserAuth, TokenAuth
from slackcli.types import (
    AuthActionOutput,
    ConversationListOutput,
    ConversationReadOutput,
    FileDownloadOutput,
    FileInfoOutput,
    FileListOutput,
    LoginOutput,
    MessageReactOutput,
    MessageSendOutput,
    ParseCurlOutput,
    SearchMessagesOutput,
    UserInfoOutput,
    UserListOutput,
    UserSearchOutput,
    WorkspaceListOutput,
)
from slackcli.workspaces import WorkspaceStore

EXTRACT_TOKENS_GUIDE = """\
How to extract browser tokens:

1. Open your Slack workspace in a web browser
2. Open Developer Tools (F12 or Cmd+Option+I)
3. Go to the Network tab
4. Refresh the page or send a message
5. Look for any Slack API request (e.g. conversations.list)

Extract the tokens:
   - xoxd token: in the "Cookie" header, look for d=xoxd-...
   - xoxc token: in the request payload, look for token=xoxc-...

Use the tokens:
   slackcli auth login-browser \\
     --xoxd xoxd-... \\
     --xoxc xoxc-... \\
     --workspace-url https://yourteam.slack.com

Or the easy way:
   Right-click any Slack API request > Copy > Copy as cURL, then run
   slackcli auth parse-curl --login          (paste, then press Enter twice)
   slackcli auth parse-curl --from-clipboard --login
"""

PARSE_CURL_USAGE = """\
[ERROR] No cURL command provided. Usage:
  Interactive:    slackcli auth parse-curl --login
  From clipboard: slackcli auth parse-curl --from-clipboard --login
  Piped input:    pbpaste | slackcli auth parse-curl --login"""


def _get_store(ns):
    store = getattr(ns, "store", None)
    return store if store is not None else WorkspaceStore()


def _get_client(ns):
    """Return a SlackClient for the --workspace selection (or the default)."""
    workspace = _get_store(ns).resolve(getattr(ns, "workspace", None))
    return SlackClient(workspace)


def _jq(ns):
    return getattr(ns, "jq", None)


def _run(ns, shape, formatter, produce):
    """Schema short-circuit, then build a client, fetch, and render."""
    if ns.format == "schema":
        emit_schema(shape)
        return None
    data = produce(_get_client(ns))
    render(data, shape, ns.format, formatter, _jq(ns))
    return data


# ---------------------------------------------------------------------------
# auth
# ---------------------------------------------------------------------------


def _save_login(ns, workspace):
    store = _get_store(ns)
    store.add(workspace)
    out = login_output(workspace, store.default_id() == workspace.workspace_id)
    render(out, LoginOutput, ns.format, format_login, _jq(ns))


def cmd_auth_login(ns):
    if ns.format == "schema":
        emit_schema(LoginOutput)
        return
    credential = TokenAuth.from_token(ns.token)
    _save_login(ns, authenticate(credential, ns.workspace_name))


def _normalize_workspace_url(url):
    url = (url or "").strip().rstrip("/")
    if not url:
        raise CliError("[ERROR] --workspace-url cannot be empty.")
    if not url.startswith(("https://", "http://")):
        url = f"https://{url}"
    return url


def cmd_auth_login_browser(ns):
    if ns.format == "schema":
        emit_schema(LoginOutput)
        return
    if not ns.xoxd.startswith("xoxd-"):
        raise CliError("[ERROR] --xoxd must be a browser session token (xoxd-...).")
    if not ns.xoxc.startswith("xoxc-"):
        raise CliError("[ERROR] --xoxc must be a browser API token (xoxc-...).")
    credential = BrowserAuth(
        xoxd_token=ns.xoxd,
        xoxc_token=ns.xoxc,
        workspace_url=_normalize_workspace_url(ns.workspace_url),
    )
    _save_login(ns, authenticate(credential, ns.workspace_name))


def cmd_auth_list(ns):
    if ns.format == "schema":
        emit_schema(WorkspaceListOutput)
        return
    store = _get_store(ns)
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
    render({"workspaces": rows}, WorkspaceListOutput, ns.format, format_workspaces_table, _jq(ns))


def _auth_action(ns, action, workspace_id, message):
    out = {"ok": True, "action": action, "workspace_id": workspace_id}
    render(out, AuthActionOutput, ns.format, lambda _data: f"OK: {message}", _jq(ns))


def cmd_auth_set_default(ns):
    if ns.format == "schema":
        emit_schema(AuthActionOutput)
        return
    _get_store(ns).set_default(ns.workspace_id)
    _auth_action(ns, "set-default", ns.workspace_id, f"{ns.workspace_id} is the default workspace")


def cmd_auth_remove(ns):
    if ns.format == "schema":
        emit_schema(AuthActionOutput)
        return
    _get_store(ns).remove(ns.workspace_id)
    _auth_action(ns, "remove", ns.workspace_id, f"removed workspace {ns.workspace_id}")


def cmd_auth_logout(ns):
    if ns.format == "schema":
        emit_schema(AuthActionOutput)
        return
    _get_store(ns).clear()
    _auth_action(ns, "logout", None, "logged out from all workspaces")


def cmd_auth_extract_tokens(ns):
    print(EXTRACT_TOKENS_GUIDE)


def _read_curl_input(ns):
    """Pick the cURL text: argument, clipboard, piped stdin, then interactive prompt."""
    if ns.curl_command:
        return ns.curl_command
    if ns.from_clipboard:
        text = input_sources.read_clipboard()
        if not looks_like_curl_command(text):
            raise NotCurlCommandError(
                "[ERROR] Clipboard content does not appear to be a cURL command. "
                "In DevTools right-click the request > Copy > Copy as cURL."
            )
        return text
    if input_sources.has_piped_input():
        return input_sources.read_piped_input()
    if input_sources.is_interactive_terminal():
        return input_sources.read_interactive_input(
            "Paste your cURL command (press Enter twice when done):",
            hint="Copy it from browser DevTools (right-click > Copy > Copy as cURL)",
        )
    return ""


def cmd_auth_parse_curl(ns):
    if ns.format == "schema":
        emit_schema(ParseCurlOutput)
        return
    text = _read_curl_input(ns)
    if not text or not text.strip():
        raise CliError(PARSE_CURL_USAGE)
    parsed = parse_curl_command(text)
    if not ns.login:
        render(parsed.as_output(), ParseCurlOutput, ns.format, format_parse_curl, _jq(ns))
        return
    credential = BrowserAuth(
        xoxd_token=parsed.xoxd_token,
        xoxc_token=parsed.xoxc_token,
        workspace_url=parsed.workspace_url,
    )
    workspace = authenticate(credential, parsed.workspace_name)
    store = _get_store(ns)
    store.add(workspace)
    if ns.format == "pretty":
        print(format_login(login_output(workspace, store.default_id() == workspace.workspace_id)))
        return
    render(parsed.as_output(), ParseCurlOutput, ns.format, None, _jq(ns))


# ---------------------------------------------------------------------------
# conversations
# ---------------------------------------------------------------------------


def cmd_conversations_list(ns):
    _run(
        ns,
        ConversationListOutput,
        format_conversations_table,
        lambda client: client.list_conversations(
            types=ns.types,
            limit=ns.limit,
            exclude_archived=ns.exclude_archived,
            cursor=ns.cursor,
            fetch_all=ns.all,
        ),
    )


def cmd_conversations_read(ns):
    _run(
        ns,
        ConversationReadOutput,
        format_conversation_read,
        lambda client: client.read_conversation(
            ns.channel_id,
            thread_ts=ns.thread_ts,
            exclude_replies=ns.exclude_replies,
            limit=ns.limit,
            oldest=ns.oldest,
            latest=ns.latest,
            cursor=ns.cursor,
            fetch_all=ns.all,
            download_files=ns.download_files,
            output_dir=ns.output_dir,
        ),
    )


# ---------------------------------------------------------------------------
# messages
# ---------------------------------------------------------------------------


def cmd_messages_send(ns):
    _run(
        ns,
        MessageSendOutput,
        format_message_sent,
        lambda client: client.send_message(ns.recipient_id, ns.message, thread_ts=ns.thread_ts),
    )


def cmd_messages_react(ns):
    _run(
        ns,
        MessageReactOutput,
        format_reaction,
        lambda client: client.react(ns.channel_id, ns.timestamp, ns.emoji),
    )


def cmd_messages_unreact(ns):
    _run(
        ns,
        MessageReactOutput,
        format_reaction,
        lambda client: client.react(ns.channel_id, ns.timestamp, ns.emoji, remove=True),
    )


# ---------------------------------------------------------------------------
# search
# ---------------------------------------------------------------------------


def cmd_search_messages(ns):
    _run(
        ns,
        SearchMessagesOutput,
        format_search_results,
        lambda client: client.search_messages(
            ns.query,
            from_user=ns.from_user,
            channel=ns.channel,
            sort=ns.sort,
            sort_dir=ns.sort_dir,
            count=ns.count,
            page=ns.page,
            highlight=ns.highlight,
            top_level_only=ns.top_level_only,
            fetch_all=ns.all,
        ),
    )


# ---------------------------------------------------------------------------
# users
# ---------------------------------------------------------------------------


def cmd_users_list(ns):
    _run(
        ns,
        UserListOutput,
        format_users_table,
        lambda client: client.list_users(
            limit=ns.limit,
            cursor=ns.cursor,
            fetch_all=ns.all,
            include_bots=ns.include_bots,
            include_deleted=ns.include_deleted,
        ),
    )


def cmd_users_search(ns):
    _run(
        ns,
        UserSearchOutput,
        format_user_search,
        lambda client: client.search_users(
            ns.query, include_bots=ns.include_bots, include_deleted=ns.include_deleted
        ),
    )


def cmd_users_info(ns):
    _run(ns, UserInfoOutput, format_user_info, lambda client: client.get_users(ns.user_ids))


# ---------------------------------------------------------------------------
# files
# ---------------------------------------------------------------------------


def cmd_files_info(ns):
    _run(ns, FileInfoOutput, format_file_info, lambda client: client.get_file(ns.file_id))


def cmd_files_list(ns):
    _run(
        ns,
        FileListOutput,
        format_files_table,
        lambda client: client.list_files(
            ns.channel_id, limit=ns.limit, types=ns.types, page=ns.page, fetch_all=ns.all
        ),
    )


def cmd_files_download(ns):
    data = _run(
        ns,
        FileDownloadOutput,
        format_download_report,
        lambda client: client.download_files(ns.file_ids, output_dir=ns.output_dir),
    )
    if data is not None and not data["downloads"]:
        sys.stdout.flush()
        raise CliError("[ERROR] No files were downloaded.")
