"""
slackcli — command-line client for the Slack Web API
"""

import argparse
import json
import sys

from slackcli import config
from slackcli.commands import (
    cmd_auth_extract_tokens,
    cmd_auth_list,
    cmd_auth_login,
    cmd_auth_login_browser,
    cmd_auth_logout,
    cmd_auth_parse_curl,
    cmd_auth_remove,
    cmd_auth_set_default,
    cmd_conversations_list,
    cmd_conversations_read,
    cmd_files_download,
    cmd_files_info,
    cmd_files_list,
    cmd_messages_react,
    cmd_messages_send,
    cmd_messages_unreact,
    cmd_search_messages,
    cmd_users_info,
    cmd_users_list,
    cmd_users_search,
)
from slackcli.exceptions import CliError, FilterError
from slackcli.workspaces import WorkspaceStore

HELP_TEXT = """\
Usage: slackcli <group> <command> [args...]

Global flags (accepted anywhere on the command line):
  --format json           Raw JSON output (default)
  --format pretty         Human-readable text
  --format schema         JSON Schema of the command's output (no network call)
  --jq <expr>             Filter JSON output through jq (json format only)
  --workspace <id|name>   Workspace to use instead of the default
  --quiet, -q             Suppress warnings
  --verbose, -v           HTTP request logging and diagnostics on stderr
  --version               Show version number

auth
  login --token T --workspace-name N     Log in with an app token (xoxb-/xoxp-)
  login-browser --xoxd D --xoxc C --workspace-url U [--workspace-name N]
  list                                   List authenticated workspaces
  set-default <workspace-id>             Set the default workspace
  remove <workspace-id>                  Remove one workspace
  logout                                 Remove all workspaces
  extract-tokens                         How to find browser tokens
  parse-curl [curl] [--from-clipboard] [--login]
                                         Extract browser tokens from "Copy as cURL"

conversations
  list [--types T] [--limit N] [--exclude-archived] [--cursor C] [--all]
  read <channel-id> [--thread-ts TS] [--exclude-replies] [--limit N]
       [--oldest TS] [--latest TS] [--cursor C] [--all]
       [--download-files] [--output-dir DIR]

messages
  send --recipient-id ID --message TEXT [--thread-ts TS]
  react --channel-id ID --timestamp TS --emoji NAME
  unreact --channel-id ID --timestamp TS --emoji NAME

search
  messages <query> [--from USER] [--channel NAME] [--sort score|timestamp]
           [--sort-dir asc|desc] [--count N] [--page N] [--all]
           [--highlight] [--top-level-only]
      Matches inside threads are included (is:thread) unless --top-level-only.
      Query modifiers: from:@user in:#channel has:link before:YYYY-MM-DD
      after:YYYY-MM-DD on:YYYY-MM-DD "exact phrase" -term

users
  list [--limit N] [--cursor C] [--all] [--include-bots] [--include-deleted]
  search <query> [--include-bots] [--include-deleted]
  info <user-id> [<user-id> ...]

files
  info <file-id>
  list <channel-id> [--limit N] [--types T] [--page N] [--all]
  download <file-id> [<file-id> ...] [--output-dir DIR]

Messages can only be sent to IDs in a workspace's "allowed_targets" list
when one is set in workspaces.json.
"""


# ---------------------------------------------------------------------------
# Global flag extraction (before argparse, so --format works after subcommand)
# ---------------------------------------------------------------------------


def _split_flag(arg, name):
    """Return the inline value of ``--name=value``, or None."""
    prefix = name + "="
    return arg[len(prefix) :] if arg.startswith(prefix) else None


# Subcommand options that consume the next token; their value is never a global flag.
_VALUE_OPTIONS = frozenset(
    {
        "--token",
        "--workspace-name",
        "--xoxd",
        "--xoxc",
        "--workspace-url",
        "--types",
        "--limit",
        "--cursor",
        "--thread-ts",
        "--oldest",
        "--latest",
        "--output-dir",
        "--recipient-id",
        "--message",
        "--channel-id",
        "--timestamp",
        "--emoji",
        "--from",
        "--channel",
        "--sort",
        "--sort-dir",
        "--count",
        "--page",
    }
)


def _extract_global_flags(argv):
    """Extract global flags from argv regardless of position.

    Returns (format_str, jq_expr, quiet, verbose, workspace, remaining_argv).
    Handles --version directly. The value of a subcommand option and
    everything after a literal ``--`` pass through untouched.
    """
    fmt = "json"
    jq_expr = None
    quiet = False
    verbose = False
    workspace = None
    remaining = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--":
            remaining.extend(argv[i:])
            break
        if arg in _VALUE_OPTIONS and i + 1 < len(argv):
            # joined so argparse keeps a dash-leading value
            remaining.append(f"{arg}={argv[i + 1]}")
            i += 2
            continue
        if arg == "--version":
            print(f"slackcli {config.VERSION}")
            sys.exit(0)
        elif arg in ("--quiet", "-q"):
            quiet = True
        elif arg in ("--verbose", "-v"):
            verbose = True
        elif arg == "--format" and i + 1 < len(argv):
            fmt = argv[i + 1]
            i += 1
        elif _split_flag(arg, "--format") is not None:
            fmt = _split_flag(arg, "--format")
        elif arg == "--jq" and i + 1 < len(argv):
            jq_expr = argv[i + 1]
            i += 1
        elif _split_flag(arg, "--jq") is not None:
            jq_expr = _split_flag(arg, "--jq")
        elif arg == "--workspace" and i + 1 < len(argv):
            workspace = argv[i + 1]
            i += 1
        elif _split_flag(arg, "--workspace") is not None:
            workspace = _split_flag(arg, "--workspace")
        else:
            remaining.append(arg)
        i += 1
    if fmt not in config.VALID_FORMATS:
        raise CliError(f"[ERROR] Invalid format '{fmt}'. Use: {', '.join(config.VALID_FORMATS)}")
    if jq_expr is not None and fmt != "json":
        raise CliError(f"[ERROR] --jq can only be used with --format json (got '{fmt}').")
    if quiet and verbose:
        raise CliError("[ERROR] --quiet and --verbose are mutually exclusive.")
    return fmt, jq_expr, quiet, verbose, workspace, remaining


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


class _SubcommandParser(argparse.ArgumentParser):
    """Subparser that raises CliError instead of printing full help text."""

    def error(self, message):
        raise CliError(f"[ERROR] {message}")


def _positive_int(value):
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a positive integer") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return parsed


def _add_paging(p, default_limit):
    p.add_argument("--limit", type=_positive_int, default=default_limit)
    p.add_argument("--cursor")
    p.add_argument("--all", action="store_true", help="Follow cursors to the last page")


def _group(sub, name):
    p = sub.add_parser(name)
    return p.add_subparsers(dest="action", parser_class=_SubcommandParser)


def build_parser():
    parser = _SubcommandParser(
        prog="slackcli",
        description="Command-line client for the Slack Web API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("--help", "-h", action="store_true", dest="show_help")
    sub = parser.add_subparsers(dest="command", parser_class=_SubcommandParser)

    # --- auth ---
    auth = _group(sub, "auth")
    p = auth.add_parser("login")
    p.add_argument("--token", required=True)
    p.add_argument("--workspace-name", dest="workspace_name", required=True)
    p.set_defaults(func=cmd_auth_login)

    p = auth.add_parser("login-browser")
    p.add_argument("--xoxd", required=True)
    p.add_argument("--xoxc", required=True)
    p.add_argument("--workspace-url", dest="workspace_url", required=True)
    p.add_argument("--workspace-name", dest="workspace_name")
    p.set_defaults(func=cmd_auth_login_browser)

    auth.add_parser("list").set_defaults(func=cmd_auth_list)
    p = auth.add_parser("set-default")
    p.add_argument("workspace_id")
    p.set_defaults(func=cmd_auth_set_default)
    p = auth.add_parser("remove")
    p.add_argument("workspace_id")
    p.set_defaults(func=cmd_auth_remove)
    auth.add_parser("logout").set_defaults(func=cmd_auth_logout)
    auth.add_parser("extract-tokens").set_defaults(func=cmd_auth_extract_tokens)

    p = auth.add_parser("parse-curl")
    p.add_argument("curl_command", nargs="?")
    p.add_argument("--from-clipboard", action="store_true", dest="from_clipboard")
    p.add_argument("--login", action="store_true")
    p.set_defaults(func=cmd_auth_parse_curl)

    # --- conversations ---
    conversations = _group(sub, "conversations")
    p = conversations.add_parser("list")
    p.add_argument("--types")
    p.add_argument("--exclude-archived", action="store_true", dest="exclude_archived")
    _add_paging(p, 100)
    p.set_defaults(func=cmd_conversations_list)

    p = conversations.add_parser("read")
    p.add_argument("channel_id")
    p.add_argument("--thread-ts", dest="thread_ts")
    p.add_argument("--exclude-replies", action="store_true", dest="exclude_replies")
    p.add_argument("--oldest")
    p.add_argument("--latest")
    p.add_argument("--download-files", action="store_true", dest="download_files")
    p.add_argument("--output-dir", dest="output_dir")
    _add_paging(p, 100)
    p.set_defaults(func=cmd_conversations_read)

    # --- messages ---
    messages = _group(sub, "messages")
    p = messages.add_parser("send")
    p.add_argument("--recipient-id", dest="recipient_id", required=True)
    p.add_argument("--message", required=True)
    p.add_argument("--thread-ts", dest="thread_ts")
    p.set_defaults(func=cmd_messages_send)

    for name, func in (("react", cmd_messages_react), ("unreact", cmd_messages_unreact)):
        p = messages.add_parser(name)
        p.add_argument("--channel-id", dest="channel_id", required=True)
        p.add_argument("--timestamp", required=True)
        p.add_argument("--emoji", required=True)
        p.set_defaults(func=func)

    # --- search ---
    search = _group(sub, "search")
    p = search.add_parser("messages")
    p.add_argument("query")
    p.add_argument("--from", dest="from_user")
    p.add_argument("--channel")
    p.add_argument("--sort", choices=sorted(config.VALID_SEARCH_SORTS), default="timestamp")
    p.add_argument(
        "--sort-dir", dest="sort_dir", choices=sorted(config.VALID_SORT_DIRS), default="desc"
    )
    p.add_argument("--count", type=_positive_int, default=20)
    p.add_argument("--page", type=_positive_int, default=1)
    p.add_argument("--all", action="store_true")
    p.add_argument("--highlight", action="store_true")
    p.add_argument("--top-level-only", action="store_true", dest="top_level_only")
    p.set_defaults(func=cmd_search_messages)

    # --- users ---
    users = _group(sub, "users")
    p = users.add_parser("list")
    p.add_argument("--include-bots", action="store_true", dest="include_bots")
    p.add_argument("--include-deleted", action="store_true", dest="include_deleted")
    _add_paging(p, 100)
    p.set_defaults(func=cmd_users_list)

    p = users.add_parser("search")
    p.add_argument("query")
    p.add_argument("--include-bots", action="store_true", dest="include_bots")
    p.add_argument("--include-deleted", action="store_true", dest="include_deleted")
    p.set_defaults(func=cmd_users_search)

    p = users.add_parser("info")
    p.add_argument("user_ids", nargs="+")
    p.set_defaults(func=cmd_users_info)

    # --- files ---
    files = _group(sub, "files")
    p = files.add_parser("info")
    p.add_argument("file_id")
    p.set_defaults(func=cmd_files_info)

    p = files.add_parser("list")
    p.add_argument("channel_id")
    p.add_argument("--limit", type=_positive_int, default=20)
    p.add_argument("--types")
    p.add_argument("--page", type=_positive_int, default=1)
    p.add_argument("--all", action="store_true")
    p.set_defaults(func=cmd_files_list)

    p = files.add_parser("download")
    p.add_argument("file_ids", nargs="+")
    p.add_argument("--output-dir", dest="output_dir")
    p.set_defaults(func=cmd_files_download)

    # --- version (bare word) ---
    sub.add_parser("version").set_defaults(func=None)

    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------


def _error_type_from_message(message):
    if message.startswith("[TOKEN_EXPIRED]"):
        return "token_expired"
    if message.startswith("[SETUP_NEEDED]"):
        return "setup_needed"
    if message.startswith("[ERROR]"):
        return "error"
    return "cli_error"


def _emit_cli_error(err, fmt):
    msg = str(err)
    shape = getattr(err, "shape", None) if isinstance(err, FilterError) else None
    if fmt == "json":
        payload = {
            "ok": False,
            "schema_version": config.CONTRACT_SCHEMA_VERSION,
            "error": {
                "type": _error_type_from_message(msg),
                "message": msg,
                "exit_code": getattr(err, "exit_code", 1),
            },
        }
        code = getattr(err, "code", None)
        if code:
            payload["error"]["code"] = code
        if shape is not None:
            payload["error"]["expected_schema"] = shape
            payload["error"]["hint"] = "Run the same command with --format schema to see the shape."
        print(json.dumps(payload, ensure_ascii=False), file=sys.stderr)
        return
    print(msg, file=sys.stderr)
    if shape is not None:
        print("\nExpected schema:", file=sys.stderr)
        print(json.dumps(shape, indent=2, ensure_ascii=False), file=sys.stderr)
        print("\nTip: run the same command with --format schema to see the shape.", file=sys.stderr)


def main(argv=None):
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")

    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print(HELP_TEXT)
        sys.exit(0)

    fmt = "json"
    try:
        # Extract global flags from anywhere in argv
        fmt, jq_expr, quiet, verbose, workspace, remaining_argv = _extract_global_flags(argv)
        config.RUNTIME_QUIET = quiet
        config.RUNTIME_VERBOSE = verbose
        if verbose:
            config.HTTP_LOG_ENABLED = True

        if not remaining_argv:
            print(HELP_TEXT)
            sys.exit(0)

        parser = build_parser()
        ns = parser.parse_args(remaining_argv)
        # inject global flags and the credential store
        ns.format = fmt
        ns.jq = jq_expr
        ns.workspace = workspace
        ns.store = WorkspaceStore()

        if ns.show_help or not ns.command:
            print(HELP_TEXT)
            sys.exit(0)

        if ns.command == "version":
            print(f"slackcli {config.VERSION}")
            sys.exit(0)

        handler = getattr(ns, "func", None)
        if not handler:
            raise CliError(
                f"[ERROR] Missing subcommand for '{ns.command}'. Run: slackcli --help"
            )
        handler(ns)

    except CliError as e:
        _emit_cli_error(e, fmt)
        sys.exit(e.exit_code)


if __name__ == "__main__":
    main()
