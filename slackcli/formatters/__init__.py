"""Output formatting package for slackcli.

Re-exports all public names so consumers can do:
    from slackcli.formatters import format_conversations_table
"""

from slackcli.formatters._auth import (
    format_login,
    format_parse_curl,
    format_workspaces_table,
)
from slackcli.formatters._conversations import (
    format_conversation_read,
    format_conversations_table,
)
from slackcli.formatters._core import (
    emit_schema,
    pretty_print,
    render,
)
from slackcli.formatters._files import (
    format_download_report,
    format_file_info,
    format_files_table,
)
from slackcli.formatters._messages import (
    format_message_sent,
    format_reaction,
    format_search_results,
)
from slackcli.formatters._table import (
    _CONTROL_RE,
    _one_line,
    _sanitize_str,
    _table,
    _trunc,
)
from slackcli.formatters._users import (
    format_user_info,
    format_user_search,
    format_users_table,
)

__all__ = [
    "_CONTROL_RE",
    "_one_line",
    "_sanitize_str",
    "_table",
    "_trunc",
    "emit_schema",
    "format_conversation_read",
    "format_conversations_table",
    "format_download_report",
    "format_file_info",
    "format_files_table",
    "format_login",
    "format_message_sent",
    "format_parse_curl",
    "format_reaction",
    "format_search_results",
    "format_user_info",
    "format_user_search",
    "format_users_table",
    "format_workspaces_table",
    "pretty_print",
    "render",
]
