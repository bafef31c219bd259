"""slackcli — command-line client for the Slack Web API."""

from slackcli.client import SlackClient
from slackcli.config import VERSION
from slackcli.exceptions import (
    AuthError,
    CliError,
    ConfigError,
    DownloadError,
    FilterError,
    NotCurlCommandError,
    ParseError,
    RemoteError,
)
from slackcli.models import BrowserAuth, TokenAuth, WorkspaceConfig
from slackcli.types import (
    ConversationListOutput,
    ConversationReadOutput,
    FileDownloadOutput,
    FileInfoOutput,
    FileListOutput,
    MessageReactOutput,
    MessageSendOutput,
    SearchMessagesOutput,
    UserInfoOutput,
    UserListOutput,
    UserSearchOutput,
    WorkspaceListOutput,
)
from slackcli.workspaces import WorkspaceStore

__all__ = [
    "VERSION",
    "SlackClient",
    "WorkspaceStore",
    "BrowserAuth",
    "TokenAuth",
    "WorkspaceConfig",
    "AuthError",
    "CliError",
    "ConfigError",
    "DownloadError",
    "FilterError",
    "NotCurlCommandError",
    "ParseError",
    "RemoteError",
    "ConversationListOutput",
    "ConversationReadOutput",
    "FileDownloadOutput",
    "FileInfoOutput",
    "FileListOutput",
    "MessageReactOutput",
    "MessageSendOutput",
    "SearchMessagesOutput",
    "UserInfoOutput",
    "UserListOutput",
    "UserSearchOutput",
    "WorkspaceListOutput",
]
