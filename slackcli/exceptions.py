"""
slackcli exception hierarchy.

All custom exceptions live here to avoid circular imports.
"""


class CliError(Exception):
    """Exit code 1 — validation, not-found, network, parse errors."""

    exit_code = 1


class ConfigError(CliError):
    """Exit code 2 — no workspace configured, ambiguous workspace reference."""

    exit_code = 2


class RemoteError(CliError):
    """Remote call failed: ``ok: false`` envelope, non-2xx status, or transport error."""

    def __init__(self, code, message=None):
        self.code = code
        self.message = message or code
        super().__init__(self._describe())

    def _describe(self):
        return f"[ERROR] Slack API error: {self.message}"


class AuthError(RemoteError):
    """Exit code 2 — the remote rejected the workspace credential."""

    exit_code = 2

    def _describe(self):
        return (
            f"[TOKEN_EXPIRED] Slack rejected the workspace credential ({self.code}). "
            "Log in again: slackcli auth login / slackcli auth parse-curl --login"
        )


class ParseError(CliError):
    """Malformed cURL text or missing token/URL."""


class NotCurlCommandError(ParseError):
    """Input does not look like a cURL command at all."""


class FilterError(CliError):
    """jq missing or the filter expression failed.

    ``shape`` holds the JSON Schema of the data the filter was applied to,
    so the caller can show what the expression should have targeted.
    """

    def __init__(self, message, shape=None):
        super().__init__(message)
        self.shape = shape


class DownloadError(CliError):
    """File-system failure while saving downloaded files."""


class HTTPError(Exception):
    """Raised by _http_request for HTTP errors that callers want to handle."""

    def __init__(self, code, reason, body, headers=None):
        self.code = code
        self.reason = reason
        self.body = body
        self.headers = headers or {}
