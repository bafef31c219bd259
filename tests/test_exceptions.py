"""Tests for exception hierarchy and re-exports."""

from slackcli.exceptions import (
    AuthError,
    CliError,
    ConfigError,
    DownloadError,
    FilterError,
    HTTPError,
    NotCurlCommandError,
    ParseError,
    RemoteError,
)


class TestExceptionHierarchy:
    def test_cli_error_is_exception(self):
        assert issubclass(CliError, Exception)

    def test_config_error_is_cli_error(self):
        assert issubclass(ConfigError, CliError)
        assert ConfigError.exit_code == 2

    def test_remote_and_auth(self):
        assert issubclass(RemoteError, CliError)
        assert issubclass(AuthError, RemoteError)
        assert RemoteError.exit_code == 1
        assert AuthError.exit_code == 2

    def test_parse_errors(self):
        assert issubclass(NotCurlCommandError, ParseError)
        assert issubclass(ParseError, CliError)

    def test_filter_and_download(self):
        assert issubclass(FilterError, CliError)
        assert issubclass(DownloadError, CliError)

    def test_http_error_not_cli_error(self):
        assert not issubclass(HTTPError, CliError)


class TestRemoteError:
    def test_code_and_message(self):
        e = RemoteError("channel_not_found")
        assert e.code == "channel_not_found"
        assert e.message == "channel_not_found"
        assert str(e) == "[ERROR] Slack API error: channel_not_found"

    def test_custom_message(self):
        e = RemoteError("http_500", "HTTP 500: Server Error")
        assert "HTTP 500" in str(e)

    def test_auth_error_hint(self):
        e = AuthError("invalid_auth")
        assert str(e).startswith("[TOKEN_EXPIRED]")
        assert "invalid_auth" in str(e)


class TestFilterError:
    def test_shape_defaults_to_none(self):
        assert FilterError("bad").shape is None

    def test_shape_kept(self):
        assert FilterError("bad", shape={"type": "object"}).shape == {"type": "object"}


class TestReExports:
    def test_config_re_exports_cli_error(self):
        from slackcli.config import CliError as ConfigCliError

        assert ConfigCliError is CliError

    def test_package_re_exports(self):
        import slackcli

        assert slackcli.RemoteError is RemoteError
        assert slackcli.AuthError is AuthError
