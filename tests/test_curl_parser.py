"""Tests for curl_parser.py — browser credential extraction from cURL text."""

import pytest

from slackcli.curl_parser import (
    extract_workspace,
    extract_xoxc,
    extract_xoxd,
    looks_like_curl_command,
    parse_curl_command,
)
from slackcli.exceptions import NotCurlCommandError, ParseError

CHROME_CURL = (
    "curl 'https://acme.slack.com/api/conversations.list' \\\n"
    "  -H 'authority: acme.slack.com' \\\n"
    "  -H 'cookie: b=abc; d=xoxd-AbC%2FdEf%2BgH%3D; x=1' \\\n"
    "  -H 'origin: https://app.slack.com' \\\n"
    "  --data-raw 'token=xoxc-111-222-333-abc&limit=100' \\\n"
    "  --compressed"
)


class TestParseCurlCommand:
    def test_minimal_example(self):
        text = (
            "curl 'https://acme.example.com/api/x' -H 'Cookie: d=xoxd-AAA' "
            "--data 'token=xoxc-BBB'"
        )
        creds = parse_curl_command(text)
        assert creds.as_output() == {
            "workspace_name": "acme",
            "workspace_url": "https://acme.example.com",
            "xoxd_token": "xoxd-AAA",
            "xoxc_token": "xoxc-BBB",
        }

    def test_chrome_copy_as_curl(self):
        creds = parse_curl_command(CHROME_CURL)
        assert creds.workspace_url == "https://acme.slack.com"
        assert creds.workspace_name == "acme"
        assert creds.xoxd_token == "xoxd-AbC/dEf+gH="
        assert creds.xoxc_token == "xoxc-111-222-333-abc"

    def test_order_independent(self):
        text = (
            "curl --data 'token=xoxc-BBB' -H 'Cookie: d=xoxd-AAA' "
            "'https://acme.slack.com/api/x'"
        )
        creds = parse_curl_command(text)
        assert creds.workspace_name == "acme"
        assert creds.xoxd_token == "xoxd-AAA"

    def test_multipart_body_token(self):
        text = (
            "curl 'https://team.slack.com/api/x' -b 'd=xoxd-AAA' "
            "--data-raw $'------Boundary\\r\\nContent-Disposition: form-data; name=\"token\"'"
            "$'\\r\\n\\r\\nxoxc-999-888\\r\\n------Boundary--'"
        )
        assert parse_curl_command(text).xoxc_token == "xoxc-999-888"

    def test_not_curl(self):
        with pytest.raises(NotCurlCommandError):
            parse_curl_command("hello world")

    def test_missing_pieces_named(self):
        with pytest.raises(ParseError) as exc_info:
            parse_curl_command("curl 'https://acme.slack.com/api/x'")
        msg = str(exc_info.value)
        assert "xoxd" in msg
        assert "xoxc" in msg
        assert "workspace URL" not in msg

    def test_only_generic_hosts(self):
        with pytest.raises(ParseError) as exc_info:
            parse_curl_command(
                "curl 'https://app.slack.com/api/x' -H 'Cookie: d=xoxd-A' --data 'token=xoxc-B'"
            )
        assert "workspace URL" in str(exc_info.value)


class TestHelpers:
    def test_looks_like_curl(self):
        assert looks_like_curl_command("curl 'https://a.slack.com'")
        assert looks_like_curl_command("  CURL https://a.slack.com")
        assert not looks_like_curl_command("curly https://a.slack.com")
        assert not looks_like_curl_command("curl localhost")
        assert not looks_like_curl_command("")
        assert not looks_like_curl_command(None)

    def test_extract_workspace_skips_app_host(self):
        text = "https://app.slack.com/client https://myteam.enterprise.slack.com/api"
        assert extract_workspace(text) == ("https://myteam.enterprise.slack.com", "myteam")

    def test_extract_workspace_none(self):
        assert extract_workspace("no url") == (None, None)

    def test_extract_xoxd_ignores_non_xoxd_cookie(self):
        assert extract_xoxd("cookie: d=abc; d-s=1") is None

    def test_extract_xoxc_url_decoded(self):
        assert extract_xoxc("token=xoxc-1%2D2&x=1") == "xoxc-1-2"
