"""
Extract browser-session credentials from a "Copy as cURL" command.

Browsers copy a Slack API request as one shell-quoted ``curl`` command that
contains the workspace URL, a ``Cookie`` header carrying ``d=xoxd-...`` and a
request body carrying ``token=xoxc-...``. The pieces are located by pattern,
so their order in the command does not matter.
"""

import re
import urllib.parse
from dataclasses import dataclass

from slackcli.exceptions import NotCurlCommandError, ParseError

_CURL_PREFIX_RE = re.compile(r"^\s*curl(?:\.exe)?\s", re.IGNORECASE)
_WORKSPACE_URL_RE = re.compile(
    r"https://([a-z0-9][a-z0-9-]*)\.((?:[a-z0-9-]+\.)+[a-z]{2,})", re.IGNORECASE
)
# Hosts the web client talks to that are not a workspace origin.
_GENERIC_SUBDOMAINS = frozenset({"app", "api", "edgeapi", "files", "www", "slack"})

_D_COOKIE_RE = re.compile(r"(?:^|[\s;'\"])d=([^;'\"\s]+)")
_XOXD_RE = re.compile(r"^xoxd-[A-Za-z0-9/+=%._-]+$")
_TOKEN_FIELD_RE = re.compile(r"(?:^|[?&\s'\"])token=(xoxc-[^&'\"\s\\]+)")
_BARE_XOXC_RE = re.compile(r"xoxc-[A-Za-z0-9-]+")


@dataclass(frozen=True)
class CurlCredentials:
    workspace_url: str
    workspace_name: str
    xoxd_token: str
    xoxc_token: str

    def as_output(self) -> dict:
        return {
            "workspace_name": self.workspace_name,
            "workspace_url": self.workspace_url,
            "xoxd_token": self.xoxd_token,
            "xoxc_token": self.xoxc_token,
        }


def looks_like_curl_command(text):
    """Cheap check before parsing: starts with ``curl`` and mentions a URL."""
    if not text:
        return False
    return bool(_CURL_PREFIX_RE.match(text)) and "https://" in text


def extract_workspace(text):
    """Return (workspace_url, workspace_name) or (None, None)."""
    for m in _WORKSPACE_URL_RE.finditer(text):
        subdomain = m.group(1).lower()
        if subdomain in _GENERIC_SUBDOMAINS:
            continue
        return f"https://{subdomain}.{m.group(2).lower()}", subdomain
    return None, None


def extract_xoxd(text):
    """Return the URL-decoded ``d`` cookie value, or None."""
    for m in _D_COOKIE_RE.finditer(text):
        value = urllib.parse.unquote(m.group(1))
        if _XOXD_RE.match(value):
            return value
    return None


def extract_xoxc(text):
    """Return the ``token`` body field, falling back to any bare xoxc token."""
    m = _TOKEN_FIELD_RE.search(text)
    if m:
        return urllib.parse.unquote(m.group(1))
    m = _BARE_XOXC_RE.search(text)
    return m.group(0) if m else None


def parse_curl_command(text):
    """Parse a copied cURL command into CurlCredentials.

    Raises NotCurlCommandError when the text is not a cURL command, and
    ParseError naming every missing piece otherwise.
    """
    if not looks_like_curl_command(text):
        raise NotCurlCommandError(
            "[ERROR] Input does not look like a cURL command. In browser DevTools "
            "right-click a Slack API request and choose Copy > Copy as cURL."
        )
    workspace_url, workspace_name = extract_workspace(text)
    xoxd = extract_xoxd(text)
    xoxc = extract_xoxc(text)
    missing = []
    if not workspace_url:
        missing.append("workspace URL (https://<team>.slack.com)")
    if not xoxd:
        missing.append("xoxd session token (d= cookie)")
    if not xoxc:
        missing.append("xoxc API token (token= field)")
    if missing:
        raise ParseError(
            "[ERROR] Could not find " + ", ".join(missing) + " in the cURL command. "
            "Copy a request to <team>.slack.com/api/... that includes cookies."
        )
    return CurlCredentials(
        workspace_url=workspace_url,
        workspace_name=workspace_name,
        xoxd_token=xoxd,
        xoxc_token=xoxc,
    )
