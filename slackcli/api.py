"""
HTTP request layer, auth strategies, and the request dispatcher for slackcli.

Every Web API call goes through ``Dispatcher.execute``. The dispatcher owns
one request strategy, picked once from the workspace credential:

* ``TokenStrategy``   — bearer token against the public API host.
* ``BrowserStrategy`` — form POST against the workspace's own origin with the
  ``d`` session cookie and the ``xoxc`` token as a body field.

Both return the Slack envelope ``{"ok": bool, "error": str?, ...}``. Failure
is signalled in the body even on HTTP 200, so ``ok: false`` is always an
error; any non-2xx status is an error too. Nothing here retries.
"""

import hashlib
import http.client
import json
import re
import sys
import time
import urllib.error
import urllib.parse
import urllib.request
import uuid

from slackcli import config
from slackcli.exceptions import AuthError, DownloadError, HTTPError, RemoteError
from slackcli.models import BrowserAuth, RemoteOperation, TokenAuth

# Envelope error codes meaning the credential itself was rejected.
_AUTH_ERROR_CODES = frozenset(
    {
        "invalid_auth",
        "not_authed",
        "token_revoked",
        "token_expired",
        "account_inactive",
        "no_permission_to_use_token",
    }
)


# ---------------------------------------------------------------------------
# Security helpers
# ---------------------------------------------------------------------------


def _mask_token(token):
    """Show only first 6 chars of a token for safe logging."""
    if not token:
        return ""
    return token[:6] + "..." if len(token) > 6 else token


def _sanitize_error(body, max_len=500):
    """Truncate and clean error body for safe display."""
    if not body:
        return ""
    cleaned = re.sub(r"<[^>]+>", "", body)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if len(cleaned) > max_len:
        return cleaned[:max_len] + "... [truncated]"
    return cleaned


def _sanitize_url_for_log(url):
    """Mask sensitive query params in URLs before logging."""
    parsed = urllib.parse.urlsplit(url)
    if not parsed.query:
        return url
    pairs = urllib.parse.parse_qsl(parsed.query, keep_blank_values=True)
    masked = []
    for key, value in pairs:
        if key.lower() in {"token", "xoxc", "xoxd"}:
            masked.append((key, "***"))
        else:
            masked.append((key, value))
    safe_query = urllib.parse.urlencode(masked, doseq=True)
    return urllib.parse.urlunsplit(
        (parsed.scheme, parsed.netloc, parsed.path, safe_query, parsed.fragment)
    )


# ---------------------------------------------------------------------------
# Structured HTTP logging
# ---------------------------------------------------------------------------


def _log_http_event(**fields):
    """Emit structured HTTP logs to stderr when enabled."""
    if not config.HTTP_LOG_ENABLED:
        return
    print("[HTTP] " + json.dumps(fields, ensure_ascii=False, sort_keys=True), file=sys.stderr)


def _is_sampled_request(request_id):
    """Decide if a request should be logged based on sample rate."""
    rate = config.HTTP_LOG_SAMPLE_RATE
    if rate <= 0:
        return False
    if rate >= 1:
        return True
    if not request_id:
        return False
    digest = hashlib.sha256(request_id.encode("utf-8")).digest()
    bucket = int.from_bytes(digest[:4], "big") / 4294967295.0
    return bucket < rate


# ---------------------------------------------------------------------------
# HTTP request layer
# ---------------------------------------------------------------------------


def _encode_form_value(value):
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def encode_form(params):
    """Form-encode API params: booleans as true/false, collections as JSON."""
    pairs = [(k, _encode_form_value(v)) for k, v in params.items() if v is not None]
    return urllib.parse.urlencode(pairs).encode("utf-8")


def _read_capped(resp):
    raw = resp.read(config.HTTP_MAX_RESPONSE_BYTES + 1)
    if len(raw) > config.HTTP_MAX_RESPONSE_BYTES:
        raise RemoteError(
            "response_too_large",
            f"Response too large (>{config.HTTP_MAX_RESPONSE_BYTES} bytes)",
        )
    return raw


def _copy_into(fh):
    """Reader that streams the response body into *fh* and returns the byte count."""

    def _reader(resp):
        total = 0
        while True:
            chunk = resp.read(config.DOWNLOAD_CHUNK_BYTES)
            if not chunk:
                return total
            try:
                fh.write(chunk)
            except OSError as e:
                raise DownloadError(f"Cannot write {fh.name}: {e}") from e
            total += len(chunk)

    return _reader


def _open(url, body=None, headers=None, method="POST", reader=_read_capped, credential=None):
    """Perform one HTTP request and return (reader(resp), content_type).

    The default reader returns the body bytes, capped at
    HTTP_MAX_RESPONSE_BYTES. Raises HTTPError for non-2xx statuses and
    RemoteError for network, timeout, and oversize failures. Exactly one
    attempt is made.
    """
    request_id = str(uuid.uuid4())
    safe_url = _sanitize_url_for_log(url)
    sampled = _is_sampled_request(request_id)
    timeout = max(1, config.HTTP_TIMEOUT_SECONDS)
    start = time.perf_counter()
    req = urllib.request.Request(url, data=body, headers=headers or {}, method=method)
    if sampled:
        _log_http_event(
            phase="request",
            method=method,
            url=safe_url,
            credential=_mask_token(credential),
            request_id=request_id,
            timeout_seconds=timeout,
        )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            content_type = resp.headers.get("Content-Type", "")
            payload = reader(resp)
            if sampled:
                _log_http_event(
                    phase="response",
                    method=method,
                    url=safe_url,
                    status=getattr(resp, "status", 200),
                    content_type=content_type,
                    bytes=payload if isinstance(payload, int) else len(payload),
                    latency_ms=round((time.perf_counter() - start) * 1000, 2),
                    request_id=request_id,
                )
            return payload, content_type
    except urllib.error.HTTPError as e:
        error_body = (
            e.read(config.HTTP_MAX_RESPONSE_BYTES).decode("utf-8", errors="replace")
            if e.fp
            else ""
        )
        if sampled:
            _log_http_event(
                phase="response",
                method=method,
                url=safe_url,
                status=e.code,
                latency_ms=round((time.perf_counter() - start) * 1000, 2),
                request_id=request_id,
            )
        raise HTTPError(e.code, e.reason, error_body, headers=e.headers) from e
    except TimeoutError as e:
        if sampled:
            _log_http_event(
                phase="network_error",
                method=method,
                url=safe_url,
                error="timeout",
                request_id=request_id,
            )
        raise RemoteError(
            "network_error", f"Request timed out after {timeout} seconds"
        ) from e
    except urllib.error.URLError as e:
        if sampled:
            _log_http_event(
                phase="network_error",
                method=method,
                url=safe_url,
                error=f"url_error: {e.reason}",
                request_id=request_id,
            )
        raise RemoteError("network_error", f"Connection failed: {e.reason}") from e
    except (http.client.HTTPException, OSError) as e:
        if sampled:
            _log_http_event(
                phase="network_error",
                method=method,
                url=safe_url,
                error=f"{type(e).__name__}: {e}",
                request_id=request_id,
            )
        raise RemoteError(
            "network_error", f"Connection failed: {type(e).__name__}: {e}"
        ) from e


def _http_request(url, body=None, headers=None, method="POST", credential=None):
    """Make an HTTP request and parse the JSON body."""
    raw, content_type = _open(url, body, headers, method, credential=credential)
    try:
        return json.loads(raw.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        if content_type and "json" not in content_type.lower():
            raise RemoteError(
                "invalid_response",
                f"Unexpected Content-Type from server ({content_type}). "
                "This may be a proxy or network issue.",
            ) from None
        raise RemoteError("invalid_response", "Unexpected response (not valid JSON)") from None


def _http_error_to_remote(e, what="HTTP"):
    detail = _sanitize_error(e.body)
    message = f"{what} {e.code}: {e.reason}"
    if e.code == 429:
        retry_after = e.headers.get("Retry-After") if e.headers else None
        message = "Rate limited by Slack (HTTP 429)"
        if retry_after:
            message += f", retry after {retry_after}s"
    elif detail:
        message += f" - {detail}"
    return RemoteError(f"http_{e.code}", message)


# ---------------------------------------------------------------------------
# Auth strategies
# ---------------------------------------------------------------------------


class RequestStrategy:
    """How one credential variant turns a RemoteOperation into an HTTP call."""

    def __init__(self, credential):
        self.credential = credential

    def endpoint(self, method):
        raise NotImplementedError

    def auth_headers(self):
        raise NotImplementedError

    def api_token(self):
        raise NotImplementedError

    def form_params(self, params):
        return params

    def call(self, operation):
        """POST the operation and return the decoded envelope (unchecked)."""
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }
        headers.update(self.auth_headers())
        body = encode_form(self.form_params(operation.as_dict()))
        return _http_request(
            self.endpoint(operation.method), body, headers, credential=self.api_token()
        )

    def download(self, url, dest):
        """Stream a private file URL into *dest*. Returns (bytes_written, content_type).

        The body is not held in memory and HTTP_MAX_RESPONSE_BYTES does not
        apply. A partially written *dest* is left for the caller to discard.
        """
        try:
            fh = open(dest, "wb")
        except OSError as e:
            raise DownloadError(f"Cannot write {dest}: {e}") from e
        with fh:
            try:
                return _open(
                    url,
                    headers=self.auth_headers(),
                    method="GET",
                    reader=_copy_into(fh),
                    credential=self.api_token(),
                )
            except HTTPError as e:
                raise _http_error_to_remote(e, "Failed to download file: HTTP") from e


class TokenStrategy(RequestStrategy):
    """Bearer-token requests against the public Web API host."""

    def endpoint(self, method):
        return f"{config.API_BASE_URL}/{method}"

    def auth_headers(self):
        return {"Authorization": f"Bearer {self.credential.token}"}

    def api_token(self):
        return self.credential.token


class BrowserStrategy(RequestStrategy):
    """Browser-session requests against the workspace origin."""

    def endpoint(self, method):
        return f"{self.credential.workspace_url}/api/{method}"

    def auth_headers(self):
        cookie = urllib.parse.quote(self.credential.xoxd_token, safe="")
        return {
            "Cookie": f"d={cookie}",
            "Origin": config.BROWSER_ORIGIN,
            "User-Agent": config.USER_AGENT,
        }

    def api_token(self):
        return self.credential.xoxc_token

    def form_params(self, params):
        form = {"token": self.credential.xoxc_token}
        form.update({k: v for k, v in params.items() if k != "token"})
        return form


_STRATEGIES = {
    TokenAuth: TokenStrategy,
    BrowserAuth: BrowserStrategy,
}


def resolve_strategy(credential):
    """Return the request strategy for a credential variant."""
    try:
        strategy_cls = _STRATEGIES[type(credential)]
    except KeyError:
        raise RemoteError(
            "unsupported_auth", f"No request strategy for {type(credential).__name__}"
        ) from None
    return strategy_cls(credential)


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


def check_envelope(envelope, method=None):
    """Return *envelope* if ``ok`` is true, otherwise raise RemoteError/AuthError."""
    if not isinstance(envelope, dict):
        raise RemoteError(
            "invalid_response",
            f"Unexpected {method or 'API'} response shape: "
            f"expected JSON object, got {type(envelope).__name__}",
        )
    if envelope.get("ok") is True:
        return envelope
    code = envelope.get("error") or "unknown_error"
    if code in _AUTH_ERROR_CODES:
        raise AuthError(code)
    raise RemoteError(code)


class Dispatcher:
    """Executes named Web API operations for one workspace."""

    def __init__(self, workspace, strategy=None):
        self.workspace = workspace
        self.strategy = strategy or resolve_strategy(workspace.credential)

    def execute(self, method, params=None):
        operation = RemoteOperation.build(method, params)
        try:
            envelope = self.strategy.call(operation)
        except HTTPError as e:
            raise _http_error_to_remote(e) from e
        return check_envelope(envelope, operation.method)

    def download(self, url, dest):
        return self.strategy.download(url, dest)
