"""Core helpers: client caching, _call dispatcher, response contract."""

from __future__ import annotations

from slackcli import config
from slackcli.client import SlackClient
from slackcli.config import CONTRACT_SCHEMA_VERSION
from slackcli.exceptions import AuthError, CliError, ConfigError
from slackcli.workspaces import WorkspaceStore

# Keyed by the workspace reference the tool was called with (None = default).
_clients: dict[str | None, SlackClient] = {}


def _get_store() -> WorkspaceStore:
    return WorkspaceStore()


def _get_client(workspace: str | None = None) -> SlackClient:
    """Return a cached SlackClient for *workspace*, creating one on first use."""
    if workspace not in _clients:
        _clients[workspace] = SlackClient(_get_store().resolve(workspace))
    return _clients[workspace]


def _contract_error(message: str, error_type: str = "error", code: str | None = None) -> dict:
    """Return a stable MCP error envelope with legacy compatibility fields."""
    detail = {"type": error_type, "message": message}
    if code:
        detail["code"] = code
    return {
        "ok": False,
        "schema_version": CONTRACT_SCHEMA_VERSION,
        "type": error_type,  # legacy
        "error": message,  # legacy
        "error_detail": detail,
    }


def _ensure_contract_dict(payload: dict) -> dict:
    """Add stable contract metadata to dict responses."""
    out = dict(payload)
    out.setdefault("schema_version", CONTRACT_SCHEMA_VERSION)
    if out.get("ok") is False:
        error_type = str(out.get("type", "error"))
        error_message = out.get("error", "Unknown error")
        if not isinstance(error_message, str):
            error_message = str(error_message)
            out["error"] = error_message
        out.setdefault("error_detail", {"type": error_type, "message": error_message})
        return out
    out.setdefault("ok", True)
    return out


def _finalize_tool_result(result):
    """Finalize tool response based on the configured MCP response mode.

    Modes:
        - legacy (default): dicts keep their shape and gain ok/schema_version.
        - envelope: success is always {"ok", "schema_version", "data"}.
    """
    if isinstance(result, dict):
        normalized = _ensure_contract_dict(result)
        if normalized.get("ok") is False:
            return normalized
        if config.MCP_RESPONSE_MODE == "envelope":
            data = dict(normalized)
            data.pop("ok", None)
            data.pop("schema_version", None)
            return {"ok": True, "schema_version": CONTRACT_SCHEMA_VERSION, "data": data}
        return normalized
    if config.MCP_RESPONSE_MODE == "envelope":
        return {"ok": True, "schema_version": CONTRACT_SCHEMA_VERSION, "data": result}
    return result


_ALLOWED_METHODS = {
    "list_conversations",
    "read_conversation",
    "search_messages",
    "list_users",
    "search_users",
    "get_users",
    "get_file",
    "list_files",
    "send_message",
    "react",
}


def _call(method_name: str, workspace: str | None = None, **kwargs):
    """Call a SlackClient method, converting exceptions to error dicts."""
    if method_name not in _ALLOWED_METHODS:
        return _contract_error(f"Unknown method: {method_name}", "error")
    try:
        client = _get_client(workspace)
        return getattr(client, method_name)(**kwargs)
    except ConfigError as e:
        return _contract_error(str(e), "setup")
    except AuthError as e:
        return _contract_error(str(e), "token_expired", e.code)
    except CliError as e:
        return _contract_error(str(e), "error", getattr(e, "code", None))
    except Exception as e:
        return _contract_error(f"Unexpected error: {e}", "error")
