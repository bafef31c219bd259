"""
Typed models for workspace credentials and command payloads.

A workspace record carries exactly one credential variant. The variant's
``auth_type`` tag is what the on-disk record and the request-strategy table
are keyed on.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from slackcli.exceptions import CliError, ConfigError


@dataclass(frozen=True)
class TokenAuth:
    """App token credential (``xoxb-`` bot or ``xoxp-`` user token)."""

    token: str
    token_type: str = "user"

    auth_type = "standard"

    @classmethod
    def from_token(cls, token):
        token = (token or "").strip()
        if not token:
            raise ConfigError("[ERROR] Token cannot be empty.")
        return cls(token=token, token_type="bot" if token.startswith("xoxb-") else "user")

    def to_record(self) -> dict:
        return {"auth_type": self.auth_type, "token": self.token, "token_type": self.token_type}


@dataclass(frozen=True)
class BrowserAuth:
    """Browser session credential: ``d`` cookie (xoxd) plus web-client token (xoxc)."""

    xoxd_token: str
    xoxc_token: str
    workspace_url: str

    auth_type = "browser"

    def to_record(self) -> dict:
        return {
            "auth_type": self.auth_type,
            "xoxd_token": self.xoxd_token,
            "xoxc_token": self.xoxc_token,
            "workspace_url": self.workspace_url,
        }


def credential_from_record(record: dict):
    """Build the credential variant selected by the record's ``auth_type`` tag."""
    tag = record.get("auth_type")
    if tag == TokenAuth.auth_type:
        token = record.get("token")
        if not token:
            raise ConfigError("[ERROR] Workspace record is missing 'token'.")
        return TokenAuth(token=token, token_type=record.get("token_type") or "user")
    if tag == BrowserAuth.auth_type:
        missing = [k for k in ("xoxd_token", "xoxc_token", "workspace_url") if not record.get(k)]
        if missing:
            raise ConfigError(f"[ERROR] Workspace record is missing {', '.join(missing)}.")
        return BrowserAuth(
            xoxd_token=record["xoxd_token"],
            xoxc_token=record["xoxc_token"],
            workspace_url=record["workspace_url"].rstrip("/"),
        )
    raise ConfigError(f"[ERROR] Unknown auth_type {tag!r} in workspace record.")


@dataclass(frozen=True)
class WorkspaceConfig:
    """One authenticated workspace, keyed by its team id."""

    workspace_id: str
    workspace_name: str
    credential: TokenAuth | BrowserAuth
    allowed_targets: tuple[str, ...] = field(default_factory=tuple)

    @property
    def auth_type(self) -> str:
        return self.credential.auth_type

    @classmethod
    def from_record(cls, record: dict) -> WorkspaceConfig:
        if not isinstance(record, dict):
            raise ConfigError("[ERROR] Workspace record must be a JSON object.")
        workspace_id = record.get("workspace_id")
        if not workspace_id:
            raise ConfigError("[ERROR] Workspace record is missing 'workspace_id'.")
        targets = record.get("allowed_targets") or []
        if not isinstance(targets, list):
            raise ConfigError(
                f"[ERROR] allowed_targets for {workspace_id} must be a list of IDs."
            )
        return cls(
            workspace_id=workspace_id,
            workspace_name=record.get("workspace_name") or workspace_id,
            credential=credential_from_record(record),
            allowed_targets=tuple(str(t) for t in targets),
        )

    def to_record(self) -> dict:
        record = {"workspace_id": self.workspace_id, "workspace_name": self.workspace_name}
        record.update(self.credential.to_record())
        if self.allowed_targets:
            record["allowed_targets"] = list(self.allowed_targets)
        return record

    def allows_target(self, target: str) -> bool:
        """Empty allow-list means every target is allowed."""
        return not self.allowed_targets or target in self.allowed_targets


@dataclass(frozen=True)
class RemoteOperation:
    """A named Web API method plus its parameters, immutable per call."""

    method: str
    params: tuple[tuple[str, object], ...] = ()

    @classmethod
    def build(cls, method: str, params: dict | None = None) -> RemoteOperation:
        method = (method or "").strip()
        if not method or "/" in method or " " in method:
            raise CliError(f"[ERROR] Invalid Slack API method name: {method!r}")
        items = tuple((k, v) for k, v in (params or {}).items() if v is not None)
        return cls(method=method, params=items)

    def as_dict(self) -> dict:
        return dict(self.params)
