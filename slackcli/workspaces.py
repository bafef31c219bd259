"""
On-disk workspace credential store.

One JSON file holds every authenticated workspace plus a pointer to the
default one::

    {"default_workspace": "T0123", "workspaces": {"T0123": {...record...}}}

The store is constructed once per process and handed to the commands. It is
read-then-written without locking, so two invocations writing at the same
time can lose one of the updates.
"""

from __future__ import annotations

import json
import os
import tempfile

from slackcli import config
from slackcli.exceptions import ConfigError
from slackcli.models import WorkspaceConfig


class WorkspaceStore:
    """Read and update ``workspaces.json``."""

    def __init__(self, path: str | None = None):
        self.path = path or config.WORKSPACES_PATH

    # ------------------------------------------------------------------
    # Raw file access
    # ------------------------------------------------------------------

    def _load(self) -> dict:
        if not os.path.exists(self.path):
            return {"workspaces": {}}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"[ERROR] Workspace file {self.path} is not valid JSON: {e.msg} at position {e.pos}"
            ) from None
        except OSError as e:
            raise ConfigError(f"[ERROR] Cannot read workspace file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"[ERROR] Workspace file {self.path} must contain a JSON object.")
        if not isinstance(data.get("workspaces"), dict):
            data["workspaces"] = {}
        return data

    def _save(self, data: dict) -> None:
        """Write the store (atomic write-then-rename, owner-only permissions)."""
        directory = os.path.dirname(self.path) or "."
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".workspaces_tmp_")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
                f.write("\n")
            os.replace(tmp_path, self.path)
        except Exception:
            try:
                os.remove(tmp_path)
            except OSError:
                pass
            raise
        # Restrict to owner-only on Unix/Mac. No-op on Windows.
        try:
            os.chmod(self.path, 0o600)
        except (OSError, NotImplementedError):
            pass

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def all(self) -> list[WorkspaceConfig]:
        data = self._load()
        return [WorkspaceConfig.from_record(r) for r in data["workspaces"].values()]

    def default_id(self) -> str | None:
        return self._load().get("default_workspace")

    def resolve(self, ref: str | None = None) -> WorkspaceConfig:
        """Find a workspace by id or name, or the default when *ref* is empty.

        Name matching is case-insensitive. Raises ConfigError when nothing is
        configured, nothing matches, or a name matches several workspaces.
        """
        data = self._load()
        records = data["workspaces"]
        if not records:
            raise ConfigError(
                "[SETUP_NEEDED] No authenticated workspaces.\n"
                "  Run: slackcli auth login --token <token> --workspace-name <name>\n"
                "  Or:  slackcli auth parse-curl --login"
            )
        if not ref:
            default = data.get("default_workspace")
            if default and default in records:
                return WorkspaceConfig.from_record(records[default])
            if len(records) == 1:
                return WorkspaceConfig.from_record(next(iter(records.values())))
            raise ConfigError(
                "[SETUP_NEEDED] No default workspace set. "
                "Run: slackcli auth set-default <workspace-id> or pass --workspace."
            )
        if ref in records:
            return WorkspaceConfig.from_record(records[ref])
        wanted = ref.lower()
        matches = [
            r for r in records.values() if str(r.get("workspace_name", "")).lower() == wanted
        ]
        if len(matches) == 1:
            return WorkspaceConfig.from_record(matches[0])
        if len(matches) > 1:
            ids = ", ".join(sorted(r.get("workspace_id", "?") for r in matches))
            raise ConfigError(
                f"[ERROR] Workspace name '{ref}' is ambiguous ({ids}). Use the workspace ID."
            )
        available = ", ".join(
            f"{r.get('workspace_name')} ({wid})" for wid, r in sorted(records.items())
        )
        raise ConfigError(f"[ERROR] Workspace '{ref}' not found. Available: {available}")

    # ------------------------------------------------------------------
    # Mutations (login / logout / set-default / remove)
    # ------------------------------------------------------------------

    def add(self, workspace: WorkspaceConfig) -> None:
        """Insert or replace a workspace; the first one becomes the default.

        Re-login keeps an existing allow-list, which is only ever edited by hand.
        """
        data = self._load()
        record = workspace.to_record()
        previous = data["workspaces"].get(workspace.workspace_id) or {}
        if "allowed_targets" not in record and previous.get("allowed_targets"):
            record["allowed_targets"] = previous["allowed_targets"]
        data["workspaces"][workspace.workspace_id] = record
        if not data.get("default_workspace") or data["default_workspace"] not in data["workspaces"]:
            data["default_workspace"] = workspace.workspace_id
        self._save(data)

    def set_default(self, workspace_id: str) -> None:
        data = self._load()
        if workspace_id not in data["workspaces"]:
            raise ConfigError(f"[ERROR] Workspace {workspace_id} not found.")
        data["default_workspace"] = workspace_id
        self._save(data)

    def remove(self, workspace_id: str) -> None:
        data = self._load()
        if workspace_id not in data["workspaces"]:
            raise ConfigError(f"[ERROR] Workspace {workspace_id} not found.")
        del data["workspaces"][workspace_id]
        if data.get("default_workspace") == workspace_id:
            remaining = list(data["workspaces"])
            if remaining:
                data["default_workspace"] = remaining[0]
            else:
                data.pop("default_workspace", None)
        self._save(data)

    def clear(self) -> None:
        self._save({"workspaces": {}})
