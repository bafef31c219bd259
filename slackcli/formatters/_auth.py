"""Formatters for workspace auth commands."""

from slackcli.formatters._table import _field_block, _table, _trunc


def format_workspaces_table(result):
    """Format authenticated workspaces, marking the default."""
    workspaces = result.get("workspaces", [])
    if not workspaces:
        return "No authenticated workspaces. Run: slackcli auth login"
    cols = [("", 2), ("Name", 24), ("Auth", 9), ("ID", 0)]
    rows = []
    for ws in workspaces:
        rows.append(
            (
                "*" if ws.get("is_default") else "",
                _trunc(ws.get("workspace_name", ""), 24),
                ws.get("auth_type", ""),
                ws.get("workspace_id", ""),
            )
        )
    return _table(cols, rows, f"Total: {len(workspaces)} workspaces (* = default)")


def format_login(result):
    lines = [f"Authenticated to {result.get('workspace_name')} ({result.get('workspace_id')})"]
    lines.append(
        _field_block(
            [
                ("Auth", result.get("auth_type")),
                ("Token type", result.get("token_type")),
                ("URL", result.get("workspace_url")),
                ("Default", "yes" if result.get("is_default") else "no"),
            ]
        )
    )
    return "\n".join(lines)


def format_parse_curl(result):
    """Show extracted browser credentials and the matching login command."""
    lines = [
        "Extracted browser credentials:",
        _field_block(
            [
                ("Workspace", result.get("workspace_name")),
                ("URL", result.get("workspace_url")),
                ("xoxd", result.get("xoxd_token")),
                ("xoxc", result.get("xoxc_token")),
            ]
        ),
        "",
        "Log in with:",
        "  slackcli auth login-browser "
        f"--xoxd '{result.get('xoxd_token')}' --xoxc '{result.get('xoxc_token')}' "
        f"--workspace-url {result.get('workspace_url')}",
        "Or re-run with: slackcli auth parse-curl --login",
    ]
    return "\n".join(lines)
