"""Low-level plain-text helpers for ``--format pretty`` output."""

import re

_CONTROL_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]|[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def _trunc(s, maxlen):
    """Truncate string with ellipsis indicator."""
    if not s:
        return ""
    return s[: maxlen - 1] + "…" if len(s) > maxlen else s


def _sanitize_str(s):
    """Strip ANSI escape sequences and control chars from message text.
    Preserves newlines (\\n) and tabs (\\t)."""
    if not s:
        return s
    return _CONTROL_RE.sub("", str(s))


def _one_line(s, maxlen=None):
    """Collapse whitespace (including newlines) so text fits in one row."""
    flat = " ".join(_sanitize_str(s or "").split())
    return _trunc(flat, maxlen) if maxlen else flat


def _table(columns, rows, footer=None):
    """Build a formatted table string.
    columns: list of (name, width) tuples. Last column has no width (fills).
    rows: list of tuples matching columns.
    footer: optional footer line."""
    parts = []
    for i, (name, width) in enumerate(columns):
        parts.append(name if i == len(columns) - 1 else f"{name:<{width}}")
    header = " ".join(parts)
    lines = [header, "-" * max(len(header), 80)]
    for row in rows:
        parts = []
        for i, val in enumerate(row):
            safe = _sanitize_str(val) if isinstance(val, str) else str(val)
            parts.append(safe if i == len(columns) - 1 else f"{safe:<{columns[i][1]}}")
        lines.append(" ".join(parts))
    if footer:
        lines.append(f"\n{footer}")
    return "\n".join(lines)


def _field_block(pairs, width=12):
    """Aligned ``Label: value`` lines; pairs with a None value are skipped."""
    lines = []
    for label, value in pairs:
        if value is None or value == "":
            continue
        lines.append(f"{label + ':':<{width}} {_sanitize_str(str(value))}")
    return "\n".join(lines)
