"""
Shared pure-utility functions for slackcli.

These helpers have no business logic. The log helpers write to stderr only.
"""

import os
import sys
from datetime import datetime, timezone

from slackcli import config

# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


def log_warning(message):
    """Print a warning to stderr unless --quiet."""
    if config.RUNTIME_QUIET:
        return
    print(f"[WARN] {message}", file=sys.stderr)


def log_debug(message):
    """Print a diagnostic to stderr only with --verbose."""
    if not config.RUNTIME_VERBOSE:
        return
    print(f"[DEBUG] {message}", file=sys.stderr)


# ---------------------------------------------------------------------------
# Slack timestamps
# ---------------------------------------------------------------------------


def ts_to_datetime(ts):
    """Convert a Slack ``ts`` ("1700000000.000100") or epoch number to a UTC datetime."""
    return datetime.fromtimestamp(float(ts), tz=timezone.utc)


def format_ts_iso(ts):
    return ts_to_datetime(ts).strftime("%Y-%m-%dT%H:%M:%SZ")


def format_relative_time(ts, now=None):
    """Humanize the age of a timestamp: "just now", "5 minutes ago", "2 years ago"."""
    now = now or datetime.now(timezone.utc)
    diff = int((now - ts_to_datetime(ts)).total_seconds())
    if diff < 0:
        return "in the future"

    minute = 60
    hour = 60 * minute
    day = 24 * hour
    month = 30 * day
    year = 365 * day

    def _plural(n, unit):
        return f"{n} {unit}{'' if n == 1 else 's'} ago"

    if diff < hour:
        minutes = diff // minute
        return "just now" if minutes == 0 else _plural(minutes, "minute")
    if diff < day:
        return _plural(diff // hour, "hour")
    if diff < 60 * day:
        return _plural(diff // day, "day")
    if diff < 2 * year:
        return _plural(diff // month, "month")
    return _plural(diff // year, "year")


def format_ts_pretty(ts, now=None):
    """ISO time plus relative age, e.g. "2026-02-12T22:20:25Z (1 day ago)"."""
    if not ts:
        return ""
    try:
        return f"{format_ts_iso(ts)} ({format_relative_time(ts, now)})"
    except (TypeError, ValueError):
        return str(ts)


def format_ts_for_json(ts, now=None):
    """All timestamp representations for machine consumers."""
    if not ts:
        return None
    try:
        seconds = float(ts)
    except (TypeError, ValueError):
        return None
    return {
        "timestamp_unix": seconds,
        "timestamp_iso": format_ts_iso(seconds),
        "relative_time": format_relative_time(seconds, now),
    }


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


def format_file_size(size):
    if size is None:
        return "unknown"
    size = float(size)
    if size < 1024:
        return f"{int(size)} B"
    for unit in ("KB", "MB"):
        size /= 1024
        if size < 1024:
            return f"{size:.1f} {unit}"
    return f"{size / 1024:.1f} GB"


def unique_path(directory, filename):
    """Return a path in *directory* that does not exist yet: name, name-1, name-2, ..."""
    safe_name = os.path.basename(filename or "") or "file"
    path = os.path.join(directory, safe_name)
    if not os.path.exists(path):
        return path
    base, ext = os.path.splitext(safe_name)
    counter = 1
    while True:
        path = os.path.join(directory, f"{base}-{counter}{ext}")
        if not os.path.exists(path):
            return path
        counter += 1
