"""Thread linkage for search results.

``search.messages`` does not reliably fill ``thread_ts`` on matches, but a
match's permalink carries ``?thread_ts=<root ts>`` when the message lives in
a thread. That query parameter is not part of any documented contract; when
it is missing the match is classified as not threaded.
"""

import re

from slackcli._utils import log_debug

THREAD_TS_RE = re.compile(r"[?&]thread_ts=([0-9.]+)")

NONE = "none"
ROOT = "root"
REPLY = "reply"


def thread_ts_from_permalink(permalink):
    """Return the ``thread_ts`` query value of a permalink, or None."""
    if not permalink:
        return None
    m = THREAD_TS_RE.search(permalink)
    return m.group(1) if m else None


def classify(ts, thread_ts):
    """none: no thread_ts; root: thread_ts == ts; reply: anything else."""
    if not thread_ts:
        return NONE
    if thread_ts == ts:
        return ROOT
    return REPLY


def reconstruct(match):
    """Return a copy of a search match with ``thread_ts`` and its classification.

    An explicit ``thread_ts`` on the match wins over the permalink.
    """
    out = dict(match)
    thread_ts = out.get("thread_ts") or thread_ts_from_permalink(out.get("permalink"))
    if not thread_ts and out.get("permalink"):
        log_debug(f"match {out.get('ts')}: permalink has no thread_ts, treating as top-level")
    role = classify(out.get("ts"), thread_ts)
    if thread_ts:
        out["thread_ts"] = thread_ts
    else:
        out.pop("thread_ts", None)
    out["thread_role"] = role
    out["is_thread_reply"] = role == REPLY
    return out


def build_search_query(query, from_user=None, channel=None, top_level_only=False):
    """Apply the --from/--channel shortcuts and the default ``is:thread`` modifier.

    ``is:thread`` widens the remote search to messages inside threads (roots
    and replies); ``top_level_only`` leaves it off.
    """
    parts = [query.strip()]
    if from_user:
        parts.append("from:" + (from_user if from_user.startswith("@") else f"@{from_user}"))
    if channel:
        parts.append("in:" + (channel if channel.startswith("#") else f"#{channel}"))
    if not top_level_only and "is:thread" not in query.split():
        parts.append("is:thread")
    return " ".join(p for p in parts if p)
