"""Security: injection detection, output tagging, input validation."""

from __future__ import annotations

import re

from slackcli.exceptions import CliError

_INJECTION_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (
        re.compile(r"^(system|assistant|user)\s*:", re.IGNORECASE | re.MULTILINE),
        "role label",
    ),
    (
        re.compile(
            r"<\s*/?\s*(system|instruction|admin|prompt|tool_call|function_call)",
            re.IGNORECASE,
        ),
        "XML-like directive tag",
    ),
    (
        re.compile(
            r"ignore\s+(all\s+)?(previous|prior|above)\s+(instructions|prompts|rules)",
            re.IGNORECASE,
        ),
        "override directive",
    ),
    (
        re.compile(
            r"forget\s+(your|all|the)\s+(rules|instructions|training|guidelines)",
            re.IGNORECASE,
        ),
        "forget directive",
    ),
    (
        re.compile(
            r"you\s+are\s+now\s+(in\s+)?(admin|root|debug|developer|unrestricted|jailbreak)",
            re.IGNORECASE,
        ),
        "mode switching",
    ),
    (
        re.compile(r"(execute|call|invoke|run)\s+the\s+(tool|function|command)", re.IGNORECASE),
        "tool invocation directive",
    ),
]


def _check_injection(text: str) -> list[str]:
    """Check text for common prompt injection patterns.

    Returns list of matched pattern descriptions (empty if clean).
    Short strings (< 10 chars) are skipped.
    """
    if len(text) < 10:
        return []
    return [desc for pattern, desc in _INJECTION_PATTERNS if pattern.search(text)]


def _tag_user_text(text: str | None) -> str | None:
    """Wrap user-authored text in [USER_DATA] boundary markers."""
    if text is None:
        return None
    return f"[USER_DATA]{text}[/USER_DATA]"


def _sanitize_messages(result: dict, key: str = "messages") -> dict:
    """Tag message text in ``result[key]`` and add _safety_warnings on injection hits."""
    if not isinstance(result, dict) or not isinstance(result.get(key), list):
        return result
    out = dict(result)
    warnings: list[str] = []
    tagged: list = []
    for msg in out[key]:
        if isinstance(msg, dict) and isinstance(msg.get("text"), str):
            msg = dict(msg)
            for desc in _check_injection(msg["text"]):
                warnings.append(f"message {msg.get('ts')}: {desc}")
            msg["text"] = _tag_user_text(msg["text"])
        tagged.append(msg)
    out[key] = tagged
    if warnings:
        out["_safety_warnings"] = warnings
    return out


def _sanitize_conversations(result: dict) -> dict:
    """Tag channel topics, which any member can set."""
    if not isinstance(result, dict) or not isinstance(result.get("channels"), list):
        return result
    out = dict(result)
    rows: list = []
    for row in out["channels"]:
        if isinstance(row, dict) and isinstance(row.get("topic"), str) and row["topic"]:
            row = dict(row)
            row["topic"] = _tag_user_text(row["topic"])
        rows.append(row)
    out["channels"] = rows
    return out


_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_INPUT_LIMITS = {
    "message": 40_000,
    "query": 1000,
    "emoji": 100,
}


def _validate_input(text: str, field: str) -> str:
    """Strip control characters and enforce length limits.

    Raises CliError if text is not a string or exceeds the field limit.
    """
    if not isinstance(text, str):
        raise CliError(f"[ERROR] {field} must be a string")
    cleaned = _CONTROL_RE.sub("", text)
    limit = _INPUT_LIMITS.get(field, 40_000)
    if len(cleaned) > limit:
        raise CliError(f"[ERROR] {field} exceeds maximum length of {limit} characters")
    return cleaned
