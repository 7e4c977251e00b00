"""Redaction helpers for logging advertiser-supplied text.

Campaign descriptions and messages to owners are free text and may carry
contact details; they go through these helpers before reaching a log line.
"""

import re
from typing import Any

_PHONE_PATTERN = re.compile(r"\+?\d[\d\s\-()]{8,}\d")
_EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
_URL_PATTERN = re.compile(r"https?://\S+")

_REDACTED = "[REDACTED]"

# Longer strings are summarised by length only.
MAX_LOGGED_TEXT = 80


def redact_string(value: str) -> str:
    """Replace phone numbers, e-mail addresses and URLs."""
    result = _URL_PATTERN.sub(_REDACTED, value)
    result = _EMAIL_PATTERN.sub(_REDACTED, result)
    result = _PHONE_PATTERN.sub(_REDACTED, result)
    return result


def redact_value(value: Any) -> str:
    """Return a log-safe string for any value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        if len(value) > MAX_LOGGED_TEXT:
            return f"str(len={len(value)})"
        return redact_string(value)
    if isinstance(value, dict):
        return f"dict(keys={sorted(value.keys())})"
    if isinstance(value, (list, tuple, set, frozenset)):
        return f"list(len={len(value)})"
    return f"<{type(value).__name__}>"


def safe_log_context(**kwargs: Any) -> dict[str, str]:
    """Build an ``extra_fields`` dict with every value redacted."""
    return {k: redact_value(v) for k, v in kwargs.items()}
