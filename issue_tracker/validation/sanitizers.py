"""
Text sanitation and lenient typed parsing.

sanitize_text() is a textual-safety transform: it trims surrounding
whitespace and escapes characters that could be read as markup when a stored
value is rendered later. Letters, digits, spaces and ordinary punctuation are
left as they are.

The typed parsers never raise. A value that does not parse yields None and
callers treat it as "not supplied".
"""

import uuid
from datetime import datetime, timezone
from typing import Any

_ESCAPES = str.maketrans({
    "&": "&amp;",
    '"': "&quot;",
    "'": "&#x27;",
    "<": "&lt;",
    ">": "&gt;",
    "/": "&#x2F;",
    "\\": "&#x5C;",
    "`": "&#96;",
})

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
_FALSE_VALUES = frozenset({"false", "0", "no", "off"})


def coerce_text(value: Any) -> str | None:
    """
    Convert a scalar body or query value to text.

    None, lists and objects have no text form and come back as None.
    """
    if value is None or isinstance(value, (list, tuple, dict)):
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def escape(value: str) -> str:
    return value.translate(_ESCAPES)


def sanitize_text(value: Any) -> str | None:
    """Trim and escape a text value. Returns None when there is no text form."""
    text = coerce_text(value)
    if text is None:
        return None
    return escape(text.strip())


def parse_bool(value: Any) -> bool | None:
    """Parse a real boolean or one of true/false, 1/0, yes/no, on/off."""
    if isinstance(value, bool):
        return value
    text = coerce_text(value)
    if text is None:
        return None
    text = text.strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse an ISO-8601 date or datetime into naive UTC.

    A trailing 'Z' and explicit offsets are honoured; values without an
    offset are taken to be UTC already.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = coerce_text(value)
        if text is None:
            return None
        text = text.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_issue_id(value: Any) -> str | None:
    """Normalize any UUID spelling to the 32-char lowercase hex used for ids."""
    text = coerce_text(value)
    if text is None:
        return None
    try:
        return uuid.UUID(text.strip()).hex
    except ValueError:
        return None


__all__ = [
    "coerce_text",
    "escape",
    "sanitize_text",
    "parse_bool",
    "parse_timestamp",
    "parse_issue_id",
]
