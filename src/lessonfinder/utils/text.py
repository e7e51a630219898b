"""Text helpers shared by the flattener, the CLI and the chat replies."""

from __future__ import annotations

import re
from typing import Any, List

_WHITESPACE = re.compile(r"\s+")


def coerce_text(value: Any) -> str:
    """Return ``value`` if it is a string, otherwise an empty string."""
    return value if isinstance(value, str) else ""


def coerce_text_list(value: Any) -> List[str]:
    """Keep the string items of a list; anything that is not a list is empty."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace (newlines included) to single spaces."""
    return _WHITESPACE.sub(" ", text).strip()


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: max(limit - 1, 0)].rstrip() + "…"
