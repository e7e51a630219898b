"""Fallback replies for the tutor chat when the remote assistant is unavailable."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Sequence

from lessonfinder.index.search import Searcher
from lessonfinder.models import Chunk, ChunkKind

APP_HELP_MODE = "app_help"
STUDENT_DOUBT_MODE = "student_doubt"

OFFLINE_HEADER = "Here's what I found in your offline lessons:"
OFFLINE_NOTHING_FOUND = (
    "I couldn't find anything in your offline lessons that matches that. "
    "Please try connecting to the internet for a better answer."
)


class FailureKind(str, Enum):
    CONNECTION = "connection"
    MODEL_UNAVAILABLE = "model_unavailable"
    RATE_LIMITED = "rate_limited"


_ERROR_PREFIX = {
    FailureKind.CONNECTION: "*Connection Error*",
    FailureKind.MODEL_UNAVAILABLE: "*System Error (404)*",
    FailureKind.RATE_LIMITED: "*High Traffic (Rate Limit)*",
}

_NOTHING_FOUND = {
    FailureKind.CONNECTION: (
        "I couldn't connect to the server and I couldn't find this on your offline lessons."
        "\n\nTry asking about topics like 'Photosynthesis', 'Food', or 'Fibre'."
    ),
    FailureKind.MODEL_UNAVAILABLE: "The AI model is currently unavailable. Please contact support.",
    FailureKind.RATE_LIMITED: "The AI brain is busy. Please try again in 5-10 seconds.",
}


@dataclass(slots=True)
class FallbackReply:
    """Composed chat reply with the offline results it was built from."""

    mode: str
    text: str
    results: List[Chunk] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "mode": self.mode,
            "reply": self.text,
            "results": [chunk.to_dict() for chunk in self.results],
        }


def chat_mode(results: Sequence[Chunk]) -> str:
    """Pick the assistant mode from the offline context."""
    if any(chunk.kind == ChunkKind.HELP for chunk in results):
        return APP_HELP_MODE
    return STUDENT_DOUBT_MODE


def classify_failure(status_code: int | None = None, message: str = "") -> FailureKind:
    message = message or ""
    if status_code == 404 or "404" in message:
        return FailureKind.MODEL_UNAVAILABLE
    if status_code == 429 or "429" in message:
        return FailureKind.RATE_LIMITED
    return FailureKind.CONNECTION


def format_bullets(results: Sequence[Chunk]) -> str:
    return "".join(f"• *{chunk.title}*: {chunk.text}\n\n" for chunk in results)


def compose_offline_reply(results: Sequence[Chunk]) -> str:
    """Reply shown when the device has no connection."""
    if not results:
        return OFFLINE_NOTHING_FOUND
    return f"{OFFLINE_HEADER}\n\n{format_bullets(results)}"


def compose_failure_reply(results: Sequence[Chunk], failure: FailureKind) -> str:
    """Reply shown when the remote assistant call failed."""
    prefix = _ERROR_PREFIX[failure]
    if results:
        return f"{prefix} - Showing Offline Results\n\n{format_bullets(results)}"
    return f"{prefix}: {_NOTHING_FOUND[failure]}"


def build_fallback_reply(
    searcher: Searcher,
    query: str,
    *,
    offline: bool = True,
    failure: FailureKind | None = None,
) -> FallbackReply:
    """Search offline content for ``query`` and compose the reply text."""
    results = searcher.search(query)
    if offline or failure is None:
        text = compose_offline_reply(results)
    else:
        text = compose_failure_reply(results, failure)
    return FallbackReply(mode=chat_mode(results), text=text, results=results)
