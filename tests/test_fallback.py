"""Tests for chat fallback replies."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from lessonfinder.chat.fallback import (
    APP_HELP_MODE,
    OFFLINE_HEADER,
    OFFLINE_NOTHING_FOUND,
    STUDENT_DOUBT_MODE,
    FailureKind,
    build_fallback_reply,
    chat_mode,
    classify_failure,
    compose_failure_reply,
    compose_offline_reply,
    format_bullets,
)
from lessonfinder.models import Chunk, ChunkKind

LESSON = Chunk(
    kind=ChunkKind.CURRICULUM,
    title="Food - Sources of Food",
    text="Plants use sunlight to make food.",
    chapter="Food",
    subchapter="Sources of Food",
)
HELP = Chunk(kind=ChunkKind.HELP, title="Offline Mode", text="Lessons stay available offline.")


class TestChatMode:
    """Test chat_mode function."""

    def test_help_result_selects_app_help(self) -> None:
        """Should pick app_help when any result is a help topic."""
        assert chat_mode([LESSON, HELP]) == APP_HELP_MODE

    def test_lessons_select_student_doubt(self) -> None:
        """Should pick student_doubt for lesson-only context."""
        assert chat_mode([LESSON]) == STUDENT_DOUBT_MODE

    def test_empty_selects_student_doubt(self) -> None:
        """Should default to student_doubt without context."""
        assert chat_mode([]) == STUDENT_DOUBT_MODE


class TestClassifyFailure:
    """Test classify_failure function."""

    @pytest.mark.parametrize(
        ("status", "message", "expected"),
        [
            (404, "", FailureKind.MODEL_UNAVAILABLE),
            (None, "Request failed with status code 404", FailureKind.MODEL_UNAVAILABLE),
            (429, "", FailureKind.RATE_LIMITED),
            (None, "status 429 Too Many Requests", FailureKind.RATE_LIMITED),
            (500, "", FailureKind.CONNECTION),
            (None, "Network Error", FailureKind.CONNECTION),
            (None, "", FailureKind.CONNECTION),
        ],
    )
    def test_classification(self, status: int | None, message: str, expected: FailureKind) -> None:
        """Should map status codes and messages to failure kinds."""
        assert classify_failure(status, message) == expected


class TestComposeReplies:
    """Test reply composition."""

    def test_bullets(self) -> None:
        """Should render one bullet per result."""
        assert format_bullets([LESSON, HELP]) == (
            "• *Food - Sources of Food*: Plants use sunlight to make food.\n\n"
            "• *Offline Mode*: Lessons stay available offline.\n\n"
        )

    def test_offline_reply_with_results(self) -> None:
        """Should list offline results under a header."""
        reply = compose_offline_reply([LESSON])

        assert reply.startswith(OFFLINE_HEADER + "\n\n")
        assert "• *Food - Sources of Food*: Plants use sunlight to make food." in reply

    def test_offline_reply_without_results(self) -> None:
        """Should give the distinct nothing-found message."""
        assert compose_offline_reply([]) == OFFLINE_NOTHING_FOUND

    def test_failure_reply_with_results(self) -> None:
        """Should show offline results after an assistant failure."""
        reply = compose_failure_reply([HELP], FailureKind.RATE_LIMITED)

        assert reply.startswith("*High Traffic (Rate Limit)* - Showing Offline Results\n\n")
        assert "*Offline Mode*" in reply

    @pytest.mark.parametrize(
        ("failure", "fragment"),
        [
            (FailureKind.CONNECTION, "couldn't connect to the server"),
            (FailureKind.MODEL_UNAVAILABLE, "AI model is currently unavailable"),
            (FailureKind.RATE_LIMITED, "Please try again in 5-10 seconds"),
        ],
    )
    def test_failure_reply_without_results(self, failure: FailureKind, fragment: str) -> None:
        """Should explain each failure kind when nothing was found offline."""
        reply = compose_failure_reply([], failure)

        assert fragment in reply
        assert "Showing Offline Results" not in reply


class TestBuildFallbackReply:
    """Test build_fallback_reply function."""

    def test_offline(self) -> None:
        """Should compose the offline reply from search results."""
        searcher = MagicMock()
        searcher.search.return_value = [HELP]

        reply = build_fallback_reply(searcher, "offline?", offline=True)

        searcher.search.assert_called_once_with("offline?")
        assert reply.mode == APP_HELP_MODE
        assert reply.results == [HELP]
        assert reply.text.startswith(OFFLINE_HEADER)

    def test_failure(self) -> None:
        """Should compose the failure reply when online but the assistant failed."""
        searcher = MagicMock()
        searcher.search.return_value = []

        reply = build_fallback_reply(
            searcher, "volcano", offline=False, failure=FailureKind.MODEL_UNAVAILABLE
        )

        assert reply.mode == STUDENT_DOUBT_MODE
        assert reply.text.startswith("*System Error (404)*:")

    def test_to_dict(self) -> None:
        """Should serialize mode, reply and results."""
        searcher = MagicMock()
        searcher.search.return_value = [LESSON]

        payload = build_fallback_reply(searcher, "sunlight").to_dict()

        assert payload["mode"] == STUDENT_DOUBT_MODE
        assert payload["reply"].startswith(OFFLINE_HEADER)
        assert payload["results"] == [LESSON.to_dict()]
