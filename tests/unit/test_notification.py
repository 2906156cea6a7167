"""Unit tests for the check-run notification model."""

from __future__ import annotations

import pytest

from gantry.checks import Conclusion, Notification, truncate_tail
from gantry.events import Event, Revision


def test_new_notification_defaults() -> None:
    """A fresh notification is neutral, unsent and titled 'running check'."""
    note = Notification(name="tests")

    assert note.count == 0
    assert note.conclusion is Conclusion.NEUTRAL
    assert note.title == "running check"


def test_for_event_copies_build_identity() -> None:
    """Payload, external id and details URL come from the event."""
    event = Event(
        type="check_suite:requested",
        build_id="01abc",
        revision=Revision(commit="9a0c", ref="feature-x"),
        payload='{"type": "check_suite"}',
    )

    note = Notification.for_event(
        "tests", event, details_url_template="https://ci.example/builds/{build_id}"
    )

    assert note.payload == '{"type": "check_suite"}'
    assert note.external_id == "01abc"
    assert note.details_url == "https://ci.example/builds/01abc"


def test_job_names_are_strictly_increasing() -> None:
    """Every send takes a new number, so job names never repeat."""
    note = Notification(name="tests")

    names = [note.next_job_name() for _ in range(3)]

    assert names == [
        "tests-notification-1",
        "tests-notification-2",
        "tests-notification-3",
    ]
    assert note.count == 3


def test_to_env_maps_every_field() -> None:
    """The check-run tool reads one CHECK_* variable per field."""
    note = Notification(
        name="tests",
        payload="{}",
        external_id="01abc",
        details_url="https://ci.example/01abc",
        title="Run Tests",
        summary="sum",
        text="txt",
        conclusion=Conclusion.SUCCESS,
    )

    assert note.to_env() == {
        "CHECK_CONCLUSION": "success",
        "CHECK_NAME": "tests",
        "CHECK_TITLE": "Run Tests",
        "CHECK_PAYLOAD": "{}",
        "CHECK_SUMMARY": "sum",
        "CHECK_TEXT": "txt",
        "CHECK_DETAILS_URL": "https://ci.example/01abc",
        "CHECK_EXTERNAL_ID": "01abc",
    }


def test_to_env_leaves_running_conclusion_empty() -> None:
    """A check still running has no conclusion."""
    note = Notification(name="tests", conclusion=None)

    assert note.to_env()["CHECK_CONCLUSION"] == ""


def test_mark_passed_fences_the_log() -> None:
    """A pass reports the job log followed by a completion line."""
    note = Notification(name="tests")

    note.mark_passed("tests", "all green")

    assert note.conclusion is Conclusion.SUCCESS
    assert note.summary == 'Task "tests" passed'
    assert note.text == "```all green```\nTest Complete"


def test_mark_failed_reports_the_error() -> None:
    """A failure names the build and ends with the error."""
    note = Notification(name="tests", external_id="01abc")

    note.mark_failed("tests", "lint failed", RuntimeError("exit 2"))

    assert note.conclusion is Conclusion.FAILURE
    assert note.summary == 'Task "tests" failed for 01abc'
    assert note.text == "```lint failed```\nFailed with error: exit 2"


def test_mark_failed_truncates_long_logs_from_the_front() -> None:
    """Oversized logs keep their tail and the text fits the limit."""
    note = Notification(name="tests")
    log = "head-" + "x" * 500 + "-tail"

    note.mark_failed("tests", log, RuntimeError("boom"), limit=200)

    assert len(note.text) <= 200
    assert "head-" not in note.text
    assert "-tail```" in note.text
    assert note.text.endswith("Failed with error: boom")


@pytest.mark.parametrize(
    ("text", "limit", "expected"),
    [
        ("short", 10, "short"),
        ("abcdef", 3, "def"),
        ("abcdef", 0, ""),
    ],
)
def test_truncate_tail_edge_cases(text: str, limit: int, expected: str) -> None:
    """Limits too small for the marker keep only the tail."""
    assert truncate_tail(text, limit) == expected


def test_truncate_tail_marks_dropped_text() -> None:
    """Truncated text starts with a marker and fits the limit exactly."""
    result = truncate_tail("0123456789" * 10, 40)

    assert result.startswith("... (truncated)\n")
    assert len(result) == 40
    assert result.endswith("789")
