"""The check-run notification sent around each wrapped job."""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

if typ.TYPE_CHECKING:
    from gantry.events.models import Event

# GitHub rejects check-run output text longer than this.
MAX_CHECK_TEXT = 65535

_TRUNCATION_MARKER = "... (truncated)\n"


class Conclusion(enum.StrEnum):
    """Terminal states GitHub accepts for a check run."""

    SUCCESS = "success"
    FAILURE = "failure"
    NEUTRAL = "neutral"
    CANCELLED = "cancelled"
    TIMED_OUT = "timed_out"


def truncate_tail(text: str, limit: int) -> str:
    """Shorten ``text`` to at most ``limit`` characters, keeping the end.

    The end of a job log is where failures are reported, so the head is
    dropped and replaced by a marker.

    >>> truncate_tail("abcdef", 20)
    'abcdef'
    >>> len(truncate_tail("x" * 100, 40))
    40

    """
    if len(text) <= limit:
        return text
    if limit <= len(_TRUNCATION_MARKER):
        return text[-limit:] if limit > 0 else ""
    keep = limit - len(_TRUNCATION_MARKER)
    return _TRUNCATION_MARKER + text[-keep:]


def _fenced_report(log: str, trailer: str, limit: int) -> str:
    """Wrap ``log`` in a code fence followed by ``trailer`` within ``limit``."""
    prefix = "```"
    suffix = f"```\n{trailer}"
    room = max(limit - len(prefix) - len(suffix), 0)
    return f"{prefix}{truncate_tail(log, room)}{suffix}"


@dataclasses.dataclass(slots=True)
class Notification:
    """A GitHub check run, reported through a job-shaped transport.

    One instance follows a single check from start to finish and is mutated
    in place between sends. ``count`` numbers the sends; every send takes the
    next number, so each attempt gets a distinct job name.

    Attributes
    ----------
    name
        Check run name shown on the pull request.
    payload
        Webhook payload of the triggering event, passed to the transport.
    external_id
        Build identifier linking the check run back to the build.
    details_url
        Link from the check run to the build's detail page.
    title, summary, text
        Check run output fields.
    conclusion
        ``None`` while the check is running, otherwise its terminal state.
    count
        Number of sends attempted so far.

    """

    name: str
    payload: str = ""
    external_id: str = ""
    details_url: str = ""
    title: str = "running check"
    summary: str = ""
    text: str = ""
    conclusion: Conclusion | None = Conclusion.NEUTRAL
    count: int = 0

    @classmethod
    def for_event(
        cls,
        name: str,
        event: Event,
        *,
        details_url_template: str,
    ) -> Notification:
        """Build a notification for ``event``.

        ``details_url_template`` may reference ``{build_id}``.
        """
        return cls(
            name=name,
            payload=event.payload,
            external_id=event.build_id,
            details_url=details_url_template.format(build_id=event.build_id),
        )

    def next_job_name(self) -> str:
        """Advance the send counter and return the job name for this send."""
        self.count += 1
        return f"{self.name}-notification-{self.count}"

    def to_env(self) -> dict[str, str]:
        """Return the ``CHECK_*`` environment consumed by the check-run tool."""
        return {
            "CHECK_CONCLUSION": self.conclusion.value if self.conclusion else "",
            "CHECK_NAME": self.name,
            "CHECK_TITLE": self.title,
            "CHECK_PAYLOAD": self.payload,
            "CHECK_SUMMARY": self.summary,
            "CHECK_TEXT": self.text,
            "CHECK_DETAILS_URL": self.details_url,
            "CHECK_EXTERNAL_ID": self.external_id,
        }

    def mark_passed(self, job_name: str, log: str, *, limit: int = MAX_CHECK_TEXT) -> None:
        """Record a successful run of ``job_name``."""
        self.conclusion = Conclusion.SUCCESS
        self.summary = f'Task "{job_name}" passed'
        self.text = _fenced_report(log, "Test Complete", limit)

    def mark_failed(
        self,
        job_name: str,
        log: str,
        error: BaseException,
        *,
        limit: int = MAX_CHECK_TEXT,
    ) -> None:
        """Record a failed run of ``job_name`` caused by ``error``."""
        self.conclusion = Conclusion.FAILURE
        self.summary = f'Task "{job_name}" failed for {self.external_id}'
        self.text = _fenced_report(log, f"Failed with error: {error}", limit)
