"""Typed models for the events Brigade delivers to the pipeline.

Brigade serialises each event as JSON with camel-cased keys::

    {
      "buildID": "01d3k...",
      "type": "push",
      "provider": "github",
      "revision": {"commit": "9a0c...", "ref": "refs/heads/master"},
      "payload": "{...webhook JSON...}"
    }

The payload stays an opaque string; only the check-run tool looks inside it.
"""

from __future__ import annotations

import enum

import msgspec

from .errors import EventDecodeError


class EventType(enum.StrEnum):
    """Event names the pipeline registers handlers for."""

    EXEC = "exec"
    PUSH = "push"
    CHECK_SUITE_REQUESTED = "check_suite:requested"
    CHECK_SUITE_REREQUESTED = "check_suite:rerequested"
    CHECK_RUN_REREQUESTED = "check_run:rerequested"


CHECK_REQUEST_EVENTS: tuple[EventType, ...] = (
    EventType.CHECK_SUITE_REQUESTED,
    EventType.CHECK_SUITE_REREQUESTED,
    EventType.CHECK_RUN_REREQUESTED,
)


class Revision(msgspec.Struct, kw_only=True, frozen=True):
    """The commit and ref an event refers to."""

    commit: str = ""
    ref: str = ""


class Event(msgspec.Struct, kw_only=True, frozen=True):
    """An inbound event as supplied by the host platform.

    Attributes
    ----------
    type
        Event tag such as ``push`` or ``check_suite:requested``. Kept as a
        plain string so unknown tags decode and can be ignored downstream.
    build_id
        Platform build identifier, also used as the check run external id.
    provider
        Gateway that produced the event (``github`` for webhook events).
    revision
        Commit and ref under test.
    payload
        Raw webhook payload, forwarded untouched to check-run jobs.

    """

    type: str
    build_id: str = msgspec.field(default="", name="buildID")
    provider: str = ""
    revision: Revision = msgspec.field(default_factory=Revision)
    payload: str = ""


_DECODER = msgspec.json.Decoder(Event)


def decode_event(data: bytes | str) -> Event:
    """Decode a Brigade event document.

    Raises
    ------
    EventDecodeError
        If the document is not valid JSON, does not match :class:`Event`, or
        carries an empty type.

    """
    try:
        event = _DECODER.decode(data)
    except msgspec.DecodeError as exc:
        raise EventDecodeError.invalid(str(exc)) from exc
    if not event.type.strip():
        raise EventDecodeError.missing_type()
    return event


def encode_event(event: Event) -> bytes:
    """Encode an event back to Brigade's JSON layout."""
    return msgspec.json.encode(event)
