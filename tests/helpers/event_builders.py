"""Builders for Brigade events and GitHub webhook payloads used in tests."""

from __future__ import annotations

import typing as typ

import msgspec

from gantry.events.models import Event, EventType, Revision

_TOKEN = "installation-token"


def check_suite_body(
    *,
    full_name: str = "brigadecore/brigade-github-app",
    head_sha: str = "9a0c1f2",
    head_branch: str = "feature-x",
) -> dict[str, typ.Any]:
    """Return a ``check_suite`` webhook body."""
    return {
        "action": "requested",
        "repository": {"full_name": full_name},
        "check_suite": {"head_sha": head_sha, "head_branch": head_branch},
    }


def webhook_payload(
    payload_type: str = "check_suite",
    body: dict[str, typ.Any] | None = None,
    **extra: str,
) -> str:
    """Return a gateway payload envelope as JSON text."""
    envelope: dict[str, typ.Any] = {
        "type": payload_type,
        "token": _TOKEN,
        "body": check_suite_body() if body is None else body,
    }
    envelope.update(extra)
    return msgspec.json.encode(envelope).decode("utf-8")


def make_event(
    event_type: str = EventType.PUSH,
    *,
    ref: str = "refs/heads/master",
    commit: str = "9a0c1f2",
    build_id: str = "01build",
    payload: str | None = None,
) -> Event:
    """Return an event for ``ref``."""
    return Event(
        type=str(event_type),
        build_id=build_id,
        provider="github",
        revision=Revision(commit=commit, ref=ref),
        payload=webhook_payload() if payload is None else payload,
    )
