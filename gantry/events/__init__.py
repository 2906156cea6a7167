"""Inbound event models and ref matching."""

from __future__ import annotations

from .errors import EventDecodeError
from .models import (
    CHECK_REQUEST_EVENTS,
    Event,
    EventType,
    Revision,
    decode_event,
    encode_event,
)
from .refs import RELEASE_TAG_PATTERN, branch_ref, is_main_branch, release_version

__all__ = [
    "CHECK_REQUEST_EVENTS",
    "RELEASE_TAG_PATTERN",
    "Event",
    "EventDecodeError",
    "EventType",
    "Revision",
    "branch_ref",
    "decode_event",
    "encode_event",
    "is_main_branch",
    "release_version",
]
