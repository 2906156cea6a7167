"""Errors raised while decoding inbound Brigade events."""

from __future__ import annotations

from gantry.errors import GantryError


class EventDecodeError(GantryError):
    """Raised when an event document cannot be decoded."""

    @classmethod
    def invalid(cls, detail: str) -> EventDecodeError:
        """Return an error for malformed or mistyped event JSON."""
        return cls(f"invalid event document: {detail}")

    @classmethod
    def missing_type(cls) -> EventDecodeError:
        """Return an error for an event without a type tag."""
        return cls("event document has an empty 'type'")
