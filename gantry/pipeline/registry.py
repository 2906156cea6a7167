"""Explicit event-to-handler registration."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from gantry.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from gantry.events.models import Event

    from .config import PipelineContext

logger = get_logger(__name__)

EventHandler = cabc.Callable[["Event", "PipelineContext"], cabc.Awaitable[object]]


class EventRegistry:
    """Map event types to the coroutine handling them.

    Handlers are registered once at process start and looked up per event.
    Registering a second handler for a type replaces the first.

    Examples
    --------
    >>> registry = EventRegistry()
    >>> @registry.on("exec")
    ... async def handle_exec(event, context):
    ...     return "ran"
    >>> registry.handles("exec")
    True

    """

    def __init__(self) -> None:
        """Start with no handlers."""
        self._handlers: dict[str, EventHandler] = {}

    def on(self, *event_types: str) -> cabc.Callable[[EventHandler], EventHandler]:
        """Return a decorator registering a handler for ``event_types``."""

        def _register(handler: EventHandler) -> EventHandler:
            for event_type in event_types:
                self.register(event_type, handler)
            return handler

        return _register

    def register(self, event_type: str, handler: EventHandler) -> None:
        """Register ``handler`` for ``event_type``."""
        self._handlers[str(event_type)] = handler

    def handles(self, event_type: str) -> bool:
        """Return True when a handler is registered for ``event_type``."""
        return str(event_type) in self._handlers

    @property
    def event_types(self) -> tuple[str, ...]:
        """Return the registered event types in registration order."""
        return tuple(self._handlers)

    async def dispatch(self, event: Event, context: PipelineContext) -> object | None:
        """Run the handler registered for ``event`` and return its result.

        Events without a handler are logged and ignored.
        """
        handler = self._handlers.get(event.type)
        if handler is None:
            log_info(logger, "No handler for event %s; ignoring", event.type)
            return None
        log_info(
            logger,
            "Dispatching %s (build=%s ref=%s)",
            event.type,
            event.build_id,
            event.revision.ref,
        )
        return await handler(event, context)
