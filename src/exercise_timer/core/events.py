"""
Notification sink for timer events.

Handlers run synchronously in registration order.  A handler that raises
is logged and skipped; later handlers still run and the exception never
reaches the timer.
"""

from typing import Any, Callable, Literal

from loguru import logger

EventName = Literal["tick", "exercise_change", "complete", "switch_sides"]

EVENT_NAMES: tuple[EventName, ...] = ("tick", "exercise_change", "complete", "switch_sides")

Handler = Callable[..., Any]


class EventEmitter:
    """Observer registry with per-event handler lists."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {name: [] for name in EVENT_NAMES}

    def subscribe(self, event: EventName, handler: Handler) -> Callable[[], None]:
        """
        Register ``handler`` for ``event``.

        Returns:
            Callable that removes this registration again

        Raises:
            ValueError: If the event name is unknown
        """
        if event not in self._handlers:
            raise ValueError(f"Unknown event {event!r}. Valid events: {', '.join(EVENT_NAMES)}")
        self._handlers[event].append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers[event]
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def emit(self, event: EventName, *args: Any) -> None:
        """Call every handler for ``event`` with ``args``."""
        # copy: a handler may unsubscribe itself while we iterate
        for handler in list(self._handlers[event]):
            try:
                handler(*args)
            except Exception:
                logger.exception("Handler {!r} for '{}' event failed", handler, event)

    def handler_count(self, event: EventName) -> int:
        return len(self._handlers[event])

    def clear(self) -> None:
        """Remove all handlers."""
        for handlers in self._handlers.values():
            handlers.clear()
