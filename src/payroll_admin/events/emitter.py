"""Event emitter for store notifications.

The emitter provides:
- Handler registration with type or category filtering
- Error isolation (handler failures don't break other handlers)
- Event batching, so a compound operation notifies once it is complete
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Protocol, TypeVar, runtime_checkable

from payroll_admin.events.types import EventCategory, StoreEvent

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=StoreEvent)


@runtime_checkable
class EventHandler(Protocol):
    """Protocol for event handlers."""

    def __call__(self, event: StoreEvent) -> None:
        ...


@dataclass
class HandlerRegistration:
    """Registration of an event handler."""

    handler: Callable[[StoreEvent], None]
    event_types: set[str] | None  # None = all events
    categories: set[EventCategory] | None  # None = all categories


class EventEmitter:
    """Synchronous event emitter.

    Each emitted event reaches each matching handler exactly once. If one
    handler fails, the others still receive the event.

    Usage:
        emitter = EventEmitter()
        emitter.on(EmployeeAdded, handle_new_employee)
        emitter.on_category(EventCategory.PAYSLIP, audit_payslips)
        emitter.emit(EmployeeAdded(employee_id="emp-1"))

        with emitter.batch():
            emitter.emit(event1)
            emitter.emit(event2)
        # Both events dispatched when the block exits
    """

    def __init__(self) -> None:
        self._handlers: list[HandlerRegistration] = []
        self._batching = False
        self._batch: list[StoreEvent] = []

    def on(
        self,
        event_type: type[T] | list[type[T]],
        handler: Callable[[StoreEvent], None],
    ) -> None:
        """Register handler for specific event type(s)."""
        if isinstance(event_type, list):
            types = {t.__name__ for t in event_type}
        else:
            types = {event_type.__name__}

        self._handlers.append(
            HandlerRegistration(handler=handler, event_types=types, categories=None)
        )

    def on_category(
        self,
        category: EventCategory | list[EventCategory],
        handler: Callable[[StoreEvent], None],
    ) -> None:
        """Register handler for event category(ies)."""
        cats = set(category) if isinstance(category, list) else {category}
        self._handlers.append(
            HandlerRegistration(handler=handler, event_types=None, categories=cats)
        )

    def on_all(self, handler: Callable[[StoreEvent], None]) -> None:
        """Register handler for all events."""
        self._handlers.append(
            HandlerRegistration(handler=handler, event_types=None, categories=None)
        )

    def off(self, handler: Callable[[StoreEvent], None]) -> None:
        """Unregister a handler."""
        self._handlers = [reg for reg in self._handlers if reg.handler != handler]

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    def emit(self, event: StoreEvent) -> list[Exception]:
        """Emit an event to all matching handlers.

        Returns list of any exceptions raised by handlers.
        """
        if self._batching:
            self._batch.append(event)
            return []

        return self._dispatch(event)

    def _dispatch(self, event: StoreEvent) -> list[Exception]:
        errors: list[Exception] = []
        event_type = event.event_type
        event_category = event.category

        # Snapshot: handlers may unsubscribe while being notified.
        for reg in list(self._handlers):
            if reg.event_types and event_type not in reg.event_types:
                continue
            if reg.categories and event_category not in reg.categories:
                continue

            try:
                reg.handler(event)
            except Exception as e:
                logger.exception(
                    "Handler %s failed for event %s",
                    reg.handler,
                    event_type,
                )
                errors.append(e)

        return errors

    def batch(self) -> EventBatch:
        """Create a batch context for collecting events."""
        return EventBatch(self)

    def _start_batch(self) -> None:
        self._batching = True
        self._batch = []

    def _end_batch(self) -> list[Exception]:
        self._batching = False
        events = self._batch
        self._batch = []

        errors: list[Exception] = []
        for event in events:
            errors.extend(self._dispatch(event))
        return errors


class EventBatch:
    """Context manager for batching events."""

    def __init__(self, emitter: EventEmitter) -> None:
        self._emitter = emitter
        self._errors: list[Exception] = []

    def __enter__(self) -> EventBatch:
        self._emitter._start_batch()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is None:
            self._errors = self._emitter._end_batch()
        else:
            # Exception occurred - discard batch
            self._emitter._batching = False
            self._emitter._batch = []

    @property
    def errors(self) -> list[Exception]:
        """Errors from handler execution (available after context exits)."""
        return self._errors
