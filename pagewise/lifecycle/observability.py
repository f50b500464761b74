from __future__ import annotations

import logging
import time
from collections import deque
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger("pagewise")

MAX_CAPTURED_EVENTS = 1000


@dataclass(frozen=True)
class PageEvent:
    """Represents a single data-source call made while serving a page."""

    operation: str
    source: str
    strategy: str = ""
    direction: str | None = None
    limit: int | None = None
    skip: int | None = None
    duration_ms: float = 0.0
    result_count: int | None = None
    error: str | None = None


class _ObservabilityState:
    """Global mutable state for observability."""

    def __init__(self) -> None:
        self.enabled: bool = False
        self.slow_fetch_threshold_ms: float = 100.0
        self.listeners: list[Callable[[PageEvent], Any]] = []
        self.events: deque[PageEvent] = deque(maxlen=MAX_CAPTURED_EVENTS)
        self.capture_events: bool = False


_state = _ObservabilityState()


def enable_tracing(slow_fetch_ms: float = 100.0, capture_events: bool = False) -> None:
    """Enable fetch tracing and observability.

    With ``capture_events`` only the latest MAX_CAPTURED_EVENTS events are kept.
    """
    _state.enabled = True
    _state.slow_fetch_threshold_ms = slow_fetch_ms
    _state.capture_events = capture_events


def disable_tracing() -> None:
    """Disable tracing and clear all state."""
    _state.enabled = False
    _state.slow_fetch_threshold_ms = 100.0
    _state.listeners.clear()
    _state.events.clear()
    _state.capture_events = False


def get_events() -> list[PageEvent]:
    """Return captured events."""
    return list(_state.events)


def clear_events() -> None:
    """Clear captured events."""
    _state.events.clear()


def add_listener(callback: Callable[[PageEvent], Any]) -> None:
    """Register a listener that receives a PageEvent on each data-source call."""
    _state.listeners.append(callback)


def remove_listener(callback: Callable[[PageEvent], Any]) -> None:
    """Remove a previously registered listener."""
    _state.listeners.remove(callback)


def emit_event(event: PageEvent) -> None:
    """Emit a page event: store, log slow fetches, notify listeners.

    A failing listener is logged and skipped; it never fails the fetch.
    """
    if not _state.enabled:
        return

    if _state.capture_events:
        _state.events.append(event)

    if event.duration_ms > _state.slow_fetch_threshold_ms:
        logger.warning(
            "Slow fetch: %s on %s took %.1fms (threshold: %.1fms)",
            event.operation,
            event.source,
            event.duration_ms,
            _state.slow_fetch_threshold_ms,
        )

    for listener in list(_state.listeners):
        try:
            listener(event)
        except Exception:
            logger.exception("Page event listener %r failed", listener)

    try:
        _try_emit_otel_span(event)
    except Exception:
        logger.exception("Failed to emit OpenTelemetry span for %s", event.operation)


def _try_emit_otel_span(event: PageEvent) -> None:
    """Attempt to emit an OpenTelemetry span if the library is available."""
    try:
        from opentelemetry import trace

        tracer = trace.get_tracer("pagewise")
        with tracer.start_as_current_span(f"pagewise.{event.operation}") as span:
            span.set_attribute("pagination.source", event.source)
            span.set_attribute("pagination.strategy", event.strategy)
            if event.limit is not None:
                span.set_attribute("pagination.limit", event.limit)
            if event.duration_ms:
                span.set_attribute("pagination.duration_ms", event.duration_ms)
    except ImportError:
        pass


@asynccontextmanager
async def track_fetch(
    operation: str,
    source: Any,
    strategy: str = "",
    direction: str | None = None,
    limit: int | None = None,
    skip: int | None = None,
):
    """Context manager that times a data-source call and emits a PageEvent.

    Exceptions raised inside the block are recorded on the event and re-raised.
    """
    if not _state.enabled:
        yield {"result_count": None}
        return

    start = time.perf_counter()
    ctx: dict[str, Any] = {"result_count": None}
    error: str | None = None
    try:
        yield ctx
    except Exception as e:
        error = type(e).__name__
        raise
    finally:
        duration_ms = (time.perf_counter() - start) * 1000
        event = PageEvent(
            operation=operation,
            source=type(source).__name__,
            strategy=strategy,
            direction=direction,
            limit=limit,
            skip=skip,
            duration_ms=duration_ms,
            result_count=ctx.get("result_count"),
            error=error,
        )
        emit_event(event)
