"""Structured logging helpers distilled into tiny orchestration phrases.

Purpose
    Keep every emission of logging data predictable, contextual, and ready for
    downstream aggregation pipelines without forcing applications to adopt a
    specific logging backend.

Contents
    - ``TRACE_ID``: context variable storing the active trace identifier.
    - ``get_logger``: returns the shared package logger (quiet by default).
    - ``bind_trace_id``: binds or clears the active trace identifier.
    - ``log_debug`` / ``log_info`` / ``log_error``: emit structured entries via a
      single private emitter.
    - ``make_event``: convenience builder for structured event payloads.
    - ``LoggingObservationRegistry``: observation registry that reports each
      send through the package logger.

System Integration
    Used by adapters and the composition root to ensure all diagnostics carry
    the same trace metadata. The domain layer stays free from logging; callers
    who want send observations in their logs pass a
    :class:`LoggingObservationRegistry` to
    :meth:`SenderOptions.with_observation`.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Final, Iterator, Mapping

from .domain.observation import (
    DEFAULT_CONVENTION,
    SenderObservationContext,
    SenderObservationConvention,
)

TRACE_ID: ContextVar[str | None] = ContextVar("lib_sender_options_trace_id", default=None)
"""Current trace identifier propagated through logging helpers."""

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_sender_options")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Expose the package logger so applications may attach handlers.

    Why
        Leaves the library silent by default while giving host applications full
        control over handler and formatter configuration.
    """

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Bind or clear the active trace identifier.

    Inputs
        trace_id: Identifier string or ``None`` to drop the binding.
    Side Effects
        Mutates the context variable visible to subsequent logging helpers.

    Examples
    --------
    >>> bind_trace_id('abc123')
    >>> TRACE_ID.get()
    'abc123'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def log_debug(message: str, **fields: Any) -> None:
    """Emit a structured debug log entry that includes the trace context."""

    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    """Emit a structured info log entry that includes the trace context."""

    _emit(logging.INFO, message, fields)


def log_error(message: str, **fields: Any) -> None:
    """Emit a structured error log entry that includes the trace context."""

    _emit(logging.ERROR, message, fields)


def make_event(
    source: str,
    path: str | None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a structured logging payload for property-source events.

    Inputs
        source: Name of the property source being observed (``file``, ``env``).
        path: Filesystem path associated with the event, if available.
        payload: Optional mapping with extra diagnostic detail.
    Outputs
        dict[str, Any]: Data safe to unpack into :func:`log_*` helpers.

    Examples
    --------
    >>> make_event('env', None, {'keys': 3})
    {'source': 'env', 'path': None, 'keys': 3}
    """

    event = _base_event(source, path)
    return _merge_payload(event, payload)


class LoggingObservationRegistry:
    """Observation registry that writes one start and one stop entry per send.

    Why
        Gives applications send-level visibility without a metrics backend.
    What
        Names and tags each observation through the supplied convention (or the
        library default) and logs ``observation_started``,
        ``observation_stopped`` with the elapsed milliseconds, or
        ``observation_failed`` when the observed block raises. Exceptions are
        always re-raised.
    """

    __slots__ = ("_level",)

    def __init__(self, *, level: int = logging.DEBUG) -> None:
        self._level = level

    @property
    def is_noop(self) -> bool:
        return False

    @contextmanager
    def observe(
        self,
        context: SenderObservationContext,
        convention: SenderObservationConvention | None = None,
    ) -> Iterator[None]:
        resolved = convention if convention is not None else DEFAULT_CONVENTION
        fields = {
            "observation": resolved.get_name(),
            "contextual_name": resolved.get_contextual_name(context),
            "tags": resolved.get_low_cardinality_tags(context),
        }
        _emit(self._level, "observation_started", fields)
        started = time.perf_counter()
        try:
            yield
        except Exception as exc:
            log_error("observation_failed", error=str(exc), **fields)
            raise
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        _emit(self._level, "observation_stopped", {**fields, "elapsed_ms": elapsed_ms})


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    """Send a log entry through the shared logger with contextual metadata."""

    _LOGGER.log(level, message, extra={"context": _with_trace(fields)})


def _with_trace(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Attach the current trace identifier to the provided structured fields."""

    context = {"trace_id": TRACE_ID.get()}
    context.update(fields)
    return context


def _base_event(source: str, path: str | None) -> dict[str, Any]:
    """Create the minimal event payload containing source and path information."""

    return {"source": source, "path": path}


def _merge_payload(event: dict[str, Any], payload: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge optional diagnostic data into the event payload when provided."""

    if payload:
        event |= dict(payload)
    return event
