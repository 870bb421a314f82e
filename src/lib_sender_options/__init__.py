"""Public package surface for immutable producer sender options.

Import :class:`SenderOptions` to build options in code, or
:func:`read_sender_options` to build them from a property file and the
environment. Scheduling, observation, and error types are re-exported so
consumers never reach into the layered sub-packages.
"""

from __future__ import annotations

from .core import SourceLoadError, default_env_prefix, read_sender_options, read_sender_options_raw
from .domain.errors import InvalidArgument, InvalidFormat, NotFound, SenderOptionsError
from .domain.observation import (
    NOOP_REGISTRY,
    DefaultSenderObservationConvention,
    NoopObservationRegistry,
    ObservationRegistry,
    SenderObservationContext,
    SenderObservationConvention,
)
from .domain.options import (
    BOOTSTRAP_SERVERS_CONFIG,
    CLIENT_ID_CONFIG,
    SMALL_BUFFER_SIZE,
    TRANSACTIONAL_ID_CONFIG,
    UNBOUNDED_CLOSE_TIMEOUT,
    SenderOptions,
)
from .domain.scheduling import IMMEDIATE, ExecutorScheduler, ImmediateScheduler, Scheduler
from .domain.serialization import Serializer
from .observability import LoggingObservationRegistry, bind_trace_id, get_logger
from .testing import i_should_fail, reset_client_id_sequence

__all__ = [
    "BOOTSTRAP_SERVERS_CONFIG",
    "CLIENT_ID_CONFIG",
    "DefaultSenderObservationConvention",
    "ExecutorScheduler",
    "IMMEDIATE",
    "ImmediateScheduler",
    "InvalidArgument",
    "InvalidFormat",
    "LoggingObservationRegistry",
    "NOOP_REGISTRY",
    "NoopObservationRegistry",
    "NotFound",
    "ObservationRegistry",
    "SMALL_BUFFER_SIZE",
    "Scheduler",
    "SenderObservationContext",
    "SenderObservationConvention",
    "SenderOptions",
    "SenderOptionsError",
    "Serializer",
    "SourceLoadError",
    "TRANSACTIONAL_ID_CONFIG",
    "UNBOUNDED_CLOSE_TIMEOUT",
    "bind_trace_id",
    "default_env_prefix",
    "get_logger",
    "i_should_fail",
    "read_sender_options",
    "read_sender_options_raw",
    "reset_client_id_sequence",
]
