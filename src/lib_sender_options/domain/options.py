"""Immutable sender options value object.

Purpose
-------
Anchor the :class:`SenderOptions` value object that carries raw producer
properties plus the typed settings of the sending pipeline. This module
belongs to the domain layer and contains no I/O apart from reading the
default buffer size once at import.

Contents
--------
* Property-key constants (:data:`CLIENT_ID_CONFIG`,
  :data:`TRANSACTIONAL_ID_CONFIG`, ...).
* :data:`SMALL_BUFFER_SIZE` – library-wide default in-flight cap.
* :class:`SenderOptions` – frozen dataclass with copy-on-write ``with_*``
  derivations.
* :func:`_ensure_client_id` – one-shot client identifier synthesis run by the
  two root constructors.

System Role
-----------
Every producer and sending pipeline built on this library is parameterised
by a :class:`SenderOptions` instance. The type guarantees immutability, a
client identifier in every root instance, and structural equality that
ignores observability hooks.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import timedelta
from types import MappingProxyType
from typing import Any, ClassVar, Final

from .errors import InvalidArgument
from .observation import NOOP_REGISTRY, ObservationRegistry, SenderObservationConvention
from .scheduling import IMMEDIATE, Scheduler
from .serialization import Serializer

CLIENT_ID_CONFIG: Final[str] = "client.id"
TRANSACTIONAL_ID_CONFIG: Final[str] = "transactional.id"
BOOTSTRAP_SERVERS_CONFIG: Final[str] = "bootstrap.servers"
KEY_SERIALIZER_CONFIG: Final[str] = "key.serializer"
VALUE_SERIALIZER_CONFIG: Final[str] = "value.serializer"

CLIENT_ID_PREFIX: Final[str] = "producer-"

BUFFER_SIZE_ENV: Final[str] = "LIB_SENDER_OPTIONS_BUFFER_SIZE_SMALL"
_MIN_BUFFER_SIZE: Final[int] = 16
_DEFAULT_BUFFER_SIZE: Final[int] = 256

UNBOUNDED_CLOSE_TIMEOUT: Final[timedelta] = timedelta.max
"""Default close timeout; the producer waits for in-flight sends without limit."""


def _small_buffer_size(environ: Mapping[str, str]) -> int:
    """Return the default in-flight cap, honouring :data:`BUFFER_SIZE_ENV`.

    Examples
    --------
    >>> _small_buffer_size({})
    256
    >>> _small_buffer_size({BUFFER_SIZE_ENV: "4"})
    16
    >>> _small_buffer_size({BUFFER_SIZE_ENV: "1024"})
    1024
    """

    raw = environ.get(BUFFER_SIZE_ENV)
    if raw is None:
        return _DEFAULT_BUFFER_SIZE
    return max(_MIN_BUFFER_SIZE, int(raw))


SMALL_BUFFER_SIZE: Final[int] = _small_buffer_size(os.environ)


class _ClientIdSequence:
    """Process-wide counter behind synthesized ``producer-<n>`` identifiers."""

    __slots__ = ("_lock", "_next")

    def __init__(self, start: int = 1) -> None:
        self._lock = threading.Lock()
        self._next = start

    def next(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
        return value

    def reset(self, start: int = 1) -> None:
        with self._lock:
            self._next = start


@dataclass(frozen=True, slots=True)
class SenderOptions:
    """Immutable configuration handed to the producer and the sending pipeline.

    Why
    ----
    Producers are built from a chain of small adjustments (serializers,
    timeouts, a property or two). Each step must leave earlier instances
    untouched so they can be shared freely between threads.

    What
    ----
    Stores the property overlay inside a ``MappingProxyType`` over a private
    ``dict`` plus typed fields. Every ``with_*`` method returns a new instance
    with exactly one aspect changed. Equality and hashing ignore
    :attr:`observation_registry` and :attr:`observation_convention`.

    Use :meth:`create` or :meth:`from_properties` to build root instances;
    calling the dataclass constructor directly skips client identifier
    synthesis and is reserved for derivations.

    Parameters
    ----------
    _properties:
        Raw producer properties. Copied (keys coerced to ``str``) during
        initialisation.
    key_serializer / value_serializer:
        Optional callables; ``None`` lets the producer resolve serializers from
        the properties.
    close_timeout:
        Upper bound for a graceful producer close.
    scheduler:
        Where send-result callbacks are delivered.
    max_in_flight:
        Cap on concurrently unacknowledged outbound records.
    stop_on_error:
        Whether a batched send stops at the first failed record.
    observation_registry / observation_convention:
        Observability hooks, not part of equality.

    Examples
    --------
    >>> options = SenderOptions.from_properties({"bootstrap.servers": "localhost:9092", "client.id": "billing"})
    >>> options.client_id
    'billing'
    >>> tuned = options.with_max_in_flight(32).with_stop_on_error(False)
    >>> tuned.max_in_flight, tuned.stop_on_error, options.stop_on_error
    (32, False, True)
    >>> tuned.producer_property("bootstrap.servers")
    'localhost:9092'
    """

    _properties: Mapping[str, Any] = field(default_factory=dict)
    key_serializer: Serializer | None = None
    value_serializer: Serializer | None = None
    close_timeout: timedelta = UNBOUNDED_CLOSE_TIMEOUT
    scheduler: Scheduler = IMMEDIATE
    max_in_flight: int = SMALL_BUFFER_SIZE
    stop_on_error: bool = True
    observation_registry: ObservationRegistry = field(default=NOOP_REGISTRY, compare=False)
    observation_convention: SenderObservationConvention | None = field(default=None, compare=False)

    _client_ids: ClassVar[_ClientIdSequence] = _ClientIdSequence()

    def __post_init__(self) -> None:
        object.__setattr__(self, "_properties", MappingProxyType(_string_keyed(self._properties)))

    def __hash__(self) -> int:
        # Overlay values and callables may be unhashable; only __eq__ compares them.
        return hash(
            (
                frozenset(self._properties),
                self.close_timeout,
                self.max_in_flight,
                self.stop_on_error,
            )
        )

    @classmethod
    def create(cls) -> SenderOptions:
        """Return options with an empty overlay and library defaults.

        A ``client.id`` of the form ``producer-<n>`` is synthesized from the
        process-wide sequence.

        Examples
        --------
        >>> options = SenderOptions.create()
        >>> options.client_id.startswith("producer-")
        True
        >>> options.stop_on_error, options.observation_convention is None
        (True, True)
        """

        return cls.from_properties({})

    @classmethod
    def from_properties(cls, source: Mapping[Any, Any] | Iterable[tuple[Any, Any]]) -> SenderOptions:
        """Return options whose overlay is a copy of *source*.

        Why
        ----
        Producers are usually described by a flat property bag loaded from a
        file or the environment; this is the entry point for such bags.

        What
        ----
        Copies *source* (a mapping or an iterable of pairs), converts every key
        with ``str()``, synthesizes ``client.id`` when it is absent, and applies
        the library defaults to every typed field.

        Raises
        ------
        InvalidArgument
            When *source* is ``None`` or not a mapping or iterable of pairs.

        Examples
        --------
        >>> SenderOptions.from_properties({"transactional.id": "tx-7"}).client_id
        'producer-tx-7'
        >>> SenderOptions.from_properties([(1, "one")]).producer_property("1")
        'one'
        """

        _require(source, "source")
        properties = _string_keyed(source)
        _ensure_client_id(properties, cls._client_ids)
        return cls(properties)

    def producer_properties(self) -> dict[str, Any]:
        """Return a mutable copy of the property overlay."""

        return dict(self._properties)

    def producer_property(self, name: str) -> Any:
        """Return the overlay value stored under *name* or ``None``."""

        _require(name, "name")
        return self._properties.get(str(name))

    @property
    def client_id(self) -> Any:
        return self._properties.get(CLIENT_ID_CONFIG)

    @property
    def transactional_id(self) -> Any:
        return self._properties.get(TRANSACTIONAL_ID_CONFIG)

    @property
    def bootstrap_servers(self) -> Any:
        return self._properties.get(BOOTSTRAP_SERVERS_CONFIG)

    @property
    def is_transactional(self) -> bool:
        transactional_id = self.transactional_id
        return transactional_id is not None and str(transactional_id) != ""

    def producer_config(self) -> dict[str, Any]:
        """Return the overlay plus ``key.serializer``/``value.serializer`` entries.

        Serializer entries are added only when set, so a producer that resolves
        serializers from properties still sees whatever the overlay holds.

        Examples
        --------
        >>> options = SenderOptions.from_properties({"client.id": "c"}).with_value_serializer(str.encode)
        >>> sorted(options.producer_config())
        ['client.id', 'value.serializer']
        """

        config = self.producer_properties()
        if self.key_serializer is not None:
            config[KEY_SERIALIZER_CONFIG] = self.key_serializer
        if self.value_serializer is not None:
            config[VALUE_SERIALIZER_CONFIG] = self.value_serializer
        return config

    def with_producer_property(self, name: str, value: Any) -> SenderOptions:
        """Return a copy whose overlay maps *name* to *value*."""

        _require(name, "name")
        _require(value, "value")
        properties = dict(self._properties)
        properties[str(name)] = value
        return replace(self, _properties=properties)

    def with_key_serializer(self, serializer: Serializer) -> SenderOptions:
        return replace(self, key_serializer=_require_callable(serializer, "key_serializer"))

    def with_value_serializer(self, serializer: Serializer) -> SenderOptions:
        return replace(self, value_serializer=_require_callable(serializer, "value_serializer"))

    def with_scheduler(self, scheduler: Scheduler) -> SenderOptions:
        _require(scheduler, "scheduler")
        if not callable(getattr(scheduler, "schedule", None)):
            raise InvalidArgument(f"scheduler must provide a callable schedule(), got {scheduler!r}")
        return replace(self, scheduler=scheduler)

    def with_max_in_flight(self, max_in_flight: int) -> SenderOptions:
        _require(max_in_flight, "max_in_flight")
        if isinstance(max_in_flight, bool) or not isinstance(max_in_flight, int):
            raise InvalidArgument(f"max_in_flight must be an int, got {max_in_flight!r}")
        if max_in_flight < 1:
            raise InvalidArgument(f"max_in_flight must be positive, got {max_in_flight}")
        return replace(self, max_in_flight=max_in_flight)

    def with_stop_on_error(self, stop_on_error: bool) -> SenderOptions:
        _require(stop_on_error, "stop_on_error")
        if not isinstance(stop_on_error, bool):
            raise InvalidArgument(f"stop_on_error must be a bool, got {stop_on_error!r}")
        return replace(self, stop_on_error=stop_on_error)

    def with_close_timeout(self, timeout: timedelta | float) -> SenderOptions:
        """Return a copy with a new close timeout.

        *timeout* is a :class:`~datetime.timedelta` or a non-negative number of
        seconds.

        Examples
        --------
        >>> SenderOptions.create().with_close_timeout(2.5).close_timeout
        datetime.timedelta(seconds=2, microseconds=500000)
        """

        return replace(self, close_timeout=_to_timedelta(timeout))

    def with_observation(
        self,
        registry: ObservationRegistry,
        convention: SenderObservationConvention | None = None,
    ) -> SenderOptions:
        """Return a copy with both observability hooks replaced in one step."""

        _require(registry, "registry")
        return replace(self, observation_registry=registry, observation_convention=convention)


def _ensure_client_id(properties: dict[str, Any], sequence: _ClientIdSequence) -> None:
    """Write ``client.id`` into *properties* unless the caller supplied one.

    Examples
    --------
    >>> props = {"transactional.id": "orders"}
    >>> _ensure_client_id(props, _ClientIdSequence())
    >>> props["client.id"]
    'producer-orders'
    >>> props = {}
    >>> _ensure_client_id(props, _ClientIdSequence(start=41))
    >>> props["client.id"]
    'producer-41'
    """

    if CLIENT_ID_CONFIG in properties:
        return
    transactional_id = properties.get(TRANSACTIONAL_ID_CONFIG)
    suffix = transactional_id if transactional_id is not None else sequence.next()
    properties[CLIENT_ID_CONFIG] = f"{CLIENT_ID_PREFIX}{suffix}"


def _string_keyed(source: Mapping[Any, Any] | Iterable[tuple[Any, Any]]) -> dict[str, Any]:
    """Copy *source* into a fresh ``dict`` with ``str`` keys.

    Examples
    --------
    >>> _string_keyed("abc")
    Traceback (most recent call last):
    ...
    lib_sender_options.domain.errors.InvalidArgument: source must be a mapping or iterable of pairs, got 'abc'
    """

    if isinstance(source, (str, bytes)):
        raise InvalidArgument(f"source must be a mapping or iterable of pairs, got {source!r}")
    items = source.items() if isinstance(source, Mapping) else source
    try:
        return {str(key): value for key, value in items}
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"source must be a mapping or iterable of pairs, got {source!r}") from exc


def _require(value: Any, name: str) -> None:
    if value is None:
        raise InvalidArgument(f"{name} must not be None")


def _require_callable(value: Any, name: str) -> Any:
    _require(value, name)
    if not callable(value):
        raise InvalidArgument(f"{name} must be callable, got {value!r}")
    return value


def _to_timedelta(timeout: timedelta | float) -> timedelta:
    """Normalise *timeout* into a non-negative ``timedelta``.

    Examples
    --------
    >>> _to_timedelta(3)
    datetime.timedelta(seconds=3)
    >>> _to_timedelta(-1)
    Traceback (most recent call last):
    ...
    lib_sender_options.domain.errors.InvalidArgument: close_timeout must not be negative, got -1
    """

    _require(timeout, "close_timeout")
    if isinstance(timeout, timedelta):
        resolved = timeout
    elif isinstance(timeout, (int, float)) and not isinstance(timeout, bool):
        try:
            resolved = timedelta(seconds=timeout)
        except (OverflowError, ValueError) as exc:
            raise InvalidArgument(f"close_timeout is not a usable number of seconds: {timeout!r}") from exc
    else:
        raise InvalidArgument(f"close_timeout must be a timedelta or seconds, got {timeout!r}")
    if resolved < timedelta(0):
        raise InvalidArgument(f"close_timeout must not be negative, got {timeout!r}")
    return resolved
