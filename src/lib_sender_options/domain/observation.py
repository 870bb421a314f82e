"""Observation hooks carried by :class:`SenderOptions`.

Purpose
-------
Give the sending pipeline a registry to open one observation per send and a
convention that names and tags it. Both are opaque to the options object and
excluded from its equality.

Contents
--------
* :class:`SenderObservationContext` – per-send facts a convention may tag.
* :class:`SenderObservationConvention` – naming/tagging contract.
* :class:`DefaultSenderObservationConvention` – used when options carry no
  convention.
* :class:`ObservationRegistry` – contract for opening observations.
* :class:`NoopObservationRegistry` / :data:`NOOP_REGISTRY` – inert default.

System Role
-----------
A concrete registry that writes to the package logger lives in
:mod:`lib_sender_options.observability` so this module stays free of I/O.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import ContextManager, Final, Iterator, Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class SenderObservationContext:
    """Facts about a single send that conventions turn into names and tags."""

    topic: str
    client_id: str | None = None
    bootstrap_servers: str | None = None


@runtime_checkable
class SenderObservationConvention(Protocol):
    """Name and tag sender observations."""

    def get_name(self) -> str:
        ...

    def get_contextual_name(self, context: SenderObservationContext) -> str:
        ...

    def get_low_cardinality_tags(self, context: SenderObservationContext) -> dict[str, str]:
        ...


class DefaultSenderObservationConvention:
    """Library default convention.

    Examples
    --------
    >>> convention = DefaultSenderObservationConvention()
    >>> ctx = SenderObservationContext(topic="orders", client_id="producer-1")
    >>> convention.get_contextual_name(ctx)
    'orders send'
    >>> convention.get_low_cardinality_tags(ctx)
    {'messaging.system': 'kafka', 'sender.type': 'sender', 'sender.client.id': 'producer-1'}
    """

    NAME: Final[str] = "lib_sender_options.sender"

    def get_name(self) -> str:
        return self.NAME

    def get_contextual_name(self, context: SenderObservationContext) -> str:
        return f"{context.topic} send"

    def get_low_cardinality_tags(self, context: SenderObservationContext) -> dict[str, str]:
        tags = {"messaging.system": "kafka", "sender.type": "sender"}
        if context.client_id is not None:
            tags["sender.client.id"] = context.client_id
        return tags


DEFAULT_CONVENTION: Final[DefaultSenderObservationConvention] = DefaultSenderObservationConvention()


@runtime_checkable
class ObservationRegistry(Protocol):
    """Open observations around sends."""

    @property
    def is_noop(self) -> bool:
        ...

    def observe(
        self,
        context: SenderObservationContext,
        convention: SenderObservationConvention | None = None,
    ) -> ContextManager[None]:
        ...


class NoopObservationRegistry:
    """Registry that records nothing; :meth:`observe` is an empty context.

    Examples
    --------
    >>> with NOOP_REGISTRY.observe(SenderObservationContext(topic="t")):
    ...     pass
    >>> NOOP_REGISTRY.is_noop
    True
    """

    __slots__ = ()

    @property
    def is_noop(self) -> bool:
        return True

    @contextmanager
    def observe(
        self,
        context: SenderObservationContext,
        convention: SenderObservationConvention | None = None,
    ) -> Iterator[None]:
        yield

    def __repr__(self) -> str:
        return "NoopObservationRegistry()"


NOOP_REGISTRY: Final[NoopObservationRegistry] = NoopObservationRegistry()
"""Shared inert registry used by :meth:`SenderOptions.create`."""
