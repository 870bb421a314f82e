"""Serializer contract carried by :class:`SenderOptions`.

A serializer is any callable ``(obj, ctx) -> bytes | None``, the same shape
callable-serializer producers expect under ``key.serializer`` and
``value.serializer``. The options object stores the reference and never calls
it.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Serializer(Protocol):
    """Convert a key or value into its wire representation."""

    def __call__(self, obj: Any, ctx: Any = None) -> bytes | None:
        ...
