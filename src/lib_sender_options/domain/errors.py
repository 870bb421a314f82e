"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by the sender options value object,
the property-source adapters, and consuming applications. The hierarchy lives
in the domain layer so outer layers may depend on it without the domain
importing anything in return.

Contents
--------
* :class:`SenderOptionsError` – umbrella base class for every library failure.
* :class:`InvalidArgument` – a caller passed a missing or unusable argument to
  an accessor or ``with_*`` derivation.
* :class:`InvalidFormat` – a property source could not be parsed.
* :class:`NotFound` – an expected property source is missing.

System Role
-----------
:class:`~lib_sender_options.domain.options.SenderOptions` raises
:class:`InvalidArgument` synchronously at the call site; adapters raise
:class:`InvalidFormat` / :class:`NotFound`, which the composition root wraps
in :class:`lib_sender_options.core.SourceLoadError`.
"""

from __future__ import annotations


class SenderOptionsError(Exception):
    """Base type for all exceptions emitted by ``lib_sender_options``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class InvalidArgument(SenderOptionsError, ValueError):
    """Raised when a required argument is ``None`` or has an unusable type.

    Why
    ----
    Signals a programmer error at the call site. It is never retried, and it
    also subclasses :class:`ValueError` so generic argument handling keeps
    working.

    Examples
    --------
    >>> from lib_sender_options.domain.options import SenderOptions
    >>> SenderOptions.create().producer_property(None)
    Traceback (most recent call last):
    ...
    lib_sender_options.domain.errors.InvalidArgument: name must not be None
    """


class InvalidFormat(SenderOptionsError):
    """Raised when a property source cannot be parsed into key/value pairs.

    Typical Sources
    ---------------
    Structured file loaders (:mod:`tomllib`, :mod:`json`, :mod:`yaml`) and the
    ``.properties`` parser.
    """


class NotFound(SenderOptionsError):
    """Represents a missing property source (file path that does not exist)."""
