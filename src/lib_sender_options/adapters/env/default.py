"""Environment variable adapter.

Purpose
-------
Translate process environment variables into producer properties. It
implements :class:`lib_sender_options.application.ports.EnvLoader` and forms
the environment precedence layer in :mod:`lib_sender_options.core`.

Key behaviours
--------------
* Enforces a prefix so only relevant variables are captured.
* Maps names to dotted, lower-case property keys: ``_`` becomes ``.`` and a
  doubled ``__`` becomes a literal ``_`` (``KAFKA_BOOTSTRAP_SERVERS`` →
  ``bootstrap.servers``).
* Keeps values as strings; the producer owns type conversion of its
  properties.
* Emits structured logging via :mod:`lib_sender_options.observability`.
"""

from __future__ import annotations

import os
from typing import Final, Mapping

from ...observability import log_debug

_UNDERSCORE_PLACEHOLDER: Final[str] = "\0"


def default_env_prefix(slug: str) -> str:
    """Return the canonical environment prefix for *slug*.

    Examples
    --------
    >>> default_env_prefix('kafka-producer')
    'KAFKA_PRODUCER'
    """

    return slug.replace("-", "_").upper()


def env_name_to_property(name: str) -> str:
    """Convert an unprefixed variable name into a property key.

    Examples
    --------
    >>> env_name_to_property('BOOTSTRAP_SERVERS')
    'bootstrap.servers'
    >>> env_name_to_property('SSL_KEY__PASSWORD')
    'ssl.key_password'
    """

    escaped = name.replace("__", _UNDERSCORE_PLACEHOLDER)
    return escaped.replace("_", ".").replace(_UNDERSCORE_PLACEHOLDER, "_").lower()


class DefaultEnvLoader:
    """Load environment variables that belong to the producer namespace."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        """Initialise the loader with a specific ``environ`` mapping for testability.

        Parameters
        ----------
        environ:
            Mapping to read from. Defaults to :data:`os.environ`.
        """

        self._environ = os.environ if environ is None else environ

    def load(self, prefix: str) -> dict[str, object]:
        """Return producer properties for variables carrying *prefix*.

        Parameters
        ----------
        prefix:
            Prefix filter (upper-case). The loader appends ``_`` if missing.
            An empty prefix is rejected because it would turn the whole
            environment into producer properties.

        Side Effects
        ------------
        Emits ``env_properties_loaded`` debug events with the resulting keys.

        Examples
        --------
        >>> env = {
        ...     'KAFKA_BOOTSTRAP_SERVERS': 'broker:9092',
        ...     'KAFKA_LINGER_MS': '5',
        ...     'HOME': '/root',
        ... }
        >>> DefaultEnvLoader(environ=env).load('KAFKA')
        {'bootstrap.servers': 'broker:9092', 'linger.ms': '5'}
        """

        if not prefix:
            raise ValueError("An environment prefix is required")
        prefix = prefix if prefix.endswith("_") else f"{prefix}_"
        collected: dict[str, object] = {}
        for key, value in self._environ.items():
            if not key.startswith(prefix):
                continue
            stripped = key[len(prefix) :]
            if not stripped:
                continue
            collected[env_name_to_property(stripped)] = value
        log_debug("env_properties_loaded", source="env", path=None, keys=sorted(collected))
        return collected
