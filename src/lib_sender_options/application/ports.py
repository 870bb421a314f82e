"""Application-layer ports describing property-source adapters.

Purpose
-------
Define the structural contracts that adapters must satisfy so the composition
root can gather producer properties without depending on concrete
implementations.

Contents
--------
* :class:`FileLoader` – parses a properties/structured file into a mapping.
* :class:`EnvLoader` – materialises process environment variables as
  producer properties.

System Role
-----------
Each adapter implements one protocol so :mod:`lib_sender_options.core` can
request behaviour via abstraction.
"""

from __future__ import annotations

from typing import Mapping, Protocol, runtime_checkable


@runtime_checkable
class FileLoader(Protocol):
    """Parse a configuration file into a mapping.

    Why
    ----
    Segregate parsing concerns (TOML/JSON/YAML/``.properties``) from
    orchestration logic.
    """

    def load(self, path: str) -> Mapping[str, object]:
        """Read *path* and return a mapping or raise ``InvalidFormat``/``NotFound``."""


@runtime_checkable
class EnvLoader(Protocol):
    """Translate process environment variables into producer properties."""

    def load(self, prefix: str) -> Mapping[str, object]:
        """Return properties for variables that start with *prefix*."""

