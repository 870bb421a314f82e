"""Composition root for ``lib_sender_options``.

Purpose
-------
Provide the entry point that gathers producer properties from a file, the
environment and explicit overrides, merges them, and turns the result into a
:class:`SenderOptions` root instance.

Contents
--------
* :data:`_FILE_LOADERS` – mapping of file suffixes to loader instances.
* :class:`SourceLoadError` – error raised when a property source fails.
* :func:`read_sender_options` – high-level API returning :class:`SenderOptions`.
* :func:`read_sender_options_raw` – lower-level API returning the merged
  properties plus provenance.

System Role
-----------
Connects adapters with the domain value object while emitting structured
observability signals. It is the canonical place to change precedence rules
or wire new property sources.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from .adapters.env.default import DefaultEnvLoader, default_env_prefix
from .adapters.file_loaders.structured import (
    JSONFileLoader,
    PropertiesFileLoader,
    TOMLFileLoader,
    YAMLFileLoader,
)
from .application.merge import merge_property_layers
from .application.ports import EnvLoader, FileLoader
from .domain.errors import InvalidArgument, InvalidFormat, NotFound, SenderOptionsError
from .domain.options import SenderOptions
from .observability import bind_trace_id, log_debug, log_info, make_event

# Supported file loaders keyed by suffix.
_FILE_LOADERS: dict[str, FileLoader] = {
    ".properties": PropertiesFileLoader(),
    ".toml": TOMLFileLoader(),
    ".json": JSONFileLoader(),
    ".yaml": YAMLFileLoader(),
    ".yml": YAMLFileLoader(),
}


class SourceLoadError(SenderOptionsError):
    """Raised when a property source cannot be materialised.

    Why
    ----
    Callers catch one exception family regardless of which adapter failed.

    What
    -----
    Wraps :class:`InvalidFormat` or :class:`NotFound` with the source path.
    """


def read_sender_options(
    *,
    path: str | Path | None = None,
    env_prefix: str | None = None,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, object] | None = None,
) -> SenderOptions:
    """Return :class:`SenderOptions` built from the merged property sources.

    Why
    ----
    Applications usually keep producer settings in a file, tweak them per
    deployment through the environment, and pin a few values in code.

    What
    ----
    Delegates to :func:`read_sender_options_raw` and hands the merged
    properties to :meth:`SenderOptions.from_properties`, so ``client.id`` is
    synthesized only when no source supplied one.

    Parameters
    ----------
    path:
        Optional property file (``.properties``, ``.toml``, ``.json``,
        ``.yaml``/``.yml``).
    env_prefix:
        Optional prefix selecting environment variables (``KAFKA`` picks up
        ``KAFKA_BOOTSTRAP_SERVERS``).
    environ:
        Mapping read instead of :data:`os.environ`; useful in tests.
    overrides:
        Properties applied last.

    Side Effects
    ------------
    Emits ``sender_options_resolved`` with the resulting client identifier.

    Examples
    --------
    >>> options = read_sender_options(
    ...     env_prefix="KAFKA",
    ...     environ={"KAFKA_BOOTSTRAP_SERVERS": "broker:9092"},
    ...     overrides={"client.id": "inventory"},
    ... )
    >>> options.bootstrap_servers, options.client_id
    ('broker:9092', 'inventory')
    """

    properties, _ = read_sender_options_raw(path=path, env_prefix=env_prefix, environ=environ, overrides=overrides)
    options = SenderOptions.from_properties(properties)
    log_info("sender_options_resolved", source="final", path=None, client_id=options.client_id)
    return options


def read_sender_options_raw(
    *,
    path: str | Path | None = None,
    env_prefix: str | None = None,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, object] | None = None,
) -> tuple[dict[str, object], dict[str, dict[str, object]]]:
    """Return the merged properties and their provenance.

    Returns
    -------
    tuple[dict[str, object], dict[str, dict[str, object]]]
        ``(properties, provenance)``; no ``client.id`` is synthesized here.

    Raises
    ------
    SourceLoadError
        When *path* is missing, has an unsupported suffix, or cannot be parsed.

    Side Effects
    ------------
    - Calls :func:`bind_trace_id` with ``None`` to clear previous trace context.
    - Emits structured log events for each source and for the final merge.

    Examples
    --------
    >>> props, meta = read_sender_options_raw(overrides={"acks": "all"})
    >>> props, meta["acks"]["layer"]
    ({'acks': 'all'}, 'overrides')
    """

    bind_trace_id(None)

    layers: list[tuple[str, Mapping[str, object], str | None]] = []
    if path is not None:
        file_path = str(path)
        data = _load_file(file_path)
        log_debug("source_loaded", **make_event("file", file_path, {"keys": len(data)}))
        layers.append(("file", data, file_path))

    if env_prefix:
        env_loader: EnvLoader = DefaultEnvLoader(environ=environ)
        env_data = env_loader.load(default_env_prefix(env_prefix))
        if env_data:
            log_debug("source_loaded", **make_event("env", None, {"keys": len(env_data)}))
            layers.append(("env", env_data, None))

    if overrides:
        layers.append(("overrides", overrides, None))

    if not layers:
        log_info("properties_empty", source="none", path=None)
        return {}, {}

    merged = merge_property_layers(layers)
    log_info("properties_merged", source="final", path=None, total_sources=len(layers))
    return merged


def _load_file(path: str) -> Mapping[str, object]:
    """Parse *path* with the loader registered for its suffix.

    Examples
    --------
    >>> _load_file("settings.ini")
    Traceback (most recent call last):
    ...
    lib_sender_options.core.SourceLoadError: Unsupported property file type: settings.ini
    """

    loader = _FILE_LOADERS.get(Path(path).suffix.lower())
    if loader is None:
        raise SourceLoadError(f"Unsupported property file type: {path}")
    try:
        return loader.load(path)
    except (InvalidFormat, NotFound) as exc:
        log_debug("source_error", source="file", path=path, error=str(exc))
        raise SourceLoadError(f"Failed to load properties from {path}: {exc}") from exc


__all__ = [
    "SenderOptions",
    "SenderOptionsError",
    "InvalidArgument",
    "InvalidFormat",
    "NotFound",
    "SourceLoadError",
    "read_sender_options",
    "read_sender_options_raw",
    "default_env_prefix",
]
