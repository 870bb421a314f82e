"""Application-layer merge policy for producer property layers.

Purpose
-------
Convert a sequence of property layers (file, environment, explicit overrides)
into the single flat overlay a :class:`SenderOptions` is built from, while
tracking which layer supplied each key. Free of I/O so alternative composition
roots can reuse it.

Contents
    - ``merge_property_layers``: public entry point driven by a simple loop.
    - ``flatten_properties``: turns nested mappings into dotted keys.
    - ``_flatten_into``: recursive stanza behind ``flatten_properties``.

System Role
-----------
Receives layer payloads from :mod:`lib_sender_options.core`, applies
precedence (``file → env → overrides``), and returns the overlay plus
provenance.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Iterable


def merge_property_layers(
    layers: Iterable[tuple[str, Mapping[str, object], str | None]],
) -> tuple[dict[str, object], dict[str, dict[str, object]]]:
    """Merge property *layers*; later layers replace earlier values per key.

    Why
    ----
    Producer properties are flat, so merging is a per-key replacement; nested
    input (TOML tables, YAML maps) is flattened to dotted keys first so
    ``[bootstrap] servers = ...`` and ``"bootstrap.servers" = ...`` collide as
    they should.

    Parameters
    ----------
    layers:
        Iterable of ``(layer_name, mapping, source_path)`` tuples ordered from
        lowest to highest precedence.

    Returns
    -------
    tuple[dict[str, object], dict[str, dict[str, object]]]
        ``(properties, provenance)`` where ``provenance`` maps each key to
        ``{"layer", "path", "key"}``.

    Examples
    --------
    >>> merged, meta = merge_property_layers([
    ...     ("file", {"linger": {"ms": 5}}, "producer.toml"),
    ...     ("env", {"linger.ms": "10"}, None),
    ... ])
    >>> merged["linger.ms"], meta["linger.ms"]["layer"]
    ('10', 'env')
    """

    merged: dict[str, object] = {}
    meta: dict[str, dict[str, object]] = {}

    for layer_name, data, path in layers:
        for key, value in flatten_properties(data).items():
            merged[key] = value
            meta[key] = {"layer": layer_name, "path": path, "key": key}
    return merged, meta


def flatten_properties(data: Mapping[str, object]) -> dict[str, object]:
    """Flatten nested mappings into dotted keys; lists and scalars stay values.

    Examples
    --------
    >>> flatten_properties({"sasl": {"mechanism": "PLAIN"}, "acks": "all"})
    {'sasl.mechanism': 'PLAIN', 'acks': 'all'}
    >>> flatten_properties({"empty": {}})
    {}
    """

    flat: dict[str, object] = {}
    _flatten_into(flat, data, [])
    return flat


def _flatten_into(target: dict[str, object], data: Mapping[str, object], segments: list[str]) -> None:
    for key, value in data.items():
        dotted = ".".join([*segments, str(key)])
        if isinstance(value, Mapping):
            _flatten_into(target, value, [*segments, str(key)])
        else:
            target[dotted] = value
