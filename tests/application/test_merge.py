from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from lib_sender_options.application.merge import flatten_properties, merge_property_layers

KEYS = st.text(alphabet="abcdefgh.", min_size=1, max_size=6)
VALUES = st.one_of(st.booleans(), st.integers(), st.text(max_size=5))
FLAT = st.dictionaries(KEYS, VALUES, max_size=5)


def test_precedence_overwrites() -> None:
    layers = [
        ("file", {"acks": "1", "linger": {"ms": 5}}, "producer.toml"),
        ("env", {"acks": "all"}, None),
        ("overrides", {"linger.ms": 0}, None),
    ]
    merged, meta = merge_property_layers(layers)
    assert merged == {"acks": "all", "linger.ms": 0}
    assert meta["acks"] == {"layer": "env", "path": None, "key": "acks"}
    assert meta["linger.ms"]["layer"] == "overrides"


def test_earlier_keys_survive() -> None:
    merged, meta = merge_property_layers(
        [("file", {"bootstrap.servers": "b:9092"}, "p.properties"), ("env", {"acks": "all"}, None)]
    )
    assert merged["bootstrap.servers"] == "b:9092"
    assert meta["bootstrap.servers"]["path"] == "p.properties"


def test_flatten_keeps_lists_as_values() -> None:
    assert flatten_properties({"interceptor": {"classes": ["a", "b"]}}) == {"interceptor.classes": ["a", "b"]}


@given(FLAT, FLAT)
def test_last_layer_wins(lhs, rhs) -> None:
    merged, meta = merge_property_layers([("lhs", lhs, None), ("rhs", rhs, None)])
    assert merged == {**lhs, **rhs}
    for key in rhs:
        assert meta[key]["layer"] == "rhs"


@given(FLAT, FLAT, FLAT)
def test_merge_associative(lhs, mid, rhs) -> None:
    left, _ = merge_property_layers([("lhs", lhs, None), ("mid", mid, None), ("rhs", rhs, None)])
    grouped, _ = merge_property_layers(
        [("lhs", lhs, None), ("mid-rhs", merge_property_layers([("mid", mid, None), ("rhs", rhs, None)])[0], None)]
    )
    assert left == grouped
