"""Environment loader adapter tests covering prefix filtering and key mapping."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lib_sender_options.adapters.env.default import DefaultEnvLoader, default_env_prefix, env_name_to_property


def test_default_env_prefix() -> None:
    assert default_env_prefix("kafka-producer") == "KAFKA_PRODUCER"


def test_env_loader_maps_names_to_properties() -> None:
    environ = {
        "KAFKA_BOOTSTRAP_SERVERS": "broker:9092",
        "KAFKA_SSL_KEY__PASSWORD": "secret",
        "KAFKA_": "ignored-empty-name",
        "OTHER": "ignored",
    }
    data = DefaultEnvLoader(environ=environ).load("KAFKA")
    assert data == {"bootstrap.servers": "broker:9092", "ssl.key_password": "secret"}


def test_env_loader_accepts_trailing_underscore_prefix() -> None:
    data = DefaultEnvLoader(environ={"KAFKA_ACKS": "all"}).load("KAFKA_")
    assert data == {"acks": "all"}


def test_env_loader_requires_prefix() -> None:
    with pytest.raises(ValueError):
        DefaultEnvLoader(environ={}).load("")


def test_env_loader_uses_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SENDER_TEST_LINGER_MS", "7")
    assert DefaultEnvLoader().load("SENDER_TEST")["linger.ms"] == "7"


SEGMENTS = st.lists(st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789", min_size=1, max_size=6), min_size=1, max_size=4)


@given(SEGMENTS)
def test_env_name_to_property_joins_segments_with_dots(segments) -> None:
    assert env_name_to_property("_".join(segments)) == ".".join(segment.lower() for segment in segments)
