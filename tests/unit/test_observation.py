from __future__ import annotations

from lib_sender_options import (
    NOOP_REGISTRY,
    DefaultSenderObservationConvention,
    ObservationRegistry,
    SenderObservationContext,
    SenderObservationConvention,
)


def test_noop_registry_observe_is_inert() -> None:
    with NOOP_REGISTRY.observe(SenderObservationContext(topic="orders")) as handle:
        assert handle is None
    assert NOOP_REGISTRY.is_noop is True
    assert isinstance(NOOP_REGISTRY, ObservationRegistry)


def test_default_convention_names_and_tags() -> None:
    convention = DefaultSenderObservationConvention()
    context = SenderObservationContext(topic="orders", client_id="producer-3", bootstrap_servers="b:9092")
    assert isinstance(convention, SenderObservationConvention)
    assert convention.get_name() == "lib_sender_options.sender"
    assert convention.get_contextual_name(context) == "orders send"
    assert convention.get_low_cardinality_tags(context)["sender.client.id"] == "producer-3"


def test_default_convention_omits_missing_client_id() -> None:
    tags = DefaultSenderObservationConvention().get_low_cardinality_tags(SenderObservationContext(topic="t"))
    assert "sender.client.id" not in tags
