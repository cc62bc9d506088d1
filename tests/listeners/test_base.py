from unittest import mock

import pytest

from listenerchain.events import Hook
from listenerchain.listeners import (
    DynamicListener,
    EventListener,
    Listener,
    ListenerChain,
    Overloadable,
    supports_listener_contract,
)


class HookCollector(DynamicListener):
    def __init__(self):
        super().__init__()
        self.seen = []

    def handle(self, hook, payload):
        self.seen.append((hook, payload))


def test_listener_base_implements_every_hook():
    listener = Listener()
    assert isinstance(listener, EventListener)
    for hook in Hook:
        assert getattr(listener, hook.value)(object()) is None


def test_capability_check():
    assert supports_listener_contract(Listener())
    assert supports_listener_contract(ListenerChain())
    assert supports_listener_contract(HookCollector())
    assert not supports_listener_contract(object())
    assert not supports_listener_contract("listener")
    assert not supports_listener_contract(Listener)


def test_mock_objects_count_as_overloadable():
    listener = mock.Mock()
    assert isinstance(listener, Overloadable)

    chain = ListenerChain()
    chain.add(listener)
    chain.on_open("conn")

    listener.on_open.assert_called_once_with("conn")


def test_dynamic_listener_routes_hooks_to_handle():
    collector = HookCollector()
    payload = object()

    collector.pre_query(payload)
    collector.on_wake_up(payload)

    assert collector.seen == [("pre_query", payload), ("on_wake_up", payload)]


def test_dynamic_listener_answers_unknown_public_names():
    collector = HookCollector()
    assert isinstance(collector, Overloadable)

    collector.on_cache_miss("key")

    assert collector.seen == [("on_cache_miss", "key")]
    with pytest.raises(AttributeError):
        collector._private


def test_dynamic_listener_with_handler_callable():
    received = []
    listener = DynamicListener(lambda hook, payload: received.append(hook))
    listener.post_fetch(None)
    assert received == ["post_fetch"]


def test_dynamic_listener_without_handler_raises():
    listener = DynamicListener()
    assert supports_listener_contract(listener)
    with pytest.raises(NotImplementedError, match="pre_connect.*override handle"):
        listener.pre_connect(None)


def test_subclass_can_override_single_hook():
    class OpenOnly(HookCollector):
        def on_open(self, connection):
            self.seen.append(("custom", connection))

    listener = OpenOnly()
    listener.on_open("conn")
    listener.post_close("event")
    assert listener.seen == [("custom", "conn"), ("post_close", "event")]
