"""Tests for EventBus — delegated pub/sub keyed by (kind, pattern)."""

import logging
import threading

from wirenode import CHANGE, INPUT, ElementStore, EventBus, default_bus, default_store


class TestOnEmit:
    """Core on/emit behavior."""

    def test_handler_receives_event(self):
        bus = EventBus({})
        received = []
        bus.on(CHANGE, "#a", received.append)
        bus.emit(CHANGE, "#a")
        assert [(e.kind, e.address) for e in received] == [(CHANGE, "#a")]

    def test_space_separated_kinds(self):
        bus = EventBus({})
        received = []
        bus.on("input change", "#a", lambda e: received.append(e.kind))
        bus.emit(INPUT, "#a")
        bus.emit(CHANGE, "#a")
        bus.emit("click", "#a")
        assert received == [INPUT, CHANGE]

    def test_exact_pattern_only(self):
        bus = EventBus({})
        received = []
        bus.on(CHANGE, "#a", received.append)
        bus.emit(CHANGE, "#ab")
        assert received == []

    def test_registration_order(self):
        bus = EventBus({})
        order = []
        bus.on(CHANGE, "#a", lambda e: order.append(1))
        bus.on(CHANGE, "#a", lambda e: order.append(2))
        bus.emit(CHANGE, "#a")
        assert order == [1, 2]

    def test_trigger_alias(self):
        bus = EventBus({})
        received = []
        bus.on(CHANGE, "#a", received.append)
        bus.trigger(CHANGE, "#a")
        assert len(received) == 1

    def test_tokens_are_distinct(self):
        bus = EventBus({})
        assert bus.on(CHANGE, "#a", print) != bus.on(CHANGE, "#a", print)

    def test_target_resolved_from_store(self):
        store = ElementStore({})
        element = store.create("input", "a", value=3)
        bus = EventBus({}, store)
        received = []
        bus.on(CHANGE, "#a", received.append)
        bus.emit(CHANGE, "#a")
        assert received[0].target is element

    def test_default_bus_uses_default_store(self):
        element = default_store.create("input", "x")
        received = []
        default_bus.on(CHANGE, "#x", received.append)
        default_bus.emit(CHANGE, "#x")
        assert received[0].target is element

    def test_binding_during_dispatch_waits_for_next_emit(self):
        bus = EventBus({})
        late = []
        bus.on(CHANGE, "#a", lambda e: bus.on(CHANGE, "#a", late.append))
        bus.emit(CHANGE, "#a")
        assert late == []
        bus.emit(CHANGE, "#a")
        assert len(late) == 1

    def test_emit_logs_debug(self, caplog):
        bus = EventBus({})
        bus.on(CHANGE, "#a", lambda e: None)
        with caplog.at_level(logging.DEBUG, logger="wirenode.bus"):
            bus.emit(CHANGE, "#a")
        assert "emit change on #a" in caplog.text


class TestOff:
    """off() with and without a token."""

    def test_off_without_token_removes_all(self):
        bus = EventBus({})
        received = []
        bus.on(CHANGE, "#a", received.append)
        bus.on(CHANGE, "#a", received.append)
        assert bus.off(CHANGE, "#a") == 2
        bus.emit(CHANGE, "#a")
        assert received == []

    def test_off_with_token_removes_one(self):
        bus = EventBus({})
        a, b = [], []
        token = bus.on(CHANGE, "#a", a.append)
        bus.on(CHANGE, "#a", b.append)
        assert bus.off(CHANGE, "#a", token) == 1
        bus.emit(CHANGE, "#a")
        assert a == []
        assert len(b) == 1

    def test_off_only_named_kinds(self):
        bus = EventBus({})
        received = []
        bus.on("input change", "#a", lambda e: received.append(e.kind))
        bus.off(INPUT, "#a")
        bus.emit(INPUT, "#a")
        bus.emit(CHANGE, "#a")
        assert received == [CHANGE]

    def test_off_unknown_pattern(self):
        bus = EventBus({})
        assert bus.off("input change", "#nothing") == 0

    def test_has(self):
        bus = EventBus({})
        token = bus.on(CHANGE, "#a", print)
        assert bus.has(CHANGE, "#a", token)
        bus.off(CHANGE, "#a", token)
        assert not bus.has(CHANGE, "#a", token)
        assert bus.handlers(CHANGE, "#a") == []


class TestScheduler:
    """emit() marshals through the scheduler from other threads."""

    def test_owning_thread_is_synchronous(self):
        bus = EventBus({})
        calls = []
        bus.set_scheduler(calls.append)
        received = []
        bus.on(CHANGE, "#a", received.append)
        bus.emit(CHANGE, "#a")
        assert calls == []
        assert len(received) == 1

    def test_background_thread_marshals(self):
        bus = EventBus({})
        calls = []
        bus.set_scheduler(calls.append)
        received = []
        bus.on(CHANGE, "#a", received.append)
        done = threading.Event()

        def bg():
            bus.emit(CHANGE, "#a")
            done.set()

        threading.Thread(target=bg).start()
        done.wait(timeout=2)
        assert len(calls) == 1
        assert received == []
        calls[0]()
        assert len(received) == 1

    def test_no_scheduler_runs_inline_on_any_thread(self):
        bus = EventBus({})
        received = []
        bus.on(CHANGE, "#a", received.append)
        t = threading.Thread(target=lambda: bus.emit(CHANGE, "#a"))
        t.start()
        t.join(timeout=2)
        assert len(received) == 1
