"""
Tests for servitor_qt/services/event_bus.py -- EventBus singleton and signals.
"""

import threading
from unittest.mock import MagicMock

import pytest

from servitor_qt.services.event_bus import EventBus


@pytest.fixture(autouse=True)
def _reset_event_bus():
    """Ensure each test starts with a fresh EventBus."""
    EventBus.reset()
    yield
    EventBus.reset()


# ------------------------------------------------------------------
# Singleton tests
# ------------------------------------------------------------------


class TestSingletonPattern:
    def test_instance_returns_same_object(self, _ensure_qapp):
        assert EventBus.instance() is EventBus.instance()

    def test_reset_clears_instance(self, _ensure_qapp):
        bus1 = EventBus.instance()
        EventBus.reset()
        assert EventBus.instance() is not bus1

    def test_thread_safe_creation(self, _ensure_qapp):
        """Multiple threads racing to create the instance should all get the same object."""
        results = []
        barrier = threading.Barrier(4)

        def _grab():
            barrier.wait()
            results.append(id(EventBus.instance()))

        threads = [threading.Thread(target=_grab) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(set(results)) == 1, "All threads should get the same instance"


# ------------------------------------------------------------------
# Signal tests
# ------------------------------------------------------------------


class TestSignals:
    @pytest.mark.parametrize(
        "signal_name, payload",
        [
            ("faction_selected", "kommandos"),
            ("killteam_selected", "IMP-AOD"),
            ("section_requested", "strategic-ploys"),
            ("swipe_navigation", -1),
            ("error_occurred", "No data found"),
            ("status_message", "Kommandos"),
        ],
    )
    def test_signal_delivers_payload(self, _ensure_qapp, signal_name, payload):
        bus = EventBus.instance()
        receiver = MagicMock()
        getattr(bus, signal_name).connect(receiver)
        getattr(bus, signal_name).emit(payload)
        receiver.assert_called_once_with(payload)

    def test_multiple_receivers(self, _ensure_qapp):
        bus = EventBus.instance()
        r1 = MagicMock()
        r2 = MagicMock()
        bus.faction_selected.connect(r1)
        bus.faction_selected.connect(r2)
        bus.faction_selected.emit("pathfinders")
        r1.assert_called_once_with("pathfinders")
        r2.assert_called_once_with("pathfinders")
