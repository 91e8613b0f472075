"""
Unit tests for the event hub and viewport tracker
"""
import asyncio
import pytest

from models.topology import ViewportBounds
from services.events import EventHub, RESIZE
from services.viewport import RemoteSurface, ViewportTracker


class TestEventHub:
    """Tests for EventHub subscriptions"""

    def test_dispatch_to_subscribers(self):
        hub = EventHub()
        received = []
        hub.subscribe("ping", received.append)
        hub.subscribe("ping", received.append)

        assert hub.dispatch("ping", 1) == 2
        assert received == [1, 1]

    def test_dispatch_without_subscribers(self):
        assert EventHub().dispatch("ping", 1) == 0

    def test_dispose_is_idempotent(self):
        hub = EventHub()
        subscription = hub.subscribe("ping", lambda _: None)
        subscription.dispose()
        subscription.dispose()
        assert hub.handler_count("ping") == 0

    def test_dispose_during_dispatch(self):
        """Handlers may unsubscribe themselves while being dispatched"""
        hub = EventHub()
        calls = []

        def once(payload):
            calls.append(payload)
            subscription.dispose()

        subscription = hub.subscribe("ping", once)
        hub.dispatch("ping", "a")
        hub.dispatch("ping", "b")
        assert calls == ["a"]

    def test_count_skips_handlers_disposed_mid_dispatch(self):
        """A handler disposed by an earlier one is neither called nor counted"""
        hub = EventHub()
        calls = []

        def first(payload):
            calls.append("first")
            second.dispose()

        hub.subscribe("ping", first)
        second = hub.subscribe("ping", lambda _: calls.append("second"))

        assert hub.dispatch("ping") == 1
        assert calls == ["first"]


@pytest.fixture
def surface():
    return RemoteSurface()


@pytest.fixture
def changes():
    return []


@pytest.fixture
def tracker(surface, changes):
    hub = EventHub()
    return ViewportTracker(hub, surface.measure, changes.append, settle_delay=0.01)


class TestViewportTracker:
    """Tests for ViewportTracker"""

    def test_update_publishes_changes_only(self, tracker, surface, changes):
        assert tracker.update() is False  # 아직 측정값 없음

        surface.report(ViewportBounds(width=800, height=600))
        assert tracker.update() is True
        assert tracker.update() is False
        assert changes == [ViewportBounds(width=800, height=600)]

    async def test_mount_measures_after_settle_delay(self, tracker, surface, changes):
        surface.report(ViewportBounds(width=640, height=480))
        tracker.mount()
        assert changes == []

        await asyncio.sleep(0.05)
        assert changes == [ViewportBounds(width=640, height=480)]
        tracker.teardown()

    async def test_resize_event(self, tracker, surface, changes):
        tracker.mount()
        surface.report(ViewportBounds(x=10, y=10, width=1024, height=768))
        tracker._hub.dispatch(RESIZE)
        assert tracker.bounds == ViewportBounds(x=10, y=10, width=1024, height=768)
        assert len(changes) == 1
        tracker.teardown()

    async def test_teardown_deregisters(self, tracker, surface, changes):
        tracker.mount()
        tracker.teardown()
        assert tracker._hub.handler_count(RESIZE) == 0
        assert tracker.mounted is False

        surface.report(ViewportBounds(width=800, height=600))
        tracker._hub.dispatch(RESIZE)
        await asyncio.sleep(0.05)
        assert changes == []
