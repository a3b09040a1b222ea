"""
Unit Tests: In-Memory Provider

The in-memory provider is the test double for every manager test, so its
own scripting behaviour is pinned down here.
"""

import asyncio

import pytest

from mediacontroller.core.types import MediaMetadata, PlaybackInfo, PlaybackStatus
from mediacontroller.providers.memory import InMemoryGateway, InMemorySessionAdapter
from mediacontroller.providers.protocols import ProviderGateway, SessionHandleAdapter


class TestInMemorySessionAdapter:
    """Tests for InMemorySessionAdapter."""

    def test_satisfies_protocol(self):
        assert isinstance(InMemorySessionAdapter("A"), SessionHandleAdapter)

    def test_default_playback(self):
        adapter = InMemorySessionAdapter("A")
        assert adapter.get_playback_info().status == PlaybackStatus.PLAYING

    def test_notifications_reach_subscribers(self):
        """Test mutators fire the matching notification."""
        adapter = InMemorySessionAdapter("A")
        calls = []
        adapter.subscribe(lambda: calls.append("metadata"), lambda: calls.append("playback"))

        adapter.set_metadata(MediaMetadata(title="Song"))
        adapter.set_playback(PlaybackInfo(PlaybackStatus.PAUSED))
        adapter.close()
        adapter.set_metadata(None, notify=False)

        assert calls == ["metadata", "playback", "playback"]
        assert adapter.get_playback_info().status == PlaybackStatus.CLOSED

    def test_unsubscribe_is_idempotent(self):
        adapter = InMemorySessionAdapter("A")
        tokens = adapter.subscribe(lambda: None, lambda: None)
        assert adapter.subscriber_count == 2

        adapter.unsubscribe(tokens)
        adapter.unsubscribe(tokens)

        assert adapter.subscriber_count == 0
        assert adapter.unsubscribe_count == 2

    def test_subscribe_error(self):
        adapter = InMemorySessionAdapter("A")
        adapter.subscribe_error = RuntimeError("gone")
        with pytest.raises(RuntimeError):
            adapter.subscribe(lambda: None, lambda: None)
        assert adapter.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_fetch(self):
        adapter = InMemorySessionAdapter("A", metadata=MediaMetadata(title="Song"))
        assert (await adapter.fetch_media_metadata()).title == "Song"
        assert adapter.fetch_count == 1

    @pytest.mark.asyncio
    async def test_fetch_error(self):
        adapter = InMemorySessionAdapter("A")
        adapter.fetch_error = OSError("rpc")
        with pytest.raises(OSError):
            await adapter.fetch_media_metadata()

    @pytest.mark.asyncio
    async def test_hold_and_release(self):
        """Test a held fetch completes only after release."""
        adapter = InMemorySessionAdapter("A", metadata=MediaMetadata(title="Song"))
        adapter.hold_metadata()
        task = asyncio.ensure_future(adapter.fetch_media_metadata())

        await asyncio.sleep(0)
        assert not task.done()

        adapter.release_metadata()
        assert (await task).title == "Song"


class TestInMemoryGateway:
    """Tests for InMemoryGateway."""

    def test_satisfies_protocol(self):
        assert isinstance(InMemoryGateway(), ProviderGateway)
        assert InMemoryGateway().name == "memory"

    @pytest.mark.asyncio
    async def test_connect(self):
        gateway = InMemoryGateway()
        await gateway.connect()
        gateway.connect_error = OSError("down")
        with pytest.raises(OSError):
            await gateway.connect()
        assert gateway.connect_count == 2

    def test_session_list_preserves_order_and_duplicates(self):
        a, b = InMemorySessionAdapter("A"), InMemorySessionAdapter("B")
        gateway = InMemoryGateway([a, b, a])
        assert gateway.get_current_sessions() == [a, b, a]
        assert gateway.session("B") is b
        assert gateway.session("C") is None

    def test_change_notifications(self):
        """Test add/remove/set notify unless told not to."""
        gateway = InMemoryGateway()
        calls = []
        token = gateway.subscribe(lambda: calls.append(len(gateway.get_current_sessions())))

        gateway.add_session(InMemorySessionAdapter("A"))
        gateway.add_session(InMemorySessionAdapter("B"), notify=False)
        gateway.remove_session("A")
        gateway.set_sessions([])
        gateway.unsubscribe(token)
        gateway.notify_sessions_changed()

        assert calls == [1, 1, 0]

    def test_subscription_accounting(self):
        gateway = InMemoryGateway()
        token = gateway.subscribe(lambda: None)
        assert gateway.active_subscriptions == 1

        gateway.unsubscribe(token)
        gateway.unsubscribe(token)

        assert gateway.active_subscriptions == 0
        assert gateway.subscribe_count == 1
        assert gateway.unsubscribe_count == 1

    def test_list_error(self):
        gateway = InMemoryGateway()
        gateway.list_error = RuntimeError("busy")
        with pytest.raises(RuntimeError):
            gateway.get_current_sessions()
