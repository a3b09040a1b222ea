"""
In-Memory Session Provider

A scriptable stand-in for the platform media session service. Used by the
test suite and by ``python -m mediacontroller --provider memory``.

It reproduces the provider behaviours the manager has to cope with:
- "sessions changed" notifications with no delta attached
- sessions that disappear without reporting CLOSED
- slow metadata fetches (hold_metadata / release_metadata)
- failures at connect, enumeration, subscription and fetch time

Usage:
    gateway = InMemoryGateway()
    spotify = InMemorySessionAdapter("Spotify.exe", metadata=MediaMetadata(title="Song"))
    gateway.add_session(spotify)
    spotify.set_playback(PlaybackInfo(PlaybackStatus.PAUSED))
    gateway.remove_session("Spotify.exe")
"""

from __future__ import annotations

import asyncio
import itertools
import threading
from typing import Iterable, Optional

from mediacontroller.core import constants as C
from mediacontroller.core.types import (
    MediaMetadata,
    PlaybackInfo,
    PlaybackStatus,
)
from mediacontroller.providers.protocols import Notification


class InMemorySessionAdapter:
    """
    Scriptable session handle.

    Notifications fire synchronously on the thread that calls the mutator,
    the way a provider dispatch thread would deliver them.
    """

    def __init__(
        self,
        source_id: str,
        *,
        playback: Optional[PlaybackInfo] = None,
        metadata: Optional[MediaMetadata] = None,
    ) -> None:
        self._source_id = source_id
        self.playback = playback or PlaybackInfo(PlaybackStatus.PLAYING)
        self.metadata = metadata
        self.fetch_error: Optional[Exception] = None
        self.subscribe_error: Optional[Exception] = None
        self.unsubscribe_error: Optional[Exception] = None
        self.fetch_count = 0
        self.unsubscribe_count = 0
        self._tokens = itertools.count(1)
        self._metadata_handlers: dict[int, Notification] = {}
        self._playback_handlers: dict[int, Notification] = {}
        self._gate: Optional[asyncio.Event] = None
        self._lock = threading.Lock()

    @property
    def source_id(self) -> str:
        return self._source_id

    @property
    def subscriber_count(self) -> int:
        """Live subscriptions across both notifications."""
        with self._lock:
            return len(self._metadata_handlers) + len(self._playback_handlers)

    # ── SessionHandleAdapter ──

    def get_playback_info(self) -> PlaybackInfo:
        return self.playback

    async def fetch_media_metadata(self) -> Optional[MediaMetadata]:
        self.fetch_count += 1
        if self._gate is not None:
            await self._gate.wait()
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.metadata

    def subscribe(
        self,
        on_metadata_changed: Notification,
        on_playback_info_changed: Notification,
    ) -> tuple[int, int]:
        if self.subscribe_error is not None:
            raise self.subscribe_error
        with self._lock:
            metadata_token = next(self._tokens)
            playback_token = next(self._tokens)
            self._metadata_handlers[metadata_token] = on_metadata_changed
            self._playback_handlers[playback_token] = on_playback_info_changed
        return metadata_token, playback_token

    def unsubscribe(self, tokens: tuple[int, int]) -> None:
        self.unsubscribe_count += 1
        if self.unsubscribe_error is not None:
            raise self.unsubscribe_error
        metadata_token, playback_token = tokens
        with self._lock:
            self._metadata_handlers.pop(metadata_token, None)
            self._playback_handlers.pop(playback_token, None)

    # ── Scripting helpers ──

    def set_playback(self, playback: PlaybackInfo, notify: bool = True) -> None:
        self.playback = playback
        if notify:
            self.notify_playback_info_changed()

    def set_metadata(self, metadata: Optional[MediaMetadata], notify: bool = True) -> None:
        self.metadata = metadata
        if notify:
            self.notify_metadata_changed()

    def close(self, notify: bool = True) -> None:
        """Report the terminal CLOSED status."""
        self.set_playback(PlaybackInfo(PlaybackStatus.CLOSED), notify=notify)

    def hold_metadata(self) -> None:
        """Make subsequent fetches suspend until release_metadata()."""
        self._gate = asyncio.Event()

    def release_metadata(self) -> None:
        if self._gate is not None:
            self._gate.set()
            self._gate = None

    def notify_metadata_changed(self) -> None:
        with self._lock:
            handlers = list(self._metadata_handlers.values())
        for handler in handlers:
            handler()

    def notify_playback_info_changed(self) -> None:
        with self._lock:
            handlers = list(self._playback_handlers.values())
        for handler in handlers:
            handler()

    def __repr__(self) -> str:
        return f"InMemorySessionAdapter({self._source_id!r}, status={self.playback.status.name})"


class InMemoryGateway:
    """
    Scriptable provider gateway.

    Keeps an ordered list of adapters; the list may contain the same
    source twice to exercise duplicate handling.
    """

    def __init__(self, sessions: Iterable[InMemorySessionAdapter] = ()) -> None:
        self._sessions: list[InMemorySessionAdapter] = list(sessions)
        self._handlers: dict[int, Notification] = {}
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()
        self.connect_error: Optional[Exception] = None
        self.list_error: Optional[Exception] = None
        self.subscribe_error: Optional[Exception] = None
        self.connect_count = 0
        self.subscribe_count = 0
        self.unsubscribe_count = 0

    @property
    def name(self) -> str:
        return C.BACKEND_MEMORY

    @property
    def active_subscriptions(self) -> int:
        with self._lock:
            return len(self._handlers)

    # ── ProviderGateway ──

    async def connect(self) -> None:
        self.connect_count += 1
        if self.connect_error is not None:
            raise self.connect_error

    def get_current_sessions(self) -> list[InMemorySessionAdapter]:
        if self.list_error is not None:
            raise self.list_error
        with self._lock:
            return list(self._sessions)

    def subscribe(self, on_changed: Notification) -> int:
        if self.subscribe_error is not None:
            raise self.subscribe_error
        with self._lock:
            token = next(self._tokens)
            self._handlers[token] = on_changed
            self.subscribe_count += 1
        return token

    def unsubscribe(self, token: int) -> None:
        with self._lock:
            if self._handlers.pop(token, None) is not None:
                self.unsubscribe_count += 1

    # ── Scripting helpers ──

    def session(self, source_id: str) -> Optional[InMemorySessionAdapter]:
        with self._lock:
            for adapter in self._sessions:
                if adapter.source_id == source_id:
                    return adapter
        return None

    def add_session(self, adapter: InMemorySessionAdapter, notify: bool = True) -> InMemorySessionAdapter:
        with self._lock:
            self._sessions.append(adapter)
        if notify:
            self.notify_sessions_changed()
        return adapter

    def remove_session(self, source_id: str, notify: bool = True) -> None:
        """Drop a source without it reporting CLOSED."""
        with self._lock:
            self._sessions = [s for s in self._sessions if s.source_id != source_id]
        if notify:
            self.notify_sessions_changed()

    def set_sessions(self, sessions: Iterable[InMemorySessionAdapter], notify: bool = True) -> None:
        with self._lock:
            self._sessions = list(sessions)
        if notify:
            self.notify_sessions_changed()

    def notify_sessions_changed(self) -> None:
        with self._lock:
            handlers = list(self._handlers.values())
        for handler in handlers:
            handler()

    def __repr__(self) -> str:
        return f"InMemoryGateway(sessions={[s.source_id for s in self._sessions]})"
