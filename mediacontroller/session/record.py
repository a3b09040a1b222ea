"""
Session Record: One Source's Subscription Lifetime

A SessionRecord is created by the MediaManager's reconciliation pass for a
source it has not seen before. It owns the source's adapter: it is the only
object that subscribes to, queries, or unsubscribes from it.

Lifecycle:
    created   → subscribed to metadata-changed and playback-info-changed
    relaying  → playback changes are forwarded synchronously; song changes
                are fetched asynchronously and forwarded on completion
    disposed  → adapter unsubscribed, registry entry released,
                removed_source emitted exactly once

Disposal triggers:
    - the source dropped out of the provider's list ("vanished")
    - the adapter reported the CLOSED playback status ("closed")
    - the manager was stopped or disposed ("teardown")
    - an embedder called dispose() ("explicit")

A metadata fetch that completes after disposal is discarded; the disposed
check happens under the manager lock at completion time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from mediacontroller.core import constants as C
from mediacontroller.core.types import (
    MediaMetadata,
    PlaybackInfo,
    SourceId,
    Timestamp,
)
from mediacontroller.observability.logging import StructuredLogger
from mediacontroller.providers.protocols import SessionHandleAdapter

if TYPE_CHECKING:
    from mediacontroller.session.manager import MediaManager


class SessionRecord:
    """
    Relay for one playback source.

    Not constructed by embedders; obtain records from MediaManager events
    or MediaManager.sessions.
    """

    __slots__ = (
        "_source_id", "_adapter", "_manager", "_lock", "_tokens",
        "_disposed", "_created_at", "_last_playback", "_last_metadata", "_log",
    )

    def __init__(
        self,
        source_id: SourceId,
        adapter: SessionHandleAdapter,
        manager: MediaManager,
    ) -> None:
        self._source_id = source_id
        self._adapter = adapter
        self._manager = manager
        self._lock = manager._lock
        self._disposed = False
        self._created_at = Timestamp.now()
        self._last_playback: Optional[PlaybackInfo] = None
        self._last_metadata: Optional[MediaMetadata] = None
        self._log = StructuredLogger(__name__).with_extra(source_id=source_id.value)
        self._tokens = adapter.subscribe(
            self._on_metadata_changed,
            self._on_playback_info_changed,
        )

    @property
    def source_id(self) -> SourceId:
        return self._source_id

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def created_at(self) -> Timestamp:
        return self._created_at

    @property
    def last_playback(self) -> Optional[PlaybackInfo]:
        """Last playback info relayed as playback_changed."""
        return self._last_playback

    @property
    def last_metadata(self) -> Optional[MediaMetadata]:
        """Last metadata relayed as song_changed."""
        return self._last_metadata

    # ── Relays ──

    def relay_song(self) -> bool:
        """
        Fetch the current media metadata and emit song_changed when it lands.

        Fire-and-forget: returns once the fetch is scheduled on the
        manager's loop. Returns False if the record is disposed or no loop
        is available.
        """
        if self._disposed:
            return False
        return self._manager._spawn(self._fetch_and_relay())

    async def _fetch_and_relay(self) -> None:
        try:
            with self._manager._metadata_fetch_timer():
                metadata = await self._adapter.fetch_media_metadata()
        except Exception as e:
            self._log.warning("Metadata fetch failed", error=repr(e))
            self._manager._metadata_failed("error")
            return
        self._manager._deliver_song(self, metadata)

    def _on_metadata_changed(self) -> None:
        try:
            self.relay_song()
        except Exception:
            self._log.exception("Metadata change relay failed")

    def _on_playback_info_changed(self) -> None:
        try:
            with self._lock:
                if self._disposed:
                    return
                info = self._adapter.get_playback_info()
                if info.is_terminal:
                    self._log.debug("Session reported CLOSED")
                    self._dispose(C.REMOVAL_CLOSED)
                    return
                self._last_playback = info
                self._manager.playback_changed.emit(self, info)
        except Exception:
            self._log.exception("Playback change relay failed")

    # ── Disposal ──

    def dispose(self) -> bool:
        """
        Release the adapter subscriptions and remove this record.

        Idempotent: only the first call emits removed_source; later calls
        return False.
        """
        return self._dispose(C.REMOVAL_EXPLICIT)

    def _dispose(self, reason: str) -> bool:
        with self._lock:
            if self._disposed:
                return False
            self._disposed = True
            try:
                self._adapter.unsubscribe(self._tokens)
            except Exception as e:
                self._log.debug("Adapter unsubscribe failed", error=repr(e))
            self._manager._release(self, reason)
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_id": self._source_id.value,
            "disposed": self._disposed,
            "created_at_nanos": self._created_at.nanos,
            "playback": self._last_playback.to_dict() if self._last_playback else None,
            "metadata": self._last_metadata.to_dict() if self._last_metadata else None,
        }

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "live"
        return f"SessionRecord({self._source_id.value!r}, {state})"
