"""
Media Manager: Session Reconciliation and Event Relay

The provider only ever says "sessions changed". The manager turns that
into precise add/remove semantics:

    1. Fetch the provider's current session list
    2. For every source not yet registered: create a SessionRecord,
       register it, emit new_source, relay its current song
    3. Compute the full set of registered sources missing from the list
    4. Dispose each of them (emits removed_source)

Additions are applied before removals are computed, so a source that is
reported present is never removed in the same pass. Duplicate ids in one
list are ignored after the first occurrence.

Concurrency:
    Provider notifications arrive on the provider's own threads. Every
    reconciliation pass, registry mutation, disposal and emission runs under
    one re-entrant lock, so passes never interleave. Metadata fetches are the
    only suspending work; they run as detached coroutines on the event loop
    captured by start() and are tracked until completion (see drain()).

    The lock is re-entrant, so a subscriber may call stop() or dispose()
    from inside a pass. Every teardown bumps a generation counter; a pass
    or a start() that sees it move abandons its remaining work.

Usage:
    manager = MediaManager(WinRTGateway())
    manager.new_source.subscribe(lambda record: print("+", record.source_id))
    manager.song_changed.subscribe(lambda record, song: print(record.source_id, song))
    await manager.start()
    ...
    manager.dispose()
"""

from __future__ import annotations

import asyncio
import threading
from concurrent.futures import Future
from typing import Any, Callable, Coroutine, Mapping, Optional, Sequence, Union

from mediacontroller.core import constants as C
from mediacontroller.core.config import ManagerConfig
from mediacontroller.core.errors import (
    AlreadyStartedError,
    NotStartedError,
    ProviderUnavailableError,
)
from mediacontroller.core.types import MediaMetadata, SourceId
from mediacontroller.observability.logging import StructuredLogger
from mediacontroller.observability.metrics import HistogramTimer, MetricsCollector
from mediacontroller.providers.protocols import ProviderGateway, SessionHandleAdapter
from mediacontroller.session.events import EventChannel
from mediacontroller.session.record import SessionRecord
from mediacontroller.session.registry import SessionRegistry

log = StructuredLogger(__name__)


class MediaManager:
    """
    Public facade over a session provider.

    Events (each an EventChannel):
        new_source(record)
        removed_source(record)
        playback_changed(record, playback_info)
        song_changed(record, media_metadata)

    Lifecycle:
        start() → stop() → start() is valid; dispose() may be called at any
        time and any number of times.
    """

    def __init__(
        self,
        gateway: ProviderGateway,
        config: Optional[ManagerConfig] = None,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self._gateway = gateway
        self._config = config or ManagerConfig()
        self._registry = SessionRegistry()
        self._lock = threading.RLock()
        self._started = False
        self._starting = False
        # Bumped by every teardown; passes and starts abandon work when it moves
        self._generation = 0
        self._subscription: Any = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._pending: set[Future] = set()
        self._pending_lock = threading.Lock()

        metrics = metrics or MetricsCollector.get_instance()
        emitted = metrics.counter(
            C.METRIC_EVENTS_EMITTED, ["event"], "Events broadcast to subscribers",
        )
        errors = metrics.counter(
            C.METRIC_SUBSCRIBER_ERRORS, ["event"], "Subscriber callbacks that raised",
        )
        self._sessions_added = metrics.counter(
            C.METRIC_SESSIONS_ADDED, (), "Sources registered",
        )
        self._sessions_removed = metrics.counter(
            C.METRIC_SESSIONS_REMOVED, ["reason"], "Sources released",
        )
        self._metadata_failures = metrics.counter(
            C.METRIC_METADATA_FAILURES, ["reason"], "Metadata relays that emitted nothing",
        )
        self._active_sessions = metrics.gauge(
            C.METRIC_ACTIVE_SESSIONS, (), "Sources currently registered",
        )
        self._reconcile_seconds = metrics.histogram(
            C.METRIC_RECONCILE_SECONDS, (), "Duration of reconciliation passes",
            buckets=C.RECONCILE_BUCKETS,
        )
        self._metadata_fetch_seconds = metrics.histogram(
            C.METRIC_METADATA_FETCH_SECONDS, (), "Duration of metadata fetches",
            buckets=C.METADATA_FETCH_BUCKETS,
        )

        self.new_source = EventChannel(C.EVENT_NEW_SOURCE, emitted, errors)
        self.removed_source = EventChannel(C.EVENT_REMOVED_SOURCE, emitted, errors)
        self.playback_changed = EventChannel(C.EVENT_PLAYBACK_CHANGED, emitted, errors)
        self.song_changed = EventChannel(C.EVENT_SONG_CHANGED, emitted, errors)
        self._channels: dict[str, EventChannel] = {
            channel.name: channel
            for channel in (
                self.new_source,
                self.removed_source,
                self.playback_changed,
                self.song_changed,
            )
        }

    # =========================================================================
    # PUBLIC SURFACE
    # =========================================================================
    @property
    def started(self) -> bool:
        return self._started

    @property
    def sessions(self) -> Mapping[SourceId, SessionRecord]:
        """Read-only snapshot of the live sessions."""
        with self._lock:
            return self._registry.snapshot()

    def get(self, source_id: Union[SourceId, str]) -> Optional[SessionRecord]:
        if isinstance(source_id, str):
            parsed = SourceId.parse(source_id)
            if parsed.is_err():
                return None
            source_id = parsed.unwrap()
        with self._lock:
            return self._registry.get(source_id)

    def subscribe(self, event: str, callback: Callable[..., Any]) -> Callable[[], None]:
        """
        Subscribe to an event by name.

        Returns a callable that cancels the subscription.
        """
        try:
            channel = self._channels[event]
        except KeyError:
            raise ValueError(
                f"Unknown event {event!r} (expected one of {', '.join(sorted(self._channels))})"
            ) from None
        return channel.subscribe(callback)

    async def start(self) -> None:
        """
        Connect to the provider, register every current source and start
        listening for session changes.

        Raises:
            AlreadyStartedError: the manager is running or starting
            ProviderUnavailableError: the provider could not connect, list
                sessions or accept the subscription; nothing is left acquired
        """
        with self._lock:
            if self._started or self._starting:
                raise AlreadyStartedError(context={"provider": self._gateway.name})
            self._starting = True
            generation = self._generation

        try:
            self._loop = asyncio.get_running_loop()
            try:
                await self._gateway.connect()
            except Exception as e:
                raise ProviderUnavailableError.connect_failed(self._gateway.name, e) from e

            with self._lock:
                if self._generation != generation:
                    log.info("Start abandoned, manager disposed while connecting")
                    return

                try:
                    sessions = self._gateway.get_current_sessions()
                except Exception as e:
                    raise ProviderUnavailableError.enumeration_failed(self._gateway.name, e) from e

                self._reconcile(sessions)
                if self._generation != generation:
                    # A subscriber disposed the manager during the initial pass
                    self._release_all(C.REMOVAL_TEARDOWN)
                    log.info("Start abandoned, manager disposed during initial pass")
                    return

                try:
                    self._subscription = self._gateway.subscribe(self._on_sessions_changed)
                except Exception as e:
                    self._subscription = None
                    self._release_all(C.REMOVAL_TEARDOWN)
                    raise ProviderUnavailableError.subscription_failed(self._gateway.name, e) from e

                self._started = True
        finally:
            with self._lock:
                self._starting = False

        log.info("Media manager started", provider=self._gateway.name, sessions=len(self._registry))

    def stop(self) -> None:
        """
        Release every session and the provider subscription.

        Subscribers are kept and receive removed_source for each live session.

        Raises:
            NotStartedError: the manager is not running
        """
        with self._lock:
            if not self._started:
                raise NotStartedError(context={"provider": self._gateway.name})
            self._teardown()
        log.info("Media manager stopped", provider=self._gateway.name)

    def dispose(self) -> None:
        """
        Clear all subscribers and release every session and the provider
        subscription. Never raises; safe to call repeatedly.
        """
        with self._lock:
            for channel in self._channels.values():
                channel.clear()
            self._teardown()

    async def drain(self) -> None:
        """Wait until every in-flight metadata relay has finished."""
        while True:
            with self._pending_lock:
                pending = list(self._pending)
            if not pending:
                return
            await asyncio.gather(
                *(asyncio.wrap_future(f) for f in pending),
                return_exceptions=True,
            )

    async def __aenter__(self) -> MediaManager:
        await self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        self.dispose()

    # =========================================================================
    # RECONCILIATION
    # =========================================================================
    def _on_sessions_changed(self) -> None:
        """Provider notification handler; runs on the provider's thread."""
        try:
            with self._lock:
                if not self._started:
                    log.debug("Ignoring session change while stopped")
                    return
                sessions = self._gateway.get_current_sessions()
                self._reconcile(sessions)
        except Exception:
            log.exception("Session reconciliation failed", provider=self._gateway.name)

    def _reconcile(self, adapters: Sequence[SessionHandleAdapter]) -> None:
        """Diff the provider list against the registry. Caller holds the lock."""
        with self._reconcile_seconds.time():
            generation = self._generation
            present: set[SourceId] = set()

            for adapter in adapters:
                try:
                    parsed = SourceId.parse(adapter.source_id)
                except Exception:
                    log.exception("Could not read source id", adapter=repr(adapter))
                    continue
                if parsed.is_err():
                    log.warning("Skipping session with invalid id", error=parsed.error)
                    continue

                source_id = parsed.unwrap()
                if source_id in present:
                    log.debug("Duplicate source in provider list", source_id=source_id.value)
                    continue
                present.add(source_id)

                if source_id not in self._registry:
                    self._add_source(source_id, adapter)
                    if self._generation != generation:
                        log.debug("Manager torn down by a subscriber, abandoning pass")
                        return

            # Full removal set first, then mutate
            stale = self._registry.absent_from(present)
            for record in stale:
                record._dispose(C.REMOVAL_VANISHED)

    def _add_source(self, source_id: SourceId, adapter: SessionHandleAdapter) -> None:
        try:
            record = SessionRecord(source_id, adapter, self)
        except Exception:
            log.exception("Could not subscribe to session", source_id=source_id.value)
            return

        self._registry.insert(record)
        self._sessions_added.inc()
        self._active_sessions.set(len(self._registry))
        log.debug("Source added", source_id=source_id.value)

        self.new_source.emit(record)
        if self._config.relay_initial_metadata:
            record.relay_song()

    def _release_all(self, reason: str) -> None:
        for record in self._registry.records():
            record._dispose(reason)
        self._registry.clear()
        self._active_sessions.set(0)

    def _teardown(self) -> None:
        """Release the provider subscription and every record. Caller holds the lock."""
        token, self._subscription = self._subscription, None
        self._started = False
        self._generation += 1
        if token is not None:
            try:
                self._gateway.unsubscribe(token)
            except Exception as e:
                log.warning("Provider unsubscribe failed", provider=self._gateway.name, error=repr(e))
        self._release_all(C.REMOVAL_TEARDOWN)

    # =========================================================================
    # RECORD CALLBACKS
    # =========================================================================
    def _release(self, record: SessionRecord, reason: str) -> None:
        """Called once per record from its disposal path, under the lock."""
        self._registry.remove(record)
        self._sessions_removed.inc(reason=reason)
        self._active_sessions.set(len(self._registry))
        log.debug("Source removed", source_id=record.source_id.value, reason=reason)
        self.removed_source.emit(record)

    def _deliver_song(self, record: SessionRecord, metadata: Optional[MediaMetadata]) -> None:
        """Completion of a metadata relay; drops results for disposed records."""
        with self._lock:
            if record.disposed:
                self._metadata_failed("disposed")
                return
            if metadata is None or (
                self._config.suppress_empty_metadata and not metadata.has_content
            ):
                self._metadata_failed("empty")
                return
            record._last_metadata = metadata
            self.song_changed.emit(record, metadata)

    def _metadata_failed(self, reason: str) -> None:
        self._metadata_failures.inc(reason=reason)

    def _metadata_fetch_timer(self) -> HistogramTimer:
        return self._metadata_fetch_seconds.time()

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> bool:
        """Schedule a detached relay on the manager's loop from any thread."""
        loop = self._loop
        if loop is None or loop.is_closed():
            coro.close()
            log.warning("No event loop available for metadata relay")
            return False
        try:
            future = asyncio.run_coroutine_threadsafe(coro, loop)
        except RuntimeError:
            coro.close()
            log.warning("Event loop rejected metadata relay")
            return False
        with self._pending_lock:
            self._pending.add(future)
        future.add_done_callback(self._relay_done)
        return True

    def _relay_done(self, future: Future) -> None:
        with self._pending_lock:
            self._pending.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            log.error("Metadata relay crashed", error=repr(exc))

    def __repr__(self) -> str:
        state = "started" if self._started else "stopped"
        return f"MediaManager({self._gateway.name}, {state}, sessions={len(self._registry)})"
