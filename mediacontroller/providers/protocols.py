"""
Provider Protocol Definitions: Session Provider Abstraction Layer

Structural subtyping protocols (PEP 544) for the two external collaborators
the manager talks to:
- ProviderGateway: yields the current session handles and a single
  "sessions changed" notification
- SessionHandleAdapter: one playback source; exposes playback info, an
  awaitable metadata fetch and two change notifications

Contract notes:
    - Notification callbacks take no arguments. Backends adapt their native
      (sender, args) signatures.
    - Callbacks may be invoked from any thread.
    - get_playback_info() and the subscription calls are synchronous and
      assumed not to raise; fetch_media_metadata() may suspend for an
      arbitrary time and cannot be cancelled at the source.
    - unsubscribe() with a token that is no longer registered is a no-op.
"""

from __future__ import annotations

from typing import (
    Any,
    Callable,
    Optional,
    Protocol,
    Sequence,
    runtime_checkable,
)

from mediacontroller.core.types import MediaMetadata, PlaybackInfo


Notification = Callable[[], None]
SubscriptionToken = Any


@runtime_checkable
class SessionHandleAdapter(Protocol):
    """Per-source handle supplied by the provider."""

    @property
    def source_id(self) -> str:
        """Stable, non-empty identity of the source."""
        ...

    def get_playback_info(self) -> PlaybackInfo:
        """Current playback state."""
        ...

    async def fetch_media_metadata(self) -> Optional[MediaMetadata]:
        """
        Fetch the media currently playing.

        Returns None when the provider has no usable data.
        """
        ...

    def subscribe(
        self,
        on_metadata_changed: Notification,
        on_playback_info_changed: Notification,
    ) -> tuple[SubscriptionToken, SubscriptionToken]:
        """Register both change notifications; returns their tokens."""
        ...

    def unsubscribe(
        self,
        tokens: tuple[SubscriptionToken, SubscriptionToken],
    ) -> None:
        """Release tokens returned by subscribe()."""
        ...


@runtime_checkable
class ProviderGateway(Protocol):
    """Entry point to the platform's media session service."""

    @property
    def name(self) -> str:
        """Short backend name used in logs and errors."""
        ...

    async def connect(self) -> None:
        """Acquire the platform session manager. Idempotent."""
        ...

    def get_current_sessions(self) -> Sequence[SessionHandleAdapter]:
        """Handles for every session the provider currently reports."""
        ...

    def subscribe(self, on_changed: Notification) -> SubscriptionToken:
        """Register the sessions-changed notification."""
        ...

    def unsubscribe(self, token: SubscriptionToken) -> None:
        """Release a token returned by subscribe()."""
        ...
