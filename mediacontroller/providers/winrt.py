"""
WinRT Session Provider

Backend over the Windows Global System Media Transport Controls (GSMTC)
session manager, via the ``winrt-Windows.Media.Control`` projection.

WinRT delivers SessionsChanged, MediaPropertiesChanged and
PlaybackInfoChanged on thread-pool threads; the manager serializes them.
Media properties are fetched with TryGetMediaPropertiesAsync, which is
awaitable from asyncio.

Note that GSMTC hands out a fresh session object on every GetSessions()
call; identity is carried by SourceAppUserModelId, never by the object.
"""

from __future__ import annotations

from typing import Any, Optional

from winrt.windows.media.control import (
    GlobalSystemMediaTransportControlsSession as NativeSession,
    GlobalSystemMediaTransportControlsSessionManager as NativeSessionManager,
)

from mediacontroller.core import constants as C
from mediacontroller.core.types import (
    MediaMetadata,
    PlaybackInfo,
    PlaybackStatus,
    PlaybackType,
    RepeatMode,
)
from mediacontroller.observability.logging import StructuredLogger
from mediacontroller.providers.protocols import Notification

log = StructuredLogger(__name__)


def _enum_or_none(enum_cls: Any, native: Any) -> Any:
    if native is None:
        return None
    try:
        return enum_cls(int(native))
    except ValueError:
        return None


def playback_info_from_native(native: Any) -> PlaybackInfo:
    """Translate GlobalSystemMediaTransportControlsSessionPlaybackInfo."""
    return PlaybackInfo(
        status=PlaybackStatus(int(native.playback_status)),
        playback_type=_enum_or_none(PlaybackType, native.playback_type),
        is_shuffle_active=native.is_shuffle_active,
        auto_repeat_mode=_enum_or_none(RepeatMode, native.auto_repeat_mode),
        playback_rate=native.playback_rate,
    )


def metadata_from_native(native: Any) -> MediaMetadata:
    """Translate GlobalSystemMediaTransportControlsSessionMediaProperties."""
    return MediaMetadata(
        title=native.title or "",
        artist=native.artist or "",
        album_title=native.album_title or "",
        album_artist=native.album_artist or "",
        subtitle=native.subtitle or "",
        track_number=native.track_number or 0,
        album_track_count=native.album_track_count or 0,
        genres=tuple(native.genres or ()),
        playback_type=_enum_or_none(PlaybackType, native.playback_type),
    )


class WinRTSessionAdapter:
    """SessionHandleAdapter over a GlobalSystemMediaTransportControlsSession."""

    __slots__ = ("_session", "_source_id")

    def __init__(self, session: NativeSession) -> None:
        self._session = session
        self._source_id = session.source_app_user_model_id

    @property
    def source_id(self) -> str:
        return self._source_id

    def get_playback_info(self) -> PlaybackInfo:
        return playback_info_from_native(self._session.get_playback_info())

    async def fetch_media_metadata(self) -> Optional[MediaMetadata]:
        properties = await self._session.try_get_media_properties_async()
        if properties is None:
            return None
        return metadata_from_native(properties)

    def subscribe(
        self,
        on_metadata_changed: Notification,
        on_playback_info_changed: Notification,
    ) -> tuple[Any, Any]:
        metadata_token = self._session.add_media_properties_changed(
            lambda sender, args: on_metadata_changed()
        )
        playback_token = self._session.add_playback_info_changed(
            lambda sender, args: on_playback_info_changed()
        )
        return metadata_token, playback_token

    def unsubscribe(self, tokens: tuple[Any, Any]) -> None:
        metadata_token, playback_token = tokens
        self._session.remove_media_properties_changed(metadata_token)
        self._session.remove_playback_info_changed(playback_token)

    def __repr__(self) -> str:
        return f"WinRTSessionAdapter({self._source_id!r})"


class WinRTGateway:
    """ProviderGateway over GlobalSystemMediaTransportControlsSessionManager."""

    def __init__(self) -> None:
        self._manager: Optional[NativeSessionManager] = None

    @property
    def name(self) -> str:
        return C.BACKEND_WINRT

    async def connect(self) -> None:
        if self._manager is not None:
            return
        self._manager = await NativeSessionManager.request_async()
        log.info("Connected to GSMTC session manager")

    def _require_manager(self) -> NativeSessionManager:
        if self._manager is None:
            raise RuntimeError("WinRTGateway.connect() has not completed")
        return self._manager

    def get_current_sessions(self) -> list[WinRTSessionAdapter]:
        return [WinRTSessionAdapter(s) for s in self._require_manager().get_sessions()]

    def subscribe(self, on_changed: Notification) -> Any:
        return self._require_manager().add_sessions_changed(
            lambda sender, args: on_changed()
        )

    def unsubscribe(self, token: Any) -> None:
        if self._manager is not None:
            self._manager.remove_sessions_changed(token)
