"""
Media Session Controller

Tracks the media playback sessions an operating system exposes (on Windows,
the Global System Media Transport Controls) and relays their lifecycle and
state changes to application subscribers:

- new_source / removed_source: a playback source appeared or went away,
  including sources that vanish without reporting CLOSED
- playback_changed: a source's playback status changed
- song_changed: a source's media metadata changed

Quick start:
    from mediacontroller import MediaManager
    from mediacontroller.providers.winrt import WinRTGateway

    async with MediaManager(WinRTGateway()) as manager:
        manager.song_changed.subscribe(lambda record, song: print(record.source_id, song))
        await asyncio.Event().wait()

License: MIT
"""

__version__ = "1.0.0"

# =============================================================================
# PUBLIC API EXPORTS
# =============================================================================
from mediacontroller.core.types import (
    Result,
    Ok,
    Err,
    SourceId,
    PlaybackStatus,
    PlaybackType,
    RepeatMode,
    PlaybackInfo,
    MediaMetadata,
    Timestamp,
)
from mediacontroller.core.errors import (
    ErrorCode,
    MediaControllerError,
    AlreadyStartedError,
    NotStartedError,
    ProviderUnavailableError,
)
from mediacontroller.core.config import MediaControllerConfig, ManagerConfig

# Session exports
from mediacontroller.session import (
    EventChannel,
    MediaManager,
    SessionRecord,
    SessionRegistry,
)

# Provider exports
from mediacontroller.providers import (
    ProviderGateway,
    SessionHandleAdapter,
    InMemoryGateway,
    InMemorySessionAdapter,
)

__all__ = [
    # Version
    "__version__",
    # Result container
    "Result",
    "Ok",
    "Err",
    # Value types
    "SourceId",
    "PlaybackStatus",
    "PlaybackType",
    "RepeatMode",
    "PlaybackInfo",
    "MediaMetadata",
    "Timestamp",
    # Errors
    "ErrorCode",
    "MediaControllerError",
    "AlreadyStartedError",
    "NotStartedError",
    "ProviderUnavailableError",
    # Config
    "MediaControllerConfig",
    "ManagerConfig",
    # Session
    "EventChannel",
    "MediaManager",
    "SessionRecord",
    "SessionRegistry",
    # Providers
    "ProviderGateway",
    "SessionHandleAdapter",
    "InMemoryGateway",
    "InMemorySessionAdapter",
]
