"""
Core Type Definitions for the Media Session Controller

Provides:
- Result/Either containers (Ok, Err) for fallible lookups and parsing
- SourceId: identity of a playback source across provider notifications
- PlaybackStatus / PlaybackInfo: provider playback state
- MediaMetadata: provider media properties (the "song")
- Timestamp: nanosecond wall-clock stamps for records and errors

Design Principles:
- Provider objects never leak past the adapter boundary; adapters translate
  native values into the immutable types defined here
- Value types are frozen and hashable so they can be shared freely between
  the provider dispatch thread and the asyncio loop
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import IntEnum
from typing import (
    Any,
    Callable,
    ClassVar,
    Generic,
    Literal,
    Optional,
    TypeVar,
    Union,
)

# =============================================================================
# TYPE VARIABLES FOR GENERIC CONTAINERS
# =============================================================================
T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Transform result type


# =============================================================================
# RESULT CONTAINER
# =============================================================================
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Success variant of Result.

    Immutable container for a successful computation result.
    """

    value: T

    def is_ok(self) -> Literal[True]:
        return True

    def is_err(self) -> Literal[False]:
        return False

    def unwrap(self) -> T:
        """Extract value. Safe to call after is_ok() check."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Return value, ignoring default."""
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        """Apply transformation to success value."""
        return Ok(fn(self.value))

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """
    Failure variant of Result.

    Carries the error (usually a message string) for the caller to report.
    """

    error: E

    def is_ok(self) -> Literal[False]:
        return False

    def is_err(self) -> Literal[True]:
        return True

    def unwrap(self) -> Any:
        """
        Attempting to unwrap an error is a programming error.

        Raises:
            RuntimeError: Always, with error context
        """
        raise RuntimeError(f"Called unwrap() on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        """Return default value on error."""
        return default

    def map(self, fn: Callable[[Any], U]) -> Err[E]:
        """No-op on error variant - propagates error unchanged."""
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Union type for pattern matching
Result = Union[Ok[T], Err[E]]


# =============================================================================
# SOURCE IDENTITY
# =============================================================================
@dataclass(frozen=True, slots=True, order=True)
class SourceId:
    """
    Identity of a playback source.

    On Windows this is the session's SourceAppUserModelId (for example
    ``Spotify.exe``). Two notifications naming the same SourceId refer to
    the same logical session.

    Invariant: value is a non-blank string.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError(f"SourceId must be a non-empty string, got {self.value!r}")

    @classmethod
    def parse(cls, raw: Any) -> Result[SourceId, str]:
        """
        Parse a raw provider identity.

        Returns:
            Ok[SourceId]: Valid identity
            Err[str]: Validation error message
        """
        try:
            return Ok(cls(value=raw))
        except ValueError as e:
            return Err(f"Invalid SourceId: {e}")

    def __str__(self) -> str:
        return self.value


# =============================================================================
# PLAYBACK STATE
# =============================================================================
class PlaybackStatus(IntEnum):
    """
    Playback status reported by the provider.

    Values mirror GlobalSystemMediaTransportControlsSessionPlaybackStatus so
    native values convert with ``PlaybackStatus(int(native))``.
    """
    CLOSED = 0
    OPENED = 1
    CHANGING = 2
    STOPPED = 3
    PLAYING = 4
    PAUSED = 5

    @property
    def is_terminal(self) -> bool:
        """A closed session has ended and must be removed."""
        return self == PlaybackStatus.CLOSED

    @property
    def is_playing(self) -> bool:
        return self == PlaybackStatus.PLAYING


class PlaybackType(IntEnum):
    """Kind of media a session is playing."""
    UNKNOWN = 0
    MUSIC = 1
    VIDEO = 2
    IMAGE = 3


class RepeatMode(IntEnum):
    """Auto-repeat mode of a session."""
    NONE = 0
    TRACK = 1
    LIST = 2


@dataclass(frozen=True, slots=True)
class PlaybackInfo:
    """Snapshot of a session's playback state."""
    status: PlaybackStatus
    playback_type: Optional[PlaybackType] = None
    is_shuffle_active: Optional[bool] = None
    auto_repeat_mode: Optional[RepeatMode] = None
    playback_rate: Optional[float] = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.name,
            "playback_type": self.playback_type.name if self.playback_type is not None else None,
            "is_shuffle_active": self.is_shuffle_active,
            "auto_repeat_mode": (
                self.auto_repeat_mode.name
                if self.auto_repeat_mode is not None else None
            ),
            "playback_rate": self.playback_rate,
        }


@dataclass(frozen=True, slots=True)
class MediaMetadata:
    """
    Media properties of the item a session is playing.

    Providers commonly hand back an all-empty record while a player is
    switching tracks; ``has_content`` distinguishes that from real data.
    """
    title: str = ""
    artist: str = ""
    album_title: str = ""
    album_artist: str = ""
    subtitle: str = ""
    track_number: int = 0
    album_track_count: int = 0
    genres: tuple[str, ...] = field(default_factory=tuple)
    playback_type: Optional[PlaybackType] = None

    @property
    def has_content(self) -> bool:
        """True when at least one identifying field is populated."""
        return bool(self.title or self.artist or self.album_title or self.subtitle)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "artist": self.artist,
            "album_title": self.album_title,
            "album_artist": self.album_artist,
            "subtitle": self.subtitle,
            "track_number": self.track_number,
            "album_track_count": self.album_track_count,
            "genres": list(self.genres),
            "playback_type": self.playback_type.name if self.playback_type is not None else None,
        }

    def __str__(self) -> str:
        if self.artist and self.title:
            return f"{self.artist} - {self.title}"
        return self.title or self.artist or "<unknown>"


# =============================================================================
# TIMESTAMP WITH NANOSECOND PRECISION
# =============================================================================
@dataclass(frozen=True, slots=True, order=True)
class Timestamp:
    """
    Wall-clock timestamp in nanoseconds since the Unix epoch.

    Used for record creation times and error correlation.
    """

    nanos: int

    NANOS_PER_SECOND: ClassVar[int] = 1_000_000_000
    NANOS_PER_MILLI: ClassVar[int] = 1_000_000

    @classmethod
    def now(cls) -> Timestamp:
        return cls(nanos=time.time_ns())

    @property
    def seconds(self) -> float:
        """Convert to floating-point seconds."""
        return self.nanos / self.NANOS_PER_SECOND

    @property
    def millis(self) -> int:
        """Convert to milliseconds (truncating)."""
        return self.nanos // self.NANOS_PER_MILLI

    def elapsed_millis(self) -> float:
        """Milliseconds elapsed since this timestamp."""
        return (time.time_ns() - self.nanos) / self.NANOS_PER_MILLI

    def __repr__(self) -> str:
        return f"Timestamp({self.nanos}ns)"
