"""
Core module: Type definitions, error hierarchy, and configuration.

This module provides the foundational abstractions for the controller:
- Result containers for fallible parsing and configuration loading
- Value types describing sources, playback state and media metadata
- Error hierarchy for lifecycle and provider failures
- Configuration management with validation
"""

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
from mediacontroller.core.config import MediaControllerConfig

__all__ = [
    "Result",
    "Ok",
    "Err",
    "SourceId",
    "PlaybackStatus",
    "PlaybackType",
    "RepeatMode",
    "PlaybackInfo",
    "MediaMetadata",
    "Timestamp",
    "ErrorCode",
    "MediaControllerError",
    "AlreadyStartedError",
    "NotStartedError",
    "ProviderUnavailableError",
    "MediaControllerConfig",
]
