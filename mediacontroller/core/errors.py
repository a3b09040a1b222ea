"""
Error Hierarchy for the Media Session Controller

Design Principles:
- Lifecycle misuse (double start, stop without start) raises immediately
  and leaves the manager untouched
- Provider failures at start time raise ProviderUnavailableError with the
  original exception chained as ``cause``
- Faults inside provider callbacks are never raised back into the provider;
  they are logged and counted where they happen

Each error type includes:
- Unique error code for programmatic handling
- Human-readable message for logging
- Optional cause for root cause analysis
- Timestamp for correlation with log lines

Usage:
    try:
        await manager.start()
    except ProviderUnavailableError as e:
        log.error("media sessions unavailable", error=e.to_dict())
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from mediacontroller.core.types import Timestamp


# =============================================================================
# ERROR CODE ENUMERATION
# =============================================================================
class ErrorCode(Enum):
    """
    Unique error codes for programmatic error handling.

    Codes are grouped by subsystem:
    - 1xxx: Manager lifecycle errors
    - 2xxx: Provider errors
    - 9xxx: Internal errors
    """

    # Lifecycle errors (1xxx)
    LIFECYCLE_ALREADY_STARTED = 1001
    LIFECYCLE_NOT_STARTED = 1002

    # Provider errors (2xxx)
    PROVIDER_CONNECT_FAILED = 2001
    PROVIDER_ENUMERATION_FAILED = 2002
    PROVIDER_SUBSCRIPTION_FAILED = 2003

    # Internal errors (9xxx)
    INTERNAL_ERROR = 9001
    INTERNAL_CONFIGURATION_ERROR = 9002


# =============================================================================
# BASE ERROR CLASS
# =============================================================================
@dataclass
class MediaControllerError(Exception):
    """
    Base class for all media controller errors.

    Provides common infrastructure for error handling:
    - Unique error ID for log correlation
    - Error code for programmatic handling
    - Timestamp for correlation
    - Cause chain for root cause analysis
    """

    code: ErrorCode
    message: str
    error_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: Timestamp = field(default_factory=Timestamp.now)
    cause: Optional[Exception] = None
    context: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize error to dictionary for structured logging."""
        data = {
            "error_id": self.error_id,
            "code": self.code.name,
            "code_value": self.code.value,
            "message": self.message,
            "timestamp_nanos": self.timestamp.nanos,
            "context": self.context,
        }
        if self.cause is not None:
            data["cause"] = repr(self.cause)
        return data

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message} (id={self.error_id[:8]})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"code={self.code.name}, "
            f"message={self.message!r}, "
            f"error_id={self.error_id!r})"
        )


# =============================================================================
# LIFECYCLE ERRORS
# =============================================================================
@dataclass
class AlreadyStartedError(MediaControllerError):
    """start() called while the manager is running or starting."""

    code: ErrorCode = ErrorCode.LIFECYCLE_ALREADY_STARTED
    message: str = "MediaManager already started"


@dataclass
class NotStartedError(MediaControllerError):
    """stop() called while the manager is not running."""

    code: ErrorCode = ErrorCode.LIFECYCLE_NOT_STARTED
    message: str = "MediaManager did not start yet"


# =============================================================================
# PROVIDER ERRORS
# =============================================================================
@dataclass
class ProviderUnavailableError(MediaControllerError):
    """
    The session provider could not be reached at start time.

    start() unwinds every partial acquisition before raising this, so the
    manager is left stopped with no provider subscription.
    """

    code: ErrorCode = ErrorCode.PROVIDER_CONNECT_FAILED
    message: str = "Media session provider unavailable"

    @classmethod
    def connect_failed(
        cls,
        provider: str,
        cause: Optional[Exception] = None,
    ) -> ProviderUnavailableError:
        """Acquiring the provider's session manager failed."""
        return cls(
            code=ErrorCode.PROVIDER_CONNECT_FAILED,
            message=f"Could not connect to media session provider {provider}",
            cause=cause,
            context={"provider": provider},
        )

    @classmethod
    def enumeration_failed(
        cls,
        provider: str,
        cause: Optional[Exception] = None,
    ) -> ProviderUnavailableError:
        """The provider failed to supply its current session list."""
        return cls(
            code=ErrorCode.PROVIDER_ENUMERATION_FAILED,
            message=f"Provider {provider} failed to list current sessions",
            cause=cause,
            context={"provider": provider},
        )

    @classmethod
    def subscription_failed(
        cls,
        provider: str,
        cause: Optional[Exception] = None,
    ) -> ProviderUnavailableError:
        """Subscribing to the provider's sessions-changed notification failed."""
        return cls(
            code=ErrorCode.PROVIDER_SUBSCRIPTION_FAILED,
            message=f"Could not subscribe to session changes of provider {provider}",
            cause=cause,
            context={"provider": provider},
        )
