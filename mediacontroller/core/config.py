"""
Configuration Management for the Media Session Controller

Provides validated configuration with sensible defaults.
Supports environment variable overrides.

Design:
- Immutable after validation
- Fail-fast on invalid configuration
- Type-safe with dataclasses
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

from mediacontroller.core.types import Result, Ok, Err
from mediacontroller.core import constants as C


_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})
_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def _default_backend() -> str:
    return C.BACKEND_WINRT if sys.platform == "win32" else C.BACKEND_MEMORY


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(C.ENV_PREFIX + name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{C.ENV_PREFIX}{name}: expected a boolean, got {raw!r}")


@dataclass(frozen=True)
class ManagerConfig:
    """Behaviour of the MediaManager relay."""

    # Fetch and relay metadata as soon as a new source is registered
    relay_initial_metadata: bool = True
    # Drop song-changed events whose metadata carries no identifying field
    suppress_empty_metadata: bool = True


@dataclass(frozen=True)
class ProviderConfig:
    """Session provider selection."""

    backend: str = field(default_factory=_default_backend)


@dataclass(frozen=True)
class ObservabilityConfig:
    """Logging and metrics configuration."""

    log_level: str = "INFO"
    log_json: bool = False
    metrics_enabled: bool = True


@dataclass(frozen=True)
class MediaControllerConfig:
    """Root configuration for the media controller."""

    manager: ManagerConfig = field(default_factory=ManagerConfig)
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)

    @classmethod
    def from_env(cls) -> Result[MediaControllerConfig, str]:
        """
        Load configuration from environment variables.

        Environment variables are prefixed with MEDIACONTROLLER_.
        Example: MEDIACONTROLLER_BACKEND, MEDIACONTROLLER_LOG_LEVEL
        """
        try:
            manager = ManagerConfig(
                relay_initial_metadata=_env_bool("RELAY_INITIAL_METADATA", True),
                suppress_empty_metadata=_env_bool("SUPPRESS_EMPTY_METADATA", True),
            )

            provider = ProviderConfig(
                backend=os.getenv(C.ENV_PREFIX + "BACKEND", _default_backend()).strip().lower(),
            )

            observability = ObservabilityConfig(
                log_level=os.getenv(C.ENV_PREFIX + "LOG_LEVEL", "INFO").strip().upper(),
                log_json=_env_bool("LOG_JSON", False),
                metrics_enabled=_env_bool("METRICS_ENABLED", True),
            )

            return Ok(cls(manager=manager, provider=provider, observability=observability))
        except (ValueError, TypeError) as e:
            return Err(f"Configuration error: {e}")

    def validate(self) -> Result[None, str]:
        """Validate configuration invariants."""
        if self.provider.backend not in C.BACKENDS:
            return Err(
                f"Unknown provider backend {self.provider.backend!r} "
                f"(expected one of {', '.join(sorted(C.BACKENDS))})"
            )
        if self.observability.log_level not in _LOG_LEVELS:
            return Err(f"Unknown log level {self.observability.log_level!r}")
        return Ok(None)
