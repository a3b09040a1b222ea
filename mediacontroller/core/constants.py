"""
System-Wide Constants for the Media Session Controller

All magic numbers and configuration defaults centralized here.
"""

from typing import Final

# =============================================================================
# ENVIRONMENT
# =============================================================================
ENV_PREFIX: Final[str] = "MEDIACONTROLLER_"

# =============================================================================
# PROVIDER BACKENDS
# =============================================================================
BACKEND_WINRT: Final[str] = "winrt"
BACKEND_MEMORY: Final[str] = "memory"
BACKENDS: Final[frozenset[str]] = frozenset({BACKEND_WINRT, BACKEND_MEMORY})

# =============================================================================
# EVENT NAMES
# =============================================================================
EVENT_NEW_SOURCE: Final[str] = "new_source"
EVENT_REMOVED_SOURCE: Final[str] = "removed_source"
EVENT_PLAYBACK_CHANGED: Final[str] = "playback_changed"
EVENT_SONG_CHANGED: Final[str] = "song_changed"

# =============================================================================
# REMOVAL REASONS (metric label values)
# =============================================================================
REMOVAL_VANISHED: Final[str] = "vanished"    # dropped from the provider list
REMOVAL_CLOSED: Final[str] = "closed"        # terminal playback status
REMOVAL_TEARDOWN: Final[str] = "teardown"    # manager stop/dispose
REMOVAL_EXPLICIT: Final[str] = "explicit"    # record.dispose() by an embedder

# =============================================================================
# METRIC NAMES
# =============================================================================
METRIC_SESSIONS_ADDED: Final[str] = "mediacontroller_sessions_added_total"
METRIC_SESSIONS_REMOVED: Final[str] = "mediacontroller_sessions_removed_total"
METRIC_EVENTS_EMITTED: Final[str] = "mediacontroller_events_emitted_total"
METRIC_SUBSCRIBER_ERRORS: Final[str] = "mediacontroller_subscriber_errors_total"
METRIC_METADATA_FAILURES: Final[str] = "mediacontroller_metadata_failures_total"
METRIC_ACTIVE_SESSIONS: Final[str] = "mediacontroller_active_sessions"
METRIC_RECONCILE_SECONDS: Final[str] = "mediacontroller_reconcile_seconds"
METRIC_METADATA_FETCH_SECONDS: Final[str] = "mediacontroller_metadata_fetch_seconds"

# =============================================================================
# HISTOGRAM BUCKETS
# =============================================================================
RECONCILE_BUCKETS: Final[tuple[float, ...]] = (
    0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5,
)
METADATA_FETCH_BUCKETS: Final[tuple[float, ...]] = (
    0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0,
)

# =============================================================================
# DEMO CLI
# =============================================================================
DEMO_STEP_SECONDS: Final[float] = 0.5
