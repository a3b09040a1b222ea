"""
Shared fixtures: an in-memory provider, an isolated metrics collector,
a manager wired to both, and an event recorder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from mediacontroller.core.types import MediaMetadata
from mediacontroller.observability.metrics import MetricsCollector
from mediacontroller.providers.memory import InMemoryGateway, InMemorySessionAdapter
from mediacontroller.session.manager import MediaManager


@dataclass
class EventRecorder:
    """Collects (event, source_id, payload) tuples in delivery order."""
    events: list[tuple[str, str, Any]] = field(default_factory=list)

    @classmethod
    def attach(cls, manager: MediaManager) -> EventRecorder:
        recorder = cls()
        manager.new_source.subscribe(
            lambda record: recorder.events.append(("new_source", record.source_id.value, None))
        )
        manager.removed_source.subscribe(
            lambda record: recorder.events.append(("removed_source", record.source_id.value, None))
        )
        manager.playback_changed.subscribe(
            lambda record, info: recorder.events.append(
                ("playback_changed", record.source_id.value, info)
            )
        )
        manager.song_changed.subscribe(
            lambda record, song: recorder.events.append(
                ("song_changed", record.source_id.value, song)
            )
        )
        return recorder

    def of(self, event: str) -> list[str]:
        """Source ids that received event, in order."""
        return [source_id for name, source_id, _ in self.events if name == event]

    def names(self) -> list[tuple[str, str]]:
        return [(name, source_id) for name, source_id, _ in self.events]

    def clear(self) -> None:
        self.events.clear()


def make_adapter(source_id: str, title: str = "") -> InMemorySessionAdapter:
    metadata = MediaMetadata(title=title, artist="Artist") if title else None
    return InMemorySessionAdapter(source_id, metadata=metadata)


@pytest.fixture
def metrics() -> MetricsCollector:
    return MetricsCollector()


@pytest.fixture
def gateway() -> InMemoryGateway:
    return InMemoryGateway()


@pytest.fixture
def manager(gateway: InMemoryGateway, metrics: MetricsCollector):
    manager = MediaManager(gateway, metrics=metrics)
    yield manager
    manager.dispose()


@pytest.fixture
def events(manager: MediaManager) -> EventRecorder:
    return EventRecorder.attach(manager)
