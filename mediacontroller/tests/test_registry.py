"""
Unit Tests: SessionRegistry
"""

from dataclasses import dataclass

import pytest

from mediacontroller.core.types import SourceId
from mediacontroller.session.registry import SessionRegistry


@dataclass(eq=False)
class FakeRecord:
    source_id: SourceId


@pytest.fixture
def registry():
    return SessionRegistry()


class TestSessionRegistry:
    """Tests for SessionRegistry."""

    def test_insert_and_get(self, registry):
        record = FakeRecord(SourceId("A"))
        assert registry.insert(record) is True
        assert registry.get(SourceId("A")) is record
        assert SourceId("A") in registry
        assert len(registry) == 1

    def test_first_insert_wins(self, registry):
        """Test a second record for the same id is refused."""
        first = FakeRecord(SourceId("A"))
        second = FakeRecord(SourceId("A"))
        registry.insert(first)

        assert registry.insert(second) is False
        assert registry.get(SourceId("A")) is first

    def test_remove_only_evicts_same_record(self, registry):
        """Test a stale record cannot remove a newer entry for its id."""
        old = FakeRecord(SourceId("A"))
        new = FakeRecord(SourceId("A"))
        registry.insert(old)
        registry.remove(old)
        registry.insert(new)

        assert registry.remove(old) is False
        assert registry.get(SourceId("A")) is new
        assert registry.remove(new) is True
        assert len(registry) == 0

    def test_absent_from(self, registry):
        """Test the removal set is every id missing from the present set."""
        a, b, c = (FakeRecord(SourceId(v)) for v in "ABC")
        for record in (a, b, c):
            registry.insert(record)

        stale = registry.absent_from({SourceId("B"), SourceId("Z")})

        assert stale == [a, c]
        assert len(registry) == 3

    def test_snapshot_is_detached(self, registry):
        registry.insert(FakeRecord(SourceId("A")))
        snapshot = registry.snapshot()
        registry.clear()

        assert SourceId("A") in snapshot
        with pytest.raises(TypeError):
            snapshot[SourceId("B")] = None

    def test_iteration_tolerates_mutation(self, registry):
        for value in "AB":
            registry.insert(FakeRecord(SourceId(value)))

        for source_id in registry:
            registry.remove(registry.get(source_id))

        assert len(registry) == 0
        assert registry.records() == []
