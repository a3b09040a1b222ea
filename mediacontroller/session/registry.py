"""
Session Registry: SourceId -> SessionRecord

Holds the manager's view of which sources are live.

Invariants:
    - At most one record per SourceId; insert() checks existence first and
      the first record for an id wins
    - remove() only evicts the entry if it still maps to the given record,
      so a late disposal of an old record cannot drop a newer one
    - absent_from() computes the complete removal set before the caller
      mutates anything

Thread Safety:
    External synchronization required. The MediaManager holds its lock
    around every call.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Iterable, Iterator, Mapping, Optional

from mediacontroller.core.types import SourceId

if TYPE_CHECKING:
    from mediacontroller.session.record import SessionRecord


class SessionRegistry:
    """
    In-memory mapping of live session records.

    Usage:
        registry = SessionRegistry()
        registry.insert(record)
        stale = registry.absent_from({SourceId("Spotify.exe")})
    """

    __slots__ = ("_records",)

    def __init__(self) -> None:
        self._records: dict[SourceId, SessionRecord] = {}

    def insert(self, record: SessionRecord) -> bool:
        """
        Add a record unless its SourceId is already registered.

        Returns False (and leaves the registry untouched) on a duplicate.
        """
        if record.source_id in self._records:
            return False
        self._records[record.source_id] = record
        return True

    def remove(self, record: SessionRecord) -> bool:
        """Evict record if the registry still maps its SourceId to it."""
        if self._records.get(record.source_id) is not record:
            return False
        del self._records[record.source_id]
        return True

    def get(self, source_id: SourceId) -> Optional[SessionRecord]:
        return self._records.get(source_id)

    def absent_from(self, present: Iterable[SourceId]) -> list[SessionRecord]:
        """Records whose SourceId is not in present."""
        keep = set(present)
        return [
            record for source_id, record in self._records.items()
            if source_id not in keep
        ]

    def records(self) -> list[SessionRecord]:
        """Copy of the current records."""
        return list(self._records.values())

    def snapshot(self) -> Mapping[SourceId, SessionRecord]:
        """Read-only copy of the mapping."""
        return MappingProxyType(dict(self._records))

    def clear(self) -> None:
        self._records.clear()

    def __contains__(self, source_id: object) -> bool:
        return source_id in self._records

    def __iter__(self) -> Iterator[SourceId]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)
