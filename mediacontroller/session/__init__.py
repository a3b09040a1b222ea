"""
Session Module: Reconciliation and Event Relay

Provides:
- MediaManager: public facade, provider subscription, reconciliation
- SessionRecord: one source's subscription lifetime and relays
- SessionRegistry: SourceId -> SessionRecord mapping
- EventChannel: multi-subscriber broadcast with failure isolation
"""

from mediacontroller.session.events import EventChannel
from mediacontroller.session.registry import SessionRegistry
from mediacontroller.session.record import SessionRecord
from mediacontroller.session.manager import MediaManager

__all__ = [
    "EventChannel",
    "SessionRegistry",
    "SessionRecord",
    "MediaManager",
]
