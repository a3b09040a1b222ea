"""
Session providers: the platform side of the media controller.

- protocols: structural contracts the manager depends on
- memory: scriptable in-process provider (tests, demo)
- winrt: Windows GSMTC backend (import explicitly; requires the
  ``windows`` extra)
"""

from mediacontroller.providers.protocols import (
    Notification,
    ProviderGateway,
    SessionHandleAdapter,
    SubscriptionToken,
)
from mediacontroller.providers.memory import (
    InMemoryGateway,
    InMemorySessionAdapter,
)

__all__ = [
    "Notification",
    "ProviderGateway",
    "SessionHandleAdapter",
    "SubscriptionToken",
    "InMemoryGateway",
    "InMemorySessionAdapter",
]
