"""Interfaces for the collaborators around the sync engine."""

from commitwatch.interfaces.ledger import SyncLedger
from commitwatch.interfaces.sink import NotificationSink

__all__ = [
    "NotificationSink",
    "SyncLedger",
]
