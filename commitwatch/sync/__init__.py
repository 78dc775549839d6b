"""Incremental sync of watched repositories."""

from commitwatch.sync.engine import SyncEngine
from commitwatch.sync.ledger import YamlLedger

__all__ = [
    "SyncEngine",
    "YamlLedger",
]
