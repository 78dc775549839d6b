"""Sync ledger interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SyncLedger(Protocol):
    """Durable mapping from repository uri to the last synced commit sha."""

    def has(self, uri: str) -> bool: ...

    def get(self, uri: str) -> str:
        """Return the recorded sha. Raises LedgerEntryNotFound when absent."""
        ...

    def set(self, uri: str, sha: str) -> None: ...
