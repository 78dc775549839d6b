"""SyncLedger implementation backed by a YAML file."""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from pathlib import Path

import yaml

from commitwatch.errors import LedgerEntryNotFound

logger = logging.getLogger(__name__)


class YamlLedger:
    """Last-seen commit per repository, persisted as YAML.

    The file holds a single ``repositories`` mapping of "owner/name" to sha.
    Every ``set`` rewrites the file atomically (temp file, fsync, rename), so a
    crash never leaves a half-written ledger behind.
    """

    def __init__(self, path: str | Path = "~/.commitwatch/history.yaml") -> None:
        self.path = Path(path).expanduser()
        # set/forget may run in worker threads
        self._lock = threading.Lock()
        self._repositories: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        if not self.path.is_file():
            return {}
        try:
            raw = yaml.safe_load(self.path.read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in ledger {self.path}: {e}") from e
        repositories = raw.get("repositories") if isinstance(raw, dict) else None
        if not isinstance(repositories, dict):
            raise ValueError(f"Invalid ledger {self.path}: missing 'repositories' mapping")
        return {str(k): str(v) for k, v in repositories.items()}

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".history-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                yaml.safe_dump(
                    {"repositories": self._repositories}, f, default_flow_style=False
                )
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    # -- SyncLedger protocol ---------------------------------------------------

    def has(self, uri: str) -> bool:
        """Whether there is a record for the repository."""
        return uri in self._repositories

    def get(self, uri: str) -> str:
        """Last synced sha for the repository."""
        try:
            return self._repositories[uri]
        except KeyError:
            raise LedgerEntryNotFound(uri) from None

    def set(self, uri: str, sha: str) -> None:
        """Record ``sha`` as the last synced commit and persist immediately."""
        with self._lock:
            previous = self._repositories.get(uri)
            self._repositories[uri] = sha
            try:
                self._save()
            except BaseException:
                # keep memory consistent with disk
                if previous is None:
                    del self._repositories[uri]
                else:
                    self._repositories[uri] = previous
                raise

    # -- extras ----------------------------------------------------------------

    def forget(self, uri: str) -> bool:
        """Drop the record so the next pass re-baselines. Returns False if absent."""
        with self._lock:
            if uri not in self._repositories:
                return False
            sha = self._repositories.pop(uri)
            try:
                self._save()
            except BaseException:
                self._repositories[uri] = sha
                raise
            logger.info("Forgot %s (was %s)", uri, sha)
            return True

    def entries(self) -> dict[str, str]:
        """Copy of all records."""
        return dict(self._repositories)
