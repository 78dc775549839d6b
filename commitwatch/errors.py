"""Error taxonomy for the watch session."""

from __future__ import annotations


class WatchError(Exception):
    """Base class for every error raised by commitwatch."""


class AuthError(WatchError):
    """Credentials were rejected. Fatal to the whole watch session."""

    def __init__(self, message: str = "GitHub rejected the configured token") -> None:
        super().__init__(message)


class RepositoryUnavailable(WatchError):
    """One repository could not be reached (not found, network, rate limit)."""

    def __init__(self, uri: str, reason: str) -> None:
        self.uri = uri
        self.reason = reason
        super().__init__(f"Repository {uri} is unavailable: {reason}")


class UnresolvableBoundary(WatchError):
    """The last synced commit is no longer reachable in the repository history.

    Usually caused by a force-push or rebase. The ledger is left untouched, so
    every later pass hits the same condition until the entry is forgotten.
    """

    def __init__(self, uri: str, boundary_sha: str) -> None:
        self.uri = uri
        self.boundary_sha = boundary_sha
        super().__init__(
            f"Commit {boundary_sha} is no longer reachable in {uri} "
            "(history rewritten?). Run `commitwatch ledger forget "
            f"{uri}` to re-baseline."
        )


class LedgerEntryNotFound(WatchError):
    """The ledger has no record for a repository."""

    def __init__(self, uri: str) -> None:
        self.uri = uri
        super().__init__(f"No record for the repository {uri}")
