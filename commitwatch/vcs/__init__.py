"""Commit sources for commitwatch."""

from __future__ import annotations

from typing import TYPE_CHECKING

from commitwatch.vcs.base import CommitSource
from commitwatch.vcs.github import GitHubCommitSource
from commitwatch.vcs.models import ChangedFile, Commit, RepositoryRef
from commitwatch.vcs.pagination import paginate_until

if TYPE_CHECKING:
    from commitwatch.config.models import WatchConfig


def create_source(config: WatchConfig) -> CommitSource:
    """Create the GitHub commit source from config.

    Raises ValueError when no token can be resolved.
    """
    from commitwatch.config.loader import resolve_token

    return GitHubCommitSource(token=resolve_token(config), max_pages=config.max_pages)


__all__ = [
    "ChangedFile",
    "Commit",
    "CommitSource",
    "GitHubCommitSource",
    "RepositoryRef",
    "create_source",
    "paginate_until",
]
