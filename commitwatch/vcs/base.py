"""Abstract commit source interface for commitwatch."""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from commitwatch.vcs.models import Commit, RepositoryRef


class CommitSource(ABC):
    """Abstract base class for commit history providers.

    Supplies the head commit of a repository and a lazy, newest-first stream of
    the commits added since a known boundary.
    """

    @abstractmethod
    async def get_head(self, repo: RepositoryRef) -> Commit:
        """Return the most recent commit on the default branch.

        Raises:
            AuthError: credentials were rejected.
            RepositoryUnavailable: the repository is missing or unreachable.
        """
        ...

    @abstractmethod
    def list_until(
        self, repo: RepositoryRef, boundary_sha: str, page_size: int = 5
    ) -> AsyncIterator[Commit]:
        """Stream commits newest first, stopping before ``boundary_sha``.

        The stream is finite and can only be consumed once. Each commit should
        carry its changed files (with patches when available).

        Raises:
            UnresolvableBoundary: history ran out before the boundary was met.
        """
        ...

    def close(self) -> None:
        """Release any network resources held by the source. Safe to call twice."""
