"""GitHub commit source using PyGithub."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncIterator, Iterator
from contextlib import contextmanager

from github import Auth, BadCredentialsException, Github, GithubException, UnknownObjectException
from github.Commit import Commit as GithubCommit
from github.Repository import Repository

from commitwatch.errors import AuthError, RepositoryUnavailable
from commitwatch.vcs.base import CommitSource
from commitwatch.vcs.models import ChangedFile, Commit, RepositoryRef
from commitwatch.vcs.pagination import paginate_until

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 5


class GitHubCommitSource(CommitSource):
    """GitHub implementation of CommitSource using PyGithub.

    PyGithub is synchronous, so all blocking calls are wrapped
    with asyncio.to_thread() to avoid blocking the event loop.
    """

    def __init__(
        self,
        token: str | None = None,
        max_pages: int | None = None,
        timeout: int = 15,
    ) -> None:
        self._token = token or os.environ.get("GITHUB_TOKEN", "")
        if not self._token:
            raise ValueError(
                "GitHub token required. Pass token= or set GITHUB_TOKEN env var."
            )
        self._max_pages = max_pages
        self._timeout = timeout
        # PyGithub fixes the page size per client
        self._clients: dict[int, Github] = {}
        self._repos: dict[tuple[int, str], Repository] = {}

    def _client(self, per_page: int) -> Github:
        if per_page not in self._clients:
            self._clients[per_page] = Github(
                auth=Auth.Token(self._token), per_page=per_page, timeout=self._timeout
            )
        return self._clients[per_page]

    def _get_repo(self, repo: RepositoryRef, per_page: int = DEFAULT_PAGE_SIZE) -> Repository:
        """Get (and cache) a PyGithub Repository for an 'owner/name' ref."""
        key = (per_page, repo.uri)
        if key not in self._repos:
            self._repos[key] = self._client(per_page).get_repo(repo.uri)
        return self._repos[key]

    def close(self) -> None:
        """Close every PyGithub client and drop the cached repositories."""
        for client in self._clients.values():
            client.close()
        self._clients.clear()
        self._repos.clear()

    async def get_head(self, repo: RepositoryRef) -> Commit:
        """Return the newest commit on the default branch (without file detail)."""

        def _sync() -> Commit:
            with _translate_errors(repo.uri):
                page = self._get_repo(repo).get_commits().get_page(0)
                if not page:
                    raise RepositoryUnavailable(repo.uri, "repository has no commits")
                return _to_commit(page[0])

        return await asyncio.to_thread(_sync)

    async def list_until(
        self, repo: RepositoryRef, boundary_sha: str, page_size: int = DEFAULT_PAGE_SIZE
    ) -> AsyncIterator[Commit]:
        """Stream detailed commits newer than ``boundary_sha``, newest first."""

        def _fetch_page(page: int) -> list[GithubCommit]:
            with _translate_errors(repo.uri):
                return self._get_repo(repo, page_size).get_commits().get_page(page)

        async def fetch(page: int) -> list[GithubCommit]:
            return await asyncio.to_thread(_fetch_page, page)

        async for summary in paginate_until(
            fetch, boundary_sha, repo.uri, max_pages=self._max_pages
        ):
            yield await asyncio.to_thread(self._fetch_detail, repo, page_size, summary)

    def _fetch_detail(
        self, repo: RepositoryRef, page_size: int, summary: GithubCommit
    ) -> Commit:
        """Fetch one commit with its files, degrading to the summary on failure."""
        try:
            detailed = self._get_repo(repo, page_size).get_commit(summary.sha)
            files = [
                ChangedFile(
                    filename=f.filename,
                    additions=f.additions or 0,
                    deletions=f.deletions or 0,
                    patch=f.patch,
                )
                for f in detailed.files
            ]
            return _to_commit(detailed, files)
        except BadCredentialsException as e:
            raise AuthError() from e
        except (GithubException, OSError) as e:
            if isinstance(e, GithubException) and e.status == 401:
                raise AuthError() from e
            logger.warning(
                "Detail fetch degraded for %s@%s, continuing without file detail: %s",
                repo.uri,
                summary.sha[:7],
                e,
            )
            return _to_commit(summary)


@contextmanager
def _translate_errors(uri: str) -> Iterator[None]:
    """Map PyGithub and network failures onto the watch error taxonomy."""
    try:
        yield
    except BadCredentialsException as e:
        raise AuthError() from e
    except UnknownObjectException as e:
        raise RepositoryUnavailable(uri, "not found") from e
    except GithubException as e:
        if e.status == 401:
            raise AuthError() from e
        raise RepositoryUnavailable(uri, _describe(e)) from e
    except OSError as e:
        # requests' connection and timeout errors are OSErrors
        raise RepositoryUnavailable(uri, str(e) or type(e).__name__) from e


def _describe(e: GithubException) -> str:
    message = e.data.get("message") if isinstance(e.data, dict) else None
    return f"HTTP {e.status}: {message}" if message else f"HTTP {e.status}"


def _to_commit(gh_commit: GithubCommit, files: list[ChangedFile] | None = None) -> Commit:
    """Convert a PyGithub Commit to our Commit model."""
    author = gh_commit.author
    return Commit(
        sha=gh_commit.sha,
        message=gh_commit.commit.message or "",
        author_login=author.login if author is not None else None,
        html_url=gh_commit.html_url or "",
        changed_files=files,
    )
