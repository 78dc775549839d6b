"""Shared test fixtures for commitwatch."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest

from commitwatch.config.models import FileRule, NotificationRule
from commitwatch.sync.ledger import YamlLedger
from commitwatch.vcs.base import CommitSource
from commitwatch.vcs.models import ChangedFile, Commit, RepositoryRef
from commitwatch.vcs.pagination import paginate_until


class FakeCommitSource(CommitSource):
    """In-memory commit histories (newest first), paged like the GitHub source."""

    def __init__(self) -> None:
        self.histories: dict[str, list[Commit]] = {}
        self.errors: dict[str, Exception] = {}
        self.list_errors: dict[str, Exception] = {}
        self.head_calls = 0
        self.pages_fetched = 0
        self.closed = False

    def push(self, repo: RepositoryRef, *commits: Commit) -> None:
        """Add commits oldest to newest, as if they were pushed in that order."""
        history = self.histories.setdefault(repo.uri, [])
        for commit in commits:
            history.insert(0, commit)

    def rewrite(self, repo: RepositoryRef, *commits: Commit) -> None:
        """Replace the whole history, as a force-push would."""
        self.histories[repo.uri] = []
        self.push(repo, *commits)

    async def get_head(self, repo: RepositoryRef) -> Commit:
        self.head_calls += 1
        if repo.uri in self.errors:
            raise self.errors[repo.uri]
        return self.histories[repo.uri][0]

    async def list_until(
        self, repo: RepositoryRef, boundary_sha: str, page_size: int = 5
    ) -> AsyncIterator[Commit]:
        history = self.histories[repo.uri]

        async def fetch(page: int) -> list[Commit]:
            self.pages_fetched += 1
            if repo.uri in self.list_errors:
                raise self.list_errors[repo.uri]
            return history[page * page_size : (page + 1) * page_size]

        async for commit in paginate_until(fetch, boundary_sha, repo.uri):
            yield commit

    def close(self) -> None:
        self.closed = True


class RecordingSink:
    """NotificationSink that keeps everything it receives."""

    def __init__(self) -> None:
        self.matches = []
        self.errors = []
        self.outcomes = []

    def notify(self, result) -> None:
        self.matches.append(result)

    def report_error(self, error) -> None:
        self.errors.append(error)

    def report_outcome(self, outcome) -> None:
        self.outcomes.append(outcome)


def commit(
    sha: str,
    message: str = "chore: update",
    files: list[ChangedFile] | None = None,
    author: str | None = "octocat",
) -> Commit:
    return Commit(
        sha=sha,
        message=message,
        author_login=author,
        html_url=f"https://github.com/acme/widget-api/commit/{sha}",
        changed_files=files,
    )


@pytest.fixture
def make_commit():
    return commit


@pytest.fixture
def repo_ref():
    return RepositoryRef(owner="acme", name="widget-api")


@pytest.fixture
def other_repo_ref():
    return RepositoryRef(owner="acme", name="gadget-web")


@pytest.fixture
def fake_source():
    return FakeCommitSource()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def ledger(tmp_path):
    return YamlLedger(tmp_path / "history.yaml")


@pytest.fixture
def auth_rule(repo_ref):
    """Watches anything under an auth directory."""
    return NotificationRule(
        repository=repo_ref,
        file_rules=[FileRule(path_pattern="auth")],
    )


@pytest.fixture
def sample_config_yaml():
    return """\
interval: "15m"
github_token: "${TEST_GH_TOKEN}"
page_size: 10
notifications:
  - repository:
      owner: acme
      name: widget-api
    pattern: ["CVE-"]
    files:
      - path: "src/auth"
      - path: "config/"
        pattern: ["timeout"]
log_level: debug
"""
