"""Pydantic models produced by rule evaluation."""

from typing import Literal

from pydantic import BaseModel, Field

from commitwatch.vcs.models import ChangedFile, Commit, RepositoryRef


class MatchResult(BaseModel):
    """One notification-worthy commit (or commit/file pair)."""

    repository: RepositoryRef | None = None
    commit: Commit
    matched_at: Literal["message", "file"]
    file: ChangedFile | None = None
    patterns_matched: list[str] = Field(default_factory=list)


class RuleError(BaseModel):
    """A rule-level failure handed to the presentation sink."""

    repository: RepositoryRef
    kind: Literal["repository_unavailable", "unresolvable_boundary", "unexpected"]
    message: str


class RuleOutcome(BaseModel):
    """Summary of one sync pass for one rule."""

    repository: RepositoryRef
    status: Literal["baseline", "unchanged", "updated", "failed"]
    head_sha: str | None = None
    new_commits: int = 0
    matches: list[MatchResult] = Field(default_factory=list)
    error: RuleError | None = None
