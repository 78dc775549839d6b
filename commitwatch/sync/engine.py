"""Incremental per-repository sync: new commits since the last pass, evaluated once."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Iterable

from commitwatch.config.models import NotificationRule
from commitwatch.errors import AuthError, RepositoryUnavailable, UnresolvableBoundary
from commitwatch.interfaces.ledger import SyncLedger
from commitwatch.interfaces.sink import NotificationSink
from commitwatch.matching.evaluator import evaluate
from commitwatch.matching.models import MatchResult, RuleError, RuleOutcome
from commitwatch.vcs.base import CommitSource

logger = logging.getLogger(__name__)


class SyncEngine:
    """Drives commit source, ledger and evaluator for each notification rule.

    A pass for one rule:

    1. Resolve the head commit.
    2. Unknown repository: record the head as baseline and report nothing.
       History before the first observation is never evaluated.
    3. Head equals the recorded sha: nothing new.
    4. Otherwise pull every commit newer than the recorded sha.
    5. Advance the ledger to the newest pulled commit *before* evaluating, so
       each commit is evaluated at most once across passes.
    6. Evaluate every pulled commit and return the matches.

    Any failure before step 5 leaves the ledger untouched, so a retry is safe.
    Rules sharing a repository serialize on a per-repository lock.
    """

    def __init__(
        self,
        source: CommitSource,
        ledger: SyncLedger,
        page_size: int = 5,
        max_concurrency: int = 1,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._source = source
        self._ledger = ledger
        self._page_size = page_size
        self._max_concurrency = max_concurrency
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def sync(self, rule: NotificationRule) -> list[MatchResult]:
        """Run one pass for ``rule``. Errors propagate to the caller."""
        outcome = await self._pass(rule)
        return outcome.matches

    async def run_rule(self, rule: NotificationRule) -> RuleOutcome:
        """Run one pass, turning recoverable failures into a failed outcome.

        AuthError is not recoverable and propagates.
        """
        try:
            return await self._pass(rule)
        except AuthError:
            raise
        except Exception as exc:
            uri = rule.repository.uri
            kind = _error_kind(exc)
            if kind == "unexpected":
                logger.exception("Unexpected failure while syncing %s", uri)
            else:
                logger.warning("Skipping %s this cycle: %s", uri, exc)
            return RuleOutcome(
                repository=rule.repository,
                status="failed",
                error=RuleError(repository=rule.repository, kind=kind, message=str(exc)),
            )

    async def run_cycle(
        self, rules: Iterable[NotificationRule], sink: NotificationSink
    ) -> list[RuleOutcome]:
        """Run a pass for every rule and deliver the results to ``sink``.

        At most ``max_concurrency`` passes run at once; with the default of 1
        rules run one after another in the given order. An AuthError cancels
        the remaining passes and propagates.
        """
        if self._max_concurrency == 1:
            outcomes = []
            for rule in rules:
                outcome = await self.run_rule(rule)
                _deliver(sink, outcome)
                outcomes.append(outcome)
            return outcomes

        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _guarded(rule: NotificationRule) -> RuleOutcome:
            async with semaphore:
                outcome = await self.run_rule(rule)
            _deliver(sink, outcome)
            return outcome

        tasks = [asyncio.create_task(_guarded(rule)) for rule in rules]
        try:
            return list(await asyncio.gather(*tasks))
        except AuthError:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _pass(self, rule: NotificationRule) -> RuleOutcome:
        repo = rule.repository
        uri = repo.uri

        async with self._locks[uri]:
            head = await self._source.get_head(repo)

            if not self._ledger.has(uri):
                await asyncio.to_thread(self._ledger.set, uri, head.sha)
                logger.info("First contact with %s, baseline set to %s", uri, head.sha[:7])
                return RuleOutcome(repository=repo, status="baseline", head_sha=head.sha)

            last_sha = self._ledger.get(uri)
            if head.sha == last_sha:
                logger.debug("No new commits in %s", uri)
                return RuleOutcome(repository=repo, status="unchanged", head_sha=head.sha)

            commits = [
                commit
                async for commit in self._source.list_until(repo, last_sha, self._page_size)
            ]
            if not commits:
                # head moved back onto the boundary between the two calls
                return RuleOutcome(repository=repo, status="unchanged", head_sha=last_sha)

            await asyncio.to_thread(self._ledger.set, uri, commits[0].sha)
            logger.info(
                "Pulled %d new commit(s) for %s, ledger now at %s",
                len(commits),
                uri,
                commits[0].sha[:7],
            )

            matches = [result for commit in commits for result in evaluate(rule, commit)]
            return RuleOutcome(
                repository=repo,
                status="updated",
                head_sha=commits[0].sha,
                new_commits=len(commits),
                matches=matches,
            )


def _error_kind(exc: Exception) -> str:
    if isinstance(exc, RepositoryUnavailable):
        return "repository_unavailable"
    if isinstance(exc, UnresolvableBoundary):
        return "unresolvable_boundary"
    return "unexpected"


def _deliver(sink: NotificationSink, outcome: RuleOutcome) -> None:
    """Hand an outcome to the sink; a failing sink never breaks the cycle."""
    try:
        sink.report_outcome(outcome)
        for result in outcome.matches:
            sink.notify(result)
        if outcome.error is not None:
            sink.report_error(outcome.error)
    except Exception:
        logger.exception("Notification sink failed for %s", outcome.repository.uri)
