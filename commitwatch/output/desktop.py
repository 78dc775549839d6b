"""Desktop notifications for matching commits."""

from __future__ import annotations

import logging

from plyer import notification

from commitwatch.matching.models import MatchResult, RuleError, RuleOutcome

logger = logging.getLogger(__name__)


class DesktopSink:
    """NotificationSink that pops up a system notification per match.

    Only matches are shown; outcomes and errors stay on the console. If the
    platform has no notification backend the first failure is logged and the
    sink turns itself off for the rest of the session.
    """

    def __init__(self, app_name: str = "commitwatch", timeout: int = 10) -> None:
        self._app_name = app_name
        self._timeout = timeout
        self.enabled = True

    def notify(self, result: MatchResult) -> None:
        if not self.enabled:
            return
        commit = result.commit
        uri = result.repository.uri if result.repository is not None else "a watched repository"
        lines = [f"Author: {commit.author_login or 'unknown'}", f"SHA: {commit.sha}"]
        if result.file is not None:
            lines.append(f"File: {result.file.filename}")
        try:
            notification.notify(
                title=f"New matching commit in {uri}",
                message="\n".join(lines),
                app_name=self._app_name,
                timeout=self._timeout,
            )
        except Exception as e:
            self.enabled = False
            logger.warning("Desktop notifications disabled: %s", e)

    def report_error(self, error: RuleError) -> None:
        pass

    def report_outcome(self, outcome: RuleOutcome) -> None:
        pass


class FanoutSink:
    """Delivers every event to several sinks; one failing sink does not starve the rest."""

    def __init__(self, *sinks) -> None:
        self.sinks = list(sinks)

    def notify(self, result: MatchResult) -> None:
        self._each("notify", result)

    def report_error(self, error: RuleError) -> None:
        self._each("report_error", error)

    def report_outcome(self, outcome: RuleOutcome) -> None:
        self._each("report_outcome", outcome)

    def _each(self, method: str, event: object) -> None:
        for sink in self.sinks:
            try:
                getattr(sink, method)(event)
            except Exception:
                logger.exception("%s.%s failed", type(sink).__name__, method)
