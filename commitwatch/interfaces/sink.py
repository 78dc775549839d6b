"""Presentation sink interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from commitwatch.matching.models import MatchResult, RuleError, RuleOutcome


@runtime_checkable
class NotificationSink(Protocol):
    """Receives sync events. Fire-and-forget: return values are ignored."""

    def notify(self, result: MatchResult) -> None: ...

    def report_error(self, error: RuleError) -> None: ...

    def report_outcome(self, outcome: RuleOutcome) -> None: ...
