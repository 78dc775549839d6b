"""Decides whether a commit is of interest to a notification rule.

Two tiers, checked in a fixed order:

1. Message tier: the first message pattern found in the commit message makes
   the whole commit interesting. File-level checks are skipped for it.
2. File tier: every changed file is tested against the rule's file rules in
   listed order. The first rule whose path matches *and* is satisfied decides
   the file. A path-only rule is satisfied by the path alone; a rule with
   content patterns additionally needs at least one of its patterns (or the
   rule's message patterns) in the file's patch.
"""

from __future__ import annotations

from commitwatch.config.models import FileRule, NotificationRule
from commitwatch.matching.models import MatchResult
from commitwatch.matching.patterns import first_match, matches
from commitwatch.vcs.models import ChangedFile, Commit


def evaluate(rule: NotificationRule, commit: Commit) -> list[MatchResult]:
    """Return the match results of ``commit`` against ``rule`` (possibly none)."""
    hit = first_match(rule.message_patterns, commit.message)
    if hit is not None:
        return [
            MatchResult(
                repository=rule.repository,
                commit=commit,
                matched_at="message",
                patterns_matched=[hit],
            )
        ]

    if commit.changed_files is None:
        return []

    results: list[MatchResult] = []
    for changed in commit.changed_files:
        patterns = _match_file(rule, changed)
        if patterns is not None:
            results.append(
                MatchResult(
                    repository=rule.repository,
                    commit=commit,
                    matched_at="file",
                    file=changed,
                    patterns_matched=patterns,
                )
            )
    return results


def _match_file(rule: NotificationRule, changed: ChangedFile) -> list[str] | None:
    """Patterns that made ``changed`` interesting, or None if nothing did.

    An empty list means a path-only rule matched.
    """
    for file_rule in rule.file_rules:
        if not matches(file_rule.path_pattern, changed.filename):
            continue
        if file_rule.content_patterns is None:
            return []
        if changed.patch is None:
            continue
        hits = [
            p for p in _content_candidates(file_rule, rule) if matches(p, changed.patch)
        ]
        if hits:
            return hits
    return None


def _content_candidates(file_rule: FileRule, rule: NotificationRule) -> list[str]:
    """File-local patterns first, then the rule's message patterns, without repeats."""
    combined = [*(file_rule.content_patterns or ()), *(rule.message_patterns or ())]
    return list(dict.fromkeys(combined))
