"""Pattern matching and commit interest evaluation."""

from commitwatch.matching.evaluator import evaluate
from commitwatch.matching.models import MatchResult, RuleError, RuleOutcome
from commitwatch.matching.patterns import first_match, matches

__all__ = [
    "MatchResult",
    "RuleError",
    "RuleOutcome",
    "evaluate",
    "first_match",
    "matches",
]
