"""Wildcard matching with substring-inclusive semantics.

Every configured pattern is wrapped as ``*<pattern>*`` before compilation, so a
bare word matches anywhere in the subject while ``*`` and ``?`` keep their glob
meaning. Matching is case-sensitive and ``*`` spans newlines, which lets the
same primitive run against file paths, commit messages and multi-line patches.
"""

from __future__ import annotations

import fnmatch
import re
from functools import lru_cache


@lru_cache(maxsize=1024)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a configured pattern into its substring-inclusive regex."""
    # '[' opens a character class for fnmatch; here it is a plain character
    literal_brackets = pattern.replace("[", "[[]")
    return re.compile(fnmatch.translate(f"*{literal_brackets}*"))


def matches(pattern: str, subject: str) -> bool:
    """Return True if ``subject`` contains a run matching ``pattern``."""
    return compile_pattern(pattern).match(subject) is not None


def first_match(patterns: list[str] | None, subject: str) -> str | None:
    """Return the first pattern (in listed order) matching ``subject``."""
    for pattern in patterns or ():
        if matches(pattern, subject):
            return pattern
    return None
