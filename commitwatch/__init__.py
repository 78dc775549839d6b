"""commitwatch - poll GitHub repositories and report the commits that match your rules."""

from commitwatch.config import NotificationRule, WatchConfig, load_config
from commitwatch.matching import MatchResult, evaluate, matches
from commitwatch.sync import SyncEngine, YamlLedger
from commitwatch.vcs import CommitSource, GitHubCommitSource, create_source

__version__ = "0.1.0"

__all__ = [
    "CommitSource",
    "GitHubCommitSource",
    "MatchResult",
    "NotificationRule",
    "SyncEngine",
    "WatchConfig",
    "YamlLedger",
    "create_source",
    "evaluate",
    "load_config",
    "matches",
]
