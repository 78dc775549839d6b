import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from commitwatch.vcs.models import RepositoryRef

_INTERVAL_RE = re.compile(r"^\s*(\d+)\s*([smh])\s*$")
_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600}


def parse_interval(value: str) -> int:
    """Convert "30s", "15m" or "2h" to seconds."""
    m = _INTERVAL_RE.match(value)
    if not m:
        raise ValueError(
            f"Invalid interval {value!r}. Use a number followed by 's', 'm' or 'h' (e.g. '15m')."
        )
    seconds = int(m.group(1)) * _UNIT_SECONDS[m.group(2)]
    if seconds <= 0:
        raise ValueError(f"Interval must be positive, got {value!r}")
    return seconds


class FileRule(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path_pattern: str = Field(alias="path")
    content_patterns: list[str] | None = Field(default=None, alias="pattern")

    @field_validator("content_patterns")
    @classmethod
    def normalize_patterns(cls, v: list[str] | None) -> list[str] | None:
        # an empty list means "no patterns"
        return v or None


class NotificationRule(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    repository: RepositoryRef
    file_rules: list[FileRule] = Field(default_factory=list, alias="files")
    message_patterns: list[str] | None = Field(default=None, alias="pattern")

    @field_validator("message_patterns")
    @classmethod
    def normalize_patterns(cls, v: list[str] | None) -> list[str] | None:
        return v or None


class WatchConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    interval: str | None = None
    github_token: str | None = None
    token_env: str = "GITHUB_TOKEN"
    page_size: int = Field(default=5, gt=0, le=100)
    max_pages: int | None = Field(default=None, gt=0)
    max_concurrency: int = Field(default=1, gt=0)
    ledger_path: str = "~/.commitwatch/history.yaml"
    notifications: list[NotificationRule] = Field(default_factory=list)
    desktop_notifications: bool = False
    log_level: Literal["debug", "info", "warn", "error"] = "warn"

    @field_validator("interval")
    @classmethod
    def validate_interval(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        parse_interval(v)
        return v.strip()

    @property
    def interval_seconds(self) -> int | None:
        """Seconds to sleep between cycles, or None for a one-shot run."""
        if self.interval is None:
            return None
        return parse_interval(self.interval)
