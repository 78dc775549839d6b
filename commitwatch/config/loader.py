"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import WatchConfig

PROJECT_CONFIG = Path("./commitwatch.yaml")


def user_config_path() -> Path:
    return Path.home() / ".commitwatch" / "config.yaml"


def find_config_path(cli_path: str | None = None) -> Path | None:
    """Return the first existing config file in resolution order."""
    candidates = [
        Path(cli_path) if cli_path else None,
        PROJECT_CONFIG,
        user_config_path(),
    ]
    for path in candidates:
        if path and path.exists():
            return path
    return None


def load_config(cli_path: str | None = None) -> WatchConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults."""
    if cli_path and not Path(cli_path).exists():
        raise ValueError(f"Config file not found: {cli_path}")

    path = find_config_path(cli_path)
    if path is None:
        return WatchConfig()

    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
        if raw is None:
            return WatchConfig()
        if not isinstance(raw, dict):
            raise ValueError(f"Invalid config in {path}: expected a mapping at the top level")
        raw = _expand_env_vars(raw)
        return WatchConfig(**raw)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    except ValidationError as e:
        raise ValueError(f"Invalid config in {path}: {e}") from e


def resolve_token(config: WatchConfig) -> str:
    """Pick the GitHub token: explicit config value first, then the env var."""
    if config.github_token:
        return config.github_token
    token = os.environ.get(config.token_env, "")
    if not token:
        raise ValueError(
            f"GitHub token not found. Set github_token in the config "
            f"or the {config.token_env} environment variable."
        )
    return token


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `commitwatch config init`
DEFAULT_CONFIG_TEMPLATE = """\
# commitwatch.yaml

# Poll interval: "<n>s", "<n>m" or "<n>h". Leave unset to check once and exit.
interval: "15m"

# GitHub access. ${VAR} references are expanded from the environment.
# github_token: "${GITHUB_TOKEN}"
token_env: "GITHUB_TOKEN"

# Commits fetched per page while looking for the last seen commit
page_size: 5
# max_pages: 20                 # give up on a boundary after this many pages
max_concurrency: 1              # repositories checked in parallel

# Where the last seen commit of every repository is recorded
ledger_path: "~/.commitwatch/history.yaml"

# What to watch. Patterns match anywhere in the subject; '*' and '?' are wildcards.
notifications: []
#  - repository:
#      owner: "octocat"
#      name: "hello-world"
#    pattern: ["CVE-", "security"]   # commit message (and patch) patterns
#    files:
#      - path: "src/auth"            # any change under src/auth
#      - path: "config/"
#        pattern: ["timeout"]        # only when the diff mentions "timeout"

# Pop up a system notification for every matching commit
desktop_notifications: false

# Logging
log_level: "warn"              # debug | info | warn | error
"""
