from .loader import DEFAULT_CONFIG_TEMPLATE, find_config_path, load_config, resolve_token
from .models import FileRule, NotificationRule, WatchConfig, parse_interval

__all__ = [
    "DEFAULT_CONFIG_TEMPLATE",
    "FileRule",
    "NotificationRule",
    "WatchConfig",
    "find_config_path",
    "load_config",
    "parse_interval",
    "resolve_token",
]
