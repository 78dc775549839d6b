from .console import ConsoleSink, format_duration
from .desktop import DesktopSink, FanoutSink

__all__ = ["ConsoleSink", "DesktopSink", "FanoutSink", "format_duration"]
