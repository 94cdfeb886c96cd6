from .adapters import JsonlLogSink, LogSink, StdoutLogSink, build_log_sink
from .domain import LogMessage
from .observers import HarnessObserver, LoggingObserver, NoOpHarnessObserver

__all__ = [
    "HarnessObserver",
    "JsonlLogSink",
    "LogMessage",
    "LogSink",
    "LoggingObserver",
    "NoOpHarnessObserver",
    "StdoutLogSink",
    "build_log_sink",
]
