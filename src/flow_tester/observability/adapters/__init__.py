from .logging import SUPPORTED_LOG_SINKS, JsonlLogSink, LogSink, StdoutLogSink, build_log_sink, encode_log_line

__all__ = [
    "SUPPORTED_LOG_SINKS",
    "JsonlLogSink",
    "LogSink",
    "StdoutLogSink",
    "build_log_sink",
    "encode_log_line",
]
