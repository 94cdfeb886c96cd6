from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol, TextIO, runtime_checkable

from flow_tester.observability.domain.logging import LogMessage

SUPPORTED_LOG_SINKS = frozenset({"none", "stdout", "jsonl"})


@runtime_checkable
class LogSink(Protocol):
    def emit(self, message: LogMessage) -> None:
        raise NotImplementedError("LogSink is a port; use a concrete adapter.")

    def close(self) -> None:
        return None


class StdoutLogSink:
    # Harness events on stdout, one record per line; pytest's capture keeps them per test.
    def emit(self, message: LogMessage) -> None:
        print(encode_log_line(message))

    def close(self) -> None:
        return None


class JsonlLogSink:
    # Append-only record file for a harness run; parents are created on open.
    def __init__(self, path: Path) -> None:
        self._path = path
        path.parent.mkdir(parents=True, exist_ok=True)
        self._stream: TextIO = path.open("a", encoding="utf-8")

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._stream.closed

    def emit(self, message: LogMessage) -> None:
        # Flushed per record so a hanging receive still leaves its trail on disk.
        self._stream.write(encode_log_line(message) + "\n")
        self._stream.flush()

    def close(self) -> None:
        if not self._stream.closed:
            self._stream.close()


def build_log_sink(name: str, *, path: Path | None = None) -> LogSink | None:
    # "none" disables harness logging altogether.
    if name not in SUPPORTED_LOG_SINKS:
        raise ValueError(f"log sink must be one of: {sorted(SUPPORTED_LOG_SINKS)}")
    if name == "none":
        return None
    if name == "stdout":
        return StdoutLogSink()
    if path is None:
        raise ValueError("jsonl log sink requires a path")
    return JsonlLogSink(path)


def encode_log_line(message: LogMessage) -> str:
    # Payloads and group labels may be arbitrary objects; they fall back to repr.
    record = {
        "level": message.level,
        "message": message.message,
        "timestamp": message.timestamp.isoformat().replace("+00:00", "Z"),
        "fields": message.fields,
    }
    return json.dumps(record, separators=(",", ":"), ensure_ascii=False, default=repr)
