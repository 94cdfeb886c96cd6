from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

# Ordered severities; sinks and observers compare by rank.
LOG_LEVELS: tuple[str, ...] = ("debug", "info", "warning", "error")


def level_rank(level: str) -> int:
    if level not in LOG_LEVELS:
        raise ValueError(f"log level must be one of: {list(LOG_LEVELS)}")
    return LOG_LEVELS.index(level)


@dataclass(frozen=True, slots=True)
class LogMessage:
    # Structured log payload for harness observability.
    level: str
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    fields: dict[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.level or not self.message:
            raise ValueError("LogMessage requires non-empty level/message")
        level_rank(self.level)
