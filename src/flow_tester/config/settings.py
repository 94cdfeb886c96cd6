from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from flow_tester.observability.adapters.logging import build_log_sink
from flow_tester.observability.observers.harness import HarnessObserver, LoggingObserver, NoOpHarnessObserver

BASE_DIR_ENV = "FLOW_TESTER_BASEDIR"


@dataclass(frozen=True, slots=True)
class HarnessSettings:
    # Resolved harness settings; paths are absolute after from_config.
    name: str = "wrapper/Wrapped"
    base_dir: Path = Path(".")
    log_sink: str = "none"
    log_level: str = "info"
    log_path: Path | None = None

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, object],
        *,
        env: Mapping[str, str] | None = None,
        cwd: Path | None = None,
    ) -> HarnessSettings:
        # Expects a validated config (validate_harness_config output).
        harness = config["harness"]
        log = config["observability"]["log"]  # type: ignore[index]
        assert isinstance(harness, dict) and isinstance(log, dict)
        environ = os.environ if env is None else env
        # Base dir precedence: explicit config, then environment, then cwd.
        raw_base = harness.get("base_dir") or environ.get(BASE_DIR_ENV)
        base_dir = Path(raw_base) if raw_base else (cwd or Path.cwd())
        if not base_dir.is_absolute():
            base_dir = (cwd or Path.cwd()) / base_dir
        log_path = None
        if log.get("path"):
            log_path = Path(log["path"])
            if not log_path.is_absolute():
                log_path = base_dir / log_path
        return cls(
            name=harness["name"],
            base_dir=base_dir,
            log_sink=log["sink"],
            log_level=log["level"],
            log_path=log_path,
        )


def build_observer(settings: HarnessSettings) -> HarnessObserver:
    sink = build_log_sink(settings.log_sink, path=settings.log_path)
    if sink is None:
        return NoOpHarnessObserver()
    return LoggingObserver(sink, level=settings.log_level, harness=settings.name)
