from __future__ import annotations

from flow_tester.observability.adapters.logging import SUPPORTED_LOG_SINKS
from flow_tester.observability.domain.logging import LOG_LEVELS


class ConfigError(ValueError):
    # Raised for invalid harness config (fail fast).
    pass


_SUPPORTED_ROOT_KEYS = {"harness", "observability"}
_SUPPORTED_HARNESS_KEYS = {"name", "base_dir"}
_SUPPORTED_LOG_KEYS = {"sink", "level", "path"}


def validate_harness_config(raw: object) -> dict[str, object]:
    # Validate the harness config structure and fill defaults for missing sections.
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError("Config root must be a mapping")
    unknown = sorted(set(raw) - _SUPPORTED_ROOT_KEYS)
    if unknown:
        raise ConfigError(f"Unsupported config sections: {unknown}")

    harness = _optional_mapping(raw, "harness")
    _reject_unknown_keys(harness, _SUPPORTED_HARNESS_KEYS, "harness")
    name = harness.get("name", "wrapper/Wrapped")
    if not isinstance(name, str) or not name:
        raise ConfigError("harness.name must be a non-empty string")
    base_dir = harness.get("base_dir")
    if base_dir is not None and (not isinstance(base_dir, str) or not base_dir):
        raise ConfigError("harness.base_dir must be a non-empty string when provided")

    observability = _optional_mapping(raw, "observability")
    _reject_unknown_keys(observability, {"log"}, "observability")
    log = _optional_mapping(observability, "log", prefix="observability.")
    _reject_unknown_keys(log, _SUPPORTED_LOG_KEYS, "observability.log")
    sink = log.get("sink", "none")
    if sink not in SUPPORTED_LOG_SINKS:
        raise ConfigError(f"observability.log.sink must be one of: {sorted(SUPPORTED_LOG_SINKS)}")
    level = log.get("level", "info")
    if level not in LOG_LEVELS:
        raise ConfigError(f"observability.log.level must be one of: {list(LOG_LEVELS)}")
    path = log.get("path")
    if path is not None and (not isinstance(path, str) or not path):
        raise ConfigError("observability.log.path must be a non-empty string when provided")
    if sink == "jsonl" and path is None:
        raise ConfigError("observability.log.path is required for the jsonl sink")

    # Normalize missing sections to keep downstream code simple.
    return {
        "harness": {"name": name, "base_dir": base_dir},
        "observability": {"log": {"sink": sink, "level": level, "path": path}},
    }


def _optional_mapping(root: dict[str, object], key: str, *, prefix: str = "") -> dict[str, object]:
    value = root.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{prefix}{key} must be a mapping when provided")
    return value


def _reject_unknown_keys(section: dict[str, object], allowed: set[str], label: str) -> None:
    unknown = sorted(set(section) - allowed)
    if unknown:
        raise ConfigError(f"{label} has unsupported keys: {unknown}")
