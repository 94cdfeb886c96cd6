from __future__ import annotations

from pathlib import Path

import yaml

from flow_tester.config.validator import ConfigError, validate_harness_config


def load_yaml_config(path: Path) -> dict[str, object]:
    # Raw YAML mapping; validation is a separate step.
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config file is not valid YAML: {path}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("Config root must be a mapping")
    return raw


def load_config(path: Path) -> dict[str, object]:
    return validate_harness_config(load_yaml_config(path))
