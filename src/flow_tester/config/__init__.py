from .loader import load_config, load_yaml_config
from .settings import BASE_DIR_ENV, HarnessSettings, build_observer
from .validator import ConfigError, validate_harness_config

__all__ = [
    "BASE_DIR_ENV",
    "ConfigError",
    "HarnessSettings",
    "build_observer",
    "load_config",
    "load_yaml_config",
    "validate_harness_config",
]
