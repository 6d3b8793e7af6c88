"""Settings loading and per-mode configuration."""

from grid_stress.config.schema import (
    BatchStressConfig,
    InspectConfig,
    RandomizeConfig,
    StressConfig,
    resolve_mode_name,
    resolve_seed,
)
from grid_stress.config.settings import (
    DEFAULT_SETTINGS_FILE,
    format_settings,
    log_settings,
    merge_settings,
    read_settings,
    require_keys,
)

__all__ = [
    "BatchStressConfig",
    "DEFAULT_SETTINGS_FILE",
    "InspectConfig",
    "RandomizeConfig",
    "StressConfig",
    "format_settings",
    "log_settings",
    "merge_settings",
    "read_settings",
    "require_keys",
    "resolve_mode_name",
    "resolve_seed",
]
