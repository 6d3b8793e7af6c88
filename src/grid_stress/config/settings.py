"""Settings file loading, command-line overrides and typed accessors."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
import logging
import math
from pathlib import Path
from typing import Any, Optional, Union

from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException
import yaml

from grid_stress.errors import ConfigError, MissingConfigurationError
from grid_stress.io_utils import read_text, read_yaml_payload

DEFAULT_SETTINGS_FILE = "settings.config"
YAML_SUFFIXES = (".yaml", ".yml")

_TRUE_WORDS = {"true", "yes", "on"}
_FALSE_WORDS = {"false", "no", "off", ""}
_MISSING = object()


def parse_settings(text: str) -> dict[str, str]:
    """Parse ``key=value`` lines; the first ``=`` splits key from value."""
    settings: dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key:
            settings[key] = value.strip()
    return settings


def read_settings(path: Union[str, Path]) -> dict[str, Any]:
    path = Path(path)
    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            payload = read_yaml_payload(
                path,
                error_message=f"Settings file is not valid YAML: {path}",
                error_cls=ConfigError,
            )
            if payload is None:
                return {}
            if not isinstance(payload, Mapping):
                raise ConfigError(f"Settings file must hold a mapping: {path}")
            return {str(key): value for key, value in payload.items()}
        return parse_settings(read_text(path))
    except OSError as exc:
        raise ConfigError(
            f"Unable to read config file: {path}",
            context={"path": str(path), "reason": str(exc)},
        ) from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(
            f"Config file is not valid UTF-8 text: {path}",
            context={"path": str(path), "reason": exc.reason},
        ) from exc


def merge_settings(
    settings: Mapping[str, Any],
    overrides: Optional[Sequence[str]] = None,
) -> dict[str, Any]:
    """Apply ``KEY=VALUE`` overrides on top of file settings.

    Override values are typed by OmegaConf's dotlist parser (``0.25`` reads as
    a float); neither file values nor overrides are interpolated, so ``${...}``
    stays literal text.
    """
    for item in overrides or ():
        if "=" not in item:
            raise ConfigError(f"Override must look like KEY=VALUE, got {item!r}.")
    try:
        parsed = OmegaConf.to_container(
            OmegaConf.from_dotlist(list(overrides or ())), resolve=False
        )
    except OmegaConfBaseException as exc:
        raise ConfigError(f"Invalid settings override: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ConfigError("Settings overrides must form a mapping.")
    merged = {str(key): value for key, value in settings.items()}
    merged.update((str(key), value) for key, value in parsed.items())
    return merged


def format_settings(settings: Mapping[str, Any]) -> str:
    return yaml.safe_dump(
        dict(settings),
        allow_unicode=False,
        default_flow_style=False,
        sort_keys=True,
    )


def log_settings(settings: Mapping[str, Any], logger: logging.Logger) -> None:
    for key in sorted(settings):
        logger.info("%s = %s", key, settings[key])


def missing_keys(settings: Mapping[str, Any], keys: Iterable[str]) -> list[str]:
    return [key for key in keys if key not in settings or settings[key] is None]


def require_keys(
    settings: Mapping[str, Any],
    keys: Sequence[str],
    *,
    mode: Optional[str] = None,
) -> None:
    """Raise one error naming every absent key."""
    missing = missing_keys(settings, keys)
    if missing:
        raise MissingConfigurationError(missing, required_keys=keys, mode=mode)


def _lookup(settings: Mapping[str, Any], key: str, default: Any) -> Any:
    if key in settings and settings[key] is not None:
        return settings[key]
    if default is _MISSING:
        raise MissingConfigurationError([key])
    return default


def get_str(settings: Mapping[str, Any], key: str, default: Any = _MISSING) -> str:
    value = _lookup(settings, key, default)
    return value if isinstance(value, str) else str(value)


def get_float(settings: Mapping[str, Any], key: str, default: Any = _MISSING) -> float:
    value = _lookup(settings, key, default)
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be a decimal number, got {value!r}.")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be a decimal number, got {value!r}.") from exc
    if not math.isfinite(number):
        raise ConfigError(f"{key} must be finite, got {value!r}.")
    return number


def get_int(settings: Mapping[str, Any], key: str, default: Any = _MISSING) -> int:
    """Decimal parse truncated toward zero (``"2.9"`` reads as 2)."""
    value = _lookup(settings, key, default)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return math.trunc(get_float({key: value}, key))


def get_bool(settings: Mapping[str, Any], key: str, default: Any = _MISSING) -> bool:
    value = _lookup(settings, key, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return get_float({key: value}, key) != 0.0


__all__ = [
    "DEFAULT_SETTINGS_FILE",
    "format_settings",
    "get_bool",
    "get_float",
    "get_int",
    "get_str",
    "log_settings",
    "merge_settings",
    "missing_keys",
    "parse_settings",
    "read_settings",
    "require_keys",
]
