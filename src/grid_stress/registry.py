"""Registry of run modes selectable through ``ProgramMethod``."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Any, Optional

from grid_stress.errors import ConfigError


def _mode_name(name: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise TypeError("Mode name must be a non-empty string.")
    return name.strip()


def _format_options(options: Iterable[str]) -> str:
    values = sorted(options)
    return ", ".join(values) if values else "<none>"


class ModeRegistry:
    """Mode name -> task callable."""

    def __init__(self) -> None:
        self._modes: dict[str, Callable[..., Any]] = {}

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip() in self._modes

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._modes))

    def register(
        self,
        name: str,
        task: Callable[..., Any],
        *,
        overwrite: bool = False,
    ) -> Callable[..., Any]:
        name = _mode_name(name)
        if name in self._modes and not overwrite:
            raise ValueError(
                f"Mode {name!r} is already registered; use overwrite=True to replace."
            )
        self._modes[name] = task
        return task

    def names(self) -> list[str]:
        return sorted(self._modes)

    def resolve(self, name: str) -> Callable[..., Any]:
        key = _mode_name(name)
        try:
            return self._modes[key]
        except KeyError as exc:
            raise ConfigError(
                f"ProgramMethod {key!r} is not a known mode. "
                f"Available: {_format_options(self._modes)}.",
                context={"mode": key},
            ) from exc


_DEFAULT_REGISTRY = ModeRegistry()


def register_mode(
    name: str,
    task: Callable[..., Any],
    *,
    overwrite: bool = False,
) -> Callable[..., Any]:
    return _DEFAULT_REGISTRY.register(name, task, overwrite=overwrite)


def mode_names(*, registry: Optional[ModeRegistry] = None) -> list[str]:
    return (registry if registry is not None else _DEFAULT_REGISTRY).names()


def resolve_mode(name: str, *, registry: Optional[ModeRegistry] = None) -> Callable[..., Any]:
    return (registry if registry is not None else _DEFAULT_REGISTRY).resolve(name)


__all__ = [
    "ModeRegistry",
    "mode_names",
    "register_mode",
    "resolve_mode",
]
