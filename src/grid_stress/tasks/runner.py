"""Mode resolution and execution helpers."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from grid_stress.config.schema import resolve_mode_name
from grid_stress.errors import GridStressError
from grid_stress.logging_utils import log_exception
from grid_stress.registry import ModeRegistry, mode_names, resolve_mode
from grid_stress.tasks.base import TaskContext


def _load_builtin_modes() -> None:
    # Import for side effects: register built-in modes.
    import grid_stress.tasks.inspection  # noqa: F401
    import grid_stress.tasks.randomize  # noqa: F401
    import grid_stress.tasks.stress  # noqa: F401


def available_modes(*, registry: Optional[ModeRegistry] = None) -> list[str]:
    if registry is None:
        _load_builtin_modes()
    return mode_names(registry=registry)


def run_mode(
    name: str,
    settings: Mapping[str, Any],
    *,
    context: Optional[TaskContext] = None,
    registry: Optional[ModeRegistry] = None,
    show_traceback: bool = False,
) -> Any:
    """Run one mode; domain errors are logged and yield ``None``.

    Only the current operation is aborted by a configuration, format, I/O or
    parameter error, so callers keep going after a ``None`` result.
    """
    context = context or TaskContext()
    task_logger = context.logger
    if registry is None:
        _load_builtin_modes()
    task_logger.info("%s started.", name)
    try:
        task = resolve_mode(name, registry=registry)
        result = task(settings, context=context)
    except GridStressError as exc:
        log_exception(task_logger, exc, show_traceback=show_traceback)
        result = None
    task_logger.info("%s complete.", name)
    return result


def run_from_settings(
    settings: Mapping[str, Any],
    *,
    context: Optional[TaskContext] = None,
    registry: Optional[ModeRegistry] = None,
    show_traceback: bool = False,
) -> Any:
    """Dispatch on ``ProgramMethod`` (``Stress`` when absent)."""
    context = context or TaskContext()
    try:
        name = resolve_mode_name(settings)
    except GridStressError as exc:
        log_exception(context.logger, exc, show_traceback=show_traceback)
        return None
    return run_mode(
        name,
        settings,
        context=context,
        registry=registry,
        show_traceback=show_traceback,
    )


__all__ = ["available_modes", "run_from_settings", "run_mode"]
