"""Logging configuration and error reporting helpers."""

from __future__ import annotations

from collections.abc import Callable
import logging
from pathlib import Path
import sys
from typing import Any, Optional, TypeVar, Union

from grid_stress.errors import GridStressError

DEFAULT_LOGGER_NAME = "grid_stress"
DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DEFAULT_LOG_FILE = "runtime.log"

_T = TypeVar("_T")


def _add_file_handler(
    logger: logging.Logger,
    log_file: Union[str, Path],
    formatter: logging.Formatter,
) -> Optional[logging.Handler]:
    try:
        handler = logging.FileHandler(str(log_file), mode="a", encoding="utf-8")
    except OSError as exc:
        logger.warning("Unable to access log file %s: %s", log_file, exc)
        return None
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return handler


def configure_logging(
    level: int = DEFAULT_LOG_LEVEL,
    *,
    logger_name: str = DEFAULT_LOGGER_NAME,
    fmt: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[Union[str, Path]] = None,
    force: bool = False,
) -> logging.Logger:
    """Install a console handler and, when possible, an append-mode file sink.

    A log file that cannot be opened only costs the file sink; the failure is
    reported on the console and logging continues there.
    """
    logger = logging.getLogger(logger_name)
    if force:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)
    formatter = logging.Formatter(fmt)
    if not any(
        getattr(handler, "_grid_stress_console", False) for handler in logger.handlers
    ):
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(formatter)
        console._grid_stress_console = True  # type: ignore[attr-defined]
        logger.addHandler(console)
    if log_file:
        _add_file_handler(logger, log_file, formatter)
    return logger


def get_user_message(exc: BaseException) -> str:
    if isinstance(exc, GridStressError):
        return exc.user_message
    return f"Unexpected error: {exc}"


def log_exception(
    logger: logging.Logger,
    exc: BaseException,
    *,
    show_traceback: bool = False,
) -> str:
    """Log the user-facing message at ERROR; details follow at DEBUG.

    With ``show_traceback`` the context and traceback are raised to ERROR.
    """
    message = get_user_message(exc)
    logger.error(message)
    detail_level = logging.ERROR if show_traceback else logging.DEBUG
    if isinstance(exc, GridStressError) and exc.context:
        logger.log(detail_level, "Error details: %s", exc.log_message())
    logger.log(detail_level, "Detailed traceback:", exc_info=exc)
    return message


def run_with_error_handling(
    func: Callable[..., _T],
    *args: Any,
    logger: logging.Logger,
    show_traceback: bool = False,
    **kwargs: Any,
) -> _T:
    try:
        return func(*args, **kwargs)
    except Exception as exc:
        log_exception(logger, exc, show_traceback=show_traceback)
        raise


__all__ = [
    "DEFAULT_LOGGER_NAME",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_LOG_FORMAT",
    "DEFAULT_LOG_FILE",
    "configure_logging",
    "get_user_message",
    "log_exception",
    "run_with_error_handling",
]
