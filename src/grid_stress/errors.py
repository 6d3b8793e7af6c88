"""Error hierarchy for grid_stress."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Mapping, Optional


class GridStressError(Exception):
    """Base exception for grid_stress failures."""

    def __init__(
        self,
        message: str,
        *,
        user_message: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.user_message = message if user_message is None else user_message
        self.context = dict(context) if context else {}

    def log_message(self) -> str:
        if not self.context:
            return str(self)
        return f"{self}: {self.context}"


class ConfigError(GridStressError):
    """Configuration loading or validation error."""


class MissingConfigurationError(ConfigError):
    """One or more required settings keys are absent."""

    def __init__(
        self,
        missing_keys: Iterable[str],
        *,
        required_keys: Optional[Iterable[str]] = None,
        mode: Optional[str] = None,
    ) -> None:
        self.missing_keys = list(missing_keys)
        self.required_keys = list(required_keys) if required_keys is not None else []
        label = f"{mode}: " if mode else ""
        message = (
            f"{label}Cannot do operation. Missing required configuration: "
            + ", ".join(self.missing_keys)
        )
        context: dict[str, Any] = {"missing": self.missing_keys}
        if self.required_keys:
            context["required"] = self.required_keys
        super().__init__(message, context=context)


class InvalidParameterError(GridStressError):
    """A numeric parameter is outside its valid range."""


class GraphFormatError(GridStressError):
    """Malformed graph file record."""

    def __init__(
        self,
        message: str,
        *,
        line: Optional[int] = None,
        source: Optional[str] = None,
    ) -> None:
        self.detail = message
        self.line = line
        self.source = source
        context: dict[str, Any] = {}
        if line is not None:
            context["line"] = line
        if source is not None:
            context["source"] = source
        location = ", ".join(
            part
            for part in (source, f"line {line}" if line is not None else None)
            if part
        )
        prefix = f"{location}: " if location else ""
        super().__init__(f"{prefix}{message}", context=context)


class InvalidEdgeError(GridStressError, ValueError):
    """Edge endpoints are out of range or form a self-loop."""


class GraphIOError(GridStressError):
    """Graph or settings file could not be read or written."""


__all__ = [
    "GridStressError",
    "ConfigError",
    "MissingConfigurationError",
    "InvalidParameterError",
    "GraphFormatError",
    "InvalidEdgeError",
    "GraphIOError",
]
