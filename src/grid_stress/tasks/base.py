"""Task base definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import random
from typing import Any, Mapping, Optional, Protocol


@dataclass(frozen=True)
class TaskContext:
    """Explicit collaborators handed to every mode."""

    rng: random.Random = field(default_factory=random.Random)
    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger("grid_stress.tasks")
    )


class ModeTask(Protocol):
    def __call__(
        self,
        settings: Mapping[str, Any],
        *,
        context: TaskContext,
    ) -> Any: ...


def make_context(
    seed: Optional[int] = None,
    *,
    logger: Optional[logging.Logger] = None,
) -> TaskContext:
    rng = random.Random(seed) if seed is not None else random.Random()
    if logger is None:
        return TaskContext(rng=rng)
    return TaskContext(rng=rng, logger=logger)


__all__ = ["ModeTask", "TaskContext", "make_context"]
