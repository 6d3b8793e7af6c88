"""Threshold-driven edge cutting simulation.

The run alternates analysis and cutting::

    INIT -> (ANALYZE -> CUT)* -> ANALYZE -> DONE

and leaves the loop once the average adequacy is at or below the threshold or
no edges remain. Every cut removes at least one edge, so a run takes at most
the initial edge count iterations.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import random
from typing import Any, Optional

from grid_stress.errors import InvalidParameterError
from grid_stress.graphs.analytics import GraphAnalytics, run_analytics
from grid_stress.graphs.randomize import cut_edges, resolve_rng, validate_cut_percent
from grid_stress.graphs.store import GraphStore

logger = logging.getLogger(__name__)

SUMMARY_FIELDS = (
    "filename",
    "node_count",
    "starting_edges",
    "ending_edges",
    "num_components",
    "num_components_powered",
    "avg_power_percentage",
)


@dataclass(frozen=True)
class StressStep:
    iteration: int
    num_edges: int
    num_components: int
    avg_power_percentage: float
    edges_removed: int = 0


@dataclass(frozen=True)
class StressResult:
    initial: GraphAnalytics
    final: GraphAnalytics
    history: tuple[StressStep, ...]

    @property
    def iterations(self) -> int:
        return len(self.history) - 1

    @property
    def edges_cut(self) -> int:
        return self.initial.num_edges - self.final.num_edges


@dataclass(frozen=True)
class StressSummary:
    """One spreadsheet row describing a finished stress run."""

    filename: str
    node_count: int
    starting_edges: int
    ending_edges: int
    num_components: int
    num_components_powered: int
    avg_power_percentage: float

    @classmethod
    def from_result(cls, filename: str, result: StressResult) -> "StressSummary":
        return cls(
            filename=filename,
            node_count=result.final.num_nodes,
            starting_edges=result.initial.num_edges,
            ending_edges=result.final.num_edges,
            num_components=result.final.num_components,
            num_components_powered=result.final.num_components_powered,
            avg_power_percentage=result.final.avg_power_percentage,
        )

    def as_row(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in SUMMARY_FIELDS}

    def as_line(self) -> str:
        return ",".join(str(value) for value in self.as_row().values())


def validate_power_threshold(value: float) -> float:
    try:
        threshold = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"Power threshold must be a number, got {value!r}.") from exc
    if not 0.0 <= threshold <= 1.0:
        raise InvalidParameterError(
            f"Power threshold must be in [0, 1], got {threshold}.",
            context={"power_threshold": threshold},
        )
    return threshold


def _step(iteration: int, analytics: GraphAnalytics, removed: int) -> StressStep:
    return StressStep(
        iteration=iteration,
        num_edges=analytics.num_edges,
        num_components=analytics.num_components,
        avg_power_percentage=analytics.avg_power_percentage,
        edges_removed=removed,
    )


def run_stress_test(
    store: GraphStore,
    power_threshold: float,
    edge_cut_percent: float,
    *,
    rng: Optional[random.Random] = None,
    max_components: int = -1,
) -> StressResult:
    """Cut edges from ``store`` in place until adequacy drops to the threshold.

    Both parameters are validated before the store is touched.
    """
    threshold = validate_power_threshold(power_threshold)
    percent = validate_cut_percent(edge_cut_percent)
    rng = resolve_rng(rng)

    analytics = run_analytics(store, max_components)
    initial = analytics
    history = [_step(0, analytics, 0)]
    while analytics.avg_power_percentage > threshold and analytics.num_edges > 0:
        removed = cut_edges(store, percent, rng=rng)
        analytics = run_analytics(store, max_components)
        history.append(_step(len(history), analytics, len(removed)))
        logger.debug(
            "Iteration %d: cut %d edges, %d left, %d components, %.4f adequacy.",
            len(history) - 1,
            len(removed),
            analytics.num_edges,
            analytics.num_components,
            analytics.avg_power_percentage,
        )
    return StressResult(initial=initial, final=analytics, history=tuple(history))


__all__ = [
    "SUMMARY_FIELDS",
    "StressResult",
    "StressStep",
    "StressSummary",
    "run_stress_test",
    "validate_power_threshold",
]
