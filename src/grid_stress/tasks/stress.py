"""Stress and BatchStress modes."""

from __future__ import annotations

from collections.abc import Sequence
import csv
import logging
from pathlib import Path
import random
from typing import Any, Mapping, Union

from grid_stress.config.schema import BatchStressConfig, StressConfig
from grid_stress.errors import GraphFormatError, GraphIOError
from grid_stress.graphs.randomize import validate_cut_percent
from grid_stress.graphs.store import read_graph, write_graph
from grid_stress.graphs.stress import (
    SUMMARY_FIELDS,
    StressResult,
    StressSummary,
    run_stress_test,
    validate_power_threshold,
)
from grid_stress.logging_utils import log_exception
from grid_stress.registry import register_mode
from grid_stress.tasks.base import TaskContext

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = ".output"


def output_path_for(path: Union[str, Path]) -> Path:
    return Path(f"{path}{OUTPUT_SUFFIX}")


def _log_result(result: StressResult) -> None:
    logger.info(
        "Number of edges cut: %d (of %d)",
        result.edges_cut,
        result.initial.num_edges,
    )
    logger.info(
        "Ending component count: %d (of %d)",
        result.final.num_components,
        result.initial.num_components,
    )
    logger.info(
        "Ending average percentage power supplied: %.2f%% (from %.2f%%)",
        result.final.avg_power_percentage * 100,
        result.initial.avg_power_percentage * 100,
    )


def stress_graph_file(
    path: Path,
    power_threshold: float,
    edge_cut_percent: float,
    *,
    rng: random.Random,
    max_components: int = -1,
) -> StressResult:
    """Load ``path``, run the stress loop and write ``<path>.output``."""
    store = read_graph(path)
    result = run_stress_test(
        store,
        power_threshold,
        edge_cut_percent,
        rng=rng,
        max_components=max_components,
    )
    _log_result(result)
    output = write_graph(store, output_path_for(path))
    logger.info("Ending graph written to: %s", output)
    return result


def write_summary_csv(path: Path, summaries: Sequence[StressSummary]) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=list(SUMMARY_FIELDS))
            writer.writeheader()
            for summary in summaries:
                writer.writerow(summary.as_row())
    except OSError as exc:
        raise GraphIOError(
            f"Unable to write summary file: {path}",
            context={"path": str(path), "reason": str(exc)},
        ) from exc
    return path


def run(settings: Mapping[str, Any], *, context: TaskContext) -> StressResult:
    config = StressConfig.from_settings(settings)
    validate_power_threshold(config.power_threshold)
    validate_cut_percent(config.edge_cut_percent)
    return stress_graph_file(
        config.graph_filename,
        config.power_threshold,
        config.edge_cut_percent,
        rng=context.rng,
        max_components=config.max_components,
    )


def stress_directory(config: BatchStressConfig, *, rng: random.Random) -> list[StressSummary]:
    """Stress every matching file in turn; a bad file is logged and skipped."""
    validate_power_threshold(config.power_threshold)
    validate_cut_percent(config.edge_cut_percent)
    if not config.directory.is_dir():
        raise GraphIOError(
            f"Graph directory not found: {config.directory}",
            context={"path": str(config.directory)},
        )
    # Results of earlier runs never count as inputs.
    paths = sorted(
        path
        for path in config.directory.glob(config.graph_pattern)
        if path.is_file()
        and not path.name.endswith(OUTPUT_SUFFIX)
        and path.name != config.summary_filename
    )
    if not paths:
        logger.warning(
            "No files matching %r in %s.", config.graph_pattern, config.directory
        )

    summaries: list[StressSummary] = []
    for path in paths:
        logger.info("Stress testing %s.", path)
        try:
            result = stress_graph_file(
                path,
                config.power_threshold,
                config.edge_cut_percent,
                rng=rng,
                max_components=config.max_components,
            )
        except (GraphIOError, GraphFormatError) as exc:
            log_exception(logger, exc)
            continue
        summary = StressSummary.from_result(path.name, result)
        logger.info("Summary: %s", summary.as_line())
        summaries.append(summary)

    summary_path = write_summary_csv(config.directory / config.summary_filename, summaries)
    logger.info("Summary of %d graphs written to: %s", len(summaries), summary_path)
    return summaries


def run_batch(settings: Mapping[str, Any], *, context: TaskContext) -> list[StressSummary]:
    return stress_directory(BatchStressConfig.from_settings(settings), rng=context.rng)


register_mode("Stress", run)
register_mode("BatchStress", run_batch)

__all__ = [
    "OUTPUT_SUFFIX",
    "output_path_for",
    "run",
    "run_batch",
    "stress_directory",
    "stress_graph_file",
    "write_summary_csv",
]
