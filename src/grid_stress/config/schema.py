"""Per-mode configuration objects built from flat settings."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar, Optional

from grid_stress.config.settings import (
    get_bool,
    get_float,
    get_int,
    get_str,
    missing_keys,
)
from grid_stress.errors import ConfigError, MissingConfigurationError

PROGRAM_METHOD_KEY = "ProgramMethod"
DEFAULT_MODE = "Stress"
SEED_KEY = "Seed"
MAX_COMPONENTS_KEY = "MaxComponents"

NODE_RANGE_KEYS = (
    "MinNodeProduction",
    "MaxNodeProduction",
    "MinNodeConsumption",
    "MaxNodeConsumption",
)


def _check_required(
    settings: Mapping[str, Any],
    required: tuple[str, ...],
    mode: str,
) -> None:
    missing = missing_keys(settings, required)
    if missing:
        raise MissingConfigurationError(missing, required_keys=required, mode=mode)


@dataclass(frozen=True)
class NodeRanges:
    min_prod: float
    max_prod: float
    min_cons: float
    max_cons: float


@dataclass(frozen=True)
class RandomizeConfig:
    mode: ClassVar[str] = "Randomize"
    required: ClassVar[tuple[str, ...]] = (
        "NumberGraphsGenerated",
        "GraphFilename",
        "OutputDirectory",
    )

    graph_filename: Path
    output_directory: Path
    number_graphs: int
    number_edge_swaps: Optional[int] = None
    node_ranges: Optional[NodeRanges] = None
    max_attempts: int = 100
    require_connected: bool = True
    strict_swaps: bool = False
    max_components: int = -1

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "RandomizeConfig":
        randomize_nodes = get_bool(settings, "RandomizeNodes", False)
        required = cls.required + (NODE_RANGE_KEYS if randomize_nodes else ())
        _check_required(settings, required, cls.mode)

        node_ranges = None
        if randomize_nodes:
            node_ranges = NodeRanges(
                *(get_float(settings, key) for key in NODE_RANGE_KEYS)
            )
        swaps = settings.get("NumberEdgeSwaps")
        config = cls(
            graph_filename=Path(get_str(settings, "GraphFilename")),
            output_directory=Path(get_str(settings, "OutputDirectory")),
            number_graphs=get_int(settings, "NumberGraphsGenerated"),
            number_edge_swaps=None if swaps is None else get_int(settings, "NumberEdgeSwaps"),
            node_ranges=node_ranges,
            max_attempts=get_int(settings, "MaxRandomizeAttempts", 100),
            require_connected=get_bool(settings, "RequireConnected", True),
            strict_swaps=get_bool(settings, "StrictEdgeSwaps", False),
            max_components=get_int(settings, MAX_COMPONENTS_KEY, -1),
        )
        if config.number_graphs < 0:
            raise ConfigError("NumberGraphsGenerated must not be negative.")
        if config.number_edge_swaps is not None and config.number_edge_swaps < 0:
            raise ConfigError("NumberEdgeSwaps must not be negative.")
        if config.max_attempts < 1:
            raise ConfigError("MaxRandomizeAttempts must be at least 1.")
        return config


@dataclass(frozen=True)
class InspectConfig:
    mode: ClassVar[str] = "Test"
    required: ClassVar[tuple[str, ...]] = ("GraphFilename",)

    graph_filename: Path
    max_components: int = -1

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "InspectConfig":
        _check_required(settings, cls.required, cls.mode)
        return cls(
            graph_filename=Path(get_str(settings, "GraphFilename")),
            max_components=get_int(settings, MAX_COMPONENTS_KEY, -1),
        )


@dataclass(frozen=True)
class StressConfig:
    mode: ClassVar[str] = "Stress"
    required: ClassVar[tuple[str, ...]] = (
        "GraphFilename",
        "PowerSuppliedThreshold",
        "PercentageOfEdgesToCut",
    )

    graph_filename: Path
    power_threshold: float
    edge_cut_percent: float
    max_components: int = -1

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "StressConfig":
        _check_required(settings, cls.required, cls.mode)
        return cls(
            graph_filename=Path(get_str(settings, "GraphFilename")),
            power_threshold=get_float(settings, "PowerSuppliedThreshold"),
            edge_cut_percent=get_float(settings, "PercentageOfEdgesToCut"),
            max_components=get_int(settings, MAX_COMPONENTS_KEY, -1),
        )


@dataclass(frozen=True)
class BatchStressConfig:
    mode: ClassVar[str] = "BatchStress"
    required: ClassVar[tuple[str, ...]] = (
        "Directory",
        "PowerSuppliedThreshold",
        "PercentageOfEdgesToCut",
    )

    directory: Path
    power_threshold: float
    edge_cut_percent: float
    graph_pattern: str = "*.graph"
    summary_filename: str = "stress_summary.csv"
    max_components: int = -1

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "BatchStressConfig":
        _check_required(settings, cls.required, cls.mode)
        return cls(
            directory=Path(get_str(settings, "Directory")),
            power_threshold=get_float(settings, "PowerSuppliedThreshold"),
            edge_cut_percent=get_float(settings, "PercentageOfEdgesToCut"),
            graph_pattern=get_str(settings, "GraphPattern", "*.graph"),
            summary_filename=get_str(settings, "SummaryFilename", "stress_summary.csv"),
            max_components=get_int(settings, MAX_COMPONENTS_KEY, -1),
        )


def resolve_mode_name(settings: Mapping[str, Any]) -> str:
    """Mode named by ``ProgramMethod``; defaults to ``Stress``."""
    return get_str(settings, PROGRAM_METHOD_KEY, DEFAULT_MODE).strip() or DEFAULT_MODE


def resolve_seed(settings: Mapping[str, Any]) -> Optional[int]:
    if settings.get(SEED_KEY) is None:
        return None
    return get_int(settings, SEED_KEY)


__all__ = [
    "BatchStressConfig",
    "DEFAULT_MODE",
    "InspectConfig",
    "NODE_RANGE_KEYS",
    "NodeRanges",
    "PROGRAM_METHOD_KEY",
    "RandomizeConfig",
    "StressConfig",
    "resolve_mode_name",
    "resolve_seed",
]
