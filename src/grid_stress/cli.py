"""CLI entry point."""

from __future__ import annotations

import argparse
import logging
from typing import Any, Optional, Sequence

from grid_stress.config.schema import resolve_seed
from grid_stress.config.settings import (
    DEFAULT_SETTINGS_FILE,
    format_settings,
    log_settings,
    merge_settings,
    read_settings,
)
from grid_stress.errors import ConfigError, GridStressError
from grid_stress.logging_utils import (
    DEFAULT_LOG_FILE,
    configure_logging,
    log_exception,
    run_with_error_handling,
)
from grid_stress.tasks.base import make_context
from grid_stress.tasks.runner import run_from_settings, run_mode

_MODE_SUBCOMMANDS = {
    "randomize": "Randomize",
    "test": "Test",
    "stress": "Stress",
    "batch-stress": "BatchStress",
}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _load_settings(args: argparse.Namespace, logger: logging.Logger) -> dict[str, Any]:
    try:
        settings = read_settings(args.settings)
    except ConfigError as exc:
        # Overrides alone may still describe a complete run.
        log_exception(logger, exc, show_traceback=args.traceback)
        settings = {}
    return merge_settings(settings, args.overrides)


def _cfg_handler(args: argparse.Namespace, logger: logging.Logger) -> None:
    settings = _load_settings(args, logger)
    print(format_settings(settings), end="")


def _run_handler(args: argparse.Namespace, logger: logging.Logger) -> None:
    settings = _load_settings(args, logger)
    log_settings(settings, logger)
    seed = args.seed if args.seed is not None else resolve_seed(settings)
    if seed is not None:
        logger.info("Random source seeded with %d.", seed)
    context = make_context(seed, logger=logging.getLogger("grid_stress.tasks"))
    mode = getattr(args, "mode", None)
    if mode is None:
        run_from_settings(settings, context=context, show_traceback=args.traceback)
    else:
        run_mode(mode, settings, context=context, show_traceback=args.traceback)


def _add_settings_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--settings",
        default=DEFAULT_SETTINGS_FILE,
        help=f"key=value or YAML settings file (default: {DEFAULT_SETTINGS_FILE}).",
    )
    parser.add_argument(
        "overrides",
        nargs="*",
        metavar="KEY=VALUE",
        help="Settings overrides applied on top of the settings file.",
    )


def _add_seed_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random source (default: Seed setting, else wall clock).",
    )


def _register_run_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    run_parser = subparsers.add_parser(
        "run",
        help="Run the mode named by the ProgramMethod setting.",
        description="Run the mode named by the ProgramMethod setting (default: Stress).",
    )
    _add_settings_arguments(run_parser)
    _add_seed_argument(run_parser)
    run_parser.set_defaults(handler=_run_handler, mode=None)


def _register_mode_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    command: str,
    mode: str,
) -> None:
    mode_parser = subparsers.add_parser(
        command,
        help=f"Run the {mode} mode.",
        description=f"Run the {mode} mode regardless of ProgramMethod.",
    )
    _add_settings_arguments(mode_parser)
    _add_seed_argument(mode_parser)
    mode_parser.set_defaults(handler=_run_handler, mode=mode)


def _register_cfg_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    cfg_parser = subparsers.add_parser(
        "cfg",
        help="Print the merged settings as YAML.",
        description="Print the merged settings as YAML.",
    )
    _add_settings_arguments(cfg_parser)
    cfg_parser.set_defaults(handler=_cfg_handler)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gridstress",
        description="Power distribution graph randomization and stress testing.",
    )
    parser.add_argument(
        "--traceback",
        action="store_true",
        help="Show full traceback on errors.",
    )
    parser.add_argument(
        "--log-file",
        default=DEFAULT_LOG_FILE,
        help=f"Append log lines to this file; empty disables (default: {DEFAULT_LOG_FILE}).",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=_LOG_LEVELS,
        help="Logging level (default: INFO).",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    _register_run_subcommand(subparsers)
    for command, mode in _MODE_SUBCOMMANDS.items():
        _register_mode_subcommand(subparsers, command, mode)
    _register_cfg_subcommand(subparsers)
    return parser


def _cli_main(argv: Optional[Sequence[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "command", None):
        parser.print_help()
        raise SystemExit(2)
    cli_logger = configure_logging(
        getattr(logging, args.log_level),
        log_file=args.log_file or None,
    )
    cli_logger.info("Program start.")
    try:
        run_with_error_handling(
            args.handler,
            args,
            cli_logger,
            logger=cli_logger,
            show_traceback=args.traceback,
        )
    except GridStressError:
        # Already logged; recoverable errors still end in a clean exit.
        pass
    cli_logger.info("Program done.")


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point with standard logging/error handling."""
    _cli_main(argv)


if __name__ == "__main__":
    main()
