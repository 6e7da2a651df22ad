"""Shared runtime setup for CLI commands."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from hmmpath.errors import ErrorHandlingConfig, ErrorReporter, configure_logging

ENV_PREFIX = "HMMPATH_"


def add_runtime_arguments(parser: argparse.ArgumentParser) -> None:
    """Options every command accepts for error handling and logging."""
    parser.add_argument("--debug", action="store_true", help="Re-raise the first failure instead of recording it.")
    parser.add_argument("--log-dir", default=None, help="Directory for run logs (default: logs).")
    parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors to the console.")


def make_reporter(args: argparse.Namespace) -> ErrorReporter:
    """Build config from env + CLI flags, configure logging and return a reporter."""
    base = ErrorHandlingConfig.from_env(default=ErrorHandlingConfig(env_prefix=ENV_PREFIX))
    cfg = ErrorHandlingConfig(
        mode="debug" if getattr(args, "debug", False) else base.mode,
        log_dir=Path(args.log_dir) if getattr(args, "log_dir", None) else base.log_dir,
        run_id=base.run_id,
        console_level=logging.WARNING if getattr(args, "quiet", False) else base.console_level,
        file_level=base.file_level,
        write_jsonl=base.write_jsonl,
        max_failures=base.max_failures,
        env_prefix=ENV_PREFIX,
    )
    logger, event_logger = configure_logging(cfg=cfg)
    return ErrorReporter(cfg=cfg, logger=logger, event_logger=event_logger)
