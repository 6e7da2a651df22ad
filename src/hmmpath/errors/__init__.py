"""
errors subpackage: error taxonomy plus logging and run bookkeeping for CLI workflows.

Key primitives
--------------
- ModelDomainError / ObservationLookupError / ...: domain error taxonomy
- ErrorHandlingConfig: global config (mode, log paths, JSONL, etc.)
- configure_logging(): console + file logging, optional JSONL event logger
- ErrorReporter: step outcomes, exit code (bad input vs internal) and a Rich summary table
- step(): context manager to wrap a named step
- guard(): one-liner wrapper for callables
- Pipeline: dependency-aware runner that skips meaningless downstream steps
"""

from .config import ConfigError, ErrorHandlingConfig
from .logging import configure_logging, JsonlEventLogger
from .reporter import EXIT_BAD_INPUT, EXIT_INTERNAL_ERROR, EXIT_OK, ErrorReporter
from .guards import step, guard
from .pipeline import Pipeline
from .types import (
    FormatError,
    HmmError,
    ModelDomainError,
    NotImplementedFeatureError,
    ObservationLookupError,
    ObservationOrderError,
    UnknownStateError,
    UnknownSymbolError,
    failure_kind,
)

__all__ = [
    "ConfigError",
    "ErrorHandlingConfig",
    "JsonlEventLogger",
    "configure_logging",
    "ErrorReporter",
    "EXIT_OK",
    "EXIT_BAD_INPUT",
    "EXIT_INTERNAL_ERROR",
    "step",
    "guard",
    "Pipeline",
    "HmmError",
    "ModelDomainError",
    "ObservationLookupError",
    "UnknownStateError",
    "UnknownSymbolError",
    "ObservationOrderError",
    "FormatError",
    "NotImplementedFeatureError",
    "failure_kind",
]
