from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from rich.logging import RichHandler

from .config import ErrorHandlingConfig
from .types import FailureRecord, StepStatus

LOGGER_NAME = "app"

_FILE_FORMAT = "%(asctime)sZ | run=%(run_id)s | step=%(step)s | %(levelname)s | %(message)s"


@dataclass
class JsonlEventLogger:
    """
    Appends one JSON object per step outcome to ``events_<run_id>.jsonl``.

    Every line carries ``time_utc``, ``run_id``, ``event`` (``step_ok``, ``step_failed`` or
    ``step_skipped``) and ``step``. Failed and skipped steps add the fields of their
    :class:`FailureRecord` that a downstream tool can act on.
    """
    path: Path
    run_id: str

    def write(self, status: StepStatus, step: str, record: Optional[FailureRecord] = None) -> None:
        payload: dict[str, Any] = {
            "time_utc": datetime.now(timezone.utc).isoformat(),
            "run_id": self.run_id,
            "event": f"step_{status.value}",
            "step": step,
        }
        if record is not None:
            payload["message"] = record.message
            for key in ("kind", "exc_type", "caused_by"):
                value = getattr(record, key)
                if value is not None:
                    payload[key] = value
            if record.context:
                payload["context"] = {k: str(v) for k, v in record.context.items()}

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload, ensure_ascii=False) + "\n")


class _RunContextFilter(logging.Filter):
    def __init__(self, *, run_id: str) -> None:
        super().__init__()
        self._run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        if not hasattr(record, "run_id"):
            setattr(record, "run_id", self._run_id)
        if not hasattr(record, "step"):
            setattr(record, "step", "-")
        return True


def _reset(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.filters.clear()


def _file_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=_FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    return handler


def configure_logging(*, cfg: ErrorHandlingConfig) -> tuple[logging.Logger, Optional[JsonlEventLogger]]:
    """
    Point the ``"app"`` logger at a Rich console and at ``<log_dir>/run_<run_id>.log``.

    Calling it again replaces the previous handlers, so each CLI invocation logs to its own
    run file. The JSONL event logger is returned only when ``cfg.write_jsonl`` is set.
    """
    run_id = cfg.resolved_run_id()
    cfg.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    _reset(logger)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    logger.addFilter(_RunContextFilter(run_id=run_id))

    console = RichHandler(rich_tracebacks=(cfg.mode == "debug"), show_path=False)
    console.setLevel(cfg.console_level)
    console.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console)
    logger.addHandler(_file_handler(cfg.log_dir / f"run_{run_id}.log", cfg.file_level))

    event_logger = None
    if cfg.write_jsonl:
        event_logger = JsonlEventLogger(path=cfg.log_dir / f"events_{run_id}.jsonl", run_id=run_id)

    logger.debug("Logging to %s (mode=%s)", cfg.log_dir, cfg.mode)
    return logger, event_logger
