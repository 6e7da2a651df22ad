from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .config import ErrorHandlingConfig
from .logging import JsonlEventLogger
from .types import FailureRecord, StepStatus

EXIT_OK = 0
EXIT_INTERNAL_ERROR = 1
EXIT_BAD_INPUT = 2


@dataclass
class ErrorReporter:
    """
    Outcome of every named step in one CLI run.

    Guards and the pipeline report here; commands read the outcome back through
    :meth:`exit_code` and :meth:`print_summary`. A run whose failures all blame the model
    or observation files exits with :data:`EXIT_BAD_INPUT`, any other failure with
    :data:`EXIT_INTERNAL_ERROR`.
    """

    cfg: ErrorHandlingConfig
    logger: logging.Logger
    event_logger: Optional[JsonlEventLogger] = None

    def __post_init__(self) -> None:
        self._run_id = self.cfg.resolved_run_id()
        self._records: list[FailureRecord] = []
        self._status: dict[str, StepStatus] = {}

    @property
    def records(self) -> tuple[FailureRecord, ...]:
        """Failure and skip records in the order they were reported."""
        return tuple(self._records)

    def status(self, step_name: str) -> Optional[StepStatus]:
        return self._status.get(step_name)

    def ok(self, step_name: str) -> bool:
        return self._status.get(step_name) == StepStatus.OK

    def failed(self, step_name: str) -> bool:
        return self._status.get(step_name) == StepStatus.FAILED

    def skipped(self, step_name: str) -> bool:
        return self._status.get(step_name) == StepStatus.SKIPPED

    def _count(self, status: StepStatus) -> int:
        return sum(1 for s in self._status.values() if s == status)

    def failures_count(self) -> int:
        return self._count(StepStatus.FAILED)

    def has_failures(self) -> bool:
        return self.failures_count() > 0

    def _set(self, step_name: str, status: StepStatus, record: Optional[FailureRecord] = None) -> None:
        self._status[step_name] = status
        if record is not None:
            self._records.append(record)
        if self.event_logger is not None:
            self.event_logger.write(status, step_name, record)

    def mark_ok(self, step_name: str) -> None:
        self._set(step_name, StepStatus.OK)
        self.logger.debug("Step '%s' ok", step_name, extra={"step": step_name})

    def mark_skipped(self, *, step_name: str, caused_by: str, context: Optional[Mapping[str, Any]] = None) -> None:
        rec = FailureRecord.skipped(step_name=step_name, caused_by=caused_by, context=context)
        self._set(step_name, StepStatus.SKIPPED, rec)
        self.logger.warning("Skipping step '%s' (caused_by=%s)", step_name, caused_by, extra={"step": step_name})

    def mark_failed(self, *, step_name: str, exc: BaseException, context: Optional[Mapping[str, Any]] = None) -> None:
        rec = FailureRecord.from_exception(step_name=step_name, exc=exc, context=context)
        self._set(step_name, StepStatus.FAILED, rec)
        self.logger.error(
            "Step '%s' failed [%s]: %s (%s)",
            step_name,
            rec.kind,
            rec.message,
            rec.exc_type,
            extra={"step": step_name},
        )
        self.logger.debug("Traceback for step '%s':\n%s", step_name, rec.traceback, extra={"step": step_name})

    def summary_table(self) -> Table:
        table = Table(
            title=f"hmmpath run {self._run_id} (mode={self.cfg.mode})",
            min_width=60,
        )
        table.add_column("step")
        table.add_column("status")
        table.add_column("input")
        table.add_column("detail", overflow="fold")

        records = {rec.step_name: rec for rec in self._records}
        for name, status in self._status.items():
            rec = records.get(name)
            if rec is None:
                detail, kind = "", ""
            elif status == StepStatus.FAILED:
                detail, kind = f"{rec.exc_type}: {rec.message}", rec.kind or ""
            else:
                detail, kind = rec.message, ""
            table.add_row(Text(name), status.value, kind, Text(detail))
        return table

    def render_summary(self) -> str:
        console = Console(record=True, width=120, file=io.StringIO())
        self.print_summary(console)
        return console.export_text()

    def print_summary(self, console: Optional[Console] = None) -> None:
        console = console or Console()
        console.print(self.summary_table())
        console.print(Text(f"log: {self.cfg.log_dir / f'run_{self._run_id}.log'}"), soft_wrap=True)

    def exit_code(self) -> int:
        failures = [rec for rec in self._records if rec.status == StepStatus.FAILED]
        if not failures:
            return EXIT_OK
        if all(rec.bad_input for rec in failures):
            return EXIT_BAD_INPUT
        return EXIT_INTERNAL_ERROR
