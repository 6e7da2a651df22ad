from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Iterator, Mapping, Optional, TypeVar

from .reporter import ErrorReporter

T = TypeVar("T")


@contextmanager
def step(
    step_name: str,
    reporter: ErrorReporter,
    *,
    context: Optional[Mapping[str, Any]] = None,
) -> Iterator[None]:
    """
    Run the enclosed block as the named step of a CLI run.

    In ``run`` mode a failure is recorded and suppressed, so the command continues after the
    block and decides what to do from ``reporter``. In ``debug`` mode it is recorded and
    re-raised. Only ``Exception`` subclasses are caught; interrupts propagate unrecorded.

        with step("sample", reporter, context={"model": str(model_path)}):
            write_trace(sample_trace(model, n_steps, seed), out_path)
    """
    reporter.logger.debug("Step '%s' started", step_name, extra={"step": step_name})
    try:
        yield
    except Exception as exc:
        reporter.mark_failed(step_name=step_name, exc=exc, context=context)
        if reporter.cfg.mode == "debug":
            raise
    else:
        reporter.mark_ok(step_name)


def guard(
    step_name: str,
    reporter: ErrorReporter,
    fn: Callable[[], T],
    *,
    context: Optional[Mapping[str, Any]] = None,
    default: Optional[T] = None,
) -> Optional[T]:
    """Call ``fn`` as a :func:`step`; return its value, or ``default`` if it failed."""
    result = default
    with step(step_name, reporter, context=context):
        result = fn()
    return result
