from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Set

from .reporter import ErrorReporter
from .guards import step


@dataclass(frozen=True)
class _StepDef:
    name: str
    fn: Callable[[Dict[str, Any]], Any]
    deps: tuple[str, ...]
    context: Optional[Mapping[str, Any]]


class Pipeline:
    """
    Dependency-aware step runner.

    Each step callable receives the results mapping of the steps that already ran, so a
    step can read the outputs of its dependencies by name.

    Rules
    -----
    - A step runs only if all dependencies are OK.
    - If any dependency FAILED or SKIPPED, this step is SKIPPED.
    - In run mode, pipeline continues with independent steps.
    - In debug mode, first failure raises.

    Usage example
    -------------
        pipe = Pipeline(reporter)

        pipe.add("load_model", lambda r: build_model(read_model(model_path)))
        pipe.add("load_observations", lambda r: build_experiment_data(r["load_model"], read_trace(obs_path)),
                 deps=["load_model"])
        pipe.add("decode", lambda r: decode(r["load_model"], r["load_observations"]),
                 deps=["load_observations"])

        results = pipe.run()
        reporter.print_summary()
    """

    def __init__(self, reporter: ErrorReporter) -> None:
        self._reporter = reporter
        self._steps: Dict[str, _StepDef] = {}

    def add(
        self,
        name: str,
        fn: Callable[[Dict[str, Any]], Any],
        *,
        deps: Optional[List[str]] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Register a named step with optional dependencies."""
        if name in self._steps:
            raise ValueError(f"Duplicate step name: {name}")
        self._steps[name] = _StepDef(name=name, fn=fn, deps=tuple(deps or []), context=context)

    def run(self) -> Dict[str, Any]:
        """
        Execute the pipeline in dependency order.

        Returns
        -------
        results
            Mapping from step name to return value (only for steps that ran successfully).
            Skipped/failed steps will not be present.

        Notes
        -----
        If cfg.max_failures is set, pipeline stops scheduling new work once reached.
        Steps that become ready in the same pass run in registration order.
        """
        results: Dict[str, Any] = {}
        order = list(self._steps.keys())
        remaining: Set[str] = set(order)
        decided: Set[str] = set()

        def _max_failures_reached() -> bool:
            if self._reporter.cfg.mode != "run":
                return False
            mf = self._reporter.cfg.max_failures
            return mf is not None and self._reporter.failures_count() >= mf

        def _skip_all_remaining(*, caused_by: str) -> None:
            for n in order:
                if n in remaining and self._reporter.status(n) is None:
                    self._reporter.mark_skipped(step_name=n, caused_by=caused_by, context=self._steps[n].context)
            remaining.clear()

        while remaining:
            progressed = False

            if _max_failures_reached():
                _skip_all_remaining(caused_by="max_failures")
                break

            for name in [n for n in order if n in remaining]:
                sdef = self._steps[name]

                if any(dep not in decided for dep in sdef.deps):
                    continue

                bad_dep = next((dep for dep in sdef.deps if not self._reporter.ok(dep)), None)
                if bad_dep is not None:
                    self._reporter.mark_skipped(step_name=name, caused_by=bad_dep, context=sdef.context)
                else:
                    with step(name, self._reporter, context=sdef.context):
                        results[name] = sdef.fn(results)

                remaining.discard(name)
                decided.add(name)
                progressed = True

                if _max_failures_reached():
                    _skip_all_remaining(caused_by="max_failures")
                    break

            if not progressed and remaining:
                unresolved = ", ".join(sorted(remaining))
                raise RuntimeError(
                    "Pipeline could not make progress (cycle or undefined deps). "
                    f"Remaining steps: {unresolved}"
                )

        return results
