"""`hmmpath eval` command implementation."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, List

from hmmpath.cli.commands.common import add_runtime_arguments, make_reporter
from hmmpath.errors import guard
from hmmpath.errors.config import load_config, resolve_out_dir
from hmmpath.eval.metrics import evaluate_experiment
from hmmpath.eval.scorecard import aggregate, write_scorecard
from hmmpath.io.text_format import read_model, read_trace
from hmmpath.model.experiment import build_experiment_data
from hmmpath.model.hmm import build_model


def add_subparser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("eval", help="Score decoded paths against reference states.")
    parser.add_argument("--model", required=True, help="Model description file.")
    parser.add_argument("--observations", nargs="+", required=True, help="One or more observation trace files.")
    parser.add_argument("--out-dir", required=False, help="Output directory for scorecards.")
    add_runtime_arguments(parser)
    parser.set_defaults(command="eval")


def run(args: argparse.Namespace) -> int:
    model_path = Path(args.model)
    out_dir = resolve_out_dir(load_config(Path.cwd()), Path(args.out_dir) if args.out_dir else None)
    reporter = make_reporter(args)

    model = guard("load_model", reporter, lambda: build_model(read_model(model_path)), context={"model": str(model_path)})
    if model is None:
        reporter.print_summary()
        return reporter.exit_code()

    rows: List[Dict[str, Any]] = []
    for raw in args.observations:
        obs_path = Path(raw)
        row = guard(
            f"eval:{obs_path.name}",
            reporter,
            lambda: evaluate_experiment(model, build_experiment_data(model, read_trace(obs_path))),
            context={"observations": str(obs_path)},
        )
        if row is not None:
            rows.append({"id": obs_path.stem, **row})

    write_scorecard(
        out_dir / "scorecard.json",
        out_dir / "scorecard.csv",
        rows,
        aggregate(rows),
        metadata={"model": str(model_path)},
    )
    print(f"scorecard written: {out_dir / 'scorecard.json'}")
    if reporter.has_failures():
        reporter.print_summary()
    return reporter.exit_code()
