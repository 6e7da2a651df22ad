"""`hmmpath sample` command implementation."""

from __future__ import annotations

import argparse
from pathlib import Path

from hmmpath.cli.commands.common import add_runtime_arguments, make_reporter
from hmmpath.errors import step
from hmmpath.eval.synthetic import sample_trace
from hmmpath.io.text_format import read_model, write_trace
from hmmpath.model.hmm import build_model


def add_subparser(subparsers: argparse._SubParsersAction) -> None:
    """Register the `sample` command."""
    parser = subparsers.add_parser("sample", help="Write a synthetic observation trace drawn from a model.")
    parser.add_argument("--model", required=True, help="Model description file.")
    parser.add_argument("--steps", type=int, default=100, help="Maximum number of observations.")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--out", required=True, help="Observation file to write.")
    add_runtime_arguments(parser)
    parser.set_defaults(command="sample")


def run(args: argparse.Namespace) -> int:
    """Execute the `sample` command."""
    model_path = Path(args.model)
    out_path = Path(args.out)
    reporter = make_reporter(args)

    with step("sample", reporter, context={"model": str(model_path), "seed": args.seed}):
        model = build_model(read_model(model_path))
        trace = sample_trace(model, args.steps, seed=args.seed)
        write_trace(trace, out_path)
        print(f"{out_path}: {len(trace)} observations")

    if reporter.has_failures():
        reporter.print_summary()
    return reporter.exit_code()
