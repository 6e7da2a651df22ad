"""`hmmpath validate` command implementation."""

from __future__ import annotations

import argparse
from pathlib import Path

from hmmpath.cli.commands.common import add_runtime_arguments, make_reporter
from hmmpath.errors import guard
from hmmpath.io.text_format import read_model
from hmmpath.model.hmm import build_model, describe_model


def add_subparser(subparsers: argparse._SubParsersAction) -> None:
    """Register the `validate` command."""
    parser = subparsers.add_parser("validate", help="Check a model file against the boundary-state rules.")
    parser.add_argument("--model", required=True, help="Model description file.")
    add_runtime_arguments(parser)
    parser.set_defaults(command="validate")


def run(args: argparse.Namespace) -> int:
    """Execute the `validate` command."""
    model_path = Path(args.model)
    reporter = make_reporter(args)
    model = guard("load_model", reporter, lambda: build_model(read_model(model_path)), context={"model": str(model_path)})
    if model is None:
        reporter.print_summary()
        return reporter.exit_code()

    desc = describe_model(model)
    print(
        f"{model_path.name}: states={model.nstates} alphabet={model.alphabet_size} "
        f"transitions={len(desc.transitions)} emissions={len(desc.emissions)} "
        f"start={model.state_name(model.states.start)} end={model.state_name(model.states.end)}"
    )
    return reporter.exit_code()
