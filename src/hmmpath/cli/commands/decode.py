"""`hmmpath decode` command implementation."""

from __future__ import annotations

import argparse
from pathlib import Path

from hmmpath.cli.commands.common import add_runtime_arguments, make_reporter
from hmmpath.decode.decoder import viterbi_trellis
from hmmpath.errors import ConfigError, Pipeline
from hmmpath.errors.config import load_config, resolve_out_dir
from hmmpath.io import artifacts
from hmmpath.io.text_format import read_model, read_trace
from hmmpath.model.experiment import build_experiment_data
from hmmpath.model.hmm import build_model


def add_subparser(subparsers: argparse._SubParsersAction) -> None:
    """Register the `decode` command."""
    parser = subparsers.add_parser("decode", help="Decode the most probable state path.")
    parser.add_argument("--model", required=True, help="Model description file.")
    parser.add_argument("--observations", required=True, help="Observation trace file.")
    parser.add_argument("--out-dir", required=False, help="Write <stem>_path.json here.")
    parser.add_argument("--save-trellis", action="store_true", help="Also write the DP tables as .npz.")
    add_runtime_arguments(parser)
    parser.set_defaults(command="decode")


def run(args: argparse.Namespace) -> int:
    """Execute the `decode` command."""
    model_path = Path(args.model)
    obs_path = Path(args.observations)
    out_dir = None
    if args.out_dir or args.save_trellis:
        try:
            out_dir = resolve_out_dir(load_config(Path.cwd()), Path(args.out_dir) if args.out_dir else None)
        except ConfigError as error:
            raise ConfigError(f"hmmpath decode --save-trellis requires an output directory. {error}") from error

    reporter = make_reporter(args)
    logger = reporter.logger
    stem = obs_path.stem

    pipe = Pipeline(reporter)
    pipe.add("load_model", lambda r: build_model(read_model(model_path)), context={"model": str(model_path)})
    pipe.add(
        "load_observations",
        lambda r: build_experiment_data(r["load_model"], read_trace(obs_path)),
        deps=["load_model"],
        context={"observations": str(obs_path)},
    )
    pipe.add(
        "decode",
        lambda r: viterbi_trellis(r["load_model"], r["load_observations"].symbols()),
        deps=["load_observations"],
    )

    def _write(r: dict) -> Path:
        model, data, trellis = r["load_model"], r["load_observations"], r["decode"]
        payload = artifacts.path_payload(model, trellis.best_path(), data.steps(), trellis.best_path_probability())
        written = artifacts.save_path(payload, out_dir, stem)
        if args.save_trellis:
            artifacts.save_trellis(trellis, out_dir / f"{stem}_trellis.npz", state_names=model.states.names)
        logger.info("Wrote %s", written, extra={"step": "write_artifacts"})
        return written

    if out_dir is not None:
        pipe.add("write_artifacts", _write, deps=["decode"])

    results = pipe.run()
    if "decode" in results:
        model, trellis = results["load_model"], results["decode"]
        names = [model.state_name(i) for i in trellis.best_path()]
        logger.debug("Decoded %d steps, p=%g", len(names), trellis.best_path_probability(), extra={"step": "decode"})
        print(" ".join(names))

    if reporter.has_failures():
        reporter.print_summary()
    return reporter.exit_code()
