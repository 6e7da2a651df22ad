"""hmmpath command-line interface entrypoint."""

from __future__ import annotations

import argparse
from collections.abc import Callable, Sequence
from types import ModuleType

from hmmpath.cli.commands import decode, sample, validate, eval as eval_cmd
from hmmpath.version import __version__

CommandModule = ModuleType
CommandRunner = Callable[[argparse.Namespace], "int | None"]

# Map CLI subcommands to their implementation modules.
_COMMANDS: dict[str, CommandModule] = {
    "decode": decode,
    "validate": validate,
    "eval": eval_cmd,
    "sample": sample,
}


def build_arg_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="hmmpath",
        description="hmmpath - most probable hidden-state paths for discrete HMMs",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True, metavar="<command>")

    for name, module in _COMMANDS.items():
        add_subparser = getattr(module, "add_subparser", None)
        if add_subparser is None:
            raise RuntimeError(f"CLI command module '{name}' is missing add_subparser().")
        add_subparser(subparsers)

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Parse args and dispatch to the selected command implementation."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    command_name = str(args.command)

    module = _COMMANDS.get(command_name)
    if module is None:
        raise RuntimeError(f"Unknown command: {command_name}")

    runner: CommandRunner | None = getattr(module, "run", None)
    if runner is None:
        raise RuntimeError(f"CLI command module '{command_name}' is missing run().")
    code = runner(args)
    if code:
        raise SystemExit(code)


# Keep console script compatibility with pyproject's entrypoint.
app = main


if __name__ == "__main__":
    main()
