"""Whitespace-token text formats for model descriptors and observation traces.

Model layout::

    <nstates> <name> ... <alphabet_size>
    <ntransitions> (<from> <to> <prob>) ...
    <nemissions> (<state> <symbol> <prob>) ...

Observation layout::

    <nsteps> (<step> <state> <symbol>) ...

Tokens may be spread over lines freely. Everything after ``#`` on a line is ignored.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Sequence

from hmmpath.errors.types import FormatError
from hmmpath.model.experiment import TraceTriple
from hmmpath.model.hmm import ModelDescriptor


class _Tokens:
    def __init__(self, text: str, source: str) -> None:
        self._source = source
        self._items: List[tuple[int, str]] = []
        for lineno, raw_line in enumerate(text.splitlines(), start=1):
            line = raw_line.split("#", 1)[0]
            self._items.extend((lineno, tok) for tok in line.split())
        self._pos = 0

    def _where(self) -> str:
        if self._pos < len(self._items):
            return f"{self._source}:{self._items[self._pos][0]}"
        return f"{self._source}:EOF"

    def next(self, what: str) -> str:
        if self._pos >= len(self._items):
            raise FormatError(f"{self._where()}: unexpected end of input, expected {what}.")
        tok = self._items[self._pos][1]
        self._pos += 1
        return tok

    def count(self, what: str) -> int:
        where = self._where()
        tok = self.next(what)
        try:
            value = int(tok)
        except ValueError:
            raise FormatError(f"{where}: expected integer {what}, got '{tok}'.") from None
        if value < 0:
            raise FormatError(f"{where}: {what} must be non-negative, got {value}.")
        return value

    def prob(self, what: str) -> float:
        where = self._where()
        tok = self.next(what)
        try:
            return float(tok)
        except ValueError:
            raise FormatError(f"{where}: expected probability for {what}, got '{tok}'.") from None

    def finish(self) -> None:
        if self._pos < len(self._items):
            raise FormatError(f"{self._where()}: unexpected trailing token '{self._items[self._pos][1]}'.")


def parse_model_text(text: str, *, source: str = "<model>") -> ModelDescriptor:
    """Parse model text into a :class:`ModelDescriptor`. Structural rules are checked later by ``build_model``."""

    toks = _Tokens(text, source)

    nstates = toks.count("state count")
    names = tuple(toks.next(f"state name #{i}") for i in range(nstates))
    alphabet_size = toks.count("alphabet size")

    ntransitions = toks.count("transition count")
    transitions = []
    for i in range(ntransitions):
        src = toks.next(f"transition #{i} source")
        dst = toks.next(f"transition #{i} target")
        transitions.append((src, dst, toks.prob(f"transition #{i}")))

    nemissions = toks.count("emission count")
    emissions = []
    for i in range(nemissions):
        state = toks.next(f"emission #{i} state")
        symbol = toks.next(f"emission #{i} symbol")
        emissions.append((state, symbol, toks.prob(f"emission #{i}")))

    toks.finish()
    return ModelDescriptor(
        state_names=names,
        alphabet_size=alphabet_size,
        transitions=tuple(transitions),
        emissions=tuple(emissions),
    )


def parse_trace_text(text: str, *, source: str = "<observations>") -> List[TraceTriple]:
    """Parse observation text into ``(step, state_name, symbol)`` triples."""

    toks = _Tokens(text, source)
    nsteps = toks.count("step count")
    trace: List[TraceTriple] = []
    for i in range(nsteps):
        step = toks.count(f"observation #{i} step number")
        state = toks.next(f"observation #{i} state")
        symbol = toks.next(f"observation #{i} symbol")
        trace.append((step, state, symbol))
    toks.finish()
    return trace


def _fmt_prob(prob: float) -> str:
    return repr(float(prob))


def _lines_model(descriptor: ModelDescriptor) -> Iterator[str]:
    yield str(len(descriptor.state_names))
    yield " ".join(descriptor.state_names)
    yield str(descriptor.alphabet_size)
    yield str(len(descriptor.transitions))
    for src, dst, prob in descriptor.transitions:
        yield f"{src} {dst} {_fmt_prob(prob)}"
    yield str(len(descriptor.emissions))
    for state, symbol, prob in descriptor.emissions:
        yield f"{state} {symbol} {_fmt_prob(prob)}"


def format_model_text(descriptor: ModelDescriptor) -> str:
    return "\n".join(_lines_model(descriptor)) + "\n"


def format_trace_text(trace: Sequence[TraceTriple]) -> str:
    lines = [str(len(trace))]
    lines += [f"{step} {state} {symbol}" for step, state, symbol in trace]
    return "\n".join(lines) + "\n"


def read_model(path: Path) -> ModelDescriptor:
    return parse_model_text(path.read_text(encoding="utf-8"), source=str(path))


def read_trace(path: Path) -> List[TraceTriple]:
    return parse_trace_text(path.read_text(encoding="utf-8"), source=str(path))


def write_trace(trace: Sequence[TraceTriple], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_trace_text(trace), encoding="utf-8")
