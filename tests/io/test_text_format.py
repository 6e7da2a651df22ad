from pathlib import Path

import pytest

from hmmpath.errors.types import FormatError
from hmmpath.io.text_format import (
    format_model_text,
    format_trace_text,
    parse_model_text,
    parse_trace_text,
    read_model,
    read_trace,
    write_trace,
)
from hmmpath.model.hmm import build_model

MODEL_TEXT = """\
# weather model
4
S H C E
3
6
S H 0.8
S C 0.2
H H 0.6
H C 0.4
C H 0.5
C C 0.5
6
H a 0.2  H b 0.4  H c 0.4
C a 0.5  C b 0.4  C c 0.1
"""

TRACE_TEXT = """\
3
0 H c
1 C a
2 H c
"""


def test_parse_model_text() -> None:
    desc = parse_model_text(MODEL_TEXT)
    assert desc.state_names == ("S", "H", "C", "E")
    assert desc.alphabet_size == 3
    assert desc.transitions[0] == ("S", "H", 0.8)
    assert len(desc.transitions) == 6
    assert desc.emissions[-1] == ("C", "c", 0.1)
    assert build_model(desc).nstates == 4


def test_parse_trace_text() -> None:
    assert parse_trace_text(TRACE_TEXT) == [(0, "H", "c"), (1, "C", "a"), (2, "H", "c")]


def test_format_round_trip() -> None:
    desc = parse_model_text(MODEL_TEXT)
    assert parse_model_text(format_model_text(desc)) == desc
    trace = parse_trace_text(TRACE_TEXT)
    assert parse_trace_text(format_trace_text(trace)) == trace


@pytest.mark.parametrize(
    "text, message",
    [
        ("3\nS A", "unexpected end of input"),
        ("x", "expected integer state count"),
        ("-1", "non-negative"),
        ("2 S E 1 1 S E high 0", "expected probability"),
        ("2 S E 1 0 0 extra", "trailing token"),
    ],
)
def test_malformed_model_text_raises_format_error(text: str, message: str) -> None:
    with pytest.raises(FormatError, match=message):
        parse_model_text(text, source="m.txt")


def test_format_error_reports_source_and_line() -> None:
    with pytest.raises(FormatError, match=r"m\.txt:2"):
        parse_model_text("2\nS E x", source="m.txt")


def test_malformed_trace_text_raises_format_error() -> None:
    with pytest.raises(FormatError):
        parse_trace_text("2\n0 A a\n")
    with pytest.raises(FormatError):
        parse_trace_text("1\nfirst A a\n")


def test_file_helpers(tmp_path: Path) -> None:
    model_path = tmp_path / "model.txt"
    model_path.write_text(MODEL_TEXT, encoding="utf-8")
    assert read_model(model_path).state_names == ("S", "H", "C", "E")

    trace_path = tmp_path / "nested" / "obs.txt"
    write_trace([(0, "H", "c"), (4, "C", "a")], trace_path)
    assert read_trace(trace_path) == [(0, "H", "c"), (4, "C", "a")]
