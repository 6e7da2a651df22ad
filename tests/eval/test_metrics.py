import math

import numpy as np
import pytest

from hmmpath.eval import metrics
from hmmpath.model.experiment import build_experiment_data
from hmmpath.model.hmm import ModelDescriptor, build_model


def test_path_accuracy() -> None:
    assert metrics.path_accuracy([1, 2, 2, 1], [1, 2, 1, 1]) == pytest.approx(0.75)
    assert metrics.path_accuracy([], []) == 1.0
    with pytest.raises(ValueError):
        metrics.path_accuracy([1, 2], [1])


def test_confusion_and_per_state_accuracy() -> None:
    ref = [1, 1, 2, 2, 2]
    hyp = [1, 2, 2, 2, 1]
    counts = metrics.confusion_counts(ref, hyp, nstates=4)
    assert counts[1, 1] == 1 and counts[1, 2] == 1
    assert counts[2, 2] == 2 and counts[2, 1] == 1
    assert counts.sum() == 5

    per_state = metrics.per_state_accuracy(ref, hyp, nstates=4)
    assert per_state == {1: pytest.approx(0.5), 2: pytest.approx(2 / 3)}


def test_state_switches() -> None:
    assert metrics.state_switches([1, 1, 2, 2, 1]) == 2
    assert metrics.state_switches([]) == 0


def test_evaluate_experiment_scores_against_reference() -> None:
    model = build_model(
        ModelDescriptor(
            state_names=("S", "A", "B", "E"),
            alphabet_size=2,
            transitions=(("S", "A", 1.0), ("A", "A", 0.5), ("A", "B", 0.5), ("B", "B", 1.0)),
            emissions=(("A", "a", 1.0), ("B", "b", 1.0)),
        )
    )
    data = build_experiment_data(model, [(0, "A", "a"), (1, "A", "b"), (2, "B", "b")])

    row = metrics.evaluate_experiment(model, data)

    assert row["n_steps"] == 3.0
    assert row["accuracy"] == pytest.approx(2 / 3)
    assert row["log10_path_probability"] == pytest.approx(math.log10(0.5))
    assert row["switches"] == 1.0


def test_evaluate_experiment_reports_underflow_as_minus_inf() -> None:
    model = build_model(
        ModelDescriptor(
            state_names=("S", "A", "E"),
            alphabet_size=1,
            transitions=(("S", "A", 1.0), ("A", "A", 0.01)),
            emissions=(("A", "a", 0.01),),
        )
    )
    data = build_experiment_data(model, [(t, "A", "a") for t in range(200)])
    row = metrics.evaluate_experiment(model, data)
    assert row["accuracy"] == 1.0
    assert np.isneginf(row["log10_path_probability"])
