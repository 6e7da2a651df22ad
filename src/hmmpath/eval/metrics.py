"""Evaluation metrics for decoded state paths."""

from __future__ import annotations

import math
from typing import Dict, Sequence

import numpy as np

from hmmpath.decode.decoder import viterbi_trellis
from hmmpath.model.experiment import ExperimentData
from hmmpath.model.hmm import Model


def path_accuracy(reference: Sequence[int], decoded: Sequence[int]) -> float:
    ref = np.asarray(reference, dtype=np.int64)
    hyp = np.asarray(decoded, dtype=np.int64)
    if ref.shape != hyp.shape:
        raise ValueError(f"reference and decoded lengths differ: {ref.shape} vs {hyp.shape}")
    if ref.size == 0:
        return 1.0
    return float(np.mean(ref == hyp))


def confusion_counts(reference: Sequence[int], decoded: Sequence[int], nstates: int) -> np.ndarray:
    """Counts matrix with reference states on rows and decoded states on columns."""

    ref = np.asarray(reference, dtype=np.int64)
    hyp = np.asarray(decoded, dtype=np.int64)
    if ref.shape != hyp.shape:
        raise ValueError(f"reference and decoded lengths differ: {ref.shape} vs {hyp.shape}")
    counts = np.zeros((nstates, nstates), dtype=np.int64)
    np.add.at(counts, (ref, hyp), 1)
    return counts


def per_state_accuracy(reference: Sequence[int], decoded: Sequence[int], nstates: int) -> Dict[int, float]:
    """Recall per reference state; states that never occur in the reference are omitted."""

    counts = confusion_counts(reference, decoded, nstates)
    totals = counts.sum(axis=1)
    return {s: float(counts[s, s] / totals[s]) for s in range(nstates) if totals[s] > 0}


def state_switches(path: Sequence[int]) -> int:
    return sum(1 for prev, cur in zip(path, path[1:]) if prev != cur)


def evaluate_experiment(model: Model, data: ExperimentData) -> Dict[str, float]:
    """
    Decode ``data`` and score the path against its reference states.

    Returns
    -------
    row
        ``n_steps``, ``accuracy``, ``log10_path_probability`` (``-inf`` when the path
        probability underflows to zero) and ``switches``.
    """

    trellis = viterbi_trellis(model, data.symbols())
    path = trellis.best_path()
    prob = trellis.best_path_probability()
    return {
        "n_steps": float(len(path)),
        "accuracy": path_accuracy(data.reference_states(), path),
        "log10_path_probability": math.log10(prob) if prob > 0 else float("-inf"),
        "switches": float(state_switches(path)),
    }
