"""Deterministic synthetic observation traces sampled from a model."""

from __future__ import annotations

from typing import List

import numpy as np

from hmmpath.model.experiment import TraceTriple
from hmmpath.model.hmm import Model, symbol_char


def _normalized(row: np.ndarray) -> np.ndarray | None:
    total = float(row.sum())
    if total <= 0.0:
        return None
    return row / total


def sample_trace(model: Model, n_steps: int, seed: int = 0) -> List[TraceTriple]:
    """
    Sample a ``(step, state_name, symbol)`` trace by walking the model from START.

    Transition and emission rows are normalized before sampling. The walk stops before
    ``n_steps`` when it reaches END, lands on a state with no transition mass, or lands on a
    state that cannot emit.

    Usage example
    -------------
        trace = sample_trace(model, 50, seed=3)
        data = build_experiment_data(model, trace)
    """

    if n_steps < 0:
        raise ValueError(f"n_steps must be non-negative, got {n_steps}")

    rng = np.random.default_rng(seed)
    trace: List[TraceTriple] = []
    state = model.states.start
    for step in range(n_steps):
        p_next = _normalized(model.transition_prob[state])
        if p_next is None:
            break
        state = int(rng.choice(model.nstates, p=p_next))
        if state == model.states.end:
            break
        p_emit = _normalized(model.state_symbol_prob[state])
        if p_emit is None:
            break
        symbol = int(rng.choice(model.alphabet_size, p=p_emit))
        trace.append((step, model.state_name(state), symbol_char(symbol)))
    return trace
