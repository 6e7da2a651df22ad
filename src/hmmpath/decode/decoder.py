"""Viterbi decoding of the most probable hidden-state path."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from hmmpath.errors.types import NotImplementedFeatureError
from hmmpath.model.experiment import ExperimentData
from hmmpath.model.hmm import Model
from hmmpath.model.state_space import START_STATE

# Probability of being in START before the first observation.
HMM_BEGIN_STATE_PROBABILITY: float = 1.0


def candidate_states(nstates: int) -> Tuple[int, int]:
    """
    Half-open index range searched for predecessors and for the final state.

    START and END never emit, so from step 1 on their scores are exactly zero and only the
    interior states can sit on a path. A model without interior states searches everything.
    """

    if nstates > 2:
        return 1, nstates - 1
    return 0, nstates


# ---------- Trellis ----------


@dataclass(frozen=True, eq=False)
class ViterbiTrellis:
    """
    Dynamic-programming tables of one decode call.

    Attributes
    ----------
    sequence_probability
        ``sequence_probability[t, s]`` is the probability of the best state path over steps
        ``0..t`` that ends in state ``s`` and explains the symbols seen so far. Shape (T, S).
    prev_seq_state
        ``prev_seq_state[t, s]`` is the state at step ``t-1`` on that best path. Row 0 holds
        START, the implicit predecessor of the first step. Shape (T, S).

    Both arrays are owned by this object alone.
    """

    sequence_probability: NDArray[np.float64]
    prev_seq_state: NDArray[np.int64]

    @property
    def maxtime(self) -> int:
        return int(self.sequence_probability.shape[0])

    @property
    def nstates(self) -> int:
        return int(self.sequence_probability.shape[1])

    def predecessor(self, t: int, state: int) -> Optional[int]:
        """Back-pointer of ``state`` at step ``t``; ``None`` at ``t == 0`` (START is not a trellis step)."""

        if t < 0 or t >= self.maxtime:
            raise IndexError(f"Step {t} out of range 0..{self.maxtime - 1}.")
        if t == 0:
            return None
        return int(self.prev_seq_state[t, state])

    def best_final_state(self) -> Optional[int]:
        """State maximizing the last row; ties resolve to the lowest index."""

        if self.maxtime == 0:
            return None
        lo, hi = candidate_states(self.nstates)
        return lo + int(np.argmax(self.sequence_probability[-1, lo:hi]))

    def best_path_probability(self) -> float:
        """Probability of the decoded path (0.0 for an empty trellis)."""

        last = self.best_final_state()
        if last is None:
            return 0.0
        return float(self.sequence_probability[-1, last])

    def best_path(self) -> List[int]:
        """Recover the most probable state sequence by walking the back-pointers."""

        last = self.best_final_state()
        if last is None:
            return []

        path = [0] * self.maxtime
        path[-1] = last
        for t in range(self.maxtime - 1, 0, -1):
            path[t - 1] = int(self.prev_seq_state[t, path[t]])
        return path


# ---------- Viterbi core ----------


def _check_symbols(model: Model, symbols: Sequence[int] | NDArray[np.integer]) -> NDArray[np.int64]:
    obs = np.asarray(symbols, dtype=np.int64)
    if obs.ndim != 1:
        raise ValueError(f"symbols must be one-dimensional, got shape {obs.shape}")
    if obs.size and (obs.min() < 0 or obs.max() >= model.alphabet_size):
        raise ValueError(f"symbols must lie within 0..{model.alphabet_size - 1}")
    return obs


def viterbi_trellis(model: Model, symbols: Sequence[int] | NDArray[np.integer]) -> ViterbiTrellis:
    """
    Fill the Viterbi tables for a symbol sequence.

    Parameters
    ----------
    model
        Model whose boundary-state rules already hold.
    symbols
        Emitted symbol indices, one per time step.

    Returns
    -------
    trellis
        Freshly allocated tables; nothing is shared between calls.

    Notes
    -----
    Scores are plain probability products without log-space scaling, so long sequences may
    underflow to 0.0. Among equal candidate scores the lowest predecessor index wins.
    """

    obs = _check_symbols(model, symbols)
    maxtime = int(obs.shape[0])
    nstates = model.nstates
    trans = model.transition_prob
    emit = model.state_symbol_prob
    lo, hi = candidate_states(nstates)

    sequence_probability = np.zeros((maxtime, nstates), dtype=np.float64)
    prev_seq_state = np.full((maxtime, nstates), START_STATE, dtype=np.int64)

    if maxtime:
        # step 0: the predecessor is START by definition
        sequence_probability[0] = HMM_BEGIN_STATE_PROBABILITY * trans[START_STATE] * emit[:, obs[0]]

    cols = np.arange(nstates)
    for t in range(1, maxtime):
        # cand[p, cur] = P(best path to lo + p) * P(lo + p -> cur) * P(cur emits symbol)
        cand = sequence_probability[t - 1, lo:hi, None] * trans[lo:hi] * emit[:, obs[t]][None, :]
        # argmax keeps the first maximum, i.e. the lowest predecessor index
        best = np.argmax(cand, axis=0)
        prev_seq_state[t] = lo + best
        sequence_probability[t] = cand[best, cols]

    sequence_probability.setflags(write=False)
    prev_seq_state.setflags(write=False)
    return ViterbiTrellis(sequence_probability=sequence_probability, prev_seq_state=prev_seq_state)


def decode_symbols(model: Model, symbols: Sequence[int] | NDArray[np.integer]) -> List[int]:
    """Most probable state indices for a raw symbol sequence. Empty input gives ``[]``."""

    if len(symbols) == 0:
        return []
    return viterbi_trellis(model, symbols).best_path()


def decode(model: Model, data: ExperimentData) -> List[int]:
    """
    Decode the most probable hidden-state path for an experiment.

    Only the symbols of ``data`` are read; its reference states play no part.

    Returns
    -------
    path
        State indices, one per observation.
    """

    return decode_symbols(model, data.symbols())


def decode_names(model: Model, data: ExperimentData) -> List[str]:
    """Like :func:`decode` but returns state names."""

    return [model.state_name(i) for i in decode(model, data)]


# ---------- Soft decoding ----------


def forward_backward(model: Model, data: ExperimentData) -> NDArray[np.float64]:
    """
    Per-step ``(forward, backward)`` probabilities for every state.

    Declared for interface completeness; there is no implementation.

    Raises
    ------
    NotImplementedFeatureError
        Always.
    """

    del model, data
    raise NotImplementedFeatureError("Forward-backward (soft) decoding is not implemented.")
