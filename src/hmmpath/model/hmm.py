"""Immutable HMM probability tables and their construction from a descriptor."""

from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from hmmpath.errors.types import ModelDomainError
from hmmpath.model.state_space import StateRegistry

MAX_ALPHABET_SIZE: int = 26

TransitionTriple = Tuple[str, str, float]
EmissionTriple = Tuple[str, str, float]


def symbol_index(symbol: str) -> int:
    """
    Map an emission symbol to its alphabet index (``'a'`` -> 0, ``'b'`` -> 1, ...).

    Only the first character is significant. It must be a lowercase ASCII letter.
    """

    if not isinstance(symbol, str) or not symbol:
        raise ValueError(f"Symbol must be a non-empty string, got {symbol!r}.")
    head = symbol[0]
    if not ("a" <= head <= "z"):
        raise ValueError(f"Symbol '{symbol}' must start with a lowercase ASCII letter.")
    return ord(head) - ord("a")


def symbol_char(index: int) -> str:
    """Inverse of :func:`symbol_index`."""

    if index < 0 or index >= MAX_ALPHABET_SIZE:
        raise ValueError(f"Symbol index {index} out of range 0..{MAX_ALPHABET_SIZE - 1}.")
    return chr(ord("a") + index)


@dataclass(frozen=True)
class ModelDescriptor:
    """
    Structured model description as produced by a text reader.

    Parameters
    ----------
    state_names
        State names in index order; the first is START, the last is END.
    alphabet_size
        Number of emission symbols (``'a'`` .. ``chr(ord('a') + alphabet_size - 1)``).
    transitions
        ``(from_state, to_state, probability)`` triples.
    emissions
        ``(state, symbol, probability)`` triples.
    """

    state_names: Tuple[str, ...]
    alphabet_size: int
    transitions: Tuple[TransitionTriple, ...] = ()
    emissions: Tuple[EmissionTriple, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "state_names", tuple(self.state_names))
        object.__setattr__(self, "transitions", tuple(tuple(t) for t in self.transitions))
        object.__setattr__(self, "emissions", tuple(tuple(e) for e in self.emissions))


@dataclass(frozen=True, eq=False)
class Model:
    """
    Discrete HMM with explicit START and END boundary states.

    ``transition_prob[i, j]`` is the probability of moving from state ``i`` to ``j``;
    ``state_symbol_prob[i, k]`` the probability that state ``i`` emits symbol ``k``. Both
    tables are read-only. Construction rejects non-zero mass in the END row, the START column
    and the emission rows of both boundary states; the decoder relies on this without
    re-checking. :func:`build_model` additionally rejects boundary declarations in a
    descriptor even when their probability is zero.
    """

    states: StateRegistry
    transition_prob: NDArray[np.float64] = field(repr=False)
    state_symbol_prob: NDArray[np.float64] = field(repr=False)

    def __post_init__(self) -> None:
        n = len(self.states)
        trans = np.array(self.transition_prob, dtype=np.float64)
        emit = np.array(self.state_symbol_prob, dtype=np.float64)
        if trans.shape != (n, n):
            raise ModelDomainError(f"transition_prob must have shape ({n}, {n}), got {trans.shape}.")
        if emit.ndim != 2 or emit.shape[0] != n:
            raise ModelDomainError(f"state_symbol_prob must have shape ({n}, K), got {emit.shape}.")
        start, end = self.states.start, self.states.end
        if np.any(trans[end, :] != 0.0):
            raise ModelDomainError("Transition from the ending state is forbidden.")
        if np.any(trans[:, start] != 0.0):
            raise ModelDomainError("Transition to the starting state is forbidden.")
        if np.any(emit[[start, end], :] != 0.0):
            raise ModelDomainError("Symbol emission from the beginning or the ending states is forbidden.")
        trans.setflags(write=False)
        emit.setflags(write=False)
        object.__setattr__(self, "transition_prob", trans)
        object.__setattr__(self, "state_symbol_prob", emit)

    @property
    def nstates(self) -> int:
        return len(self.states)

    @property
    def alphabet_size(self) -> int:
        return int(self.state_symbol_prob.shape[1])

    def state_index(self, name: str) -> int:
        return self.states.index(name)

    def state_name(self, index: int) -> str:
        return self.states.name(index)

    def transition(self, from_state: int, to_state: int) -> float:
        return float(self.transition_prob[from_state, to_state])

    def emission(self, state: int, symbol: int) -> float:
        return float(self.state_symbol_prob[state, symbol])


def _check_probability(prob: float, what: str) -> float:
    try:
        value = float(prob)
    except (TypeError, ValueError) as error:
        raise ModelDomainError(f"{what}: probability {prob!r} is not a number.") from error
    if not math.isfinite(value) or value < 0.0 or value > 1.0:
        raise ModelDomainError(f"{what}: probability {value} must lie in [0, 1].")
    return value


def _resolve_state(states: StateRegistry, name: str, what: str) -> int:
    if name not in states:
        raise ModelDomainError(f"{what}: state '{name}' is not declared in the model.")
    return states.index(name)


def build_model(descriptor: ModelDescriptor) -> Model:
    """
    Build a :class:`Model` from a descriptor, enforcing the boundary-state rules.

    Raises
    ------
    ModelDomainError
        On a transition from END, a transition into START, an emission from START or END,
        fewer than two states, an undeclared state name, a symbol outside the alphabet, or a
        probability outside [0, 1].
    """

    states = StateRegistry(descriptor.state_names)
    nstates = len(states)
    if nstates < 2:
        raise ModelDomainError(f"A model needs at least the START and END states, got {nstates} state(s).")

    alphabet_size = int(descriptor.alphabet_size)
    if alphabet_size < 1 or alphabet_size > MAX_ALPHABET_SIZE:
        raise ModelDomainError(f"Alphabet size must be within 1..{MAX_ALPHABET_SIZE}, got {alphabet_size}.")

    transition_prob = np.zeros((nstates, nstates), dtype=np.float64)
    for from_name, to_name, prob in descriptor.transitions:
        what = f"Transition {from_name} -> {to_name}"
        from_ind = _resolve_state(states, from_name, what)
        to_ind = _resolve_state(states, to_name, what)

        if from_ind == states.end:
            raise ModelDomainError(f"{what}: transition from the ending state is forbidden.")
        if to_ind == states.start:
            raise ModelDomainError(f"{what}: transition to the starting state is forbidden.")

        transition_prob[from_ind, to_ind] = _check_probability(prob, what)

    state_symbol_prob = np.zeros((nstates, alphabet_size), dtype=np.float64)
    for state_name, symbol, prob in descriptor.emissions:
        what = f"Emission {state_name} -> {symbol!r}"
        state_ind = _resolve_state(states, state_name, what)
        try:
            symbol_ind = symbol_index(symbol)
        except ValueError as error:
            raise ModelDomainError(f"{what}: {error}") from error
        if symbol_ind >= alphabet_size:
            raise ModelDomainError(f"{what}: symbol is outside the alphabet of size {alphabet_size}.")

        if state_ind in (states.start, states.end):
            raise ModelDomainError(f"{what}: symbol emission from the beginning or the ending states is forbidden.")

        state_symbol_prob[state_ind, symbol_ind] = _check_probability(prob, what)

    return Model(states=states, transition_prob=transition_prob, state_symbol_prob=state_symbol_prob)


def describe_model(model: Model) -> ModelDescriptor:
    """Return the sparse descriptor of a model (non-zero cells only)."""

    names = model.states.names
    transitions: Sequence[TransitionTriple] = [
        (names[i], names[j], float(model.transition_prob[i, j]))
        for i, j in zip(*np.nonzero(model.transition_prob))
    ]
    emissions: Sequence[EmissionTriple] = [
        (names[i], symbol_char(int(k)), float(model.state_symbol_prob[i, k]))
        for i, k in zip(*np.nonzero(model.state_symbol_prob))
    ]
    return ModelDescriptor(
        state_names=names,
        alphabet_size=model.alphabet_size,
        transitions=tuple(transitions),
        emissions=tuple(emissions),
    )
