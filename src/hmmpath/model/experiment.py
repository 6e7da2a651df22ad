"""Observed symbol sequences resolved against a model's state and symbol space."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Tuple

import numpy as np
from numpy.typing import NDArray

from hmmpath.errors.types import ObservationOrderError, UnknownStateError, UnknownSymbolError
from hmmpath.model.hmm import Model, symbol_index

TraceTriple = Tuple[int, str, str]


class Observation(NamedTuple):
    """One time step: step number, reference state index, emitted symbol index."""

    step: int
    state: int
    symbol: int


@dataclass(frozen=True)
class ExperimentData:
    """
    Ordered observations tied to one model's index space.

    The reference ``state`` of each observation is bookkeeping only (e.g. ground truth for
    evaluation); decoding reads nothing but the symbols.
    """

    time_state_symbol: Tuple[Observation, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "time_state_symbol", tuple(Observation(*o) for o in self.time_state_symbol))

    def __len__(self) -> int:
        return len(self.time_state_symbol)

    def steps(self) -> List[int]:
        return [o.step for o in self.time_state_symbol]

    def symbols(self) -> NDArray[np.int64]:
        return np.array([o.symbol for o in self.time_state_symbol], dtype=np.int64)

    def reference_states(self) -> NDArray[np.int64]:
        return np.array([o.state for o in self.time_state_symbol], dtype=np.int64)


def build_experiment_data(model: Model, trace: Iterable[TraceTriple]) -> ExperimentData:
    """
    Resolve a raw ``(step, state_name, symbol)`` trace against ``model``.

    Raises
    ------
    UnknownStateError
        A state name is not in the model's registry.
    UnknownSymbolError
        A symbol is malformed or outside the model's alphabet.
    ObservationOrderError
        Step numbers are not strictly increasing.
    """

    observations: List[Observation] = []
    prev_step = None
    for position, (step, state_name, symbol) in enumerate(trace):
        step = int(step)
        if prev_step is not None and step <= prev_step:
            raise ObservationOrderError(
                f"Observation #{position}: step {step} does not follow step {prev_step}."
            )
        prev_step = step

        try:
            state_ind = model.state_index(state_name)
        except UnknownStateError as error:
            raise UnknownStateError(f"Observation at step {step}: {error}") from error

        try:
            symbol_ind = symbol_index(symbol)
        except ValueError as error:
            raise UnknownSymbolError(f"Observation at step {step}: {error}") from error
        if symbol_ind >= model.alphabet_size:
            raise UnknownSymbolError(
                f"Observation at step {step}: symbol '{symbol}' is outside the alphabet of size {model.alphabet_size}."
            )

        observations.append(Observation(step, state_ind, symbol_ind))

    return ExperimentData(time_state_symbol=tuple(observations))
