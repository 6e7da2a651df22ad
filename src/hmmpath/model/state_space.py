"""State-space registry: dense indices for named HMM states."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, Tuple

from hmmpath.errors.types import ModelDomainError, UnknownStateError

# ##########  Boundary states  ##########

START_STATE: int = 0


class StateRegistry:
    """
    Bidirectional mapping between state names and dense indices ``0..n-1``.

    Indices follow declaration order. Index ``0`` is the START state and index ``n-1`` the
    END state; everything in between is an interior (emitting) state.

    Usage example
    -------------
        states = StateRegistry(["S", "rain", "sun", "E"])
        states.index("rain")   # 1
        states.name(2)         # "sun"
        list(states.interior())  # [1, 2]
    """

    def __init__(self, names: Iterable[str]) -> None:
        ordered: Tuple[str, ...] = tuple(names)
        index: Dict[str, int] = {}
        for i, name in enumerate(ordered):
            if not isinstance(name, str) or not name:
                raise ModelDomainError(f"State names must be non-empty strings, got {name!r} at position {i}.")
            if name in index:
                raise ModelDomainError(f"Duplicate state name '{name}'.")
            index[name] = i
        self._names = ordered
        self._index = index

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    @property
    def start(self) -> int:
        return START_STATE

    @property
    def end(self) -> int:
        return len(self._names) - 1

    def index(self, name: str) -> int:
        """Return index for a state name."""

        if name not in self._index:
            raise UnknownStateError(f"Unknown state '{name}'. Expected one of {list(self._names)}.")
        return self._index[name]

    def name(self, index: int) -> str:
        """Return state name for an index."""

        if index < 0 or index >= len(self._names):
            raise IndexError(f"State index {index} out of range 0..{len(self._names) - 1}.")
        return self._names[index]

    def interior(self) -> range:
        """Range over the emitting states (everything except START and END)."""

        return range(1, max(len(self._names) - 1, 1))

    def to_dict(self) -> Dict[str, int]:
        return dict(self._index)

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StateRegistry):
            return NotImplemented
        return self._names == other._names

    def __hash__(self) -> int:
        return hash(self._names)

    def __repr__(self) -> str:
        return f"StateRegistry({list(self._names)!r})"
