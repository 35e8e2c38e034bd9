"""State definitions for Caldera.

A state is something a cell can become (e.g. "ground", "sky"). Each state
carries two pure field functions:

- initial_weight(dimensions, point): prior plausibility of the state at a point
- update_weight(signal): multiplicative adjustment applied when a nearby cell
  collapses and broadcasts a Signal

Any float is accepted from either function; zero, negative and non-finite
values are sanitized by the probability utilities.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Sequence

from .types import Dimensions, Point, Signal, StateName

InitialWeightFn = Callable[[Dimensions, Point], float]
UpdateWeightFn = Callable[[Signal], float]


def neutral_update(signal: Signal) -> float:
    """Update function that leaves weights untouched."""
    return 1.0


@dataclass(frozen=True)
class StateDefinition:
    """A named state with its two field functions."""

    name: StateName
    initial_weight: InitialWeightFn
    update_weight: UpdateWeightFn = neutral_update


class StateTable(Sequence[StateDefinition]):
    """Ordered, fixed table of states for one run.

    A state's id is its index in this table. The table is immutable once
    built, so ids stay stable for the whole generation.
    """

    def __init__(self, states: Iterable[StateDefinition]):
        """
        Build the table.

        Args:
            states: State definitions in id order

        Raises:
            ValueError: If the table is empty, or a name is empty or repeated
        """
        self._states: tuple[StateDefinition, ...] = tuple(states)
        if not self._states:
            raise ValueError("A state table needs at least one state")

        self._index: dict[str, int] = {}
        for state_id, state in enumerate(self._states):
            if not state.name:
                raise ValueError(f"State {state_id} has an empty name")
            if state.name in self._index:
                raise ValueError(f"Duplicate state name: {state.name!r}")
            self._index[state.name] = state_id

    def __getitem__(self, state_id):  # type: ignore[override]
        return self._states[state_id]

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[StateDefinition]:
        return iter(self._states)

    def __repr__(self) -> str:
        return f"StateTable({list(self.names)!r})"

    @property
    def names(self) -> tuple[StateName, ...]:
        return tuple(state.name for state in self._states)

    def index_of(self, name: str) -> int:
        """Get the state id for a name.

        Raises:
            KeyError: If no state has that name
        """
        return self._index[name]

    def initial_weights(self, dimensions: Dimensions, point: Point) -> list[float]:
        """Evaluate every state's initial field at a point, in id order."""
        return [float(state.initial_weight(dimensions, point)) for state in self._states]

    def update_weights(self, signal: Signal) -> list[float]:
        """Evaluate every state's update field for a signal, in id order."""
        return [float(state.update_weight(signal)) for state in self._states]
