"""
Wave storage for Wave Function Collapse.

The Wave holds the mutable part of the generation: for every cell, a weight
vector over states, its cached entropy, and the observed state once the cell
has collapsed.

Cells are appended once, in cell id order, while the solver initializes.
After that only uncollapsed cells may change; an observed cell is frozen.
"""

from __future__ import annotations

import math
from typing import Iterator, Sequence

from pydantic import BaseModel, ConfigDict

from caldera.core.types import CellId, Edge, Point, StateName
from .probability import one_hot


class WaveCell(BaseModel):
    """
    Read-only snapshot of one cell.

    Before collapse: observation is None and weights is a distribution
    After collapse: observation names the state and weights is one-hot
    """

    model_config = ConfigDict(frozen=True)

    cell_id: int
    point: Point
    edges: tuple[Edge, ...]
    weights: tuple[float, ...]
    entropy: float
    observation: StateName | None = None

    @property
    def collapsed(self) -> bool:
        return self.observation is not None


class FrozenCellError(RuntimeError):
    """Attempt to change a cell that has already been observed."""

    def __init__(self, cell_id: int):
        super().__init__(f"Cell {cell_id} is already observed and cannot change")
        self.cell_id = cell_id


class Wave:
    """
    Columnar store of every cell's wave state.

    Columns are parallel lists indexed by cell id. ``observations`` holds
    state ids; ``state_names`` translates them for the read views.
    """

    def __init__(self, state_names: Sequence[StateName]):
        """
        Create an empty wave.

        Args:
            state_names: Names of the states, in id order
        """
        self.state_names: tuple[StateName, ...] = tuple(state_names)

        self.points: list[Point] = []
        self.edges: list[tuple[Edge, ...]] = []
        self.weights: list[list[float]] = []
        self.entropies: list[float] = []
        self.observations: list[int | None] = []

        self._collapsed_count = 0

    @property
    def state_count(self) -> int:
        return len(self.state_names)

    @property
    def count(self) -> int:
        """Number of cells added so far."""
        return len(self.points)

    @property
    def collapsed_count(self) -> int:
        return self._collapsed_count

    def __len__(self) -> int:
        return len(self.points)

    def ids(self) -> range:
        """Iterate cell ids in order."""
        return range(len(self.points))

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def add(
        self,
        point: Point,
        edges: Sequence[Edge],
        weights: Sequence[float],
        entropy: float,
        observation: int | None = None,
    ) -> CellId:
        """
        Append a cell and return its id.

        An observed cell is stored one-hot with entropy 0 whatever weights
        and entropy were passed.

        Raises:
            ValueError: If the weight vector has the wrong length or the
                        observation is not a valid state id
        """
        if len(weights) != self.state_count:
            raise ValueError(
                f"Expected {self.state_count} weights, got {len(weights)}"
            )
        if observation is not None:
            if not 0 <= observation < self.state_count:
                raise ValueError(f"Invalid state id {observation}")
            weights = one_hot(self.state_count, observation)
            entropy = 0.0
            self._collapsed_count += 1

        cell_id = CellId(len(self.points))
        self.points.append(point)
        self.edges.append(tuple(edges))
        self.weights.append(list(weights))
        self.entropies.append(entropy)
        self.observations.append(observation)
        return cell_id

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def is_collapsed(self, cell_id: int) -> bool:
        return self.observations[cell_id] is not None

    def update(self, cell_id: int, weights: Sequence[float], entropy: float) -> None:
        """
        Replace the weights and entropy of an uncollapsed cell.

        Raises:
            FrozenCellError: If the cell is already observed
        """
        if self.observations[cell_id] is not None:
            raise FrozenCellError(cell_id)
        if len(weights) != self.state_count:
            raise ValueError(
                f"Expected {self.state_count} weights, got {len(weights)}"
            )
        self.weights[cell_id] = list(weights)
        self.entropies[cell_id] = entropy

    def collapse(self, cell_id: int, state_id: int) -> None:
        """
        Fix a cell to one state: one-hot weights, entropy 0.

        Raises:
            FrozenCellError: If the cell is already observed
        """
        if self.observations[cell_id] is not None:
            raise FrozenCellError(cell_id)
        if not 0 <= state_id < self.state_count:
            raise ValueError(f"Invalid state id {state_id}")
        self.weights[cell_id] = one_hot(self.state_count, state_id)
        self.entropies[cell_id] = 0.0
        self.observations[cell_id] = state_id
        self._collapsed_count += 1

    # -------------------------------------------------------------------------
    # Read views
    # -------------------------------------------------------------------------

    def observation_name(self, cell_id: int) -> StateName | None:
        state_id = self.observations[cell_id]
        if state_id is None:
            return None
        return self.state_names[state_id]

    def get(self, cell_id: int) -> WaveCell:
        """Snapshot of one cell."""
        return WaveCell(
            cell_id=cell_id,
            point=self.points[cell_id],
            edges=self.edges[cell_id],
            weights=tuple(self.weights[cell_id]),
            entropy=self.entropies[cell_id],
            observation=self.observation_name(cell_id),
        )

    def cells(self) -> Iterator[WaveCell]:
        """Snapshots of every cell in id order."""
        for cell_id in self.ids():
            yield self.get(cell_id)

    def observed_points(self) -> Iterator[tuple[Point, StateName | None]]:
        """(point, state name) for every cell in id order."""
        for cell_id in self.ids():
            yield self.points[cell_id], self.observation_name(cell_id)

    def is_complete(self) -> bool:
        """Check if every cell has collapsed."""
        return self._collapsed_count == len(self.points)

    def describe(self, cell_id: int) -> str:
        """Compact one-line description for logs."""
        weights = ", ".join(
            "nan" if math.isnan(w) else f"{w:.3f}" for w in self.weights[cell_id]
        )
        return (
            f"Cell{{id={cell_id}, point={self.points[cell_id]}, weights=[{weights}], "
            f"entropy={self.entropies[cell_id]:.4f}, "
            f"observation={self.observation_name(cell_id)}}}"
        )
