"""
Wave Function Collapse solver.

This is the heart of WFC - the algorithm that observes (collapses) cells
and propagates their influence until the entire lattice is determined.

Unlike tile-based WFC, each cell holds a continuous weight vector over
states rather than a set of candidates. A collapse broadcasts Signals to
cells within max_distance hops, and every state's update field turns each
Signal into a multiplicative adjustment of the receiver's weights.

The algorithm:
1. Initialize every cell from the states' initial fields
2. Find the uncollapsed cell with lowest entropy
3. Collapse it to one state (weighted random choice)
4. Propagate: broadcast the chosen state to nearby cells
5. Repeat until complete or contradiction

There is no backtracking. A contradiction ends the run; callers start
over with a fresh solver (usually with a different seed).
"""

from __future__ import annotations

import heapq
import math
import random
from collections import deque
from enum import Enum, auto
from typing import Callable, NamedTuple

from caldera.core.states import StateTable
from caldera.core.types import CellId, Dimensions, Point, Signal, StateName
from caldera.logging_config import get_logger, log_collapse, log_propagation, log_run
from .lattice import Lattice
from .probability import combine, entropy, is_degenerate, normalize, one_hot_index
from .wave import Wave, WaveCell

logger = get_logger(__name__)

CONTRADICTION_POLICIES = ("deferred", "strict")


# -----------------------------------------------------------------------------
# Exceptions
# -----------------------------------------------------------------------------


class GenerationError(Exception):
    """Base exception for a failed generation run."""

    def __init__(self, message: str, cell_id: int | None = None, point: Point | None = None):
        super().__init__(message)
        self.cell_id = cell_id
        self.point = point


class ConfigurationError(GenerationError):
    """A cell's initial field gives no state positive weight."""

    pass


class ContradictionError(GenerationError):
    """Propagation drove a cell's weights to zero before it was observed."""

    pass


# -----------------------------------------------------------------------------
# Solver
# -----------------------------------------------------------------------------


class SolverState(Enum):
    """The current state of the WFC solver."""
    UNINITIALIZED = auto()        # Nothing built yet
    INITIALIZING = auto()         # Building the wave from initial fields
    RUNNING = auto()              # Still solving, more steps needed
    COMPLETE = auto()             # All cells collapsed successfully
    CONFIGURATION_ERROR = auto()  # An initial field was unsatisfiable
    CONTRADICTION = auto()        # A cell ran out of weight before observation


_TERMINAL_FAILURES = (SolverState.CONFIGURATION_ERROR, SolverState.CONTRADICTION)


class _Node(NamedTuple):
    """Worklist entry: a cell broadcasting state_name, distance hops from its source."""
    cell_id: int
    state_name: StateName
    distance: int


class EntropyIndex:
    """
    Min-heap over uncollapsed cells keyed on entropy.

    Entries are never removed when a cell changes; a fresh entry is pushed
    and the old one is skipped when it surfaces. Keys are
    (is_nan, entropy, cell_id), which orders cells exactly like a linear
    scan: lowest entropy first, lowest id on ties, NaN cells last.
    """

    def __init__(self):
        self._heap: list[tuple[int, float, int]] = []
        self._current: dict[int, tuple[int, float]] = {}

    def __len__(self) -> int:
        return len(self._current)

    @staticmethod
    def _key(value: float) -> tuple[int, float]:
        if math.isnan(value):
            return (1, 0.0)
        return (0, value)

    def push(self, cell_id: int, value: float) -> None:
        """Record the latest entropy of a cell."""
        key = self._key(value)
        self._current[cell_id] = key
        heapq.heappush(self._heap, (key[0], key[1], cell_id))

    def discard(self, cell_id: int) -> None:
        """Forget a cell (it collapsed)."""
        self._current.pop(cell_id, None)

    def peek(self) -> int | None:
        """Lowest-entropy live cell, or None if the index is empty."""
        heap = self._heap
        while heap:
            flag, value, cell_id = heap[0]
            if self._current.get(cell_id) == (flag, value):
                return cell_id
            heapq.heappop(heap)
        return None


class WFCSolver:
    """
    The WFC algorithm implementation.

    Usage:
        solver = WFCSolver(dimensions, states, random.Random(seed))
        solver.wave_function_collapse()  # Returns SolverState.COMPLETE or raises
        observations = solver.observations()

    Or step by step:
        solver.initialize()
        while solver.step() == SolverState.RUNNING:
            pass

    A solver runs once. After it completes or fails, build a new one.
    """

    def __init__(
        self,
        dimensions: Dimensions,
        states: StateTable,
        rng: random.Random,
        max_distance: int = 2,
        jitter: float = 0.001,
        contradiction_policy: str = "deferred",
        use_entropy_index: bool = True,
        progress_callback: Callable[[int, int], None] | None = None,
    ):
        """
        Initialize the solver.

        Args:
            dimensions: Lattice extent
            states: Ordered state table; state ids are indexes into it
            rng: Random source for tie-break jitter and observations.
                 Seed it for reproducible maps.
            max_distance: How many hops a collapse broadcasts (at least 1)
            jitter: Amplitude of uniform noise added to initial entropies to
                    break ties between equally uncertain cells
            contradiction_policy: "deferred" raises when a zeroed cell is
                                  observed, "strict" raises during propagation
            use_entropy_index: Pick cells through a heap instead of a full scan
            progress_callback: Optional callback(collapsed, total) after initialize
                               and after each step
        """
        if max_distance < 1:
            raise ValueError(f"max_distance must be at least 1, got {max_distance}")
        if jitter < 0:
            raise ValueError(f"jitter must be non-negative, got {jitter}")
        if contradiction_policy not in CONTRADICTION_POLICIES:
            raise ValueError(
                f"contradiction_policy must be one of {CONTRADICTION_POLICIES}, "
                f"got {contradiction_policy!r}"
            )

        self.dimensions = dimensions
        self.states = states
        self.rng = rng
        self.max_distance = max_distance
        self.jitter = jitter
        self.contradiction_policy = contradiction_policy
        self.use_entropy_index = use_entropy_index
        self.progress_callback = progress_callback

        self.lattice = Lattice.build(dimensions)
        self.wave = Wave(states.names)
        self.state = SolverState.UNINITIALIZED
        self.step_count = 0
        self.forced_count = 0

        # Track the last collapsed cells (for visualization/debugging)
        self.last_collapsed: list[int] = []

        # Track cells modified in last propagation (for visualization/debugging)
        self.last_propagated: set[int] = set()

        self._index: EntropyIndex | None = EntropyIndex() if use_entropy_index else None

    @property
    def collapsed_count(self) -> int:
        """Number of cells that have been collapsed."""
        return self.wave.collapsed_count

    @property
    def total_cells(self) -> int:
        return self.lattice.cell_count

    # -------------------------------------------------------------------------
    # Initialization
    # -------------------------------------------------------------------------

    def initialize(self) -> None:
        """
        Build the wave from every state's initial field.

        Cells whose normalized field is one-hot collapse immediately. Other
        cells start uncollapsed with a little entropy jitter so that ties
        are broken randomly per run.

        Raises:
            ConfigurationError: If a cell's field gives no state positive weight
            RuntimeError: If the solver was already initialized
        """
        if self.state != SolverState.UNINITIALIZED:
            raise RuntimeError(f"Solver already initialized (state={self.state.name})")

        self.state = SolverState.INITIALIZING
        log_run(
            logger,
            "INITIALIZE",
            f"dimensions={self.dimensions} | states={list(self.states.names)} "
            f"| max_distance={self.max_distance}",
        )

        for cell_id, point in enumerate(self.lattice.points):
            weights = normalize(self.states.initial_weights(self.dimensions, point))
            edges = self.lattice.neighbors(cell_id)

            forced = one_hot_index(weights)
            if forced is not None:
                self.wave.add(point, edges, weights, 0.0, forced)
                self.forced_count += 1
                log_collapse(logger, 0, cell_id, point, self.wave.state_names[forced], forced=True)
                continue

            cell_entropy = entropy(weights)
            if math.isnan(cell_entropy):
                self.state = SolverState.CONFIGURATION_ERROR
                logger.error(f"No state has positive initial weight at {point} (cell {cell_id})")
                raise ConfigurationError(
                    f"Initial weights at {point} leave no possible state",
                    cell_id=cell_id,
                    point=point,
                )

            cell_entropy += self.rng.uniform(-1.0, 1.0) * self.jitter
            self.wave.add(point, edges, weights, cell_entropy)
            if self._index is not None:
                self._index.push(cell_id, cell_entropy)

        self.state = SolverState.RUNNING
        log_run(
            logger,
            "INITIALIZED",
            f"cells={self.total_cells} | forced={self.forced_count}",
        )

        # Cells forced up front count as progress too
        if self.progress_callback is not None:
            self.progress_callback(self.collapsed_count, self.total_cells)

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def min_entropy_cell(self) -> CellId | None:
        """
        Find the uncollapsed cell with minimum entropy.

        Returns None if all cells are collapsed.

        NaN entropy (a latent contradiction) never counts as smallest, so
        such cells are only picked once nothing else is left.
        """
        if self._index is not None:
            cell_id = self._index.peek()
            return None if cell_id is None else CellId(cell_id)
        return self._scan_min_entropy_cell()

    def _scan_min_entropy_cell(self) -> CellId | None:
        """Linear scan version of min_entropy_cell()."""
        observations = self.wave.observations
        entropies = self.wave.entropies

        best: int | None = None
        best_entropy = math.nan
        for cell_id in self.wave.ids():
            if observations[cell_id] is not None:
                continue
            value = entropies[cell_id]
            if best is None or (math.isnan(best_entropy) and not math.isnan(value)):
                best, best_entropy = cell_id, value
            elif value < best_entropy:
                best, best_entropy = cell_id, value

        return None if best is None else CellId(best)

    # -------------------------------------------------------------------------
    # Observation
    # -------------------------------------------------------------------------

    def observe(self, cell_id: int) -> StateName:
        """
        Collapse a cell to a single state using weighted random selection.

        States with higher weights are more likely to be chosen.

        Returns the name of the chosen state.

        Raises:
            ContradictionError: If no state has positive weight left
        """
        weights = self.wave.weights[cell_id]
        point = self.wave.points[cell_id]

        if is_degenerate(weights):
            self.state = SolverState.CONTRADICTION
            logger.warning(f"Contradiction at {self.wave.describe(cell_id)}")
            raise ContradictionError(
                f"Cell {cell_id} at {point} has no possible state left",
                cell_id=cell_id,
                point=point,
            )

        state_id = self.rng.choices(range(len(weights)), weights=weights, k=1)[0]
        self._collapse(cell_id, state_id)
        log_collapse(logger, self.step_count, cell_id, point, self.wave.state_names[state_id])
        return self.wave.state_names[state_id]

    def _collapse(self, cell_id: int, state_id: int) -> None:
        self.wave.collapse(cell_id, state_id)
        self.last_collapsed.append(cell_id)
        if self._index is not None:
            self._index.discard(cell_id)

    # -------------------------------------------------------------------------
    # Propagation
    # -------------------------------------------------------------------------

    def propagate(self, cell_id: int) -> int:
        """
        Broadcast a collapsed cell's state to cells within max_distance hops.

        Each reachable uncollapsed cell receives at most one Signal per call.
        Collapsed cells are never modified but still relay the broadcast.
        A cell forced to one-hot by its update collapses on the spot and
        starts its own broadcast from distance 0.

        Returns the number of cells whose weights were updated.

        Raises:
            ContradictionError: Under the "strict" policy, if an update leaves
                                a cell with no possible state
        """
        origin = self.wave.observation_name(cell_id)
        if origin is None:
            return 0

        queue: deque[_Node] = deque([_Node(cell_id, origin, 0)])
        visited: set[int] = {cell_id}
        updated = 0
        forced = 0

        while queue:
            node = queue.popleft()
            distance = node.distance + 1

            for neighbor_id, direction in self.lattice.neighbors(node.cell_id):
                if neighbor_id in visited:
                    continue
                visited.add(neighbor_id)

                if not self.wave.is_collapsed(neighbor_id):
                    signal = Signal(node.state_name, direction, distance)
                    forced_state = self._apply_signal(neighbor_id, signal)
                    updated += 1

                    if forced_state is not None:
                        forced += 1
                        queue.append(_Node(neighbor_id, forced_state, 0))
                        continue

                # Continue the propagation up to max_distance
                if distance < self.max_distance:
                    queue.append(_Node(neighbor_id, node.state_name, distance))

        log_propagation(logger, self.step_count, cell_id, updated, forced)
        return updated

    def _apply_signal(self, cell_id: int, signal: Signal) -> StateName | None:
        """
        Combine a Signal's update vector into a cell.

        Returns the state name if the update forced the cell to collapse.
        """
        update = self.states.update_weights(signal)
        weights = combine(self.wave.weights[cell_id], update)
        self.last_propagated.add(cell_id)

        forced = one_hot_index(weights)
        if forced is not None:
            self._collapse(cell_id, forced)
            self.forced_count += 1
            state_name = self.wave.state_names[forced]
            log_collapse(logger, self.step_count, cell_id, self.wave.points[cell_id], state_name, forced=True)
            return state_name

        cell_entropy = entropy(weights)
        self.wave.update(cell_id, weights, cell_entropy)
        if self._index is not None:
            self._index.push(cell_id, cell_entropy)

        if math.isnan(cell_entropy):
            point = self.wave.points[cell_id]
            if self.contradiction_policy == "strict":
                self.state = SolverState.CONTRADICTION
                logger.warning(f"Contradiction at {point} from {signal}")
                raise ContradictionError(
                    f"Cell {cell_id} at {point} lost every state to {signal}",
                    cell_id=cell_id,
                    point=point,
                )
            logger.debug(f"Latent contradiction at {point} (cell {cell_id}) from {signal}")

        return None

    # -------------------------------------------------------------------------
    # Main loop
    # -------------------------------------------------------------------------

    def step(self) -> SolverState:
        """
        Perform one step of WFC: observe one cell and propagate from it.

        Returns the current solver state after this step (RUNNING or COMPLETE).

        Raises:
            ContradictionError: If the chosen cell has no possible state
            RuntimeError: If the solver is not initialized or already failed
        """
        if self.state == SolverState.COMPLETE:
            return self.state
        if self.state != SolverState.RUNNING:
            raise RuntimeError(f"Cannot step a solver in state {self.state.name}")

        self.last_propagated.clear()
        self.last_collapsed.clear()

        cell_id = self.min_entropy_cell()
        if cell_id is None:
            self.state = SolverState.COMPLETE
            log_run(
                logger,
                "COMPLETE",
                f"steps={self.step_count} | forced={self.forced_count}",
            )
            return self.state

        self.step_count += 1
        self.observe(cell_id)
        self.propagate(cell_id)

        if self.progress_callback is not None:
            self.progress_callback(self.collapsed_count, self.total_cells)

        return self.state

    def wave_function_collapse(self) -> SolverState:
        """
        Run the solver to completion.

        Returns SolverState.COMPLETE on success.

        Raises:
            ConfigurationError: If an initial field is unsatisfiable
            ContradictionError: If a cell runs out of possible states
        """
        self.initialize()
        while self.step() == SolverState.RUNNING:
            pass
        return self.state

    # -------------------------------------------------------------------------
    # Read views
    # -------------------------------------------------------------------------

    @property
    def failed(self) -> bool:
        return self.state in _TERMINAL_FAILURES

    def observations(self) -> dict[Point, StateName | None]:
        """Map every point to its observed state (None while uncollapsed)."""
        return dict(self.wave.observed_points())

    def cells(self) -> list[WaveCell]:
        """Snapshots of every cell in id order."""
        return list(self.wave.cells())
