"""
Map generation using Wave Function Collapse.

This module provides the main entry point for generating a Caldera voxel
map. It owns the retry policy: the solver itself never backtracks, so a
contradiction discards the attempt and a fresh solver runs with the next
seed.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable

from caldera.core.config import GeneratorConfig
from caldera.core.states import StateTable
from caldera.core.types import Dimensions, Point, StateName
from caldera.logging_config import get_logger, log_run
from .wfc import ContradictionError, SolverState, WFCSolver

logger = get_logger(__name__)


@dataclass(frozen=True)
class GeneratedMap:
    """
    A completed map.

    Attributes:
        dimensions: Lattice extent
        state_names: States in id order
        assignment: State of every point, in cell id order
        seed: Seed of the successful attempt (None if unseeded)
        attempts: How many attempts were needed
    """

    dimensions: Dimensions
    state_names: tuple[StateName, ...]
    assignment: dict[Point, StateName]
    seed: int | None
    attempts: int

    def counts(self) -> dict[StateName, int]:
        """Number of cells per state."""
        totals = {name: 0 for name in self.state_names}
        for state in self.assignment.values():
            totals[state] += 1
        return totals


def build_solver(
    config: GeneratorConfig,
    states: StateTable,
    rng: random.Random,
    progress_callback: Callable[[int, int], None] | None = None,
) -> WFCSolver:
    """Create a solver from a GeneratorConfig."""
    return WFCSolver(
        config.dimensions,
        states,
        rng,
        max_distance=config.max_distance,
        jitter=config.jitter,
        contradiction_policy=config.contradiction_policy,
        use_entropy_index=config.use_entropy_index,
        progress_callback=progress_callback,
    )


def generate_map(
    config: GeneratorConfig,
    states: StateTable,
    seed: int | None = None,
    max_retries: int = 1,
    progress_callback: Callable[[int, int], None] | None = None,
) -> GeneratedMap:
    """
    Generate a voxel map using Wave Function Collapse.

    Args:
        config: Lattice size and solver settings
        states: State table for this map
        seed: Random seed for reproducibility (None = random). Attempt n
              uses seed + n, so retries stay reproducible.
        max_retries: Max attempts before giving up on contradictions
        progress_callback: Optional callback(collapsed, total_cells)

    Returns:
        The completed map

    Raises:
        ConfigurationError: If an initial field is unsatisfiable (never retried)
        ContradictionError: If every attempt hit a contradiction
    """
    if max_retries < 1:
        raise ValueError(f"max_retries must be at least 1, got {max_retries}")

    for attempt in range(max_retries):
        attempt_seed = None if seed is None else seed + attempt
        rng = random.Random(attempt_seed)
        solver = build_solver(config, states, rng, progress_callback)

        try:
            state = solver.wave_function_collapse()
        except ContradictionError as e:
            if attempt + 1 == max_retries:
                logger.error(f"Map generation failed after {max_retries} attempts: {e}")
                raise
            log_run(
                logger,
                "RESTART",
                f"attempt {attempt + 1}/{max_retries} | seed={attempt_seed} | {e}",
            )
            continue

        if state != SolverState.COMPLETE:
            raise RuntimeError(f"Solver stopped in state {state.name}")

        assignment: dict[Point, StateName] = {}
        for point, observation in solver.wave.observed_points():
            if observation is None:
                raise RuntimeError(f"Cell at {point} left unobserved after completion")
            assignment[point] = observation

        return GeneratedMap(
            dimensions=config.dimensions,
            state_names=states.names,
            assignment=assignment,
            seed=attempt_seed,
            attempts=attempt + 1,
        )
