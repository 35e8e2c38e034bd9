"""Core domain types for Caldera.

This module contains pure domain types with no I/O.

Usage:
    from caldera.core import Dimensions, Point, Direction, StateTable
"""

# Types
from .types import (
    CellId,
    StateName,
    Direction,
    HORIZONTAL_DIRECTIONS,
    Point,
    Dimensions,
    Edge,
    Signal,
)

# States
from .states import (
    InitialWeightFn,
    UpdateWeightFn,
    StateDefinition,
    StateTable,
    neutral_update,
)

# Config
from .config import (
    ContradictionPolicy,
    MapSize,
    GeneratorConfig,
    DEFAULT_MAX_DISTANCE,
    DEFAULT_TILE_SIZE,
    DEFAULT_JITTER,
)

__all__ = [
    # Types
    "CellId",
    "StateName",
    "Direction",
    "HORIZONTAL_DIRECTIONS",
    "Point",
    "Dimensions",
    "Edge",
    "Signal",
    # States
    "InitialWeightFn",
    "UpdateWeightFn",
    "StateDefinition",
    "StateTable",
    "neutral_update",
    # Config
    "ContradictionPolicy",
    "MapSize",
    "GeneratorConfig",
    "DEFAULT_MAX_DISTANCE",
    "DEFAULT_TILE_SIZE",
    "DEFAULT_JITTER",
]
