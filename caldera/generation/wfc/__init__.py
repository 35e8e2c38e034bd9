"""Wave Function Collapse over continuous weight vectors."""

from .lattice import Lattice, edges, enumerate_points
from .probability import add, combine, entropy, hadamard_product, normalize, one_hot_index
from .wave import Wave, WaveCell, FrozenCellError
from .solver import (
    WFCSolver,
    SolverState,
    EntropyIndex,
    GenerationError,
    ConfigurationError,
    ContradictionError,
)

__all__ = [
    "Lattice",
    "edges",
    "enumerate_points",
    "add",
    "combine",
    "entropy",
    "hadamard_product",
    "normalize",
    "one_hot_index",
    "Wave",
    "WaveCell",
    "FrozenCellError",
    "WFCSolver",
    "SolverState",
    "EntropyIndex",
    "GenerationError",
    "ConfigurationError",
    "ContradictionError",
]
