"""Generation settings for Caldera.

GeneratorConfig is a frozen Pydantic model so invalid settings are rejected
before any cell is built.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .types import Dimensions

ContradictionPolicy = Literal["deferred", "strict"]

# Defaults used by the built-in map presets
DEFAULT_MAX_DISTANCE = 2
DEFAULT_TILE_SIZE = 3
DEFAULT_JITTER = 0.001


class MapSize(Enum):
    """Preset lattice sizes."""

    TEST_ONE = "test-one"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    @property
    def dimensions(self) -> Dimensions:
        return _MAP_SIZE_DIMENSIONS[self]


_MAP_SIZE_DIMENSIONS: dict[MapSize, Dimensions] = {
    MapSize.TEST_ONE: Dimensions(1, 1, 1),
    MapSize.SMALL: Dimensions(10, 10, 10),
    MapSize.MEDIUM: Dimensions(20, 20, 20),
    MapSize.LARGE: Dimensions(30, 30, 30),
}


class GeneratorConfig(BaseModel):
    """Settings for one map generation.

    Attributes:
        width, depth, height: Lattice extent, each at least 1
        max_distance: How many hops a collapse broadcasts
        tile_size: Voxels per cell side in the exported placement list
        jitter: Amplitude of the tie-breaking noise added to initial entropies
        contradiction_policy: "deferred" fails when a zeroed cell is observed,
                              "strict" fails as soon as propagation zeroes it
        use_entropy_index: Select cells through a heap instead of a full scan.
                           Both give the same picks; the heap is faster.
    """

    model_config = ConfigDict(frozen=True)

    width: int = Field(ge=1)
    depth: int = Field(ge=1)
    height: int = Field(ge=1)
    max_distance: int = Field(default=DEFAULT_MAX_DISTANCE, ge=1)
    tile_size: int = Field(default=DEFAULT_TILE_SIZE, ge=1)
    jitter: float = Field(default=DEFAULT_JITTER, ge=0.0)
    contradiction_policy: ContradictionPolicy = "deferred"
    use_entropy_index: bool = True

    @property
    def dimensions(self) -> Dimensions:
        return Dimensions(self.width, self.depth, self.height)

    @classmethod
    def for_size(cls, size: MapSize, **overrides: Any) -> GeneratorConfig:
        """Build a config from a preset size, overriding any other field."""
        width, depth, height = size.dimensions
        return cls(width=width, depth=depth, height=height, **overrides)
