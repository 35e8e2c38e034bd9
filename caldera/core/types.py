"""Foundational types for Caldera.

This module defines the core types used throughout the system:
- Dimensions: Lattice extent (width, depth, height)
- Point: Lattice coordinates (x, y, z)
- Direction: The six axis-aligned directions with offsets
- Edge: One adjacency of a cell
- Signal: One hop of propagated influence
- Type aliases for domain identifiers
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple, NewType

# Type aliases for domain identifiers
CellId = NewType("CellId", int)
StateName = NewType("StateName", str)


class Direction(Enum):
    """Axis-aligned directions in the voxel lattice.

    Coordinate system: x increases to the right, y increases toward the back,
    z increases upward.
    """

    LEFT = "left"
    RIGHT = "right"
    FRONT = "front"
    BACK = "back"
    DOWN = "down"
    UP = "up"

    @property
    def offset(self) -> tuple[int, int, int]:
        """Get the (dx, dy, dz) offset for this direction."""
        return _DIRECTION_OFFSETS[self]

    @property
    def opposite(self) -> Direction:
        """Get the opposite direction."""
        return _DIRECTION_OPPOSITES[self]

    @property
    def is_horizontal(self) -> bool:
        """True for directions that stay within one z-layer."""
        return self.offset[2] == 0


# Lookup tables for Direction properties
_DIRECTION_OFFSETS: dict[Direction, tuple[int, int, int]] = {
    Direction.LEFT: (-1, 0, 0),
    Direction.RIGHT: (1, 0, 0),
    Direction.FRONT: (0, -1, 0),
    Direction.BACK: (0, 1, 0),
    Direction.DOWN: (0, 0, -1),
    Direction.UP: (0, 0, 1),
}

_DIRECTION_OPPOSITES: dict[Direction, Direction] = {
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
    Direction.FRONT: Direction.BACK,
    Direction.BACK: Direction.FRONT,
    Direction.DOWN: Direction.UP,
    Direction.UP: Direction.DOWN,
}

HORIZONTAL_DIRECTIONS: frozenset[Direction] = frozenset(
    d for d in Direction if d.is_horizontal
)


class Point(NamedTuple):
    """A position in the voxel lattice."""

    x: int
    y: int
    z: int

    def __add__(self, other: object) -> Point:
        """Add a direction offset or a 3-tuple to this point."""
        if isinstance(other, Direction):
            dx, dy, dz = other.offset
            return Point(self.x + dx, self.y + dy, self.z + dz)
        if isinstance(other, tuple) and len(other) == 3:
            return Point(self.x + other[0], self.y + other[1], self.z + other[2])
        return NotImplemented

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"


class Dimensions(NamedTuple):
    """Extent of the lattice.

    Cell ids linearise points as ``x + y * width + z * width * depth``.
    """

    width: int
    depth: int
    height: int

    @property
    def cell_count(self) -> int:
        return self.width * self.depth * self.height

    @property
    def max_side(self) -> int:
        """Length of the longest side."""
        return max(self.width, self.depth, self.height)

    def contains(self, point: Point) -> bool:
        """Check if a point lies within the lattice."""
        return (
            0 <= point.x < self.width
            and 0 <= point.y < self.depth
            and 0 <= point.z < self.height
        )

    def cell_id(self, point: Point) -> CellId:
        """Get the cell id of a point.

        Raises:
            ValueError: If the point lies outside the lattice
        """
        if not self.contains(point):
            raise ValueError(f"Point {point} outside lattice {self}")
        return CellId(point.x + point.y * self.width + point.z * self.width * self.depth)

    def point(self, cell_id: int) -> Point:
        """Get the point for a cell id (inverse of cell_id).

        Raises:
            ValueError: If the id is out of range
        """
        if not 0 <= cell_id < self.cell_count:
            raise ValueError(f"Cell id {cell_id} outside lattice {self}")
        layer = self.width * self.depth
        z, rest = divmod(cell_id, layer)
        y, x = divmod(rest, self.width)
        return Point(x, y, z)

    def __str__(self) -> str:
        return f"{self.width}x{self.depth}x{self.height}"


class Edge(NamedTuple):
    """An adjacency from one cell to a neighbor.

    ``direction`` is where the originating cell lies as seen from the
    neighbor, so a signal crossing this edge carries it unchanged.
    """

    cell_id: CellId
    direction: Direction


class Signal(NamedTuple):
    """One hop of influence broadcast by a collapsed cell.

    Attributes:
        state_name: State the broadcasting cell collapsed to
        direction: Where the broadcasting state lies relative to the receiver
        distance: Hops travelled, 1 for direct neighbors
    """

    state_name: StateName
    direction: Direction
    distance: int
