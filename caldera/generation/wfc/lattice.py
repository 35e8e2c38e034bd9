"""
Lattice construction for Wave Function Collapse.

The Lattice is the fixed skeleton the wave lives on: every cell's point and
the axis-aligned edges to its in-bounds neighbors. It never changes during a
run, so it is built once up front.
"""

from dataclasses import dataclass
from typing import Iterator

from caldera.core.types import CellId, Dimensions, Direction, Edge, Point

# Neighbor order within each edge list. Stepping in one of these directions
# reaches the neighbor; the edge is labelled with the opposite direction.
_STEP_ORDER = (
    Direction.LEFT,
    Direction.RIGHT,
    Direction.FRONT,
    Direction.BACK,
    Direction.DOWN,
    Direction.UP,
)


def enumerate_points(dimensions: Dimensions) -> Iterator[Point]:
    """Yield every point in cell id order: z outermost, then y, then x."""
    for z in range(dimensions.height):
        for y in range(dimensions.depth):
            for x in range(dimensions.width):
                yield Point(x, y, z)


def edges(dimensions: Dimensions, point: Point) -> list[Edge]:
    """
    Build the edge list of a point.

    Each edge names the neighbor and where ``point`` lies as seen from that
    neighbor. Out-of-bounds neighbors are simply left out, so corner cells
    have three edges and interior cells six.
    """
    result: list[Edge] = []
    for step in _STEP_ORDER:
        neighbor = point + step
        if dimensions.contains(neighbor):
            result.append(Edge(dimensions.cell_id(neighbor), step.opposite))
    return result


@dataclass(frozen=True)
class Lattice:
    """
    Points and adjacency for a 3D grid.

    Attributes:
        dimensions: Extent of the grid
        points: Point of each cell, indexed by cell id
        graph: Edge list of each cell, indexed by cell id
    """
    dimensions: Dimensions
    points: tuple[Point, ...]
    graph: tuple[tuple[Edge, ...], ...]

    @classmethod
    def build(cls, dimensions: Dimensions) -> "Lattice":
        """
        Build the lattice for the given dimensions.

        Raises:
            ValueError: If any dimension is below 1
        """
        if min(dimensions) < 1:
            raise ValueError(f"Lattice dimensions must be at least 1, got {tuple(dimensions)}")

        points = tuple(enumerate_points(dimensions))
        graph = tuple(tuple(edges(dimensions, point)) for point in points)
        return cls(dimensions=dimensions, points=points, graph=graph)

    @property
    def cell_count(self) -> int:
        return len(self.points)

    def ids(self) -> range:
        """All cell ids in order."""
        return range(len(self.points))

    def point(self, cell_id: int) -> Point:
        return self.points[cell_id]

    def cell_id(self, point: Point) -> CellId:
        return self.dimensions.cell_id(point)

    def neighbors(self, cell_id: int) -> tuple[Edge, ...]:
        """Edges leaving a cell."""
        return self.graph[cell_id]
