"""Tests for core types: Point, Dimensions, Direction, Edge, Signal."""

import pytest

from caldera.core import Dimensions, Direction, HORIZONTAL_DIRECTIONS, Point, Signal, StateName


class TestDirection:
    """Tests for Direction enum."""

    def test_six_directions(self):
        assert len(list(Direction)) == 6

    def test_offsets(self):
        assert Direction.LEFT.offset == (-1, 0, 0)
        assert Direction.RIGHT.offset == (1, 0, 0)
        assert Direction.FRONT.offset == (0, -1, 0)
        assert Direction.BACK.offset == (0, 1, 0)
        assert Direction.DOWN.offset == (0, 0, -1)
        assert Direction.UP.offset == (0, 0, 1)

    def test_opposites(self):
        """Each direction has its opposite, and opposites cancel out."""
        for direction in Direction:
            assert direction.opposite.opposite == direction
            offset = direction.offset
            opposite = direction.opposite.offset
            assert tuple(a + b for a, b in zip(offset, opposite)) == (0, 0, 0)

    def test_horizontal_directions(self):
        assert HORIZONTAL_DIRECTIONS == {
            Direction.LEFT, Direction.RIGHT, Direction.FRONT, Direction.BACK,
        }
        assert not Direction.UP.is_horizontal
        assert not Direction.DOWN.is_horizontal


class TestPoint:
    """Tests for Point NamedTuple."""

    def test_add_direction(self):
        pos = Point(5, 5, 5)
        assert pos + Direction.UP == Point(5, 5, 6)
        assert pos + Direction.LEFT == Point(4, 5, 5)
        assert pos + Direction.BACK == Point(5, 6, 5)

    def test_add_tuple(self):
        assert Point(1, 2, 3) + (1, 1, -1) == Point(2, 3, 2)

    def test_hashable(self):
        d = {Point(1, 2, 3): "a"}
        assert d[Point(1, 2, 3)] == "a"

    def test_str(self):
        assert str(Point(1, 2, 3)) == "(1, 2, 3)"


class TestDimensions:
    """Tests for Dimensions and the point <-> cell id mapping."""

    def test_cell_count(self):
        assert Dimensions(4, 3, 2).cell_count == 24
        assert Dimensions(1, 1, 1).cell_count == 1

    def test_max_side(self):
        assert Dimensions(4, 7, 2).max_side == 7

    def test_cell_id_linearization(self):
        """x + y * width + z * width * depth."""
        dims = Dimensions(4, 3, 2)
        assert dims.cell_id(Point(0, 0, 0)) == 0
        assert dims.cell_id(Point(1, 0, 0)) == 1
        assert dims.cell_id(Point(0, 1, 0)) == 4
        assert dims.cell_id(Point(0, 0, 1)) == 12
        assert dims.cell_id(Point(3, 2, 1)) == 23

    @pytest.mark.parametrize("dims", [Dimensions(1, 1, 1), Dimensions(4, 3, 2), Dimensions(2, 5, 3)])
    def test_cell_id_is_bijective(self, dims):
        ids = set()
        for cell_id in range(dims.cell_count):
            point = dims.point(cell_id)
            assert dims.contains(point)
            assert dims.cell_id(point) == cell_id
            ids.add(point)
        assert len(ids) == dims.cell_count

    def test_contains(self):
        dims = Dimensions(2, 2, 2)
        assert dims.contains(Point(1, 1, 1))
        assert not dims.contains(Point(2, 0, 0))
        assert not dims.contains(Point(0, -1, 0))
        assert not dims.contains(Point(0, 0, 2))

    def test_out_of_range_raises(self):
        dims = Dimensions(2, 2, 2)
        with pytest.raises(ValueError):
            dims.cell_id(Point(2, 0, 0))
        with pytest.raises(ValueError):
            dims.point(8)
        with pytest.raises(ValueError):
            dims.point(-1)


class TestSignal:
    def test_signal_is_hashable_value(self):
        a = Signal(StateName("sky"), Direction.DOWN, 1)
        b = Signal(StateName("sky"), Direction.DOWN, 1)
        assert a == b
        assert hash(a) == hash(b)
        assert a.state_name == "sky"
        assert a.distance == 1
