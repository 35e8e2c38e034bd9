"""Tests for the preset state tables and their field functions."""

import math
import random

import pytest

from caldera.core import Dimensions, Direction, Point, Signal, StateName
from caldera.generation import MapConfig, create_state_table, fields
from caldera.generation.wfc import SolverState, WFCSolver

GROUND = StateName("ground")
SKY = StateName("sky")
EDGE = StateName("edge")


class TestShapingFunctions:

    def test_fermi_dirac_midpoint(self):
        assert fields.fermi_dirac(2.0, 0.0, 1.0, 0.0) == 1.0

    def test_fermi_dirac_saturates_without_overflow(self):
        assert fields.fermi_dirac(2.0, 0.0, 0.001, 10.0) == 0.0
        assert math.isclose(fields.fermi_dirac(2.0, 0.0, 0.001, -10.0), 2.0)

    def test_gaussian_peaks_at_center(self):
        assert fields.gaussian(3.0, 1.0, 2.0, 0.5, 0.5, 1.0, 2.0) == 3.0
        assert fields.gaussian(3.0, 1.0, 2.0, 0.5, 0.5, 2.0, 2.0) < 3.0


class TestInitialFields:

    def test_sky_is_zero_on_bottom_layer(self):
        dims = Dimensions(4, 4, 4)
        assert fields.initial_sky(dims, Point(2, 2, 0)) == 0.0
        assert fields.initial_sky(dims, Point(2, 2, 3)) > fields.initial_sky(dims, Point(2, 2, 1))

    def test_ground_is_ruled_out_near_the_top(self):
        dims = Dimensions(4, 4, 4)
        assert fields.initial_ground(dims, Point(2, 2, 0)) > 0.0
        assert fields.initial_ground(dims, Point(2, 2, 3)) < 0.0

    def test_sigmoid_sky_rises_with_height(self):
        dims = Dimensions(4, 4, 8)
        values = [fields.initial_sigmoid_sky(dims, Point(0, 0, z)) for z in range(8)]
        assert values == sorted(values)
        assert all(0.0 < v < 2.0 for v in values)

    def test_edge_ring(self):
        dims = Dimensions(4, 3, 1)
        assert fields.initial_test_edge(dims, Point(0, 1, 0)) == 1.0
        assert fields.initial_test_edge(dims, Point(3, 1, 0)) == 1.0
        assert fields.initial_test_edge(dims, Point(1, 0, 0)) == 1.0
        assert fields.initial_test_edge(dims, Point(1, 2, 0)) == 1.0
        assert fields.initial_test_edge(dims, Point(1, 1, 0)) == 0.0


class TestUpdateFields:

    def test_ground_beside_ground(self):
        assert fields.update_ground(Signal(GROUND, Direction.LEFT, 1)) == fields.FLAT_GROUND_FACTOR
        assert fields.update_ground(Signal(GROUND, Direction.BACK, 1)) == fields.FLAT_GROUND_FACTOR
        assert fields.update_ground(Signal(GROUND, Direction.LEFT, 2)) == 1.0
        assert fields.update_ground(Signal(GROUND, Direction.UP, 1)) == 1.0

    def test_no_ground_above_sky(self):
        assert fields.update_ground(Signal(SKY, Direction.DOWN, 1)) == 0.0
        assert fields.update_ground(Signal(SKY, Direction.DOWN, 2)) == 0.0
        assert fields.update_ground(Signal(SKY, Direction.UP, 1)) == 1.0

    def test_no_sky_under_ground(self):
        assert fields.update_sky(Signal(GROUND, Direction.UP, 1)) == 0.0
        assert fields.update_sky(Signal(GROUND, Direction.UP, 2)) == 1.0
        assert fields.update_sky(Signal(SKY, Direction.UP, 1)) == 1.0

    def test_edge_preset_updates(self):
        assert fields.update_test_edge_ground(Signal(SKY, Direction.DOWN, 1)) == 0.0
        assert fields.update_test_edge_ground(Signal(GROUND, Direction.RIGHT, 1)) == fields.FLAT_GROUND_FACTOR
        assert fields.update_test_sky(Signal(EDGE, Direction.UP, 1)) == 0.0
        assert fields.update_test_sky(Signal(EDGE, Direction.DOWN, 1)) == 1.0

    def test_forbid_all_is_negative(self):
        assert fields.update_forbid_all(Signal(GROUND, Direction.LEFT, 1)) < 0.0


class TestPresets:

    @pytest.mark.parametrize("config", list(MapConfig))
    def test_every_preset_builds(self, config):
        states = create_state_table(config)
        assert len(states) >= 1
        assert states.names[0] == GROUND

    def test_lookup_by_value(self):
        assert MapConfig("test-100-ground") == MapConfig.TEST_100_GROUND
        assert MapConfig("mound") == MapConfig.MOUND

    def test_edge_preset_states(self):
        states = create_state_table(MapConfig.TEST_EDGE)
        assert states.names == (GROUND, EDGE, SKY)

    def test_100_ground_fills_map_without_steps(self):
        states = create_state_table(MapConfig.TEST_100_GROUND)
        solver = WFCSolver(Dimensions(5, 5, 5), states, random.Random(1))
        assert solver.wave_function_collapse() == SolverState.COMPLETE
        assert solver.step_count == 0
        assert set(solver.observations().values()) == {GROUND}

    @pytest.mark.parametrize("config", [MapConfig.SIMPLE, MapConfig.MOUND])
    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_two_state_presets_complete(self, config, seed):
        states = create_state_table(config)
        solver = WFCSolver(Dimensions(6, 5, 4), states, random.Random(seed))
        assert solver.wave_function_collapse() == SolverState.COMPLETE
        assert solver.wave.is_complete()

    @pytest.mark.slow
    def test_simple_preset_on_small_map(self):
        states = create_state_table(MapConfig.SIMPLE)
        solver = WFCSolver(Dimensions(10, 10, 10), states, random.Random(12345))
        assert solver.wave_function_collapse() == SolverState.COMPLETE
