"""
Built-in state tables.

SIMPLE is the real map: a ground mound under a sky gradient. The TEST_*
presets are small, predictable configurations that exercise one engine
behavior each.
"""

from enum import Enum

from caldera.core.states import StateDefinition, StateTable, neutral_update
from caldera.core.types import StateName
from . import fields


class MapConfig(Enum):
    """Named state table presets."""

    TEST_INITIAL_WEIGHTS_ERROR = "test-initial-weights-error"
    TEST_CONTRADICTION = "test-contradiction"
    TEST_EDGE = "test-edge"
    TEST_100_GROUND = "test-100-ground"
    SIMPLE = "simple"
    MOUND = "mound"


def _state(name: str, initial, update=neutral_update) -> StateDefinition:
    return StateDefinition(StateName(name), initial, update)


def _constant(value: float):
    def initial(dimensions, point) -> float:
        return value
    return initial


def create_state_table(config: MapConfig) -> StateTable:
    """
    Build the state table for a preset.

    - TEST_INITIAL_WEIGHTS_ERROR: one state weighted 0 everywhere
      (initialization fails)
    - TEST_CONTRADICTION: two states that any broadcast wipes out
      (the second observation fails)
    - TEST_100_GROUND: ground everywhere, decided before the first step
    - TEST_EDGE: ground floor with an edge ring, sky above
    - SIMPLE: ground mound under a sky gradient
    - MOUND: narrow ground mound under a logistic sky, nothing forced up front
    """
    if config == MapConfig.TEST_INITIAL_WEIGHTS_ERROR:
        return StateTable([
            _state("ground", _constant(0.0), fields.update_forbid_all),
        ])

    if config == MapConfig.TEST_CONTRADICTION:
        return StateTable([
            _state("ground", _constant(1.0), fields.update_forbid_all),
            _state("sky", _constant(1.0), fields.update_forbid_all),
        ])

    if config == MapConfig.TEST_100_GROUND:
        return StateTable([
            _state("ground", _constant(1.0)),
            _state("sky", _constant(0.0)),
        ])

    if config == MapConfig.TEST_EDGE:
        return StateTable([
            _state("ground", fields.initial_test_edge_ground, fields.update_test_edge_ground),
            _state("edge", fields.initial_test_edge_wall, fields.update_test_ground),
            _state("sky", fields.initial_test_sky, fields.update_test_sky),
        ])

    if config == MapConfig.SIMPLE:
        return StateTable([
            _state("ground", fields.initial_ground, fields.update_ground),
            _state("sky", fields.initial_sky, fields.update_sky),
        ])

    if config == MapConfig.MOUND:
        return StateTable([
            _state("ground", fields.initial_mound_ground, fields.update_ground),
            _state("sky", fields.initial_sigmoid_sky, fields.update_sky),
        ])

    raise ValueError(f"Unknown map config: {config}")
