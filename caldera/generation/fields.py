"""
Field functions for the built-in map presets.

Initial fields shape where each state is plausible before anything has
collapsed: ground rises as a Gaussian mound in the middle of the map, and
sky becomes more likely with height.

Update fields react to Signals from collapsed cells. They return
multiplicative factors: 1.0 leaves a state alone, 0.0 rules it out, and
values above 1 make it more likely.
"""

import math

from caldera.core.types import HORIZONTAL_DIRECTIONS, Dimensions, Direction, Point, Signal

# Neighboring ground on the same layer makes ground more likely
FLAT_GROUND_FACTOR = 1.5


# =============================================================================
# Shaping functions
# =============================================================================


def fermi_dirac(a: float, u: float, kt: float, x: float) -> float:
    """Logistic step of height ``a`` centered at ``u`` with width ``kt``."""
    exponent = (x - u) / kt
    if exponent > 700.0:
        return 0.0
    return a / (math.exp(exponent) + 1.0)


def gaussian(a: float, x_0: float, y_0: float, s_x: float, s_y: float, x: float, y: float) -> float:
    """2D Gaussian of amplitude ``a`` centered on (x_0, y_0)."""
    return a * math.exp(
        -(((x - x_0) ** 2 / (2.0 * s_x ** 2)) + ((y - y_0) ** 2 / (2.0 * s_y ** 2)))
    )


# =============================================================================
# Initial fields
# =============================================================================


def initial_sky(dimensions: Dimensions, point: Point) -> float:
    """Zero at the bottom layer, growing exponentially with height."""
    return math.exp((point.z / dimensions.height) * 4.0) - 1.0


def initial_ground(dimensions: Dimensions, point: Point) -> float:
    """A wide mound centered on the map, cut off where sky takes over."""
    s = dimensions.width * 0.9
    mound = gaussian(
        1.0,
        dimensions.width / 2.0,
        dimensions.depth / 2.0,
        s,
        s,
        float(point.x),
        float(point.y),
    )
    return (1.0 - initial_sky(dimensions, point)) * mound


def initial_sigmoid_sky(dimensions: Dimensions, point: Point) -> float:
    """Smooth logistic rise toward the top layer."""
    height = float(dimensions.height)
    return fermi_dirac(2.0, 0.0, height * 0.5, height - point.z)


def initial_mound_ground(dimensions: Dimensions, point: Point) -> float:
    """A narrow mound under the logistic sky."""
    s = dimensions.width * 0.2
    mound = gaussian(
        1.0,
        dimensions.width / 2.0,
        dimensions.depth / 2.0,
        s,
        s,
        float(point.x),
        float(point.y),
    )
    return (1.0 - initial_sigmoid_sky(dimensions, point)) * mound


def initial_test_sky(dimensions: Dimensions, point: Point) -> float:
    """Gentler sky gradient used by the test presets."""
    return math.exp((point.z / dimensions.height) * 2.0) - 1.0


def initial_test_edge(dimensions: Dimensions, point: Point) -> float:
    """1 on the outer ring of every layer, 0 inside."""
    if point.x == 0 or point.x == dimensions.width - 1:
        return 1.0
    if point.y == 0 or point.y == dimensions.depth - 1:
        return 1.0
    return 0.0


def initial_test_edge_ground(dimensions: Dimensions, point: Point) -> float:
    return 1.0 - initial_test_sky(dimensions, point) - initial_test_edge(dimensions, point)


def initial_test_edge_wall(dimensions: Dimensions, point: Point) -> float:
    return initial_test_edge(dimensions, point) - initial_test_sky(dimensions, point)


# =============================================================================
# Update fields
# =============================================================================


def update_forbid_all(signal: Signal) -> float:
    """Negative factor: clamps every state to zero."""
    return -1.0


def update_ground(signal: Signal) -> float:
    """Ground likes ground beside it and never sits on sky."""
    if (
        signal.state_name == "ground"
        and signal.direction in HORIZONTAL_DIRECTIONS
        and signal.distance == 1
    ):
        return FLAT_GROUND_FACTOR
    if signal.state_name == "sky" and signal.direction == Direction.DOWN:
        return 0.0
    return 1.0


def update_sky(signal: Signal) -> float:
    """Sky never sits directly under ground."""
    if signal.state_name == "ground" and signal.direction == Direction.UP and signal.distance == 1:
        return 0.0
    return 1.0


def update_test_ground(signal: Signal) -> float:
    """Nothing solid directly on top of sky."""
    if signal.state_name == "sky" and signal.direction == Direction.DOWN and signal.distance == 1:
        return 0.0
    return 1.0


def update_test_flat(signal: Signal) -> float:
    if (
        signal.state_name == "ground"
        and signal.direction in HORIZONTAL_DIRECTIONS
        and signal.distance == 1
    ):
        return FLAT_GROUND_FACTOR
    return 1.0


def update_test_edge_ground(signal: Signal) -> float:
    return update_test_ground(signal) * update_test_flat(signal)


def update_test_sky(signal: Signal) -> float:
    """No sky directly under ground or edge."""
    if (
        signal.state_name in ("ground", "edge")
        and signal.direction == Direction.UP
        and signal.distance == 1
    ):
        return 0.0
    return 1.0
