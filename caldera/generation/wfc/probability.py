"""
Weight vector utilities for Wave Function Collapse.

A cell's wave is a list of non-negative floats, one per state, summing to 1.
These helpers keep that invariant:

- normalize(): sanitize raw field output into a distribution
- entropy(): Shannon entropy in bits, used to pick the next cell
- combine(): apply a propagation update (multiplicative)

A vector of all NaN means "no valid distribution". It is what normalize()
returns when nothing positive is left, and entropy() passes it through as NaN.
"""

import math
import sys
from typing import Sequence


def _is_valid_weight(weight: float) -> bool:
    """Finite, positive and not subnormal."""
    return math.isfinite(weight) and weight >= sys.float_info.min


def normalize(weights: Sequence[float]) -> list[float]:
    """
    Scale weights to sum to 1.

    Entries that are negative, zero, subnormal or non-finite are clamped to 0
    first. If nothing positive remains, every entry becomes NaN.
    """
    cleaned = [weight if _is_valid_weight(weight) else 0.0 for weight in weights]
    total = sum(cleaned)
    if total == 0.0:
        return [math.nan] * len(cleaned)
    if math.isinf(total):
        # Sum overflowed; rescale by the largest entry first
        peak = max(cleaned)
        cleaned = [weight / peak for weight in cleaned]
        total = sum(cleaned)
    return [weight / total for weight in cleaned]


def entropy(weights: Sequence[float]) -> float:
    """
    Shannon entropy in bits, -sum(p * log2(p)).

    Zero entries contribute nothing, so a one-hot vector has entropy 0.
    Returns NaN if any entry is NaN.
    """
    result = 0.0
    for p in weights:
        if math.isnan(p):
            return math.nan
        if p > 0.0:
            result -= p * math.log2(p)
    # -0.0 for one-hot vectors
    return result + 0.0


def hadamard_product(weights: Sequence[float], update: Sequence[float]) -> list[float]:
    """Element-wise product."""
    if len(weights) != len(update):
        raise ValueError(f"Length mismatch: {len(weights)} weights, {len(update)} updates")
    return [w * u for w, u in zip(weights, update)]


def add(weights: Sequence[float], update: Sequence[float]) -> list[float]:
    """Element-wise sum. Kept for comparing against the multiplicative rule."""
    if len(weights) != len(update):
        raise ValueError(f"Length mismatch: {len(weights)} weights, {len(update)} updates")
    return [w + u for w, u in zip(weights, update)]


def combine(weights: Sequence[float], update: Sequence[float]) -> list[float]:
    """
    Apply a propagation update to a wave.

    Multiplies element-wise, clamps negative products to 0, then normalizes.
    A factor of 1 leaves a state alone, 0 rules it out, >1 favors it.
    """
    product = hadamard_product(weights, update)
    return normalize([max(p, 0.0) for p in product])


def one_hot_index(weights: Sequence[float]) -> int | None:
    """
    Index of the single certain state, if the vector is one-hot.

    One-hot means exactly one entry equals 1 and every other entry is 0.
    Returns None for anything else, including all-NaN vectors.
    """
    index = None
    for i, p in enumerate(weights):
        if p == 1.0:
            if index is not None:
                return None
            index = i
        elif p != 0.0:
            return None
    return index


def one_hot(size: int, index: int) -> list[float]:
    """Build a one-hot vector."""
    return [1.0 if i == index else 0.0 for i in range(size)]


def is_degenerate(weights: Sequence[float]) -> bool:
    """True when no state has positive weight (all zero or NaN)."""
    return not any(_is_valid_weight(p) for p in weights)
