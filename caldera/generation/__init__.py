"""Voxel map generation for Caldera."""

from .mapgen import GeneratedMap, build_solver, generate_map
from .presets import MapConfig, create_state_table

__all__ = [
    "GeneratedMap",
    "build_solver",
    "generate_map",
    "MapConfig",
    "create_state_table",
]
