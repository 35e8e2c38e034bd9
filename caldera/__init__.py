"""Caldera - Wave Function Collapse voxel map generator."""

__version__ = "0.1.0"
