"""MagicaVoxel `mv_import` placement-list export.

Each collapsed cell becomes one line placing that state's .vox model at the
cell's voxel offset:

    // Generated by Caldera
    mv_import <size>
    <x> <y> <z> <absolute path to state .vox>
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from caldera.core.types import Dimensions, Point, StateName
from caldera.logging_config import get_logger, log_export

logger = get_logger(__name__)

HEADER_COMMENT = "// Generated by Caldera"
DEFAULT_VOX_DIR = "states"


class ExportError(Exception):
    """The cells cannot be written as a placement list."""

    def __init__(self, message: str, point: Point | None = None):
        super().__init__(message)
        self.point = point


def vox_path(vox_dir: Path | str, state: str) -> Path:
    """Absolute path of a state's .vox model."""
    return (Path(vox_dir) / state).with_suffix(".vox").resolve()


def render_mv_import(
    cells: Iterable[tuple[Point, StateName | None]],
    dimensions: Dimensions,
    tile_size: int = 3,
    vox_dir: Path | str = DEFAULT_VOX_DIR,
) -> list[str]:
    """
    Build the placement list lines (without trailing newlines).

    Raises:
        ExportError: If any cell has no observed state
    """
    lines = [HEADER_COMMENT, f"mv_import {dimensions.max_side * tile_size}"]
    paths: dict[str, Path] = {}

    for point, state in cells:
        if state is None:
            raise ExportError(f"Cell at {point} has no observed state", point=point)
        if state not in paths:
            paths[state] = vox_path(vox_dir, state)
        x = point.x * tile_size
        y = point.y * tile_size
        z = point.z * tile_size
        lines.append(f"{x} {y} {z} {paths[state]}")

    return lines


def write_mv_import(
    cells: Iterable[tuple[Point, StateName | None]],
    dimensions: Dimensions,
    path: Path | str,
    tile_size: int = 3,
    vox_dir: Path | str = DEFAULT_VOX_DIR,
) -> Path:
    """
    Write a placement list for MagicaVoxel.

    Args:
        cells: (point, state) for every cell, in cell id order
        dimensions: Lattice extent (sets the import size)
        path: Output file
        tile_size: Voxels per cell side
        vox_dir: Directory holding one <state>.vox per state

    Returns:
        Path of the written file

    Raises:
        ExportError: If any cell has no observed state
        OSError: If the file cannot be written
    """
    output = Path(path)
    try:
        lines = render_mv_import(cells, dimensions, tile_size, vox_dir)
    except ExportError as e:
        log_export(logger, output, 0, success=False, details=str(e))
        raise

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text("\n".join(lines) + "\n", encoding="utf-8")
    except OSError as e:
        log_export(logger, output, 0, success=False, details=str(e))
        raise
    log_export(logger, output, len(lines) - 2)
    return output
