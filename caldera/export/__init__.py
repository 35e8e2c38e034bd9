"""Exporters for generated maps."""

from .mv_import import HEADER_COMMENT, ExportError, render_mv_import, vox_path, write_mv_import

__all__ = [
    "HEADER_COMMENT",
    "ExportError",
    "render_mv_import",
    "vox_path",
    "write_mv_import",
]
