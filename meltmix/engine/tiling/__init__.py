"""Tiling compositor and its shape layouts."""

from meltmix.engine.tiling.compositor import composite_tiles, mirror_raster, pre_tile
from meltmix.engine.tiling.layouts import available_shapes, get_layout

__all__ = ["available_shapes", "composite_tiles", "get_layout", "mirror_raster", "pre_tile"]
