"""Tiling compositor — mirror, pre-tile, then re-project into a shape layout.

Every stage renders onto a fresh surface the size of the source, so the output
always has the source's dimensions. A failed draw aborts the whole pass and no
partial raster escapes.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from meltmix.engine.tiling.layouts import get_layout
from meltmix.errors import DrawSurfaceFailure, InvalidDimensions
from meltmix.models.params import MirrorMode, TilingParams
from meltmix.models.raster import Raster
from meltmix.utils.surface import DrawSurface, PillowSurface

logger = logging.getLogger(__name__)

SurfaceFactory = Callable[[int, int], DrawSurface]


def mirror_raster(
    raster: Raster,
    mode: MirrorMode | str,
    surface_factory: SurfaceFactory = PillowSurface,
) -> Raster:
    """Flip ``raster`` horizontally, vertically, both or not at all."""
    mode = MirrorMode(mode)
    surface = surface_factory(raster.width, raster.height)
    flip_x = mode in (MirrorMode.HORIZONTAL, MirrorMode.BOTH)
    flip_y = mode in (MirrorMode.VERTICAL, MirrorMode.BOTH)

    surface.save()
    if flip_x or flip_y:
        surface.translate(raster.width if flip_x else 0, raster.height if flip_y else 0)
        surface.scale(-1 if flip_x else 1, -1 if flip_y else 1)
    surface.draw_image(raster, 0, 0, raster.width, raster.height)
    surface.restore()
    return surface.snapshot()


def pre_tile(
    raster: Raster,
    grid_x: int,
    grid_y: int,
    surface_factory: SurfaceFactory = PillowSurface,
) -> Raster:
    """Shrink ``raster`` into a grid_x × grid_y grid of copies at the same size."""
    grid_x = max(1, grid_x)
    grid_y = max(1, grid_y)
    surface = surface_factory(raster.width, raster.height)
    cell_w = raster.width / grid_x
    cell_h = raster.height / grid_y
    for py in range(grid_y):
        for px in range(grid_x):
            surface.draw_image(raster, px * cell_w, py * cell_h, cell_w, cell_h)
    return surface.snapshot()


def composite_tiles(
    source: Raster,
    params: TilingParams | None = None,
    surface_factory: SurfaceFactory = PillowSurface,
) -> Raster:
    """Run the full tiling pass and return a new raster the size of ``source``."""
    params = params or TilingParams()
    if source.is_empty:
        raise InvalidDimensions(f"Cannot tile a {source.width}x{source.height} raster")

    nx = max(1, params.tiles_x)
    ny = max(1, params.tiles_y)
    draw_layout = get_layout(params.shape)

    start = time.perf_counter()
    try:
        mirrored = mirror_raster(source, params.mirror, surface_factory)
        pre = pre_tile(mirrored, params.pre_tile_x, params.pre_tile_y, surface_factory)

        surface = surface_factory(source.width, source.height)
        draw_layout(surface, pre, params, nx, ny)
        result = surface.snapshot()
    except DrawSurfaceFailure as e:
        logger.error("Tiling %s aborted: %s", params.shape.value, e)
        raise

    elapsed = (time.perf_counter() - start) * 1000
    logger.debug(
        "Tiled %dx%d as %s (%dx%d tiles) in %.1fms",
        source.width,
        source.height,
        params.shape.value,
        nx,
        ny,
        elapsed,
    )
    return result
