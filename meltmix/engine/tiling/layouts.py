"""Shape layouts — one drawing routine per tiling shape.

Each layout receives the output surface, the pre-tiled raster and the tiling
parameters, then walks an overscanned grid of positions so that rotated or
skewed tiles never leave gaps at the borders. Clipped shapes draw the whole
pre-tiled raster centered on the shape, so every tile shows the middle of the
pattern.
"""

from __future__ import annotations

import math
from typing import Callable

from shapely.geometry import Polygon

from meltmix.errors import DrawSurfaceFailure
from meltmix.models.params import TileShape, TilingParams
from meltmix.models.raster import Raster
from meltmix.utils.shapes import (
    SQRT3,
    hexagon_path,
    l_tromino_path,
    octagon_path,
    rect_path,
    rhombus_path,
    square_path,
    triangle_path,
)
from meltmix.utils.surface import DrawSurface

LayoutFn = Callable[[DrawSurface, Raster, TilingParams, int, int], None]

_LAYOUTS: dict[TileShape, LayoutFn] = {}

# square_triangle: relative triangle row height and the resulting average row
TRI_HEIGHT_REL = 0.06
AVG_ROW_HEIGHT = (1 + TRI_HEIGHT_REL) / 2


def layout(shape: TileShape):
    """Register a layout function for ``shape``."""

    def decorator(fn: LayoutFn) -> LayoutFn:
        _LAYOUTS[shape] = fn
        return fn

    return decorator


def get_layout(shape: TileShape | str) -> LayoutFn:
    try:
        return _LAYOUTS[TileShape(shape)]
    except ValueError as e:
        raise KeyError(f"Unknown tiling shape: {shape}") from e


def available_shapes() -> list[TileShape]:
    return sorted(_LAYOUTS, key=lambda s: s.value)


def _require_positive(value: float, what: str) -> float:
    if not value > 0:
        raise DrawSurfaceFailure(f"Degenerate {what}: {value}")
    return value


def _draw_clipped(surface: DrawSurface, pre: Raster, cx: float, cy: float, path: Polygon) -> None:
    """Draw ``pre`` centered on (cx, cy), clipped to ``path``."""
    surface.save()
    surface.clip(path)
    surface.draw_image(pre, cx - pre.width / 2, cy - pre.height / 2, pre.width, pre.height)
    surface.restore()


@layout(TileShape.GRID)
def grid(surface: DrawSurface, pre: Raster, params: TilingParams, nx: int, ny: int) -> None:
    tile_w = surface.width / nx
    tile_h = surface.height / ny
    scaled_w = tile_w * params.scale_factor
    scaled_h = tile_h * params.scale_factor
    offset_x = (tile_w - scaled_w) / 2
    offset_y = (tile_h - scaled_h) / 2
    for y in range(ny):
        for x in range(nx):
            surface.draw_image(pre, x * tile_w + offset_x, y * tile_h + offset_y, scaled_w, scaled_h)


@layout(TileShape.BRICK_WALL)
def brick_wall(surface: DrawSurface, pre: Raster, params: TilingParams, nx: int, ny: int) -> None:
    tile_w = surface.width / nx
    tile_h = surface.height / ny
    scaled_w = tile_w * params.scale_factor
    scaled_h = tile_h * params.scale_factor
    offset_x = (tile_w - scaled_w) / 2
    offset_y = (tile_h - scaled_h) / 2
    for y in range(-1, ny + 1):
        row_shift = tile_w / 2 if y % 2 != 0 else 0.0
        for x in range(-2, nx + 2):
            surface.draw_image(
                pre, x * tile_w - row_shift + offset_x, y * tile_h + offset_y, scaled_w, scaled_h
            )


@layout(TileShape.HERRINGBONE)
def herringbone(surface: DrawSurface, pre: Raster, params: TilingParams, nx: int, ny: int) -> None:
    plank_w = surface.width / nx * params.scale_factor
    plank_h = surface.height / ny * params.scale_factor
    step = _require_positive(min(plank_w, plank_h) / math.sqrt(2), "herringbone step")
    cols = math.ceil(surface.width / step) + 4
    rows = math.ceil(surface.height / step) + 4
    for r in range(-2, rows):
        for c in range(-2, cols):
            cx = c * step + step / 2
            cy = r * step + step / 2
            angle = math.pi / 4 if (r + c) % 2 == 0 else -math.pi / 4
            surface.save()
            # Clip in the rotated frame, draw in the unrotated one
            surface.translate(cx, cy)
            surface.rotate(angle)
            surface.clip(rect_path(-plank_w / 2, -plank_h / 2, plank_w, plank_h))
            surface.rotate(-angle)
            surface.translate(-cx, -cy)
            surface.draw_image(pre, cx - pre.width / 2, cy - pre.height / 2, pre.width, pre.height)
            surface.restore()


@layout(TileShape.SKEWED)
def skewed(surface: DrawSurface, pre: Raster, params: TilingParams, nx: int, ny: int) -> None:
    tile_w = surface.width / nx
    tile_h = surface.height / ny
    scaled_w = tile_w * params.scale_factor
    scaled_h = tile_h * params.scale_factor
    offset_x = (tile_w - scaled_w) / 2
    offset_y = (tile_h - scaled_h) / 2
    end_x = math.ceil(surface.width / tile_w) + 3
    for y in range(-2, ny + 2):
        row_shift = tile_w * params.stagger if y % 2 != 0 else 0.0
        for x in range(-3, end_x):
            shear = params.skew if x % 2 == 0 else -params.skew
            surface.save()
            surface.translate(x * tile_w - row_shift, y * tile_h)
            surface.skew_x(shear)
            surface.draw_image(pre, offset_x, offset_y, scaled_w, scaled_h)
            surface.restore()


def _hex_metrics(width: int, height: int, nx: int, ny: int) -> tuple[float, float, float]:
    """Hex radius fitted to the tile counts, plus column and row spacing."""
    radius = min(width / (nx * 1.5 + 0.5), height / (ny * SQRT3 + 0.5 * SQRT3))
    hex_w = SQRT3 * radius
    vert_dist = 2 * radius * 3 / 4
    return radius, hex_w, vert_dist


@layout(TileShape.HEXAGON)
def hexagon(surface: DrawSurface, pre: Raster, params: TilingParams, nx: int, ny: int) -> None:
    radius, hex_w, vert_dist = _hex_metrics(surface.width, surface.height, nx, ny)
    scaled_radius = radius * params.scale_factor
    cols = math.ceil(surface.width / hex_w) + 2
    rows = math.ceil(surface.height / vert_dist) + 2
    for row in range(-1, rows):
        for col in range(-1, cols):
            cx = col * hex_w + (hex_w / 2 if row % 2 != 0 else 0.0)
            cy = row * vert_dist
            _draw_clipped(surface, pre, cx, cy, hexagon_path(cx, cy, scaled_radius))


@layout(TileShape.HEXAGON_TRIANGLE)
def hexagon_triangle(surface: DrawSurface, pre: Raster, params: TilingParams, nx: int, ny: int) -> None:
    radius, hex_w, vert_dist = _hex_metrics(surface.width, surface.height, nx, ny)
    scaled_radius = radius * params.scale_factor
    scaled_side = radius * params.scale_factor
    tri_dist = scaled_radius * SQRT3 / 2 + scaled_side * SQRT3 / 6
    cols = math.ceil(surface.width / hex_w) + 2
    rows = math.ceil(surface.height / vert_dist) + 2
    for row in range(-1, rows):
        for col in range(-1, cols):
            cx = col * hex_w + (hex_w / 2 if row % 2 != 0 else 0.0)
            cy = row * vert_dist
            _draw_clipped(surface, pre, cx, cy, hexagon_path(cx, cy, scaled_radius))
            for i in range(6):
                angle = math.pi / 3 * i
                tx = cx + tri_dist * math.cos(angle)
                ty = cy + tri_dist * math.sin(angle)
                _draw_clipped(surface, pre, tx, ty, triangle_path(tx, ty, scaled_side, i % 2 == 0))


@layout(TileShape.SEMI_OCTAGON_SQUARE)
def semi_octagon_square(surface: DrawSurface, pre: Raster, params: TilingParams, nx: int, ny: int) -> None:
    unit = 1 + math.sqrt(2) / 2
    side = min(surface.width / (nx * unit), surface.height / (ny * unit))
    oct_radius = side / (2 * math.sin(math.pi / 8)) * params.scale_factor
    square_side = side * params.scale_factor
    spacing = _require_positive(oct_radius * math.cos(math.pi / 8) + square_side / 2, "octagon spacing")
    units_x = math.ceil(surface.width / spacing) + 4
    units_y = math.ceil(surface.height / spacing) + 4
    for r in range(-2, units_y):
        for c in range(-2, units_x):
            cx = c * spacing
            cy = r * spacing
            if r % 2 == c % 2:
                path = octagon_path(cx, cy, oct_radius)
            else:
                path = square_path(cx, cy, square_side)
            _draw_clipped(surface, pre, cx, cy, path)


@layout(TileShape.L_SHAPE_SQUARE)
def l_shape_square(surface: DrawSurface, pre: Raster, params: TilingParams, nx: int, ny: int) -> None:
    unit = min(surface.width / (nx * 2), surface.height / (ny * 2))
    scaled = unit * params.scale_factor
    cell = 2 * unit
    cols = math.ceil(surface.width / cell) + 2
    rows = math.ceil(surface.height / cell) + 2
    for r in range(-1, rows):
        for c in range(-1, cols):
            cell_x = c * cell
            cell_y = r * cell
            cx = cell_x + unit
            cy = cell_y + unit
            # Four trominoes around the cell, each with its own anchor and turn
            for ox, oy, angle in (
                (cell_x, cell_y + 2 * scaled, -math.pi / 2),
                (cell_x + scaled, cell_y, 0.0),
                (cell_x + scaled, cell_y + 2 * scaled, math.pi),
                (cell_x + 2 * scaled, cell_y + scaled, math.pi / 2),
            ):
                surface.save()
                surface.translate(ox, oy)
                surface.rotate(angle)
                surface.clip(l_tromino_path(0.0, 0.0, scaled))
                surface.rotate(-angle)
                surface.translate(-ox, -oy)
                surface.draw_image(pre, cx - pre.width / 2, cy - pre.height / 2, pre.width, pre.height)
                surface.restore()
            _draw_clipped(surface, pre, cx, cy, square_path(cx, cy, scaled))


@layout(TileShape.SQUARE_TRIANGLE)
def square_triangle(surface: DrawSurface, pre: Raster, params: TilingParams, nx: int, ny: int) -> None:
    """Alternating square and triangle rows.

    Side length is fitted with the average row height, which is only
    approximate; rows drift against the canvas when many are stacked.
    """
    side = min(surface.width / nx, surface.height / (ny * AVG_ROW_HEIGHT))
    scaled = side * params.scale_factor
    tri_height = scaled * TRI_HEIGHT_REL
    tallest = max(scaled, tri_height)
    _require_positive(min(scaled, tri_height), "square_triangle row height")

    cols = math.ceil(surface.width / side) + 2
    y = -tallest * 1.5
    y_end = surface.height + tallest * 2.0
    row = 0
    while y < y_end:
        square_row = row % 2 == 0
        row_shift = 0.0 if square_row else side * 0.5
        for c in range(-2, cols):
            cx = c * side + row_shift + side * 0.5
            if square_row:
                cy = y + scaled * 0.5
                path = square_path(cx, cy, scaled)
            else:
                cy = y + tri_height * 0.5
                path = triangle_path(cx, cy, scaled, c % 2 == 0)
            _draw_clipped(surface, pre, cx, cy, path)
        y += scaled if square_row else tri_height
        row += 1


@layout(TileShape.RHOMBUS)
def rhombus(surface: DrawSurface, pre: Raster, params: TilingParams, nx: int, ny: int) -> None:
    rhomb_w = surface.width / nx
    rhomb_h = surface.height / ny
    scaled_w = rhomb_w * params.scale_factor
    scaled_h = rhomb_h * params.scale_factor
    for y in range(-1, ny + 2):
        row_shift = rhomb_w / 2 if y % 2 != 0 else 0.0
        for x in range(-2, nx + 2):
            cx = x * rhomb_w + row_shift
            cy = y * rhomb_h + rhomb_h / 2
            _draw_clipped(surface, pre, cx, cy, rhombus_path(cx, cy, scaled_w, scaled_h))


@layout(TileShape.BASKETWEAVE)
def basketweave(surface: DrawSurface, pre: Raster, params: TilingParams, nx: int, ny: int) -> None:
    plank_w = surface.width / nx
    plank_h = surface.height / ny
    for r in range(-1, ny + 2):
        for c in range(-1, nx + 2):
            x = c * plank_w
            y = r * plank_h
            mid_x = x + plank_w / 2
            mid_y = y + plank_h / 2
            surface.save()
            surface.clip(rect_path(x, y, plank_w, plank_h))
            if (r // 2 + c // 2) % 2 == 0:
                surface.draw_image(pre, mid_x - pre.width / 2, mid_y - pre.height / 2, pre.width, pre.height)
            else:
                # Vertical plank: quarter turn about the plank center
                surface.translate(mid_x, mid_y)
                surface.rotate(math.pi / 2)
                surface.translate(-mid_x, -mid_y)
                surface.draw_image(
                    pre, mid_x - pre.height / 2, mid_y - pre.width / 2, pre.height, pre.width
                )
            surface.restore()
