"""Leaf-node shape geometry. No engine imports.

Each generator returns a shapely Polygon in user-space coordinates; the
drawing surface maps it through its current transform when clipping.
"""

from __future__ import annotations

import math

from shapely.geometry import Polygon

SQRT3 = math.sqrt(3.0)


def regular_polygon_path(cx: float, cy: float, radius: float, sides: int, start_angle: float) -> Polygon:
    """Regular polygon with vertices at ``radius`` from the center."""
    step = 2.0 * math.pi / sides
    return Polygon(
        [
            (cx + radius * math.cos(start_angle + step * i), cy + radius * math.sin(start_angle + step * i))
            for i in range(sides)
        ]
    )


def hexagon_path(cx: float, cy: float, radius: float) -> Polygon:
    """Pointy-top hexagon; first vertex straight below the center (+90°)."""
    return regular_polygon_path(cx, cy, radius, 6, math.pi / 2)


def octagon_path(cx: float, cy: float, radius: float) -> Polygon:
    """Octagon with flat top/bottom/left/right edges (first vertex at +22.5°)."""
    return regular_polygon_path(cx, cy, radius, 8, math.pi / 8)


def rect_path(x: float, y: float, width: float, height: float) -> Polygon:
    return Polygon([(x, y), (x + width, y), (x + width, y + height), (x, y + height)])


def square_path(cx: float, cy: float, side: float) -> Polygon:
    half = side / 2
    return rect_path(cx - half, cy - half, side, side)


def l_tromino_path(x: float, y: float, unit: float) -> Polygon:
    """L-tromino filling three quarters of the 2×2 box anchored at (x, y).

    The missing quarter is the bottom-right unit square.
    """
    return Polygon(
        [
            (x, y),
            (x + 2 * unit, y),
            (x + 2 * unit, y + unit),
            (x + unit, y + unit),
            (x + unit, y + 2 * unit),
            (x, y + 2 * unit),
        ]
    )


def triangle_path(cx: float, cy: float, side: float, point_up: bool) -> Polygon:
    """Equilateral triangle centered on its centroid."""
    height = side * SQRT3 / 2
    half = side / 2
    apex = height * 2 / 3
    base = height / 3
    if point_up:
        return Polygon([(cx, cy - apex), (cx + half, cy + base), (cx - half, cy + base)])
    return Polygon([(cx, cy + apex), (cx - half, cy - base), (cx + half, cy - base)])


def rhombus_path(cx: float, cy: float, width: float, height: float) -> Polygon:
    half_w = width / 2
    half_h = height / 2
    return Polygon([(cx, cy - half_h), (cx + half_w, cy), (cx, cy + half_h), (cx - half_w, cy)])
