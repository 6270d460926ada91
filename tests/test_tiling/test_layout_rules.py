"""Per-shape placement rules, checked against a surface that records calls."""

import math

import pytest

from meltmix.engine.tiling.layouts import (
    TRI_HEIGHT_REL,
    basketweave,
    brick_wall,
    herringbone,
    hexagon_triangle,
    semi_octagon_square,
    skewed,
    square_triangle,
)
from meltmix.models.params import TilingParams
from meltmix.models.raster import Raster
from meltmix.utils.surface import DrawSurface

# Non-square so quarter turns show up in the draw size
PRE = Raster.blank(6, 4)


class RecordingSurface(DrawSurface):
    """Surface that keeps a log of every state change and draw."""

    def __init__(self, width, height):
        self._width = width
        self._height = height
        self.calls = []

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    def resize(self, width, height):
        self._width, self._height = width, height

    def clear(self):
        pass

    def save(self):
        self.calls.append(("save", None))

    def restore(self):
        self.calls.append(("restore", None))

    def transform(self, a, b, c, d, e, f):
        self.calls.append(("transform", (a, b, c, d, e, f)))

    def rotate(self, angle):
        self.calls.append(("rotate", angle))
        super().rotate(angle)

    def clip(self, path):
        self.calls.append(("clip", path))

    def draw_image(self, image, dx, dy, dw, dh, src_rect=None):
        self.calls.append(("draw", (dx, dy, dw, dh)))

    def snapshot(self):
        return Raster.blank(self._width, self._height)

    def draws(self):
        return [args for name, args in self.calls if name == "draw"]

    def blocks(self):
        """Calls between each save and its restore, one list per tile."""
        out, current = [], None
        for name, args in self.calls:
            if name == "save":
                current = []
            elif name == "restore":
                out.append(current)
                current = None
            elif current is not None:
                current.append((name, args))
        return out


def _first(block, name):
    return next(args for n, args in block if n == name)


def _has(block, name):
    return any(n == name for n, _ in block)


def _draw_center(block):
    dx, dy, dw, dh = _first(block, "draw")
    return dx + dw / 2, dy + dh / 2


def _vertex_count(path):
    return len(path.exterior.coords) - 1


def test_brick_wall_odd_rows_shift_half_tile():
    surface = RecordingSurface(80, 40)
    brick_wall(surface, PRE, TilingParams(), 2, 2)
    rows = set()
    for dx, dy, dw, dh in surface.draws():
        assert (dw, dh) == (40, 20)
        row = round(dy / 20)
        rows.add(row % 2)
        shift = 20 if row % 2 else 0
        assert (dx + shift) % 40 == 0
    assert rows == {0, 1}


def test_herringbone_angle_alternates_with_parity():
    surface = RecordingSurface(40, 20)
    herringbone(surface, PRE, TilingParams(), 2, 2)
    step = min(20, 10) / math.sqrt(2)
    blocks = surface.blocks()
    assert blocks
    for block in blocks:
        angle = _first(block, "rotate")
        cx, cy = _draw_center(block)
        c = round((cx - step / 2) / step)
        r = round((cy - step / 2) / step)
        expected = math.pi / 4 if (r + c) % 2 == 0 else -math.pi / 4
        assert angle == pytest.approx(expected)
        minx, miny, maxx, maxy = _first(block, "clip").bounds
        assert (maxx - minx, maxy - miny) == pytest.approx((20, 10))


def test_skewed_shear_by_column_and_stagger_by_row():
    surface = RecordingSurface(40, 20)
    skewed(surface, PRE, TilingParams(skew=0.5, stagger=0.3), 4, 2)
    seen = set()
    for block in surface.blocks():
        transforms = [args for n, args in block if n == "transform"]
        tx, ty = transforms[0][4], transforms[0][5]
        shear = transforms[1][2]
        row = round(ty / 10)
        stagger = 3 if row % 2 else 0
        col = (tx + stagger) / 10
        assert col == pytest.approx(round(col))
        col = round(col)
        assert shear == (0.5 if col % 2 == 0 else -0.5)
        seen.add((row % 2, col % 2))
    assert seen == {(0, 0), (0, 1), (1, 0), (1, 1)}


def test_semi_octagon_square_parity():
    surface = RecordingSurface(40, 40)
    semi_octagon_square(surface, PRE, TilingParams(), 2, 2)
    blocks = surface.blocks()
    xs = sorted({round(_draw_center(b)[0], 6) for b in blocks})
    spacing = xs[1] - xs[0]
    kinds = set()
    for block in blocks:
        cx, cy = _draw_center(block)
        c, r = round(cx / spacing), round(cy / spacing)
        sides = _vertex_count(_first(block, "clip"))
        assert sides == (8 if r % 2 == c % 2 else 4)
        kinds.add(sides)
    assert kinds == {4, 8}


def test_hexagon_followed_by_six_triangles():
    surface = RecordingSurface(40, 40)
    hexagon_triangle(surface, PRE, TilingParams(), 2, 2)
    blocks = surface.blocks()
    assert blocks and len(blocks) % 7 == 0
    for i in range(0, len(blocks), 7):
        hexagon, triangles = blocks[i], blocks[i + 1 : i + 7]
        assert _vertex_count(_first(hexagon, "clip")) == 6
        hx, hy = _draw_center(hexagon)
        tx0, ty0 = _draw_center(triangles[0])
        dist = math.hypot(tx0 - hx, ty0 - hy)
        assert dist > 0
        for k, block in enumerate(triangles):
            path = _first(block, "clip")
            assert _vertex_count(path) == 3
            tx, ty = _draw_center(block)
            angle = math.pi / 3 * k
            assert (tx - hx, ty - hy) == pytest.approx((dist * math.cos(angle), dist * math.sin(angle)), abs=1e-9)
            _, miny, _, maxy = path.bounds
            point_up = ty - miny > maxy - ty
            assert point_up == (k % 2 == 0)


def test_basketweave_planks_turn_by_pair_parity():
    surface = RecordingSurface(40, 40)
    basketweave(surface, PRE, TilingParams(), 4, 4)
    turned = set()
    for block in surface.blocks():
        minx, miny, _, _ = _first(block, "clip").bounds
        c, r = round(minx / 10), round(miny / 10)
        dx, dy, dw, dh = _first(block, "draw")
        vertical = (r // 2 + c // 2) % 2 == 1
        turned.add(vertical)
        if vertical:
            assert _first(block, "rotate") == pytest.approx(math.pi / 2)
            assert (dw, dh) == (4, 6)
        else:
            assert not _has(block, "rotate")
            assert (dw, dh) == (6, 4)
        assert (dx + dw / 2, dy + dh / 2) == pytest.approx((minx + 5, miny + 5))
    assert turned == {True, False}


def test_square_triangle_rows_advance_by_row_height():
    surface = RecordingSurface(40, 40)
    square_triangle(surface, PRE, TilingParams(), 2, 2)
    blocks = surface.blocks()
    square = next(b for b in blocks if _vertex_count(_first(b, "clip")) == 4)
    minx, _, maxx, _ = _first(square, "clip").bounds
    scaled = maxx - minx
    tri_height = scaled * TRI_HEIGHT_REL

    # Consecutive blocks of one kind make up a row
    rows = []
    for block in blocks:
        is_square = _vertex_count(_first(block, "clip")) == 4
        if not rows or rows[-1][0] != is_square:
            rows.append((is_square, []))
        rows[-1][1].append(block)
    assert len(rows) >= 4
    assert [kind for kind, _ in rows] == [i % 2 == 0 for i in range(len(rows))]

    tops = []
    for is_square, row in rows:
        _, cy = _draw_center(row[0])
        tops.append(cy - (scaled if is_square else tri_height) / 2)
        if not is_square:
            for block in row:
                cx, ty = _draw_center(block)
                c = round((cx - scaled) / scaled)
                _, miny, _, maxy = _first(block, "clip").bounds
                assert (ty - miny > maxy - ty) == (c % 2 == 0)
    for (is_square, _), top, next_top in zip(rows, tops, tops[1:]):
        assert next_top - top == pytest.approx(scaled if is_square else tri_height)
