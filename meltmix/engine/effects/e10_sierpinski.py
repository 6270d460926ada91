"""E10 — Sierpinski Carpet.

Split the rectangle into a 3×3 grid, make the center cell transparent and
repeat on the eight outer cells until the depth runs out or a cell is thinner
than a pixel. intensity → depth = clamp(round(intensity / 16), 1, 6).
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from meltmix.engine.context import EffectContext
from meltmix.engine.registry import TAG_REALTIME, effect
from meltmix.models.params import EffectKind, SierpinskiParams
from meltmix.models.raster import Raster
from meltmix.utils.math_helpers import clamp, round_half_up

_MAX_DEPTH = 6


def carpet_depth(intensity: float) -> int:
    return int(clamp(round_half_up(intensity / 16), 1, _MAX_DEPTH))


def _clear(data: NDArray[np.uint8], x: float, y: float, w: float, h: float) -> None:
    height, width = data.shape[:2]
    x0, y0 = math.floor(x), math.floor(y)
    x1 = min(width, math.floor(x + w))
    y1 = min(height, math.floor(y + h))
    if x0 >= x1 or y0 >= y1:
        return
    data[y0:y1, x0:x1, 3] = 0


@effect(
    kind=EffectKind.SIERPINSKI,
    params=SierpinskiParams,
    tags={TAG_REALTIME},
    description="Punch a Sierpinski carpet into the alpha channel",
)
def sierpinski(raster: Raster, params: SierpinskiParams, ctx: EffectContext) -> None:
    # Explicit work stack; depth ≤ 6 keeps it at most 8^6 cells
    stack = [(carpet_depth(params.intensity), 0.0, 0.0, float(raster.width), float(raster.height))]
    while stack:
        level, x, y, w, h = stack.pop()
        if level <= 0 or w < 1 or h < 1:
            continue
        sub_w, sub_h = w / 3, h / 3
        _clear(raster.data, x + sub_w, y + sub_h, sub_w, sub_h)
        for row in range(3):
            for col in range(3):
                if row == 1 and col == 1:
                    continue
                stack.append((level - 1, x + col * sub_w, y + row * sub_h, sub_w, sub_h))
