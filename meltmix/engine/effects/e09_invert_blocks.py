"""E09 — Invert Blocks.

Inverts RGB inside random squares or circles. A circle covers the pixels whose
centers lie strictly inside the block's inscribed circle. Alpha is untouched.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from meltmix.engine.context import EffectContext
from meltmix.engine.registry import TAG_RANDOM, TAG_REALTIME, effect
from meltmix.models.params import EffectKind, InvertBlocksParams
from meltmix.models.raster import Raster
from meltmix.utils.math_helpers import round_half_up

_MIN_BLOCK = 3
_MIN_MAX_BLOCK = 5
_MAX_BLOCK_FRACTION = 0.25
_BASE_BLOCKS = 5
_EXTRA_BLOCKS = 100


def circle_mask(size: int) -> NDArray[np.bool_]:
    yy, xx = np.mgrid[0:size, 0:size].astype(np.float64)
    radius = size / 2
    return (xx + 0.5 - radius) ** 2 + (yy + 0.5 - radius) ** 2 < radius * radius


@effect(
    kind=EffectKind.INVERT_BLOCKS,
    params=InvertBlocksParams,
    tags={TAG_RANDOM, TAG_REALTIME},
    description="Invert colors inside random squares and circles",
)
def invert_blocks(raster: Raster, params: InvertBlocksParams, ctx: EffectContext) -> None:
    rng = ctx.rng
    w, h = raster.width, raster.height
    fraction = params.intensity / 100

    max_block = max(_MIN_MAX_BLOCK, round_half_up(min(w, h) * fraction * _MAX_BLOCK_FRACTION))
    count = round_half_up(_BASE_BLOCKS + _EXTRA_BLOCKS * fraction)

    for _ in range(count):
        size = min(max(_MIN_BLOCK, math.floor(rng.random() * max_block)), w, h)
        x = math.floor(rng.random() * (w - size))
        y = math.floor(rng.random() * (h - size))
        square = rng.random() < 0.5

        block = raster.data[y:y + size, x:x + size, :3]
        if square:
            block[...] = 255 - block
        else:
            inside = circle_mask(size)
            block[inside] = 255 - block[inside]
