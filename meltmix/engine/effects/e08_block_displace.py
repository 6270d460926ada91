"""E08 — Block Displace.

Swaps pairs of random same-size square blocks, alpha included. Every swap is
a permutation of pixels, so the raster's pixel multiset never changes.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from meltmix.engine.context import EffectContext
from meltmix.engine.registry import TAG_RANDOM, TAG_REALTIME, effect
from meltmix.models.params import BlockDisplaceParams, EffectKind
from meltmix.models.raster import Raster
from meltmix.utils.math_helpers import round_half_up

_MIN_BLOCK = 3
_MIN_MAX_BLOCK = 5
# Largest block at intensity 100: 20% of the smaller side
_MAX_BLOCK_FRACTION = 0.2
_BASE_SWAPS = 10
_EXTRA_SWAPS = 190


def swap_blocks(data: NDArray[np.uint8], x1: int, y1: int, x2: int, y2: int, size: int) -> None:
    """Swap two size×size blocks; overlapping blocks swap pixel by pixel."""
    if abs(x1 - x2) >= size or abs(y1 - y2) >= size:
        first = data[y1:y1 + size, x1:x1 + size].copy()
        data[y1:y1 + size, x1:x1 + size] = data[y2:y2 + size, x2:x2 + size]
        data[y2:y2 + size, x2:x2 + size] = first
        return

    for by in range(size):
        for bx in range(size):
            a = data[y1 + by, x1 + bx].copy()
            data[y1 + by, x1 + bx] = data[y2 + by, x2 + bx]
            data[y2 + by, x2 + bx] = a


@effect(
    kind=EffectKind.BLOCK_DISPLACE,
    params=BlockDisplaceParams,
    tags={TAG_RANDOM, TAG_REALTIME},
    description="Swap random square blocks of pixels",
)
def block_displace(raster: Raster, params: BlockDisplaceParams, ctx: EffectContext) -> None:
    rng = ctx.rng
    w, h = raster.width, raster.height
    fraction = params.intensity / 100

    max_block = max(_MIN_MAX_BLOCK, round_half_up(min(w, h) * fraction * _MAX_BLOCK_FRACTION))
    swaps = round_half_up(_BASE_SWAPS + _EXTRA_SWAPS * fraction)

    for _ in range(swaps):
        size = min(max(_MIN_BLOCK, math.floor(rng.random() * max_block)), w, h)
        x1 = math.floor(rng.random() * (w - size))
        y1 = math.floor(rng.random() * (h - size))
        x2 = math.floor(rng.random() * (w - size))
        y2 = math.floor(rng.random() * (h - size))
        if x1 == x2 and y1 == y2:
            continue
        swap_blocks(raster.data, x1, y1, x2, y2, size)
