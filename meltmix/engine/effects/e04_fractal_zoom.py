"""E04 — Fractal Zoom.

Iterative inverse mapping. At level k the raster is split into 2^(k-1) segments
per axis; the lookup point is pulled toward (or pushed from) the center of the
segment containing it by ``1 + zoom / k``. Deeper levels have less influence.

intensity → depth = clamp(round(intensity / 20), 1, 5)
intensity → zoom  = (intensity - 1) / 99 * 1.6 - 0.8   (pinch -0.8 … bulge +0.8)
"""

from __future__ import annotations

import numpy as np

from meltmix.engine.context import EffectContext
from meltmix.engine.registry import TAG_SAMPLING, effect
from meltmix.models.params import EffectKind, FractalZoomParams
from meltmix.models.raster import Raster
from meltmix.utils.math_helpers import clamp, round_half_up
from meltmix.utils.sampler import sample_many

_MAX_DEPTH = 5
_ZOOM_RANGE = 1.6


def zoom_depth(intensity: float) -> int:
    return int(clamp(round_half_up(intensity / 20), 1, _MAX_DEPTH))


def zoom_factor(intensity: float) -> float:
    return ((intensity - 1) / 99.0) * _ZOOM_RANGE - _ZOOM_RANGE / 2


@effect(
    kind=EffectKind.FRACTAL_ZOOM,
    params=FractalZoomParams,
    tags={TAG_SAMPLING},
    description="Recursive quadrant zoom/pinch via inverse mapping",
)
def fractal_zoom(raster: Raster, params: FractalZoomParams, ctx: EffectContext) -> None:
    source = ctx.require_source()
    h, w = raster.height, raster.width
    max_depth = zoom_depth(params.intensity)
    zoom = zoom_factor(params.intensity)

    sy, sx = np.mgrid[0:h, 0:w].astype(np.float64)
    for depth in range(1, max_depth + 1):
        level = 2 ** (depth - 1)
        seg_w = w / level
        seg_h = h / level

        center_x = np.floor(sx / seg_w) * seg_w + seg_w / 2
        center_y = np.floor(sy / seg_h) * seg_h + seg_h / 2

        scale = 1.0 + zoom / depth
        if scale != 0:
            sx = center_x + (sx - center_x) / scale
            sy = center_y + (sy - center_y) / scale

    raster.data[...] = sample_many(sx, sy, source)
