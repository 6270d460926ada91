"""E01 — Noise.

One uniform draw per pixel in [-amount, +amount], amount = 127 * intensity / 100,
added to R, G and B alike and clamped to [0, 255]. Alpha is untouched.
"""

from __future__ import annotations

import numpy as np

from meltmix.engine.context import EffectContext
from meltmix.engine.registry import TAG_RANDOM, TAG_REALTIME, effect
from meltmix.models.params import EffectKind, NoiseParams
from meltmix.models.raster import Raster
from meltmix.utils.math_helpers import round_half_up, round_half_up_array

# Noise range at intensity 100: ±127, half the channel range
_MAX_NOISE = 127


@effect(
    kind=EffectKind.NOISE,
    params=NoiseParams,
    tags={TAG_RANDOM, TAG_REALTIME},
    description="Add uniform per-pixel noise to the color channels",
)
def noise(raster: Raster, params: NoiseParams, ctx: EffectContext) -> None:
    amount = round_half_up(_MAX_NOISE * params.intensity / 100)
    draws = ctx.rng.random((raster.height, raster.width))
    delta = round_half_up_array((draws - 0.5) * 2 * amount)

    rgb = raster.data[..., :3].astype(np.float64)
    raster.data[..., :3] = np.clip(rgb + delta[..., None], 0, 255).astype(np.uint8)
