"""E07 — Channel Shift.

Red, green and blue each roll horizontally by their own random offset, bounded
by ``width * intensity / 1000`` (blue by half of that), wrapping at the edges.
"""

from __future__ import annotations

import math

import numpy as np

from meltmix.engine.context import EffectContext
from meltmix.engine.registry import TAG_RANDOM, TAG_REALTIME, TAG_SNAPSHOT, effect
from meltmix.models.params import ChannelShiftParams, EffectKind
from meltmix.models.raster import Raster
from meltmix.utils.math_helpers import round_half_up

_MAX_SHIFT_FRACTION = 0.1
_BLUE_DAMPING = 0.5


@effect(
    kind=EffectKind.CHANNEL_SHIFT,
    params=ChannelShiftParams,
    tags={TAG_RANDOM, TAG_SNAPSHOT, TAG_REALTIME},
    description="Offset the RGB channels horizontally",
)
def channel_shift(raster: Raster, params: ChannelShiftParams, ctx: EffectContext) -> None:
    rng = ctx.rng
    max_shift = round_half_up(raster.width * (params.intensity / 100) * _MAX_SHIFT_FRACTION)

    shift_r = math.floor((rng.random() - 0.5) * 2 * max_shift)
    shift_g = math.floor((rng.random() - 0.5) * 2 * max_shift)
    shift_b = math.floor((rng.random() - 0.5) * 2 * max_shift * _BLUE_DAMPING)

    source = raster.data.copy()
    for channel, shift in ((0, shift_r), (1, shift_g), (2, shift_b)):
        # Destination x reads source x + shift
        raster.data[..., channel] = np.roll(source[..., channel], -shift, axis=1)
