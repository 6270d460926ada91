"""E03 — Wave Distortion.

Inverse mapping: every destination pixel samples the source at a position
displaced by ``amplitude * wave(angle)``. A horizontal wave moves x by an angle
taken from the row, a vertical wave moves y by an angle taken from the column.
"""

from __future__ import annotations

import math

import numpy as np

from meltmix.engine.context import EffectContext
from meltmix.engine.registry import TAG_REALTIME, TAG_SAMPLING, effect
from meltmix.models.params import Direction, EffectKind, WaveDistortionParams, WaveType
from meltmix.models.raster import Raster
from meltmix.utils.sampler import sample_many


@effect(
    kind=EffectKind.WAVE_DISTORTION,
    params=WaveDistortionParams,
    tags={TAG_SAMPLING, TAG_REALTIME},
    description="Displace pixels along a sine or cosine wave",
)
def wave_distortion(raster: Raster, params: WaveDistortionParams, ctx: EffectContext) -> None:
    source = ctx.require_source()
    h, w = raster.height, raster.width

    wave = np.cos if params.wave_type == WaveType.COSINE else np.sin
    freq_scale = 2 * math.pi * params.frequency

    py, px = np.mgrid[0:h, 0:w].astype(np.float64)
    sx, sy = px, py
    if params.direction in (Direction.HORIZONTAL, Direction.BOTH):
        sx = px + params.amplitude * wave((py / h) * freq_scale + params.phase)
    if params.direction in (Direction.VERTICAL, Direction.BOTH):
        sy = py + params.amplitude * wave((px / w) * freq_scale + params.phase)

    # sample_many returns a fresh buffer, so reads never see partial writes
    raster.data[...] = sample_many(sx, sy, source)
