"""E05 — Slice Shift.

Walks the rows (or columns) and, with a probability rising with intensity,
starts a band of random thickness whose lines all roll by one random signed
offset, wrapping around the raster edge.
"""

from __future__ import annotations

import math

import numpy as np

from meltmix.engine.context import EffectContext
from meltmix.engine.registry import TAG_RANDOM, TAG_REALTIME, TAG_SNAPSHOT, effect
from meltmix.models.params import Direction, EffectKind, SliceShiftParams
from meltmix.models.raster import Raster
from meltmix.utils.math_helpers import round_half_up

# At intensity 100 a band may roll by up to 30% of the raster
_MAX_SHIFT_FRACTION = 0.3
_MAX_EXTRA_SLICE = 10
_BASE_PROBABILITY = 0.3
_PROBABILITY_RANGE = 0.6


@effect(
    kind=EffectKind.SLICE_SHIFT,
    params=SliceShiftParams,
    tags={TAG_RANDOM, TAG_SNAPSHOT, TAG_REALTIME},
    description="Roll random bands of rows or columns with wrap-around",
)
def slice_shift(raster: Raster, params: SliceShiftParams, ctx: EffectContext) -> None:
    rng = ctx.rng
    fraction = params.intensity / 100
    horizontal = params.direction == Direction.HORIZONTAL

    source = raster.data.copy()
    # Lines are rows for horizontal shifts, columns otherwise
    src_lines = source if horizontal else source.transpose(1, 0, 2)
    dst_lines = raster.data if horizontal else raster.data.transpose(1, 0, 2)
    n_lines, line_len = dst_lines.shape[0], dst_lines.shape[1]

    max_shift = round_half_up(line_len * fraction * _MAX_SHIFT_FRACTION)
    slice_factor = 1 + round_half_up(_MAX_EXTRA_SLICE * fraction)
    probability = _BASE_PROBABILITY + _PROBABILITY_RANGE * fraction

    line = 0
    while line < n_lines:
        if rng.random() < probability:
            shift = math.floor((rng.random() - 0.5) * 2 * max_shift)
            thickness = max(1, math.floor(rng.random() * slice_factor))
            end = min(line + thickness, n_lines)
            dst_lines[line:end] = np.roll(src_lines[line:end], shift, axis=1)
            line = end
        else:
            line += 1
