"""E02 — Scan Lines.

Bands of ``2 * thickness`` lines; the first ``thickness`` lines of every band
are multiplied by ``1 - intensity / 100``. Horizontal bands darken rows,
vertical bands darken columns, ``both`` does rows then columns.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from meltmix.engine.context import EffectContext
from meltmix.engine.registry import TAG_REALTIME, effect
from meltmix.models.params import Direction, EffectKind, ScanLinesParams
from meltmix.models.raster import Raster


def _darken_rows(pixels: NDArray[np.uint8], factor: float, thickness: int) -> None:
    rows = np.arange(pixels.shape[0]) % (2 * thickness) < thickness
    darkened = np.rint(pixels[rows, :, :3].astype(np.float64) * factor)
    pixels[rows, :, :3] = np.clip(darkened, 0, 255).astype(np.uint8)


@effect(
    kind=EffectKind.SCAN_LINES,
    params=ScanLinesParams,
    tags={TAG_REALTIME},
    description="Darken alternating bands of lines",
)
def scan_lines(raster: Raster, params: ScanLinesParams, ctx: EffectContext) -> None:
    factor = 1.0 - params.intensity / 100
    thickness = max(1, int(params.thickness))

    if params.direction in (Direction.HORIZONTAL, Direction.BOTH):
        _darken_rows(raster.data, factor, thickness)
    if params.direction in (Direction.VERTICAL, Direction.BOTH):
        # Transposed view writes straight through to the raster
        _darken_rows(raster.data.transpose(1, 0, 2), factor, thickness)
