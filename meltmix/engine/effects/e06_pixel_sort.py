"""E06 — Pixel Sort.

Scan each row (or column) for maximal runs of pixels darker than the threshold
luminance and sort every run longer than one pixel, ascending by the chosen key.
Pixels at or above the threshold never move.
"""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np
from numpy.typing import NDArray

from meltmix.engine.context import EffectContext
from meltmix.engine.registry import TAG_REALTIME, effect
from meltmix.models.params import Direction, EffectKind, PixelSortParams, SortKey
from meltmix.models.raster import Raster
from meltmix.utils.color import luminance, rgb_to_hsl

_CHANNEL = {SortKey.RED: 0, SortKey.GREEN: 1, SortKey.BLUE: 2}


def sort_values(pixels: NDArray[np.uint8], key: SortKey) -> NDArray[np.float64]:
    """Per-pixel sort key for an (..., 4) array."""
    if key == SortKey.HUE:
        return rgb_to_hsl(pixels)[..., 0]
    if key == SortKey.SATURATION:
        return rgb_to_hsl(pixels)[..., 1]
    if key in _CHANNEL:
        return pixels[..., _CHANNEL[key]].astype(np.float64)
    return luminance(pixels)


def find_runs(mask: NDArray[np.bool_]) -> Iterator[tuple[int, int]]:
    """Yield (start, end) of every maximal True run in a 1-D mask."""
    padded = np.concatenate(([0], mask.astype(np.int8), [0]))
    edges = np.flatnonzero(np.diff(padded))
    for start, end in zip(edges[0::2], edges[1::2]):
        yield int(start), int(end)


@effect(
    kind=EffectKind.PIXEL_SORT,
    params=PixelSortParams,
    tags={TAG_REALTIME},
    description="Sort runs of dark pixels along rows or columns",
)
def pixel_sort(raster: Raster, params: PixelSortParams, ctx: EffectContext) -> None:
    horizontal = params.direction == Direction.HORIZONTAL
    lines = raster.data if horizontal else raster.data.transpose(1, 0, 2)

    below = luminance(lines) < params.threshold
    keys = sort_values(lines, params.sort_by)

    for i in range(lines.shape[0]):
        for start, end in find_runs(below[i]):
            if end - start < 2:
                continue
            order = np.argsort(keys[i, start:end], kind="stable")
            lines[i, start:end] = lines[i, start:end][order]
