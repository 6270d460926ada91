"""Bilinear sampling of a raster at fractional coordinates.

Shared by the distortion effects. Neighbours that fall outside the raster are
replaced by the nearest already-resolved sample (right → base, below → base,
diagonal → below → right → base), so edges never read out of bounds. A base
coordinate outside the raster yields opaque black.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from meltmix.models.raster import RGBA, Raster

FALLBACK_PIXEL: RGBA = (0, 0, 0, 255)


def sample(x: float, y: float, source: Raster) -> RGBA:
    """Interpolated RGBA at (x, y). Pure and deterministic."""
    px = sample_many(np.array([x], dtype=np.float64), np.array([y], dtype=np.float64), source)[0]
    return (int(px[0]), int(px[1]), int(px[2]), int(px[3]))


def sample_many(
    xs: NDArray[np.float64],
    ys: NDArray[np.float64],
    source: Raster,
) -> NDArray[np.uint8]:
    """Vectorized ``sample``: coordinate arrays of shape S → uint8 array S×4."""
    xs, ys = np.broadcast_arrays(np.asarray(xs, dtype=np.float64), np.asarray(ys, dtype=np.float64))
    out_shape = xs.shape + (4,)

    if source.is_empty:
        out = np.empty(out_shape, dtype=np.uint8)
        out[...] = FALLBACK_PIXEL
        return out

    w, h = source.width, source.height
    data = source.data

    finite = np.isfinite(xs) & np.isfinite(ys)
    xs_safe = np.where(finite, xs, -1.0)
    ys_safe = np.where(finite, ys, -1.0)
    # Far-away coordinates only need to stay out of bounds
    xs_safe = np.clip(xs_safe, -2.0, w + 1.0)
    ys_safe = np.clip(ys_safe, -2.0, h + 1.0)

    x0f = np.floor(xs_safe)
    y0f = np.floor(ys_safe)
    fx = (xs_safe - x0f)[..., None]
    fy = (ys_safe - y0f)[..., None]
    x0 = x0f.astype(np.int64)
    y0 = y0f.astype(np.int64)

    valid1 = finite & (x0 >= 0) & (x0 < w) & (y0 >= 0) & (y0 < h)
    valid2 = valid1 & (x0 + 1 < w)
    valid3 = valid1 & (y0 + 1 < h)
    valid4 = valid2 & valid3

    xi0 = np.clip(x0, 0, w - 1)
    xi1 = np.clip(x0 + 1, 0, w - 1)
    yi0 = np.clip(y0, 0, h - 1)
    yi1 = np.clip(y0 + 1, 0, h - 1)

    p1 = data[yi0, xi0].astype(np.float64)
    p2 = np.where(valid2[..., None], data[yi0, xi1], p1)
    p3 = np.where(valid3[..., None], data[yi1, xi0], p1)
    p4 = np.where(
        valid4[..., None],
        data[yi1, xi1],
        np.where(valid3[..., None], p3, np.where(valid2[..., None], p2, p1)),
    )

    top = p1 * (1.0 - fx) + p2 * fx
    bottom = p3 * (1.0 - fx) + p4 * fx
    value = top * (1.0 - fy) + bottom * fy

    out = np.clip(np.floor(value + 0.5), 0, 255).astype(np.uint8)
    out[~valid1] = FALLBACK_PIXEL
    return out
