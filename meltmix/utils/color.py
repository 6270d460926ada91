"""Vectorized color metrics used for thresholding and sorting pixels."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

# ITU-R BT.601 luma weights
_LUMA_R = 0.299
_LUMA_G = 0.587
_LUMA_B = 0.114


def luminance(rgb: NDArray) -> NDArray[np.float64]:
    """Perceived brightness 0-255 for an (..., >=3) array."""
    rgb = np.asarray(rgb, dtype=np.float64)
    return _LUMA_R * rgb[..., 0] + _LUMA_G * rgb[..., 1] + _LUMA_B * rgb[..., 2]


def rgb_to_hsl(rgb: NDArray) -> NDArray[np.float64]:
    """Convert (..., >=3) RGB 0-255 to (..., 3) HSL, each component in [0, 1].

    Achromatic pixels (max == min) get hue and saturation 0.
    """
    c = np.asarray(rgb, dtype=np.float64)[..., :3] / 255.0
    r, g, b = c[..., 0], c[..., 1], c[..., 2]
    cmax = np.max(c, axis=-1)
    cmin = np.min(c, axis=-1)
    delta = cmax - cmin
    light = (cmax + cmin) / 2.0

    chroma = delta > 0
    safe_delta = np.where(chroma, delta, 1.0)

    denom = np.where(light > 0.5, 2.0 - cmax - cmin, cmax + cmin)
    sat = np.where(chroma, delta / np.where(denom > 0, denom, 1.0), 0.0)

    # Channel priority on ties follows r, then g, then b
    is_r = cmax == r
    is_g = ~is_r & (cmax == g)
    hue = np.where(
        is_r,
        (g - b) / safe_delta + np.where(g < b, 6.0, 0.0),
        np.where(is_g, (b - r) / safe_delta + 2.0, (r - g) / safe_delta + 4.0),
    )
    hue = np.where(chroma, hue / 6.0, 0.0)

    return np.stack([hue, sat, light], axis=-1)
