"""Math helpers — rounding and intensity mappings. No engine imports."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray


def round_half_up(value: float) -> int:
    """Round .5 toward +inf (Python's round() is half-to-even)."""
    return int(math.floor(value + 0.5))


def round_half_up_array(values: NDArray[np.float64]) -> NDArray[np.float64]:
    return np.floor(values + 0.5)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
