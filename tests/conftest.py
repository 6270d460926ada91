"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from meltmix.models.raster import Raster

SEED = 1234

# Small sizes keep the tiling tests fast
WIDTH = 24
HEIGHT = 18

GRAY = (200, 200, 200, 255)


def gradient_raster(width: int = WIDTH, height: int = HEIGHT) -> Raster:
    """Opaque raster where every pixel has a distinct color."""
    yy, xx = np.mgrid[0:height, 0:width]
    data = np.empty((height, width, 4), dtype=np.uint8)
    data[..., 0] = (xx * 255 // max(1, width - 1)).astype(np.uint8)
    data[..., 1] = (yy * 255 // max(1, height - 1)).astype(np.uint8)
    data[..., 2] = ((xx * 7 + yy * 13) % 256).astype(np.uint8)
    data[..., 3] = 255
    return Raster(data)


def random_raster(width: int = WIDTH, height: int = HEIGHT, seed: int = SEED) -> Raster:
    rng = np.random.default_rng(seed)
    data = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
    data[..., 3] = 255
    return Raster(data)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(SEED)


@pytest.fixture
def gradient() -> Raster:
    return gradient_raster()


@pytest.fixture
def noisy() -> Raster:
    return random_raster()


@pytest.fixture
def gray4() -> Raster:
    return Raster.filled(4, 4, GRAY)
