"""Tests for the noise and scan-line effects."""

import numpy as np

from meltmix.engine.context import EffectContext
from meltmix.engine.effects.e01_noise import noise
from meltmix.engine.effects.e02_scan_lines import scan_lines
from meltmix.models.params import Direction, NoiseParams, ScanLinesParams
from meltmix.models.raster import Raster
from tests.conftest import GRAY, SEED


def test_noise_zero_intensity_is_identity(noisy):
    before = noisy.copy()
    noise(noisy, NoiseParams(intensity=0), EffectContext.seeded(SEED))
    assert noisy == before


def test_noise_full_intensity_stays_in_range(gray4):
    noise(gray4, NoiseParams(intensity=100), EffectContext.seeded(SEED))
    assert gray4.data.dtype == np.uint8
    assert np.all(gray4.data[..., 3] == 255)
    assert not np.all(gray4.data[..., :3] == 200)


def test_noise_shares_one_draw_across_channels(gray4):
    noise(gray4, NoiseParams(intensity=60), EffectContext.seeded(SEED))
    rgb = gray4.data[..., :3]
    assert np.array_equal(rgb[..., 0], rgb[..., 1])
    assert np.array_equal(rgb[..., 1], rgb[..., 2])


def test_noise_bounded_by_intensity():
    raster = Raster.filled(16, 16, (128, 128, 128, 255))
    noise(raster, NoiseParams(intensity=10), EffectContext.seeded(SEED))
    diff = np.abs(raster.data[..., :3].astype(int) - 128)
    assert diff.max() <= 13


def test_scan_lines_zero_intensity_is_identity(noisy):
    before = noisy.copy()
    scan_lines(noisy, ScanLinesParams(intensity=0, direction=Direction.BOTH), EffectContext())
    assert noisy == before


def test_scan_lines_horizontal_bands():
    raster = Raster.filled(4, 8, GRAY)
    scan_lines(raster, ScanLinesParams(intensity=50), EffectContext())
    rows = raster.data[:, 0, 0]
    assert rows.tolist() == [100, 100, 200, 200, 100, 100, 200, 200]
    assert np.all(raster.data[..., 3] == 255)


def test_scan_lines_vertical_bands():
    raster = Raster.filled(6, 2, GRAY)
    scan_lines(raster, ScanLinesParams(intensity=100, direction=Direction.VERTICAL), EffectContext())
    cols = raster.data[0, :, 0]
    assert cols.tolist() == [0, 0, 200, 200, 0, 0]


def test_scan_lines_both_darkens_twice():
    raster = Raster.filled(4, 4, GRAY)
    scan_lines(raster, ScanLinesParams(intensity=50, direction=Direction.BOTH), EffectContext())
    assert raster.pixel(0, 0) == (50, 50, 50, 255)
    assert raster.pixel(2, 0) == (100, 100, 100, 255)
    assert raster.pixel(0, 2) == (100, 100, 100, 255)
    assert raster.pixel(2, 2) == GRAY


def test_scan_lines_custom_thickness():
    raster = Raster.filled(1, 6, GRAY)
    scan_lines(raster, ScanLinesParams(intensity=100, thickness=3), EffectContext())
    assert raster.data[:, 0, 0].tolist() == [0, 0, 0, 200, 200, 200]
