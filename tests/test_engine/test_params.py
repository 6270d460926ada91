"""Tests for lenient parameter parsing."""

import pytest

import meltmix.engine  # noqa: F401
from meltmix.engine import EffectContext, apply_effect
from meltmix.engine.registry import get_registry
from meltmix.models.params import (
    Direction,
    EffectKind,
    MirrorMode,
    NoiseParams,
    PixelSortParams,
    SliceShiftParams,
    SortKey,
    TileShape,
    TilingParams,
    WaveDistortionParams,
    WaveType,
)
from tests.conftest import SEED


def test_unknown_sort_key_falls_back():
    params = get_registry().get(EffectKind.PIXEL_SORT).parse_params({"sort_by": "luma"})
    assert params.sort_by == SortKey.BRIGHTNESS


@pytest.mark.parametrize("model", [PixelSortParams, SliceShiftParams])
def test_unknown_direction_means_vertical(model):
    assert model.model_validate({"direction": "diagonal"}).direction == Direction.VERTICAL
    assert model.model_validate({"direction": "horizontal"}).direction == Direction.HORIZONTAL


def test_null_values_take_defaults():
    assert PixelSortParams.model_validate({"threshold": None}).threshold == 100
    assert NoiseParams.model_validate({"intensity": None}).intensity == 50


def test_unknown_wave_type_is_sine():
    params = WaveDistortionParams.model_validate({"wave_type": "triangle", "direction": "diagonal"})
    assert params.wave_type == WaveType.SINE
    assert params.direction == Direction.HORIZONTAL


def test_unparseable_number_takes_default():
    params = NoiseParams.model_validate({"intensity": "loud"})
    assert params.intensity == 50


def test_valid_values_still_coerced():
    params = PixelSortParams.model_validate({"threshold": "40", "sort_by": "hue", "direction": "vertical"})
    assert params.threshold == 40
    assert params.sort_by == SortKey.HUE
    assert params.direction == Direction.VERTICAL


def test_tiling_params_fall_back():
    params = TilingParams.model_validate({"shape": "dodecagon", "tiles_x": None, "tiles_y": "x", "mirror": "sideways"})
    assert params.shape == TileShape.GRID
    assert params.tiles_x == 1
    assert params.tiles_y == 1
    assert params.mirror == MirrorMode.NONE


def test_apply_effect_with_bad_params(gradient):
    before = gradient.copy()
    applied = apply_effect(
        gradient,
        EffectKind.PIXEL_SORT,
        {"sort_by": "luma", "direction": "diagonal", "threshold": None},
        EffectContext.seeded(SEED),
    )
    assert applied is True
    assert gradient.size == before.size
