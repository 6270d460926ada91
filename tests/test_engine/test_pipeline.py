"""Tests for apply_effect, preview_effect and the Pipeline."""

import logging

import numpy as np
import pytest

from meltmix.engine import EffectContext, Pipeline, apply_effect, create_pipeline, preview_effect
from meltmix.engine.config import PipelineConfig
from meltmix.errors import InvalidDimensions
from meltmix.models.params import EffectKind, NoiseParams, TileShape, TilingParams
from meltmix.models.raster import Raster
from tests.conftest import SEED, gradient_raster


def test_apply_effect_mutates_in_place(gradient):
    before = gradient.copy()
    applied = apply_effect(gradient, EffectKind.INVERT_BLOCKS, {"intensity": 80}, EffectContext.seeded(SEED))
    assert applied is True
    assert gradient != before


def test_apply_effect_accepts_string_kind(gray4):
    assert apply_effect(gray4, "noise", NoiseParams(intensity=0), EffectContext.seeded(SEED))
    assert gray4 == Raster.filled(4, 4, (200, 200, 200, 255))


def test_missing_source_is_skipped_with_warning(gradient, caplog):
    before = gradient.copy()
    with caplog.at_level(logging.WARNING):
        applied = apply_effect(gradient, EffectKind.WAVE_DISTORTION, None, EffectContext.seeded(SEED))
    assert applied is False
    assert gradient == before
    assert any("wave_distortion" in r.getMessage() for r in caplog.records)


def test_fractal_zoom_without_source_is_skipped(gradient):
    before = gradient.copy()
    assert apply_effect(gradient, EffectKind.FRACTAL_ZOOM, {"intensity": 70}) is False
    assert gradient == before


def test_mismatched_source_raises(gradient):
    ctx = EffectContext.seeded(SEED, source=gradient_raster(5, 5))
    with pytest.raises(InvalidDimensions):
        apply_effect(gradient, EffectKind.WAVE_DISTORTION, None, ctx)


def test_empty_raster_is_skipped():
    empty = Raster.blank(0, 4)
    assert apply_effect(empty, EffectKind.NOISE) is False


def test_unknown_effect_raises(gradient):
    with pytest.raises(KeyError):
        apply_effect(gradient, "blur")


def test_seeded_contexts_are_deterministic(gradient):
    a = gradient.copy()
    b = gradient.copy()
    apply_effect(a, EffectKind.SLICE_SHIFT, {"intensity": 90}, EffectContext.seeded(7))
    apply_effect(b, EffectKind.SLICE_SHIFT, {"intensity": 90}, EffectContext.seeded(7))
    assert a == b


def test_preview_leaves_input_untouched(gradient):
    before = gradient.copy()
    preview = preview_effect(gradient, EffectKind.WAVE_DISTORTION, {"amplitude": 4})
    assert gradient == before
    assert preview.size == gradient.size
    assert preview != gradient


def test_preview_keeps_injected_rng(gradient):
    a = preview_effect(gradient, EffectKind.CHANNEL_SHIFT, {"intensity": 100}, EffectContext.seeded(3))
    b = preview_effect(gradient, EffectKind.CHANNEL_SHIFT, {"intensity": 100}, EffectContext.seeded(3))
    assert a == b


def test_pipeline_without_stages_copies(gradient):
    result = Pipeline(config=PipelineConfig(seed=SEED)).run(gradient)
    assert result == gradient
    assert result is not gradient


def test_pipeline_effect_then_tiling(gradient):
    pipeline = create_pipeline(PipelineConfig(seed=SEED, resample="nearest"))
    before = gradient.copy()
    result = pipeline.run(
        gradient,
        effect=EffectKind.SIERPINSKI,
        params={"intensity": 16},
        tiling={"shape": "grid", "tiles_x": 2, "tiles_y": 2},
    )
    assert gradient == before
    assert result.size == gradient.size
    assert np.any(result.data[..., 3] == 0)


def test_pipeline_wave_uses_given_source(gradient):
    pipeline = Pipeline(config=PipelineConfig(seed=SEED))
    result = pipeline.run(
        gradient,
        effect=EffectKind.WAVE_DISTORTION,
        params={"amplitude": 3},
        source=gradient,
    )
    assert result != gradient


@pytest.mark.parametrize(
    "kind, params",
    [
        (EffectKind.WAVE_DISTORTION, {"amplitude": 4}),
        (EffectKind.FRACTAL_ZOOM, {"intensity": 90}),
    ],
)
def test_pipeline_sampling_effect_defaults_source_to_input(gradient, kind, params):
    before = gradient.copy()
    result = Pipeline(config=PipelineConfig(seed=1)).run(gradient, effect=kind, params=params)
    assert result != gradient
    assert gradient == before


def test_pipeline_tiling_params_model(gradient):
    result = Pipeline(config=PipelineConfig(seed=SEED)).run(
        gradient, tiling=TilingParams(shape=TileShape.HEXAGON, tiles_x=3, tiles_y=3)
    )
    assert result.size == gradient.size


def test_unknown_resample_rejected(gradient):
    pipeline = Pipeline(config=PipelineConfig(resample="lanczos9"))
    with pytest.raises(ValueError):
        pipeline.run(gradient, tiling=TilingParams())
