"""MeltMix effect and tiling engine."""

from meltmix.engine.registry import effect, get_registry
from meltmix.engine.context import EffectContext
from meltmix.engine import effects  # noqa: F401
from meltmix.engine.pipeline import Pipeline, apply_effect, create_pipeline, preview_effect
from meltmix.engine.tiling import composite_tiles, mirror_raster, pre_tile

__all__ = [
    "effect",
    "get_registry",
    "EffectContext",
    "Pipeline",
    "apply_effect",
    "create_pipeline",
    "preview_effect",
    "composite_tiles",
    "mirror_raster",
    "pre_tile",
]
