"""MeltMix — raster glitch effects and geometric tiling."""

from meltmix.engine import apply_effect, composite_tiles, preview_effect
from meltmix.errors import (
    DrawSurfaceFailure,
    EffectError,
    InvalidDimensions,
    MeltMixError,
    MissingSourceContext,
    TilingError,
)
from meltmix.models.params import EffectKind, MirrorMode, TileShape, TilingParams
from meltmix.models.raster import Raster
from meltmix.utils.sampler import sample

__all__ = [
    "apply_effect",
    "composite_tiles",
    "preview_effect",
    "sample",
    "Raster",
    "EffectKind",
    "MirrorMode",
    "TileShape",
    "TilingParams",
    "MeltMixError",
    "EffectError",
    "TilingError",
    "InvalidDimensions",
    "MissingSourceContext",
    "DrawSurfaceFailure",
]
