"""Pipeline — applies one effect and then one tiling pass to a raster."""

from __future__ import annotations

import logging
import time
from typing import Any

from meltmix.config import settings
from meltmix.engine.config import PipelineConfig
from meltmix.engine.context import EffectContext
from meltmix.engine.registry import get_registry
from meltmix.engine.tiling import composite_tiles
from meltmix.errors import MissingSourceContext
from meltmix.models.params import EffectKind, EffectParams, TilingParams
from meltmix.models.raster import Raster
from meltmix.utils.surface import PillowSurface

logger = logging.getLogger(__name__)

ParamsInput = EffectParams | dict[str, Any] | None


def apply_effect(
    raster: Raster,
    kind: EffectKind | str,
    params: ParamsInput = None,
    context: EffectContext | None = None,
) -> bool:
    """Mutate ``raster`` in place with one effect.

    Returns False when the effect was skipped: the raster has no pixels, or a
    sampling effect ran without a source. Raises InvalidDimensions when the
    context source does not match the raster and KeyError for unknown kinds.
    """
    spec = get_registry().get(kind)
    if raster.is_empty:
        logger.debug("Skipping %s on empty raster", spec.kind.value)
        return False

    ctx = context if context is not None else EffectContext.seeded(settings.meltmix_seed)
    ctx.check_source(raster)
    parsed = spec.parse_params(params)

    t0 = time.perf_counter()
    try:
        spec.fn(raster, parsed, ctx)
    except MissingSourceContext as e:
        logger.warning("Effect %s skipped: %s", spec.kind.value, e)
        return False

    elapsed = (time.perf_counter() - t0) * 1000
    logger.debug("  %s applied to %dx%d in %.1fms", spec.kind.value, raster.width, raster.height, elapsed)
    return True


def preview_effect(
    raster: Raster,
    kind: EffectKind | str,
    params: ParamsInput = None,
    context: EffectContext | None = None,
) -> Raster:
    """Return an effected copy of ``raster``; the input is left untouched.

    Without a context source the input itself is sampled.
    """
    preview = raster.copy()
    if context is None:
        context = EffectContext.seeded(settings.meltmix_seed, source=raster)
    elif context.source is None:
        context = EffectContext(source=raster, rng=context.rng)
    apply_effect(preview, kind, params, context)
    return preview


class Pipeline:
    """Copy → optional effect → optional tiling pass."""

    def __init__(self, config: PipelineConfig | None = None) -> None:
        self.config = config or PipelineConfig()

    def surface_factory(self, width: int, height: int) -> PillowSurface:
        return PillowSurface(width, height, resample=self.config.resample)

    def run(
        self,
        raster: Raster,
        effect: EffectKind | str | None = None,
        params: ParamsInput = None,
        tiling: TilingParams | dict[str, Any] | None = None,
        source: Raster | None = None,
    ) -> Raster:
        """Run the pipeline on a copy of ``raster`` and return the result.

        ``source`` defaults to ``raster`` itself, which is never mutated.
        """
        start = time.perf_counter()
        result = raster.copy()

        if effect is not None:
            ctx = EffectContext.seeded(self.config.seed, source=source if source is not None else raster)
            applied = apply_effect(result, effect, params, ctx)
            logger.info("Pipeline: effect %s %s", EffectKind(effect).value, "applied" if applied else "skipped")

        if tiling is not None:
            if isinstance(tiling, dict):
                tiling = TilingParams.model_validate(tiling)
            result = composite_tiles(result, tiling, surface_factory=self.surface_factory)

        total = (time.perf_counter() - start) * 1000
        logger.info("Pipeline complete: %dx%d in %.0fms", result.width, result.height, total)
        return result


def create_pipeline(config: PipelineConfig | None = None) -> Pipeline:
    return Pipeline(config=config)
