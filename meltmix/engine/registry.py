"""Effect registry — every effect is a standalone function registered via decorator.

Usage:
    @effect(kind=EffectKind.NOISE, params=NoiseParams, tags={"random", "realtime"})
    def noise(raster: Raster, params: NoiseParams, ctx: EffectContext) -> None:
        ...

Adding a new effect = creating one module with the decorator and importing it
from ``meltmix.engine.effects``. Nothing else changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from meltmix.models.params import EffectKind, EffectParams

if TYPE_CHECKING:
    from meltmix.engine.context import EffectContext
    from meltmix.models.raster import Raster

logger = logging.getLogger(__name__)

EffectFn = Callable[["Raster", Any, "EffectContext"], None]

# Tags understood by the pipeline
TAG_SAMPLING = "sampling"  # reads EffectContext.source
TAG_RANDOM = "random"  # consumes EffectContext.rng
TAG_SNAPSHOT = "snapshot"  # reads a pre-mutation copy of the target
TAG_REALTIME = "realtime"  # cheap enough for live preview


@dataclass
class EffectSpec:
    kind: EffectKind
    fn: EffectFn
    params_model: type[EffectParams]
    tags: set[str] = field(default_factory=set)
    description: str = ""

    @property
    def needs_source(self) -> bool:
        return TAG_SAMPLING in self.tags

    def parse_params(self, params: EffectParams | dict[str, Any] | None) -> EffectParams:
        """Coerce a dict (or another effect's model) into this effect's params."""
        if params is None:
            return self.params_model()
        if isinstance(params, self.params_model):
            return params
        if isinstance(params, EffectParams):
            params = params.model_dump()
        return self.params_model.model_validate(params)


class EffectRegistry:
    """Singleton registry of all effects."""

    def __init__(self) -> None:
        self._effects: dict[EffectKind, EffectSpec] = {}

    def register(self, spec: EffectSpec) -> None:
        if spec.kind in self._effects:
            raise ValueError(f"Duplicate effect: {spec.kind.value}")
        self._effects[spec.kind] = spec
        logger.debug("Registered effect %s (tags=%s)", spec.kind.value, sorted(spec.tags))

    def get(self, kind: EffectKind | str) -> EffectSpec:
        try:
            return self._effects[EffectKind(kind)]
        except ValueError as e:
            raise KeyError(f"Unknown effect: {kind}") from e

    def all(self) -> list[EffectSpec]:
        return sorted(self._effects.values(), key=lambda s: s.kind.value)

    def with_tag(self, tag: str) -> list[EffectSpec]:
        return [s for s in self.all() if tag in s.tags]

    @property
    def count(self) -> int:
        return len(self._effects)


# Module-level singleton
_registry = EffectRegistry()


def get_registry() -> EffectRegistry:
    return _registry


def effect(
    *,
    kind: EffectKind,
    params: type[EffectParams],
    tags: set[str] | None = None,
    description: str = "",
):
    """Decorator to register an effect function."""

    def decorator(fn: EffectFn):
        spec = EffectSpec(
            kind=kind,
            fn=fn,
            params_model=params,
            tags=tags or set(),
            description=description,
        )
        _registry.register(spec)
        return fn

    return decorator
