"""EffectContext — read-only inputs an effect may need besides its params."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from meltmix.errors import InvalidDimensions, MissingSourceContext
from meltmix.models.raster import Raster


@dataclass
class EffectContext:
    """Sampling source and the injected pseudo-random source."""

    # Pre-effect pixels for sampling effects; must match the target size
    source: Raster | None = None
    rng: np.random.Generator = field(default_factory=np.random.default_rng)

    @classmethod
    def seeded(cls, seed: int | None, source: Raster | None = None) -> EffectContext:
        return cls(source=source, rng=np.random.default_rng(seed))

    def check_source(self, target: Raster) -> None:
        """Raise InvalidDimensions when the source size differs from ``target``."""
        if self.source is not None and not self.source.same_size(target):
            raise InvalidDimensions(
                f"Source {self.source.width}x{self.source.height} does not match "
                f"target {target.width}x{target.height}"
            )

    def require_source(self) -> Raster:
        if self.source is None:
            raise MissingSourceContext("Effect needs a source raster to sample from")
        return self.source
