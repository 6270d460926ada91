"""Error kinds raised by effects and the tiling compositor."""

from __future__ import annotations


class MeltMixError(Exception):
    """Base class for all engine errors."""


class EffectError(MeltMixError):
    """An effect could not be applied."""


class TilingError(MeltMixError):
    """A compositing pass was aborted."""


class InvalidDimensions(EffectError, TilingError):
    """Zero-area raster, or raster and context source differ in size."""


class MissingSourceContext(EffectError):
    """A sampling effect was invoked without a source raster.

    Raised by the effect body and downgraded to a warning by ``apply_effect``.
    """


class DrawSurfaceFailure(TilingError):
    """The drawing backend rejected an operation (e.g. a degenerate rectangle)."""
