"""Effect and tiling parameter models.

Every model ignores unknown fields and falls back to defaults for missing,
null or unparseable ones.
Values are not range-checked: effects use them as given and clamp only where the
algorithm says so.
"""

from __future__ import annotations

import enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator


class EffectKind(str, enum.Enum):
    NOISE = "noise"
    SCAN_LINES = "scan_lines"
    WAVE_DISTORTION = "wave_distortion"
    FRACTAL_ZOOM = "fractal_zoom"
    SLICE_SHIFT = "slice_shift"
    PIXEL_SORT = "pixel_sort"
    CHANNEL_SHIFT = "channel_shift"
    BLOCK_DISPLACE = "block_displace"
    INVERT_BLOCKS = "invert_blocks"
    SIERPINSKI = "sierpinski"


class Direction(str, enum.Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    BOTH = "both"


class WaveType(str, enum.Enum):
    SINE = "sine"
    COSINE = "cosine"


class SortKey(str, enum.Enum):
    BRIGHTNESS = "brightness"
    HUE = "hue"
    SATURATION = "saturation"
    RED = "red"
    GREEN = "green"
    BLUE = "blue"


class TileShape(str, enum.Enum):
    GRID = "grid"
    BRICK_WALL = "brick_wall"
    HERRINGBONE = "herringbone"
    SKEWED = "skewed"
    HEXAGON = "hexagon"
    SEMI_OCTAGON_SQUARE = "semi_octagon_square"
    L_SHAPE_SQUARE = "l_shape_square"
    HEXAGON_TRIANGLE = "hexagon_triangle"
    SQUARE_TRIANGLE = "square_triangle"
    RHOMBUS = "rhombus"
    BASKETWEAVE = "basketweave"


class MirrorMode(str, enum.Enum):
    NONE = "none"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    BOTH = "both"


class LenientModel(BaseModel):
    """Model that never rejects a payload.

    A field holding None or a value that fails validation (an unknown enum
    member, a non-numeric intensity) takes its fallback instead: the entry in
    ``invalid_fallbacks`` when there is one, otherwise the field default.
    """

    model_config = ConfigDict(extra="ignore")

    invalid_fallbacks: ClassVar[dict[str, Any]] = {}

    @field_validator("*", mode="wrap")
    @classmethod
    def _fall_back_on_invalid(cls, value: Any, handler, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].default
        try:
            return handler(value)
        except ValidationError:
            if info.field_name in cls.invalid_fallbacks:
                return cls.invalid_fallbacks[info.field_name]
            return cls.model_fields[info.field_name].default


class EffectParams(LenientModel):
    """Base for all effect parameter sets."""


class NoiseParams(EffectParams):
    intensity: float = 50


class ScanLinesParams(EffectParams):
    intensity: float = 50
    direction: Direction = Direction.HORIZONTAL
    thickness: int = 2  # darkened lines per band; bands are 2× this


class WaveDistortionParams(EffectParams):
    amplitude: float = 10  # pixels
    frequency: float = 5  # full cycles across the raster
    phase: float = 0.0  # radians
    direction: Direction = Direction.HORIZONTAL
    wave_type: WaveType = WaveType.SINE


class FractalZoomParams(EffectParams):
    intensity: float = 50


class SliceShiftParams(EffectParams):
    # Anything but horizontal slices columns
    invalid_fallbacks: ClassVar[dict[str, Any]] = {"direction": Direction.VERTICAL}

    intensity: float = 30
    direction: Direction = Direction.HORIZONTAL


class PixelSortParams(EffectParams):
    # Anything but horizontal sorts columns
    invalid_fallbacks: ClassVar[dict[str, Any]] = {"direction": Direction.VERTICAL}

    threshold: float = 100  # luminance 0-255; darker pixels form runs
    direction: Direction = Direction.HORIZONTAL
    sort_by: SortKey = SortKey.BRIGHTNESS


class ChannelShiftParams(EffectParams):
    intensity: float = 30


class BlockDisplaceParams(EffectParams):
    intensity: float = 30


class InvertBlocksParams(EffectParams):
    intensity: float = 30


class SierpinskiParams(EffectParams):
    intensity: float = 30


class TilingParams(LenientModel):
    """Inputs for one compositing pass."""

    shape: TileShape = TileShape.GRID
    tiles_x: int = 1
    tiles_y: int = 1
    pre_tile_x: int = 1
    pre_tile_y: int = 1
    scale_factor: float = 1.0
    skew: float = 0.5  # shear magnitude for the skewed layout
    stagger: float = 0.5  # fraction of a tile width that odd rows shift by
    mirror: MirrorMode = MirrorMode.NONE
