"""Raster — fixed-size RGBA pixel buffer shared by effects and the compositor.

Pixels live in a ``(height, width, 4)`` uint8 array, row-major, so the flat
buffer is exactly ``width * height * 4`` bytes.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from meltmix.errors import InvalidDimensions

RGBA = tuple[int, int, int, int]


@dataclass
class Raster:
    """Mutable RGBA pixels with an immutable size."""

    data: NDArray[np.uint8]

    def __post_init__(self) -> None:
        arr = np.asarray(self.data)
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise InvalidDimensions(f"Expected (height, width, 4) array, got shape {arr.shape}")
        if arr.dtype != np.uint8:
            arr = np.clip(arr, 0, 255).astype(np.uint8)
        self.data = np.ascontiguousarray(arr)

    # --- Constructors ---

    @classmethod
    def blank(cls, width: int, height: int) -> Raster:
        """Fully transparent raster."""
        return cls(np.zeros((max(0, height), max(0, width), 4), dtype=np.uint8))

    @classmethod
    def filled(cls, width: int, height: int, rgba: RGBA) -> Raster:
        data = np.empty((max(0, height), max(0, width), 4), dtype=np.uint8)
        data[...] = np.asarray(rgba, dtype=np.uint8)
        return cls(data)

    @classmethod
    def from_buffer(cls, buffer: bytes | bytearray | memoryview, width: int, height: int) -> Raster:
        """Wrap a flat row-major RGBA buffer (copied)."""
        flat = np.frombuffer(bytes(buffer), dtype=np.uint8)
        if width < 0 or height < 0 or flat.size != width * height * 4:
            raise InvalidDimensions(
                f"Buffer of {flat.size} bytes does not match {width}x{height} RGBA"
            )
        return cls(flat.reshape(height, width, 4).copy())

    @classmethod
    def from_image(cls, image: Image.Image) -> Raster:
        return cls(np.array(image.convert("RGBA"), dtype=np.uint8))

    # --- Accessors ---

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    @property
    def buffer(self) -> bytes:
        return self.data.tobytes()

    def pixel(self, x: int, y: int) -> RGBA:
        r, g, b, a = self.data[y, x]
        return (int(r), int(g), int(b), int(a))

    def same_size(self, other: Raster) -> bool:
        return self.size == other.size

    def copy(self) -> Raster:
        return Raster(self.data.copy())

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.data, mode="RGBA")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Raster):
            return NotImplemented
        return self.size == other.size and bool(np.array_equal(self.data, other.data))
