"""Drawing surfaces — the 2D target the tiling compositor draws onto.

``DrawSurface`` is a retained-mode canvas: an affine transform plus a clip
region, both saved and restored as a stack. ``PillowSurface`` implements it
with Pillow for resampling/compositing, shapely for path transforms and
scikit-image for clip-path rasterization.
"""

from __future__ import annotations

import abc
import logging
import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from PIL import Image
from shapely import affinity
from shapely.geometry import Polygon
from skimage.draw import polygon as draw_polygon

from meltmix.errors import DrawSurfaceFailure
from meltmix.models.raster import Raster

logger = logging.getLogger(__name__)

SrcRect = tuple[int, int, int, int]

_RESAMPLE = {
    "nearest": Image.Resampling.NEAREST,
    "bilinear": Image.Resampling.BILINEAR,
    "bicubic": Image.Resampling.BICUBIC,
}

# Tolerance for treating a placement as an exact pixel copy
_EXACT_EPS = 1e-9
# Determinant below this is a collapsed (non-invertible) transform
_SINGULAR_EPS = 1e-12


@dataclass(frozen=True)
class ClipRegion:
    """Clip mask stored only over its bounding box.

    ``mask[j, i]`` is the clip state of device pixel ``(x0 + i, y0 + j)``;
    pixels outside the box are clipped away.
    """

    x0: int
    y0: int
    mask: NDArray[np.bool_]

    @classmethod
    def empty(cls) -> ClipRegion:
        return cls(0, 0, np.zeros((0, 0), dtype=bool))

    @property
    def x1(self) -> int:
        return self.x0 + self.mask.shape[1]

    @property
    def y1(self) -> int:
        return self.y0 + self.mask.shape[0]

    def window(self, x0: int, y0: int, x1: int, y1: int) -> NDArray[np.bool_]:
        """Mask for a device box lying inside this region's box."""
        return self.mask[y0 - self.y0 : y1 - self.y0, x0 - self.x0 : x1 - self.x0]

    def intersect(self, other: ClipRegion) -> ClipRegion:
        x0, y0 = max(self.x0, other.x0), max(self.y0, other.y0)
        x1, y1 = min(self.x1, other.x1), min(self.y1, other.y1)
        if x0 >= x1 or y0 >= y1:
            return ClipRegion.empty()
        return ClipRegion(x0, y0, self.window(x0, y0, x1, y1) & other.window(x0, y0, x1, y1))

    def bounds(self) -> tuple[int, int, int, int] | None:
        """Tight device box (x0, y0, x1, y1) of the unclipped pixels, or None."""
        rows = np.flatnonzero(self.mask.any(axis=1))
        if rows.size == 0:
            return None
        cols = np.flatnonzero(self.mask.any(axis=0))
        return (
            self.x0 + int(cols[0]),
            self.y0 + int(rows[0]),
            self.x0 + int(cols[-1]) + 1,
            self.y0 + int(rows[-1]) + 1,
        )


class DrawSurface(abc.ABC):
    """Abstract 2D drawing target with a transform/clip state stack."""

    @property
    @abc.abstractmethod
    def width(self) -> int: ...

    @property
    @abc.abstractmethod
    def height(self) -> int: ...

    @abc.abstractmethod
    def resize(self, width: int, height: int) -> None:
        """Reallocate as a transparent surface and reset transform/clip state."""

    @abc.abstractmethod
    def clear(self) -> None:
        """Make every pixel transparent; transform and clip are kept."""

    @abc.abstractmethod
    def save(self) -> None: ...

    @abc.abstractmethod
    def restore(self) -> None: ...

    @abc.abstractmethod
    def transform(self, a: float, b: float, c: float, d: float, e: float, f: float) -> None:
        """Post-multiply the current transform by [[a, c, e], [b, d, f], [0, 0, 1]]."""

    @abc.abstractmethod
    def clip(self, path: Polygon) -> None:
        """Intersect the clip region with ``path`` (user space)."""

    @abc.abstractmethod
    def draw_image(
        self,
        image: Raster,
        dx: float,
        dy: float,
        dw: float,
        dh: float,
        src_rect: SrcRect | None = None,
    ) -> None:
        """Draw ``src_rect`` of ``image`` scaled into the user-space rect (dx, dy, dw, dh)."""

    @abc.abstractmethod
    def snapshot(self) -> Raster: ...

    def translate(self, tx: float, ty: float) -> None:
        self.transform(1.0, 0.0, 0.0, 1.0, tx, ty)

    def scale(self, sx: float, sy: float) -> None:
        self.transform(sx, 0.0, 0.0, sy, 0.0, 0.0)

    def rotate(self, angle: float) -> None:
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        self.transform(cos_a, sin_a, -sin_a, cos_a, 0.0, 0.0)

    def skew_x(self, factor: float) -> None:
        """Horizontal shear: x' = x + factor * y."""
        self.transform(1.0, 0.0, factor, 1.0, 0.0, 0.0)


def _matrix(a: float, b: float, c: float, d: float, e: float, f: float) -> NDArray[np.float64]:
    return np.array([[a, c, e], [b, d, f], [0.0, 0.0, 1.0]], dtype=np.float64)


def _is_exact_placement(m: NDArray[np.float64]) -> bool:
    """True for unit-scale axis flips/swaps with integer translation."""
    linear = m[:2, :2]
    if not np.all(np.isclose(np.abs(linear), np.round(np.abs(linear)), atol=_EXACT_EPS)):
        return False
    if not np.isclose(abs(np.linalg.det(linear)), 1.0, atol=_EXACT_EPS):
        return False
    if np.count_nonzero(np.round(linear)) != 2:
        return False
    offset = m[:2, 2]
    return bool(np.all(np.isclose(offset, np.round(offset), atol=_EXACT_EPS)))


class PillowSurface(DrawSurface):
    """Pillow-backed surface. Pixels are straight-alpha RGBA."""

    def __init__(self, width: int, height: int, resample: str = "bilinear") -> None:
        if resample not in _RESAMPLE:
            raise ValueError(f"Unknown resample filter: {resample!r}")
        self._resample = _RESAMPLE[resample]
        self._stack: list[tuple[NDArray[np.float64], ClipRegion | None]] = []
        self.resize(width, height)

    @property
    def width(self) -> int:
        return self._canvas.width

    @property
    def height(self) -> int:
        return self._canvas.height

    # --- State ---

    def resize(self, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise DrawSurfaceFailure(f"Invalid surface size {width}x{height}")
        self._canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        self._ctm = np.eye(3, dtype=np.float64)
        self._clip: ClipRegion | None = None
        self._stack.clear()

    def clear(self) -> None:
        self._canvas = Image.new("RGBA", self._canvas.size, (0, 0, 0, 0))

    def save(self) -> None:
        self._stack.append((self._ctm.copy(), self._clip))

    def restore(self) -> None:
        if not self._stack:
            return
        self._ctm, self._clip = self._stack.pop()

    def transform(self, a: float, b: float, c: float, d: float, e: float, f: float) -> None:
        if not all(math.isfinite(v) for v in (a, b, c, d, e, f)):
            raise DrawSurfaceFailure(f"Non-finite transform ({a}, {b}, {c}, {d}, {e}, {f})")
        self._ctm = self._ctm @ _matrix(a, b, c, d, e, f)

    # --- Clipping ---

    def _device_path(self, path: Polygon) -> Polygon:
        m = self._ctm
        return affinity.affine_transform(path, [m[0, 0], m[0, 1], m[1, 0], m[1, 1], m[0, 2], m[1, 2]])

    def clip(self, path: Polygon) -> None:
        device = self._device_path(path)
        region = ClipRegion.empty()
        if not device.is_empty:
            # Rasterize only the path's bounding box, limited to the canvas
            minx, miny, maxx, maxy = device.bounds
            x0, y0 = max(0, math.floor(minx)), max(0, math.floor(miny))
            x1, y1 = min(self.width, math.ceil(maxx) + 1), min(self.height, math.ceil(maxy) + 1)
            if x0 < x1 and y0 < y1:
                mask = np.zeros((y1 - y0, x1 - x0), dtype=bool)
                coords = np.asarray(device.exterior.coords, dtype=np.float64)
                # Pixel (x, y) covers [x, x+1); its center is tested for containment
                rr, cc = draw_polygon(coords[:, 1] - 0.5 - y0, coords[:, 0] - 0.5 - x0, shape=mask.shape)
                mask[rr, cc] = True
                region = ClipRegion(x0, y0, mask)
        if self._clip is not None:
            region = self._clip.intersect(region)
        self._clip = region

    # --- Drawing ---

    def draw_image(
        self,
        image: Raster,
        dx: float,
        dy: float,
        dw: float,
        dh: float,
        src_rect: SrcRect | None = None,
    ) -> None:
        if image.is_empty:
            raise DrawSurfaceFailure("Cannot draw an empty image")
        sx, sy, sw, sh = src_rect if src_rect is not None else (0, 0, image.width, image.height)
        if sw <= 0 or sh <= 0 or sx < 0 or sy < 0 or sx + sw > image.width or sy + sh > image.height:
            raise DrawSurfaceFailure(
                f"Source rect {(sx, sy, sw, sh)} outside {image.width}x{image.height} image"
            )
        if not all(math.isfinite(v) for v in (dx, dy, dw, dh)) or dw == 0 or dh == 0:
            raise DrawSurfaceFailure(f"Degenerate destination rect {(dx, dy, dw, dh)}")

        # Source pixel space → device space
        m = self._ctm @ _matrix(dw / sw, 0.0, 0.0, dh / sh, dx, dy)
        det = m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0]
        if abs(det) < _SINGULAR_EPS:
            raise DrawSurfaceFailure("Transform collapses the image to zero area")

        region = self._target_region(m, sw, sh)
        if region is None:
            return
        x0, y0, x1, y1 = region

        inv = np.linalg.inv(m)
        a, b, c = inv[0]
        d, e, f = inv[1]
        coeffs = (a, b, a * x0 + b * y0 + c, d, e, d * x0 + e * y0 + f)
        resample = Image.Resampling.NEAREST if _is_exact_placement(m) else self._resample

        src = image.to_image()
        if (sx, sy, sw, sh) != (0, 0, image.width, image.height):
            src = src.crop((sx, sy, sx + sw, sy + sh))

        try:
            layer = src.transform(
                (x1 - x0, y1 - y0),
                Image.Transform.AFFINE,
                coeffs,
                resample=resample,
                fillcolor=(0, 0, 0, 0),
            )
            if self._clip is not None:
                arr = np.array(layer)
                arr[..., 3] = np.where(self._clip.window(x0, y0, x1, y1), arr[..., 3], 0)
                layer = Image.fromarray(arr, mode="RGBA")
            self._canvas.alpha_composite(layer, dest=(x0, y0))
        except (ValueError, OSError) as e:
            raise DrawSurfaceFailure(f"Backend rejected draw: {e}") from e

    def _target_region(self, m: NDArray[np.float64], sw: int, sh: int) -> tuple[int, int, int, int] | None:
        """Device-space pixel box touched by the draw, limited by canvas and clip."""
        corners = np.array([[0, 0, 1], [sw, 0, 1], [0, sh, 1], [sw, sh, 1]], dtype=np.float64).T
        dev = m @ corners
        x0 = max(0, int(math.floor(dev[0].min())))
        y0 = max(0, int(math.floor(dev[1].min())))
        x1 = min(self.width, int(math.ceil(dev[0].max())))
        y1 = min(self.height, int(math.ceil(dev[1].max())))

        if self._clip is not None:
            clip_box = self._clip.bounds()
            if clip_box is None:
                return None
            x0, y0 = max(x0, clip_box[0]), max(y0, clip_box[1])
            x1, y1 = min(x1, clip_box[2]), min(y1, clip_box[3])

        if x0 >= x1 or y0 >= y1:
            return None
        return (x0, y0, x1, y1)

    def snapshot(self) -> Raster:
        return Raster(np.array(self._canvas, dtype=np.uint8))
