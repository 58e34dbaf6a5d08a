from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np
from PIL import Image, ImageChops, ImageDraw

# Maximum luminance shift of a fully opaque dodge or burn mask.
LOCAL_GAIN = 0.22

Point = Tuple[float, float]


def mask_strength(mask: Optional[np.ndarray], shape: Tuple[int, ...]) -> np.ndarray | float:
    """Mask opacity in ``[0, 1]``; flat ``w*h`` or ``(h, w)`` masks are accepted."""
    if mask is None:
        return 0.0
    return np.asarray(mask, dtype=np.float64).reshape(shape) / 255.0


def apply_dodge_burn(
    y: np.ndarray,
    dodge: Optional[np.ndarray] = None,
    burn: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Apply local dodge then burn to tone-mapped luminance.

    Both steps pull toward or away from white relative to the remaining
    headroom, so overlapping masks compose rather than cancel.
    """
    dodge_strength = mask_strength(dodge, y.shape)
    burn_strength = mask_strength(burn, y.shape)
    y = y + LOCAL_GAIN * dodge_strength * (1.0 - y)
    y = y - LOCAL_GAIN * burn_strength * (1.0 - y)
    return np.clip(y, 0.0, 1.0)


class MaskBrush:
    """Accumulates soft circular stamps into an ``L`` mode mask.

    Each stamp is alpha-blended over the existing mask at a low opacity, so
    repeated strokes build up gradually toward 255.
    """

    def __init__(self, size: Tuple[int, int], radius: float = 24.0, opacity: float = 0.12) -> None:
        self.size = tuple(size)
        self.radius = float(radius)
        self.opacity = max(0.0, min(1.0, opacity))
        self.mask = Image.new("L", self.size, 0)

    def _stamp_layer(self, points: Iterable[Point]) -> Image.Image:
        layer = Image.new("L", self.size, 0)
        draw = ImageDraw.Draw(layer)
        r = self.radius
        for x, y in points:
            draw.ellipse((x - r, y - r, x + r, y + r), fill=255)
        return layer

    def _stamp(self, x: float, y: float) -> None:
        coverage = self._stamp_layer([(x, y)])
        white = Image.new("L", self.size, 255)
        blended = Image.blend(self.mask, white, self.opacity)
        self.mask = Image.composite(blended, self.mask, coverage)

    def stroke(self, points: Sequence[Point]) -> None:
        """Stamp along a polyline, interpolating so stamps overlap."""
        if not points:
            return
        spacing = max(1.0, self.radius / 4.0)
        self._stamp(*points[0])
        for (x0, y0), (x1, y1) in zip(points, points[1:]):
            distance = math.hypot(x1 - x0, y1 - y0)
            steps = max(1, int(distance // spacing))
            for step in range(1, steps + 1):
                t = step / steps
                self._stamp(x0 + (x1 - x0) * t, y0 + (y1 - y0) * t)

    def erase(self, points: Sequence[Point]) -> None:
        coverage = self._stamp_layer(points)
        self.mask = ImageChops.subtract(self.mask, coverage)

    def clear(self) -> None:
        self.mask = Image.new("L", self.size, 0)

    def to_array(self) -> np.ndarray:
        return np.asarray(self.mask, dtype=np.uint8).copy()
