from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from PIL import Image


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Row-major interleaved RGBA bytes with explicit dimensions.

    ``data`` is a flat ``uint8`` array of length ``width * height * 4``.
    """

    width: int
    height: int
    data: np.ndarray

    @classmethod
    def from_image(cls, img: Image.Image) -> "PixelBuffer":
        rgba = img.convert("RGBA")
        width, height = rgba.size
        data = np.frombuffer(rgba.tobytes(), dtype=np.uint8).copy()
        return cls(width, height, data)

    @classmethod
    def from_rgba(cls, pixels: np.ndarray) -> "PixelBuffer":
        """Wrap an ``(h, w, 4)`` array, copying it."""
        height, width, _ = pixels.shape
        return cls(width, height, np.ascontiguousarray(pixels, dtype=np.uint8).reshape(-1).copy())

    @classmethod
    def filled(cls, width: int, height: int, rgba) -> "PixelBuffer":
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[...] = rgba
        return cls(width, height, pixels.reshape(-1))

    def pixels(self) -> np.ndarray:
        """Return a read-only ``(h, w, 4)`` view of the channel data."""
        view = self.data.reshape(self.height, self.width, 4)
        view.flags.writeable = False
        return view

    def to_image(self) -> Image.Image:
        return Image.frombytes("RGBA", (self.width, self.height), self.data.tobytes())


def mask_from_image(img: Image.Image, size: Optional[tuple] = None) -> np.ndarray:
    """Convert an image into a single-channel ``(h, w)`` mask of 0..255 values.

    When ``size`` is given the mask is resampled to ``(width, height)`` first.
    """
    mask = img.convert("L")
    if size is not None and mask.size != tuple(size):
        mask = mask.resize(tuple(size), Image.Resampling.BILINEAR)
    return np.asarray(mask, dtype=np.uint8).copy()
