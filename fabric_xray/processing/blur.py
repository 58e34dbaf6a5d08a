from __future__ import annotations

import numpy as np

from .buffer import PixelBuffer

# Fixed reference radii shared by the denoise, sharpen and clarity stages.
DENOISE_RADIUS = 1
CLARITY_RADIUS = 2


def _box_pass(pixels: np.ndarray, radius: int, axis: int) -> np.ndarray:
    # Running sums along ``axis``; windows shrink at the borders instead of padding.
    length = pixels.shape[axis]
    sums = np.cumsum(pixels, axis=axis, dtype=np.int64)
    zero_shape = list(sums.shape)
    zero_shape[axis] = 1
    sums = np.concatenate([np.zeros(zero_shape, dtype=np.int64), sums], axis=axis)

    index = np.arange(length)
    lo = np.maximum(0, index - radius)
    hi = np.minimum(length - 1, index + radius)
    window = np.take(sums, hi + 1, axis=axis) - np.take(sums, lo, axis=axis)

    count_shape = [1] * pixels.ndim
    count_shape[axis] = length
    count = (hi - lo + 1).reshape(count_shape)
    return (window // count).astype(np.uint8)


def box_blur_rgba(pixels: np.ndarray, radius: int) -> np.ndarray:
    """Separable mean filter over an ``(h, w, 4)`` array, horizontal then vertical.

    Every channel, alpha included, is averaged and truncated to an integer
    after each pass. A radius of zero returns a copy.
    """
    r = max(0, int(radius))
    if r == 0:
        return pixels.copy()
    horizontal = _box_pass(pixels, r, axis=1)
    return _box_pass(horizontal, r, axis=0)


def blur(buffer: PixelBuffer, radius: int) -> PixelBuffer:
    return PixelBuffer.from_rgba(box_blur_rgba(buffer.pixels(), radius))
