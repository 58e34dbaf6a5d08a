from __future__ import annotations

import numpy as np

# Ratios below this are treated as black and leave the channels untouched.
LUMA_EPSILON = 1e-6


def srgb_to_linear(values: np.ndarray) -> np.ndarray:
    """Decode 0..255 sRGB values to linear light in [0, 1]."""
    v = np.clip(np.asarray(values, dtype=np.float64), 0.0, 255.0) / 255.0
    return np.where(v <= 0.04045, v / 12.92, ((v + 0.055) / 1.055) ** 2.4)


def linear_to_srgb(values: np.ndarray) -> np.ndarray:
    """Encode linear light back to 0..255 sRGB (unrounded floats)."""
    v = np.clip(np.asarray(values, dtype=np.float64), 0.0, 1.0)
    encoded = np.where(v <= 0.0031308, v * 12.92, 1.055 * v ** (1.0 / 2.4) - 0.055)
    return np.clip(encoded * 255.0, 0.0, 255.0)


def luminance(rgb: np.ndarray) -> np.ndarray:
    """Rec. 709 luminance of the last axis of ``rgb``."""
    return 0.2126 * rgb[..., 0] + 0.7152 * rgb[..., 1] + 0.0722 * rgb[..., 2]


def luminance_ratio(target: np.ndarray, current: np.ndarray) -> np.ndarray:
    safe = np.where(current > LUMA_EPSILON, current, 1.0)
    return np.where(current > LUMA_EPSILON, target / safe, 1.0)


def rescale_luminance(linear_rgb: np.ndarray, current: np.ndarray, target: np.ndarray) -> np.ndarray:
    """Scale linear channels so their luminance moves from ``current`` to ``target``.

    Chroma ratios are kept; near-black pixels are left unchanged.
    """
    ratio = luminance_ratio(target, current)
    return np.clip(linear_rgb * ratio[..., None], 0.0, 1.0)


def lerp(a, b, t):
    return a + (b - a) * t
