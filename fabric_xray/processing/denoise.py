from __future__ import annotations

import numpy as np

from .color import lerp, linear_to_srgb, luminance, rescale_luminance, srgb_to_linear

DENOISE_GAIN = 0.55
SHARPEN_GAIN = 0.55
MASKING_GAIN = 0.35


def denoise_color(working: np.ndarray, reference: np.ndarray, amount: float) -> np.ndarray:
    if amount <= 0:
        return working
    return lerp(working, reference, amount * DENOISE_GAIN)


def denoise_luma(working: np.ndarray, reference: np.ndarray, amount: float) -> np.ndarray:
    """Pull linear luminance toward the reference while keeping chroma."""
    if amount <= 0:
        return working
    linear = srgb_to_linear(working)
    y = luminance(linear)
    target = lerp(y, luminance(srgb_to_linear(reference)), amount * DENOISE_GAIN)
    return linear_to_srgb(rescale_luminance(linear, y, target))


def edge_mask(original: np.ndarray, reference: np.ndarray, masking: float) -> np.ndarray:
    """Per-pixel sharpening weight in ``[0, 1]`` from local edge strength."""
    edge = np.mean(np.abs(original - reference), axis=-1) / 255.0
    floor = masking * MASKING_GAIN
    return np.clip((edge - floor) / (1.0 - floor), 0.0, 1.0)


def sharpen(
    working: np.ndarray,
    original: np.ndarray,
    reference: np.ndarray,
    amount: float,
    masking: float,
) -> np.ndarray:
    """Edge-gated unsharp mask against the radius-1 blur of the original."""
    if amount <= 0:
        return working
    weight = amount * SHARPEN_GAIN * edge_mask(original, reference, masking)
    return working + (working - reference) * weight[..., None]
