from __future__ import annotations

import numpy as np

from ..presets import FabricPreset
from .color import lerp

CLARITY_GAIN = 0.35
DEHAZE_GAIN = 0.25 * 1.15


def transmission_base(working: np.ndarray, tissue: np.ndarray, mix: float) -> np.ndarray:
    """Blend the working pixels toward the tissue-scatter blur."""
    return lerp(working, tissue, mix)


def transmission_detail(
    original: np.ndarray,
    tissue: np.ndarray,
    preset: FabricPreset,
    reveal: float,
) -> np.ndarray:
    """High-pass detail revealed through the fabric.

    Both the gain and the per-channel clamp scale with ``reveal``, so the
    added detail can never exceed ``preset.max_delta * reveal``.
    """
    limit = preset.max_delta * reveal
    delta = (original - tissue) * preset.detail_gain * reveal
    return np.clip(delta, -limit, limit)


def local_contrast(working: np.ndarray, reference: np.ndarray, clarity: float, dehaze: float) -> np.ndarray:
    # Clarity and dehaze share the radius-2 reference; no clamp until the final output.
    gain = clarity * CLARITY_GAIN + dehaze * DEHAZE_GAIN
    if gain == 0:
        return np.zeros_like(working)
    return (working - reference) * gain
