from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .color import linear_to_srgb, luminance, rescale_luminance, srgb_to_linear
from .masking import apply_dodge_burn


@dataclass(frozen=True)
class ToneControls:
    shadows: float = 0.0
    highlights: float = 0.0
    contrast: float = 0.0
    blacks: float = 0.0


def tone_curve(y: np.ndarray, controls: ToneControls) -> np.ndarray:
    """Reshape linear luminance in ``[0, 1]``.

    Shadow lift, highlight hold, contrast S-curve and black deepen are applied
    in that order, each followed by a clamp.
    """
    y = np.clip(np.asarray(y, dtype=np.float64), 0.0, 1.0)

    y = np.clip(y + controls.shadows * (1.0 - y) * np.exp(-6.0 * y), 0.0, 1.0)
    y = np.clip(y - controls.highlights * y ** 3 * 0.35, 0.0, 1.0)

    d = y - 0.5
    y = np.clip(y + controls.contrast * d * (1.0 - np.minimum(1.0, np.abs(d) * 2.0)) * 0.6, 0.0, 1.0)

    y = np.clip(y - controls.blacks * (1.0 - y) ** 2 * 0.55, 0.0, 1.0)
    return y


def apply_tone(
    rgb: np.ndarray,
    controls: ToneControls,
    dodge: Optional[np.ndarray] = None,
    burn: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Tone-map ``(h, w, 3)`` sRGB floats through linear light.

    Dodge/burn masks act on the already tone-mapped luminance. Returns sRGB
    floats clamped to ``[0, 255]``.
    """
    linear = srgb_to_linear(rgb)
    y = luminance(linear)
    target = apply_dodge_burn(tone_curve(y, controls), dodge, burn)
    return linear_to_srgb(rescale_luminance(linear, y, target))
