from __future__ import annotations

import numpy as np


def add_grain(working: np.ndarray, amplitude: float, rng: np.random.Generator) -> np.ndarray:
    """Add monochromatic grain: one draw per pixel shared by R, G and B."""
    if amplitude <= 0:
        return working
    height, width = working.shape[:2]
    draw = rng.random((height, width)) - 0.5
    return working + (draw * 255.0 * amplitude)[..., None]
