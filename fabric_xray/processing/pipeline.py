from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..presets import FabricPreset
from .blur import CLARITY_RADIUS, DENOISE_RADIUS, box_blur_rgba
from .buffer import PixelBuffer
from .color import lerp, luminance
from .denoise import denoise_color, denoise_luma, sharpen
from .detail import local_contrast, transmission_base, transmission_detail
from .grain import add_grain
from .tone import ToneControls, apply_tone
from .transmission import Transmission, compute_transmission

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class EffectParameters:
    """Per-render controls.

    ``dodge_mask`` and ``burn_mask`` hold 0..255 opacities for every pixel,
    either as a flat row-major array of length ``w * h`` or shaped ``(h, w)``.
    """

    preset: FabricPreset
    thickness: float
    intensity: float = 1.0
    shadows: float = 0.0
    blacks: float = 0.0
    highlights: float = 0.0
    contrast: float = 0.0
    clarity: float = 0.0
    dehaze: float = 0.0
    denoise_color: float = 0.0
    denoise_luma: float = 0.0
    sharpen: float = 0.0
    sharpen_masking: float = 0.0
    enable_noise: bool = False
    dodge_mask: Optional[np.ndarray] = None
    burn_mask: Optional[np.ndarray] = None
    rng: Optional[np.random.Generator] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "thickness", self.preset.clamp_thickness(self.thickness))

    @property
    def tone(self) -> ToneControls:
        return ToneControls(
            shadows=self.shadows,
            highlights=self.highlights,
            contrast=self.contrast,
            blacks=self.blacks,
        )


def apply_xray_effect(buffer: PixelBuffer, params: EffectParameters) -> PixelBuffer:
    """Render the fabric transmission effect into a new buffer.

    The input buffer is never modified and the alpha channel is copied through
    unchanged. Reference blurs are all taken from the original pixels; only the
    running RGB value threads through the stages.
    """
    preset = params.preset
    source = buffer.pixels()
    original = source[..., :3].astype(np.float64)

    transmission: Transmission = compute_transmission(preset, params.thickness, params.intensity)
    reveal = transmission.reveal
    LOGGER.debug(
        "x-ray %s %dx%d reveal=%.4f mix=%.4f",
        preset.key.value,
        buffer.width,
        buffer.height,
        reveal,
        transmission.mix,
    )

    tissue = box_blur_rgba(source, preset.blur_radius)[..., :3].astype(np.float64)
    fine = box_blur_rgba(source, DENOISE_RADIUS)[..., :3].astype(np.float64)
    mid = box_blur_rgba(source, CLARITY_RADIUS)[..., :3].astype(np.float64)

    working = denoise_color(original, fine, params.denoise_color)
    working = denoise_luma(working, fine, params.denoise_luma)

    working = transmission_base(working, tissue, transmission.mix)
    working = working + transmission_detail(original, tissue, preset, reveal)
    working = working + local_contrast(working, mid, params.clarity, params.dehaze)

    working = apply_tone(working, params.tone, params.dodge_mask, params.burn_mask)

    desat = preset.desat * reveal
    if desat > 0:
        working = lerp(working, luminance(working)[..., None], desat)

    if params.enable_noise:
        rng = params.rng if params.rng is not None else np.random.default_rng()
        working = add_grain(working, preset.noise * reveal, rng)

    working = sharpen(working, original, fine, params.sharpen, params.sharpen_masking)

    out = np.empty_like(source)
    out[..., :3] = np.rint(np.clip(working, 0.0, 255.0)).astype(np.uint8)
    out[..., 3] = source[..., 3]
    return PixelBuffer.from_rgba(out)
