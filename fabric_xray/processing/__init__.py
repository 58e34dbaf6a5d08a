"""Pixel-processing engine for the fabric transmission effect."""

from .blur import blur, box_blur_rgba
from .buffer import PixelBuffer, mask_from_image
from .masking import MaskBrush, apply_dodge_burn
from .pipeline import EffectParameters, apply_xray_effect
from .tone import ToneControls, apply_tone, tone_curve
from .transmission import Transmission, compute_reveal, compute_transmission

__all__ = [
    "blur",
    "box_blur_rgba",
    "PixelBuffer",
    "mask_from_image",
    "MaskBrush",
    "apply_dodge_burn",
    "EffectParameters",
    "apply_xray_effect",
    "ToneControls",
    "apply_tone",
    "tone_curve",
    "Transmission",
    "compute_reveal",
    "compute_transmission",
]
