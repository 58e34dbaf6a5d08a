from __future__ import annotations

import math
from dataclasses import dataclass

from ..presets import FabricPreset

# Tissue-scatter blend is capped regardless of preset so extreme inputs never wash out.
MIX_GAIN = 1.15
MIX_CAP = 0.42


@dataclass(frozen=True)
class Transmission:
    reveal: float
    mix: float


def transmittance(preset: FabricPreset, thickness: float) -> float:
    return math.exp(-preset.density * preset.clamp_thickness(thickness))


def compute_reveal(preset: FabricPreset, thickness: float, intensity: float) -> float:
    t = transmittance(preset, thickness)
    return max(0.0, min(preset.max_reveal, t * preset.max_reveal * intensity))


def mix_fraction(reveal: float) -> float:
    return max(0.0, min(MIX_CAP, reveal * MIX_GAIN))


def compute_transmission(preset: FabricPreset, thickness: float, intensity: float) -> Transmission:
    reveal = compute_reveal(preset, thickness, intensity)
    return Transmission(reveal=reveal, mix=mix_fraction(reveal))
