"""Fabric material presets.

Each preset bundles the simplified attenuation constants for one material
together with the visual safety limits that keep the effect from washing out.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, Union


class FabricKey(str, Enum):
    ESTOFADO = "estofado"
    CORTINA = "cortina"
    SEDA = "seda"
    POLIESTER = "poliester"


@dataclass(frozen=True)
class FabricPreset:
    key: FabricKey
    label: str

    # Attenuation: higher density means less transmission.
    density: float
    thickness_min: float
    thickness_max: float

    # Visual limits.
    max_reveal: float
    detail_gain: float
    blur_radius: int
    desat: float
    noise: float
    max_delta: float

    def __post_init__(self) -> None:
        if not self.thickness_min < self.thickness_max:
            raise ValueError(f"{self.key.value}: thickness_min must be below thickness_max")
        for name in ("density", "max_reveal", "detail_gain", "blur_radius", "desat", "noise", "max_delta"):
            if getattr(self, name) < 0:
                raise ValueError(f"{self.key.value}: {name} must be non-negative")

    def clamp_thickness(self, thickness: float) -> float:
        return max(self.thickness_min, min(self.thickness_max, thickness))

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["key"] = self.key.value
        return data


PRESETS: Dict[FabricKey, FabricPreset] = {
    FabricKey.ESTOFADO: FabricPreset(
        key=FabricKey.ESTOFADO,
        label="Estofado (alta densidade)",
        density=2.4,
        thickness_min=0.2,
        thickness_max=1.6,
        max_reveal=0.28,
        detail_gain=0.55,
        blur_radius=4,
        desat=0.45,
        noise=0.018,
        max_delta=28,
    ),
    FabricKey.CORTINA: FabricPreset(
        key=FabricKey.CORTINA,
        label="Cortina (média densidade)",
        density=1.5,
        thickness_min=0.2,
        thickness_max=1.8,
        max_reveal=0.42,
        detail_gain=0.65,
        blur_radius=3,
        desat=0.35,
        noise=0.02,
        max_delta=34,
    ),
    FabricKey.SEDA: FabricPreset(
        key=FabricKey.SEDA,
        label="Seda (baixa densidade)",
        density=0.95,
        thickness_min=0.15,
        thickness_max=2.0,
        max_reveal=0.55,
        detail_gain=0.7,
        blur_radius=2,
        desat=0.28,
        noise=0.022,
        max_delta=40,
    ),
    FabricKey.POLIESTER: FabricPreset(
        key=FabricKey.POLIESTER,
        label="Poliéster (média/alta densidade)",
        density=1.85,
        thickness_min=0.2,
        thickness_max=1.9,
        max_reveal=0.36,
        detail_gain=0.6,
        blur_radius=3,
        desat=0.38,
        noise=0.02,
        max_delta=32,
    ),
}


def get_preset(key: Union[str, FabricKey]) -> FabricPreset:
    """Look up a preset by enum member or its string value.

    Raises ``KeyError`` for unknown materials.
    """
    try:
        return PRESETS[FabricKey(key)]
    except ValueError:
        raise KeyError(f"Unknown fabric preset: {key}") from None
