import math

import numpy as np
import pytest

from fabric_xray.presets import PRESETS, get_preset
from fabric_xray.processing.transmission import (
    MIX_CAP,
    compute_reveal,
    compute_transmission,
    mix_fraction,
)

ALL_PRESETS = list(PRESETS.values())


@pytest.mark.parametrize("preset", ALL_PRESETS, ids=lambda p: p.key.value)
def test_reveal_non_increasing_in_thickness(preset):
    thicknesses = np.linspace(preset.thickness_min, preset.thickness_max, 25)
    reveals = [compute_reveal(preset, t, 1.0) for t in thicknesses]

    assert all(a >= b for a, b in zip(reveals, reveals[1:]))


@pytest.mark.parametrize("preset", ALL_PRESETS, ids=lambda p: p.key.value)
def test_reveal_non_decreasing_in_intensity_and_bounded(preset):
    intensities = np.linspace(0.0, 1.0, 21)
    reveals = [compute_reveal(preset, preset.thickness_min, i) for i in intensities]

    assert all(a <= b for a, b in zip(reveals, reveals[1:]))
    assert max(reveals) <= preset.max_reveal


def test_zero_intensity_reveals_nothing():
    transmission = compute_transmission(get_preset("seda"), 1.0, 0.0)

    assert transmission.reveal == 0.0
    assert transmission.mix == 0.0


def test_thickness_outside_preset_range_is_clamped():
    preset = get_preset("cortina")

    assert compute_reveal(preset, 0.0, 1.0) == compute_reveal(preset, preset.thickness_min, 1.0)
    assert compute_reveal(preset, 5.0, 1.0) == compute_reveal(preset, preset.thickness_max, 1.0)


def test_reveal_matches_attenuation_law():
    preset = get_preset("poliester")
    expected = math.exp(-preset.density * 0.8) * preset.max_reveal * 0.5

    assert compute_reveal(preset, 0.8, 0.5) == pytest.approx(expected)


def test_mix_fraction_is_capped():
    assert mix_fraction(0.1) == pytest.approx(0.115)
    assert mix_fraction(10.0) == MIX_CAP
    assert mix_fraction(0.0) == 0.0
