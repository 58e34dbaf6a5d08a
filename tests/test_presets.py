import pytest

from fabric_xray.presets import PRESETS, FabricKey, FabricPreset, get_preset


@pytest.mark.parametrize("preset", list(PRESETS.values()), ids=lambda p: p.key.value)
def test_presets_respect_invariants(preset):
    assert preset.thickness_min < preset.thickness_max
    assert 0 <= preset.max_reveal <= 1
    assert 0 <= preset.desat <= 1
    assert 0 <= preset.noise <= 0.06
    assert preset.max_delta >= 0
    assert preset.blur_radius >= 0


def test_catalog_has_four_materials():
    assert set(PRESETS) == set(FabricKey)
    assert len({p.density for p in PRESETS.values()}) == 4


def test_get_preset_accepts_strings_and_members():
    assert get_preset("seda") is PRESETS[FabricKey.SEDA]
    assert get_preset(FabricKey.CORTINA).max_reveal == 0.42


def test_get_preset_rejects_unknown_material():
    with pytest.raises(KeyError):
        get_preset("linho")


def test_clamp_thickness_bounds():
    preset = get_preset("estofado")
    assert preset.clamp_thickness(-1.0) == preset.thickness_min
    assert preset.clamp_thickness(99.0) == preset.thickness_max
    assert preset.clamp_thickness(1.0) == 1.0


def test_invalid_thickness_range_is_rejected():
    with pytest.raises(ValueError):
        FabricPreset(
            key=FabricKey.SEDA,
            label="broken",
            density=1.0,
            thickness_min=1.0,
            thickness_max=1.0,
            max_reveal=0.5,
            detail_gain=0.5,
            blur_radius=2,
            desat=0.2,
            noise=0.01,
            max_delta=10,
        )
