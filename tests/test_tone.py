import numpy as np
import pytest

from fabric_xray.processing.color import linear_to_srgb, luminance, srgb_to_linear
from fabric_xray.processing.tone import ToneControls, apply_tone, tone_curve


def test_neutral_controls_leave_luminance_alone():
    y = np.linspace(0.0, 1.0, 11)

    assert np.allclose(tone_curve(y, ToneControls()), y)


def test_shadow_lift_formula():
    y = np.array([0.1])

    result = tone_curve(y, ToneControls(shadows=1.0))

    assert result[0] == pytest.approx(0.1 + 0.9 * np.exp(-0.6))


def test_highlight_hold_formula():
    result = tone_curve(np.array([0.9]), ToneControls(highlights=1.0))

    assert result[0] == pytest.approx(0.9 - 0.9 ** 3 * 0.35)


def test_contrast_s_curve_pushes_away_from_midpoint():
    result = tone_curve(np.array([0.25, 0.5, 0.75]), ToneControls(contrast=1.0))

    assert result[0] == pytest.approx(0.175)
    assert result[1] == pytest.approx(0.5)
    assert result[2] == pytest.approx(0.825)


def test_black_deepen_formula():
    result = tone_curve(np.array([0.5]), ToneControls(blacks=1.0))

    assert result[0] == pytest.approx(0.5 - 0.25 * 0.55)


def test_curve_steps_clamp_to_unit_range():
    result = tone_curve(np.array([0.02]), ToneControls(blacks=1.0))

    assert result[0] == 0.0


def test_black_pixels_are_not_rescaled():
    rgb = np.zeros((1, 1, 3))

    result = apply_tone(rgb, ToneControls(shadows=1.0))

    assert np.array_equal(result, rgb)


def test_tone_mapping_preserves_chroma_ratios():
    rgb = np.array([[[200.0, 120.0, 60.0]]])

    result = apply_tone(rgb, ToneControls(contrast=0.5, highlights=0.3))

    before = srgb_to_linear(rgb)[0, 0]
    after = srgb_to_linear(result)[0, 0]
    assert after[0] / after[1] == pytest.approx(before[0] / before[1], rel=1e-6)
    assert after[2] / after[1] == pytest.approx(before[2] / before[1], rel=1e-6)


def test_srgb_roundtrip():
    values = np.arange(256, dtype=np.float64)

    assert np.allclose(linear_to_srgb(srgb_to_linear(values)), values)


def test_luminance_weights_sum_to_one():
    assert luminance(np.array([1.0, 1.0, 1.0])) == pytest.approx(1.0)
