import numpy as np
import pytest

from fabric_xray.processing.masking import LOCAL_GAIN, MaskBrush, apply_dodge_burn


def test_absent_masks_leave_luminance_unchanged():
    y = np.array([[0.2, 0.8]])

    assert np.array_equal(apply_dodge_burn(y), y)


def test_full_dodge_brightens_and_full_burn_darkens():
    y = np.array([[0.5]])
    full = np.array([[255]], dtype=np.uint8)

    assert apply_dodge_burn(y, dodge=full)[0, 0] == pytest.approx(0.5 + LOCAL_GAIN * 0.5)
    assert apply_dodge_burn(y, burn=full)[0, 0] == pytest.approx(0.5 - LOCAL_GAIN * 0.5)


def test_dodge_then_burn_compose_sequentially():
    y = np.array([[0.5]])
    full = np.array([[255]], dtype=np.uint8)

    dodged = 0.5 + LOCAL_GAIN * (1 - 0.5)
    expected = dodged - LOCAL_GAIN * (1 - dodged)

    result = apply_dodge_burn(y, dodge=full, burn=full)[0, 0]
    assert result == pytest.approx(expected)
    assert result != pytest.approx(0.5)


def test_partial_mask_scales_strength():
    y = np.array([[0.4]])
    half = np.array([[51]], dtype=np.uint8)

    result = apply_dodge_burn(y, dodge=half)[0, 0]

    assert result == pytest.approx(0.4 + LOCAL_GAIN * 0.2 * 0.6)


def test_brush_accumulates_soft_stamps():
    brush = MaskBrush((40, 40), radius=5, opacity=0.12)

    brush.stroke([(20, 20)])
    first = brush.to_array()[20, 20]
    brush.stroke([(20, 20)])
    second = brush.to_array()[20, 20]

    assert 0 < first < second < 255
    assert brush.to_array()[0, 0] == 0


def test_brush_stroke_interpolates_between_points():
    brush = MaskBrush((60, 20), radius=3)

    brush.stroke([(5, 10), (55, 10)])
    mask = brush.to_array()

    assert all(mask[10, x] > 0 for x in range(5, 56))
    assert mask[0, 30] == 0


def test_brush_clear_and_erase():
    brush = MaskBrush((20, 20), radius=4, opacity=0.5)
    brush.stroke([(10, 10)])

    brush.erase([(10, 10)])
    assert brush.to_array()[10, 10] == 0

    brush.stroke([(10, 10)])
    brush.clear()
    assert not brush.to_array().any()


def test_flat_masks_are_reshaped_to_luminance():
    y = np.full((2, 3), 0.5)
    flat = np.full(6, 255, dtype=np.uint8)

    result = apply_dodge_burn(y, dodge=flat)

    assert result.shape == (2, 3)
    assert np.allclose(result, 0.5 + LOCAL_GAIN * 0.5)
