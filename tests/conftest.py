import numpy as np
import pytest

from fabric_xray.processing.buffer import PixelBuffer


@pytest.fixture
def random_buffer():
    rng = np.random.default_rng(1234)
    pixels = rng.integers(0, 256, size=(9, 11, 4), dtype=np.uint8)
    return PixelBuffer.from_rgba(pixels)


@pytest.fixture
def gray_buffer():
    return PixelBuffer.filled(2, 2, (128, 128, 128, 255))
