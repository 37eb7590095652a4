import numpy as np
import pytest


@pytest.fixture
def gradient_image():
    """16x16 RGB image; each channel is a different ramp over 0..255."""
    ramp = np.arange(256, dtype=np.uint8).reshape(16, 16)
    return np.stack([ramp, ramp[::-1], ramp.T], axis=-1).copy()


@pytest.fixture
def random_image():
    """Deterministic 24x32 RGB noise."""
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(24, 32, 3), dtype=np.uint8)


@pytest.fixture
def tall_image():
    """Enough rows to split uniform quantization into several bands."""
    rng = np.random.default_rng(99)
    return rng.integers(0, 256, size=(300, 7, 3), dtype=np.uint8)
