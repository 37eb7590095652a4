import numpy as np
import pytest

from level_map.analysis import distinct_levels, level_usage, max_code
from level_map.display import stretch_codes
from level_map.errors import InvalidLevelCountError, UnsupportedVariantError
from level_map.uniform import uniform_quantize


def test_max_code():
    assert max_code(4, "uniform") == 3
    assert max_code(5, "igs") == 5
    assert max_code(256, "igs") == 255
    with pytest.raises(UnsupportedVariantError):
        max_code(4, "other")


def test_level_usage_counts():
    codes = np.array([[[0, 1], [2, 1]], [[2, 1], [2, 0]]], dtype=np.uint8)
    usage = level_usage(codes)
    assert [u.channel for u in usage] == [0, 1]
    assert usage[0].codes == (0, 2)
    assert usage[0].counts == (1, 3)
    assert usage[1].codes == (0, 1)
    assert usage[1].counts == (1, 3)


def test_distinct_levels(gradient_image):
    codes = uniform_quantize(gradient_image, 6)
    assert distinct_levels(codes) == 6


def test_stretch_uniform():
    codes = np.array([[0, 1, 2, 3]], dtype=np.uint8)
    assert stretch_codes(codes, 4, "uniform").tolist() == [[0, 85, 170, 255]]


def test_stretch_igs_top_code():
    codes = np.array([[0, 5]], dtype=np.uint8)
    assert stretch_codes(codes, 5, "igs").tolist() == [[0, 255]]


def test_stretch_single_level_is_black():
    codes = np.zeros((2, 2, 3), dtype=np.uint8)
    assert not stretch_codes(codes, 1, "uniform").any()


@pytest.mark.parametrize(
    "levels, variant", [(300, "igs"), (0, "igs"), (0, "uniform"), (257, "uniform")]
)
def test_max_code_rejects_bad_levels(levels, variant):
    with pytest.raises(InvalidLevelCountError):
        max_code(levels, variant)


def test_stretch_rejects_bad_levels():
    codes = np.array([[0, 1]], dtype=np.uint8)
    with pytest.raises(InvalidLevelCountError):
        stretch_codes(codes, 0, "uniform")
    with pytest.raises(InvalidLevelCountError):
        stretch_codes(codes, 300, "igs")
