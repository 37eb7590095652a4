import numpy as np
import pytest

from level_map.errors import InvalidLevelCountError
from level_map.igs import igs_divisor, igs_quantize, igs_scan, igs_step


class TestIgsStep:
    def test_divisor_is_integer(self):
        assert igs_divisor(5) == 51
        assert igs_divisor(3) == 85
        assert igs_divisor(256) == 1

    def test_clamps_before_remainder(self):
        # 255 + 10 = 265 is clamped to 255, so the remainder is 255 % 51 = 0
        assert igs_step(10, 255, 51) == (5, 0)

    def test_carries_remainder(self):
        assert igs_step(0, 10, 51) == (0, 10)
        assert igs_step(10, 45, 51) == (1, 4)

    def test_scan_scenario(self):
        codes, remainder = igs_scan([10, 250, 5], 51)
        assert codes == [0, 5, 0]
        assert remainder == 5

    def test_scan_can_be_resumed(self):
        values = [17, 200, 3, 99, 255, 254, 0, 128]
        whole, rem_whole = igs_scan(values, 51)
        head, rem_head = igs_scan(values[:3], 51)
        tail, rem_tail = igs_scan(values[3:], 51, rem_head)
        assert head + tail == whole
        assert rem_tail == rem_whole

    def test_scan_rejects_zero_divisor(self):
        with pytest.raises(ValueError):
            igs_scan([1, 2], 0)


class TestIgsQuantize:
    def test_row_scenario_all_channels(self):
        row = np.array([10, 250, 5], dtype=np.uint8)
        src = np.repeat(row[None, :, None], 3, axis=2)
        out = igs_quantize(src, 5)
        assert out.shape == (1, 3, 3)
        for c in range(3):
            assert out[0, :, c].tolist() == [0, 5, 0]

    def test_scan_order_is_row_major(self):
        src = np.array([[60, 4], [4, 0]], dtype=np.uint8)
        out = igs_quantize(src, 4)
        assert out.tolist() == [[0, 1], [0, 0]]

    def test_remainder_resets_per_channel(self):
        src = np.zeros((1, 2, 2), dtype=np.uint8)
        src[0, :, 0] = [63, 0]
        src[0, :, 1] = [1, 0]
        out = igs_quantize(src, 4)
        assert out[0, :, 1].tolist() == [0, 0]

    def test_early_pixel_affects_only_its_channel(self):
        base = np.zeros((1, 2, 3), dtype=np.uint8)
        base[0, 1, :] = 1
        changed = base.copy()
        changed[0, 0, 0] = 63

        out_base = igs_quantize(base, 4)
        out_changed = igs_quantize(changed, 4)

        assert out_base[0, 1, 0] == 0
        assert out_changed[0, 1, 0] == 1
        np.testing.assert_array_equal(out_base[..., 1:], out_changed[..., 1:])

    @pytest.mark.parametrize("levels", [1, 2, 3, 5, 7, 16, 64, 200, 256])
    def test_codes_in_range(self, random_image, levels):
        out = igs_quantize(random_image, levels)
        assert out.shape == random_image.shape
        assert out.dtype == np.uint8
        assert out.max() <= 255 // (256 // levels)

    def test_levels_256_is_identity(self, random_image):
        np.testing.assert_array_equal(igs_quantize(random_image, 256), random_image)

    def test_levels_1_is_all_zero(self, random_image):
        assert not igs_quantize(random_image, 1).any()

    def test_matches_scalar_scan(self, random_image):
        out = igs_quantize(random_image, 6)
        divisor = igs_divisor(6)
        for c in range(3):
            expected, _ = igs_scan(random_image[..., c].ravel().tolist(), divisor)
            assert out[..., c].ravel().tolist() == expected

    def test_threaded_channels_match_single_thread(self, random_image):
        single = igs_quantize(random_image, 9, workers=1)
        threaded = igs_quantize(random_image, 9, workers=3)
        np.testing.assert_array_equal(single, threaded)

    def test_greyscale_input(self):
        src = np.array([[10, 250, 5]], dtype=np.uint8)
        out = igs_quantize(src, 5)
        assert out.shape == (1, 3)
        assert out.tolist() == [[0, 5, 0]]

    @pytest.mark.parametrize("levels", [0, -1, 257, 1000])
    def test_rejects_bad_levels(self, random_image, levels):
        with pytest.raises(InvalidLevelCountError):
            igs_quantize(random_image, levels)
