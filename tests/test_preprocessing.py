"""Tests for preprocessing module."""

import pytest
import numpy as np
import cv2
from scipy import ndimage
from irisloc.preprocessing import ImageEnhancer, normalize_intensity, reduce_noise
from irisloc.preprocessing.masking import apply_opening, fill_holes, shrink


class TestEnhancement:
    """Test image enhancement functions."""

    def test_enhancer_initialization(self):
        """Test ImageEnhancer defaults."""
        enhancer = ImageEnhancer()
        assert enhancer.blur_kernel == 5

    def test_normalize_stretches_range(self):
        """Test min maps to 0 and max to 255."""
        test_image = np.linspace(50, 100, 400).reshape(20, 20).astype(np.uint8)
        normalized = normalize_intensity(test_image)
        assert normalized.dtype == np.uint8
        assert normalized.min() == 0
        assert normalized.max() == 255

    def test_normalize_uniform_image(self):
        """Test a uniform image normalizes to black."""
        test_image = np.full((50, 50), 128, dtype=np.uint8)
        normalized = normalize_intensity(test_image)
        assert np.count_nonzero(normalized) == 0

    def test_normalize_16bit_input(self):
        """Test deeper grayscale input is brought down to 8 bits."""
        test_image = np.zeros((30, 30), dtype=np.uint16)
        test_image[10:20, 10:20] = 4000
        normalized = normalize_intensity(test_image)
        assert normalized.dtype == np.uint8
        assert normalized.max() == 255

    def test_enhance(self):
        """Test full enhancement pipeline."""
        test_image = np.random.randint(0, 256, (120, 160), dtype=np.uint8)
        enhanced = ImageEnhancer().enhance(test_image)
        assert enhanced.shape == test_image.shape
        assert enhanced.dtype == np.uint8

    def test_enhance_does_not_modify_input(self):
        """Test the caller's buffer is left untouched."""
        test_image = np.random.randint(40, 200, (64, 64), dtype=np.uint8)
        original = test_image.copy()
        ImageEnhancer().enhance(test_image)
        np.testing.assert_array_equal(test_image, original)

    def test_reduce_noise(self):
        """Test noise reduction."""
        test_image = np.random.randint(0, 256, (120, 160), dtype=np.uint8)
        smoothed = reduce_noise(test_image)
        assert smoothed.shape == test_image.shape
        assert smoothed.std() < test_image.std()

    def test_normalize_64bit_integer_input(self):
        """Test integer depths OpenCV lacks are still accepted."""
        test_image = np.arange(100, dtype=np.int64).reshape(10, 10)
        normalized = normalize_intensity(test_image)
        assert normalized.dtype == np.uint8
        assert normalized[0, 0] == 0
        assert normalized[9, 9] == 255

    def test_accepts_single_channel_axis(self):
        """Test (h, w, 1) input is treated as grayscale."""
        test_image = np.random.randint(0, 256, (40, 50, 1), dtype=np.uint8)
        enhanced = ImageEnhancer().enhance(test_image)
        assert enhanced.shape == (40, 50)

    def test_accepts_bool_input(self):
        """Test boolean masks are accepted."""
        test_image = np.zeros((40, 40), dtype=bool)
        test_image[10:30, 10:30] = True
        normalized = normalize_intensity(test_image)
        assert normalized.max() == 255

    @pytest.mark.parametrize("bad_input", [
        None,
        [[1, 2], [3, 4]],
        np.zeros((0, 10), dtype=np.uint8),
        np.zeros((10, 0), dtype=np.uint8),
        np.zeros((10, 10, 3), dtype=np.uint8),
        np.zeros(10, dtype=np.uint8),
    ])
    def test_rejects_invalid_input(self, bad_input):
        """Test precondition violations raise ValueError."""
        with pytest.raises(ValueError):
            ImageEnhancer().enhance(bad_input)


def _pupil_with_reflection():
    mask = np.full((100, 100), 255, dtype=np.uint8)
    cv2.circle(mask, (50, 50), 30, 0, -1)
    cv2.circle(mask, (50, 50), 6, 255, -1)
    return mask


class TestHoleFilling:
    """Test hole filling."""

    def test_removes_enclosed_blob(self):
        """Test a reflection inside a dark disk is erased."""
        mask = _pupil_with_reflection()
        filled = fill_holes(mask)
        assert filled[50, 50] == 0
        assert np.count_nonzero(filled[40:61, 40:61]) == 0

    def test_keeps_border_connected_regions(self):
        """Test background touching the border stays white."""
        mask = _pupil_with_reflection()
        filled = fill_holes(mask)
        assert filled[0, 0] == 255
        assert filled[5, 50] == 255
        assert filled[95, 95] == 255

    def test_does_not_modify_input(self):
        """Test the input mask is left untouched."""
        mask = _pupil_with_reflection()
        original = mask.copy()
        fill_holes(mask)
        np.testing.assert_array_equal(mask, original)

    def test_idempotent(self):
        """Test filling twice is the same as filling once."""
        rng = np.random.default_rng(3)
        mask = (rng.random((80, 90)) > 0.45).astype(np.uint8) * 255
        once = fill_holes(mask)
        twice = fill_holes(once)
        np.testing.assert_array_equal(once, twice)

    def test_matches_scipy_fill_holes(self):
        """Test against scipy's binary hole filling of the dark regions."""
        rng = np.random.default_rng(11)
        mask = (rng.random((60, 70)) > 0.4).astype(np.uint8) * 255
        mask[0, :] = 255
        mask[-1, :] = 255
        mask[:, 0] = 255
        mask[:, -1] = 255

        dark_filled = ndimage.binary_fill_holes(mask == 0)
        expected = np.where(dark_filled, 0, 255).astype(np.uint8)

        np.testing.assert_array_equal(fill_holes(mask), expected)

    def test_all_black(self):
        """Test an all-black mask stays black."""
        mask = np.zeros((30, 30), dtype=np.uint8)
        assert np.count_nonzero(fill_holes(mask)) == 0

    def test_rejects_non_2d(self):
        """Test multi-channel masks are rejected."""
        with pytest.raises(ValueError):
            fill_holes(np.zeros((10, 10, 3), dtype=np.uint8))


class TestMasking:
    """Test morphology and resizing utilities."""

    def test_opening_removes_specks(self):
        """Test small white specks disappear and large shapes survive."""
        mask = np.zeros((100, 100), dtype=np.uint8)
        mask[10:12, 10:12] = 255
        cv2.rectangle(mask, (40, 40), (80, 80), 255, -1)
        opened = apply_opening(mask, 7)
        assert np.count_nonzero(opened[5:20, 5:20]) == 0
        assert opened[60, 60] == 255

    def test_shrink_large_image(self):
        """Test smaller dimension is capped and mult recorded."""
        test_image = np.zeros((200, 300), dtype=np.uint8)
        small, mult = shrink(test_image, 60)
        assert small.shape == (60, 90)
        assert mult == pytest.approx(200 / 60)

    def test_shrink_uses_smaller_dimension(self):
        """Test portrait images are capped on width."""
        test_image = np.zeros((400, 120), dtype=np.uint8)
        small, mult = shrink(test_image, 60)
        assert small.shape == (200, 60)
        assert mult == pytest.approx(2.0)

    def test_shrink_small_image_unchanged(self):
        """Test no resize when already within the cap."""
        test_image = np.random.randint(0, 256, (50, 80), dtype=np.uint8)
        small, mult = shrink(test_image, 60)
        assert mult == 1.0
        np.testing.assert_array_equal(small, test_image)
        assert small is not test_image
