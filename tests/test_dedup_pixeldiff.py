"""Tests for the structural pixel diff."""

import pytest
from PIL import Image

from dupsweep.dedup.pixeldiff import count_diff_pixels, load_pixels, pixel_similarity


def solid(color, size=(256, 256)):
    return Image.new("RGBA", size, color)


def edge(column_color):
    """Black left half, white right half, one column in between."""
    img = solid((255, 255, 255, 255))
    img.paste((0, 0, 0, 255), (0, 0, 128, 256))
    img.paste(column_color, (128, 0, 129, 256))
    return img


class TestPixelDiff:
    def test_identical_content_scores_100(self):
        pixels = solid((10, 200, 30, 255)).tobytes()
        assert count_diff_pixels(pixels, bytes(pixels)) == 0
        assert pixel_similarity(pixels, bytes(pixels)) == 100.0

    def test_black_and_white_differ_everywhere(self):
        black = solid((0, 0, 0, 255)).tobytes()
        white = solid((255, 255, 255, 255)).tobytes()
        assert pixel_similarity(black, white) == 0.0

    def test_small_color_shift_within_threshold(self):
        a = solid((120, 120, 120, 255)).tobytes()
        b = solid((122, 121, 120, 255)).tobytes()
        assert count_diff_pixels(a, b, threshold=0.1) == 0

    def test_counts_changed_block(self):
        a = solid((128, 128, 128, 255))
        b = a.copy()
        b.paste((0, 0, 0, 255), (0, 0, 16, 16))
        assert count_diff_pixels(a.tobytes(), b.tobytes()) == 256
        assert pixel_similarity(a.tobytes(), b.tobytes()) == pytest.approx((65536 - 256) / 65536 * 100)

    def test_antialiased_edge_not_counted(self):
        """A softened edge column against a hard edge is not a real difference."""
        softened = edge((128, 128, 128, 255)).tobytes()
        hard = edge((255, 255, 255, 255)).tobytes()
        assert count_diff_pixels(softened, hard) == 0
        assert pixel_similarity(softened, hard) == 100.0

    def test_size_mismatch_rejected(self):
        with pytest.raises(ValueError):
            count_diff_pixels(solid((0, 0, 0, 255), (8, 8)).tobytes(), solid((0, 0, 0, 255), (8, 9)).tobytes(), (8, 8))

    def test_load_pixels_resizes(self, tmp_path):
        path = tmp_path / "small.png"
        Image.new("RGB", (40, 30), "red").save(path)
        pixels = load_pixels(path, (256, 256))
        assert len(pixels) == 256 * 256 * 4
