"""Structural pixel diff at a fixed canonical resolution."""

from pathlib import Path
from typing import Tuple

from PIL import Image
from pixelmatch import pixelmatch


def load_pixels(image_path: Path, size: Tuple[int, int] = (256, 256)) -> bytes:
    """Decode an image, resize it to ``size`` and return its raw RGBA bytes."""
    with Image.open(image_path) as img:
        return img.convert("RGBA").resize(size, Image.BILINEAR).tobytes()


def count_diff_pixels(a: bytes, b: bytes, size: Tuple[int, int] = (256, 256), threshold: float = 0.1) -> int:
    """
    Count pixels whose colour difference exceeds ``threshold`` on a 0..1 scale.

    Anti-aliased edge pixels are not counted.

    Raises:
        ValueError: If a buffer does not hold ``size`` RGBA pixels
    """
    width, height = size
    expected = width * height * 4
    if len(a) != expected or len(b) != expected:
        raise ValueError(f"Pixel buffers must hold {expected} bytes, got {len(a)} and {len(b)}")
    return pixelmatch(a, b, width, height, None, threshold=threshold)


def pixel_similarity(a: bytes, b: bytes, size: Tuple[int, int] = (256, 256), threshold: float = 0.1) -> float:
    """Share of matching pixels between two equally sized buffers, in percent."""
    total = size[0] * size[1]
    diff = count_diff_pixels(a, b, size, threshold)
    return (total - diff) / total * 100.0
