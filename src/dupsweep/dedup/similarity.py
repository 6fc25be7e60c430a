"""Two-stage similarity score between two normalized images."""

from pathlib import Path
from typing import Optional, Tuple

from PIL import Image

from .distance import hamming_distance
from .hash import HashComputationError, image_hash
from .pixeldiff import load_pixels, pixel_similarity
from ..config import Settings
from ..logging import get_logger

logger = get_logger(__name__)


class SimilarityError(Exception):
    """Raised when an image cannot be read for comparison."""


def image_size(image_path: Path) -> Tuple[int, int]:
    """Intrinsic (width, height) of an image without decoding its pixels."""
    try:
        with Image.open(image_path) as img:
            return img.size
    except Exception as exc:
        raise SimilarityError(f"Failed to read dimensions of {image_path}: {exc}") from exc


def score_images(path_a: Path, path_b: Path, settings: Optional[Settings] = None) -> float:
    """
    Score how similar two images are, from 0 to 100.

    1. Perceptual hashes closer than ``hash_distance_threshold`` return
       ``hash_match_score`` without touching pixels.
    2. Images of different dimensions return 0.
    3. Otherwise both are resized to ``canonical_size`` and the share of
       matching pixels is returned.

    Args:
        path_a: First image, already normalized
        path_b: Second image, already normalized
        settings: Thresholds and sizes; defaults apply when omitted

    Raises:
        SimilarityError: If either image cannot be read
    """
    settings = settings or Settings()

    try:
        hash_a = image_hash(path_a, settings.hash_size)
        hash_b = image_hash(path_b, settings.hash_size)
    except HashComputationError as exc:
        raise SimilarityError(str(exc)) from exc

    distance = hamming_distance(hash_a, hash_b)
    if distance < settings.hash_distance_threshold:
        logger.debug(f"Hash prefilter matched {path_a.name} and {path_b.name} (distance: {distance})")
        return settings.hash_match_score

    if image_size(path_a) != image_size(path_b):
        return 0.0

    try:
        pixels_a = load_pixels(path_a, settings.canonical_size)
        pixels_b = load_pixels(path_b, settings.canonical_size)
    except Exception as exc:
        raise SimilarityError(f"Failed to decode pixels of {path_a} or {path_b}: {exc}") from exc

    score = pixel_similarity(pixels_a, pixels_b, settings.canonical_size, settings.pixel_threshold)
    logger.debug(f"Pixel similarity {path_a.name} vs {path_b.name}: {score:.2f}")
    return min(100.0, max(0.0, score))
