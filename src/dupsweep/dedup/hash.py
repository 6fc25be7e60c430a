"""Perceptual hash computation for the similarity prefilter."""

from pathlib import Path

from PIL import Image
import imagehash

from ..logging import get_logger

logger = get_logger(__name__)


class HashComputationError(Exception):
    """Raised when hash computation fails."""


def image_hash(image_path: Path, hash_size: int = 8) -> str:
    """
    Load image from disk and compute its perceptual hash as a hex string.

    Args:
        image_path: Path to image file
        hash_size: Side of the DCT grid; the hash has ``hash_size ** 2`` bits

    Returns:
        Hex digest, ``hash_size ** 2 / 4`` characters long

    Raises:
        HashComputationError: If image cannot be loaded or hashed
    """
    try:
        with Image.open(image_path) as img:
            # Hash on luminance only
            gray = img.convert('L')
            digest = str(imagehash.phash(gray, hash_size=hash_size))
    except Exception as exc:
        raise HashComputationError(f"Failed to compute hash for {image_path}: {exc}") from exc

    logger.debug(f"Computed hash for {image_path}: {digest}")
    return digest
