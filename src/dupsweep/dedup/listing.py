from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List

from .model import ImageRef
from ..logging import get_logger

logger = get_logger(__name__)


class ListingError(Exception):
    """Raised when the target directory cannot be listed."""


def extension_pattern(extensions: Iterable[str]) -> re.Pattern[str]:
    """Case-insensitive pattern matching any of the given file extensions."""
    alternatives = "|".join(re.escape(ext) for ext in extensions)
    return re.compile(rf"\.({alternatives})$", re.IGNORECASE)


def list_images(
    directory: Path | str,
    extensions: Iterable[str] = ("jpg", "jpeg", "png", "gif"),
    temp_prefix: str = "temp_convert_to_jpeg_",
) -> List[ImageRef]:
    """
    Enumerate candidate images in a directory.

    Only regular files whose name ends in a supported extension are returned.
    Files carrying the temporary artifact prefix are left to the cleanup sweep.
    The order is by file name so it stays fixed for the whole run.

    Raises:
        ListingError: If the directory does not exist or cannot be read
    """
    root = Path(directory)
    pattern = extension_pattern(extensions)

    try:
        entries = sorted(root.iterdir(), key=lambda entry: entry.name)
    except OSError as exc:
        raise ListingError(f"Cannot list directory {root}: {exc}") from exc

    images = []
    for entry in entries:
        if not pattern.search(entry.name):
            continue
        if entry.name.startswith(temp_prefix):
            logger.debug(f"Skipping temporary artifact {entry.name}")
            continue
        if not entry.is_file():
            continue
        images.append(ImageRef.from_path(entry))

    logger.debug(f"Found {len(images)} candidate images in {root}")
    return images
