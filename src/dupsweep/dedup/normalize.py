"""Re-encode inputs the hashing and diffing stages cannot use directly."""

import os
from pathlib import Path
from typing import Optional

from PIL import Image

from ..logging import get_logger

logger = get_logger(__name__)

TEMP_PREFIX = "temp_convert_to_jpeg_"
CONVERTED_FORMATS = frozenset({"png"})


class ConversionError(Exception):
    """Raised when an image cannot be decoded or re-encoded as JPEG."""


def needs_conversion(path: Path) -> bool:
    return path.suffix.lower().lstrip(".") in CONVERTED_FORMATS


def is_temporary_artifact(name: str, prefix: str = TEMP_PREFIX) -> bool:
    return name.startswith(prefix)


def temporary_path(path: Path, token: Optional[str] = None, prefix: str = TEMP_PREFIX) -> Path:
    """Name of the JPEG artifact for ``path``, placed beside it."""
    stem = path.stem if token is None else f"{path.stem}_{token}"
    return path.with_name(f"{prefix}{stem}.jpg")


def partial_path(target: Path) -> Path:
    """In-progress name for ``target``; not an image extension, so never listed."""
    return target.with_suffix(".part")


def normalize_image(path: Path, token: Optional[str] = None, prefix: str = TEMP_PREFIX) -> Path:
    """
    Return a path whose content is JPEG-compatible.

    PNG inputs are decoded and written as a new JPEG next to the source; every
    other input is returned unchanged. The caller owns the returned file when it
    differs from ``path`` and must delete it.

    Args:
        path: Source image
        token: Per-caller suffix keeping concurrent artifacts apart
        prefix: File name prefix marking the artifact as temporary

    Raises:
        ConversionError: If decoding, encoding or writing fails
    """
    path = Path(path)
    if not needs_conversion(path):
        return path

    target = temporary_path(path, token, prefix)
    partial = partial_path(target)

    try:
        with Image.open(path) as img:
            img.load()
            rgb = _flatten(img)
            rgb.save(partial, format="JPEG")
        os.replace(partial, target)
    except Exception as exc:
        partial.unlink(missing_ok=True)
        raise ConversionError(f"Failed to convert {path} to JPEG: {exc}") from exc

    logger.debug(f"Converted {path.name} -> {target.name}")
    return target


def _flatten(img: Image.Image) -> Image.Image:
    """Drop alpha onto a white background; JPEG has no transparency."""
    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        rgba = img.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.split()[-1])
        return background
    if img.mode != "RGB":
        return img.convert("RGB")
    return img
