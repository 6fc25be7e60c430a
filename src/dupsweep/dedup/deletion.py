"""Delayed, race-tolerant deletion of duplicates and stray artifacts."""

import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .model import DeletionOutcome
from .normalize import is_temporary_artifact
from ..config import Settings
from ..logging import get_logger

logger = get_logger(__name__)

MAX_DELETE_WORKERS = 32


def delete_file(path: Path, delay: float = 0.1) -> DeletionOutcome:
    """
    Remove ``path`` after a short grace period.

    A file that is already gone is reported, not treated as an error. I/O
    failures are logged and reported so other deletions can proceed.
    """
    path = Path(path)
    if not path.exists():
        logger.info(f"File does not exist: {path}")
        return DeletionOutcome.MISSING

    time.sleep(delay)

    try:
        path.unlink()
    except FileNotFoundError:
        logger.info(f"File does not exist: {path}")
        return DeletionOutcome.MISSING
    except OSError as exc:
        logger.error(f"Error deleting file {path}: {exc}")
        return DeletionOutcome.FAILED

    logger.info(f"Deleted: {path}")
    return DeletionOutcome.DELETED


def delete_files(paths: Iterable[Path], settings: Optional[Settings] = None) -> Dict[Path, DeletionOutcome]:
    """Delete every path concurrently and wait until all of them settle."""
    settings = settings or Settings()
    targets = list(dict.fromkeys(Path(p) for p in paths))
    if not targets:
        return {}

    with ThreadPoolExecutor(max_workers=min(len(targets), MAX_DELETE_WORKERS), thread_name_prefix="delete") as executor:
        futures = {path: executor.submit(delete_file, path, settings.delete_delay) for path in targets}
        return {path: future.result() for path, future in futures.items()}


def sweep_temporary_artifacts(directory: Path, settings: Optional[Settings] = None) -> List[Path]:
    """
    Delete leftover conversion artifacts in ``directory``.

    Returns:
        Paths that were removed
    """
    settings = settings or Settings()
    directory = Path(directory)

    stray = sorted(
        entry for entry in directory.iterdir()
        if entry.is_file() and is_temporary_artifact(entry.name, settings.temp_prefix)
    )
    logger.info(f"Deleting temp files... {[entry.name for entry in stray]}")

    removed = []
    for entry in stray:
        if delete_file(entry, settings.delete_delay) == DeletionOutcome.DELETED:
            removed.append(entry)
    return removed
