"""Pairwise sweep over a directory and the pruning that follows it."""

from pathlib import Path
from typing import List, Optional

from .deletion import delete_files, sweep_temporary_artifacts
from .listing import list_images
from .model import ComparisonTask, ImageRef, RunReport
from .unit import ComparisonPool
from ..config import Settings
from ..logging import get_logger

logger = get_logger(__name__)


def find_duplicates(
    images: List[ImageRef],
    pool: ComparisonPool,
    report: RunReport,
    settings: Optional[Settings] = None,
) -> List[ComparisonTask]:
    """
    Compare every pair ``(images[i], images[j])`` with ``i < j``.

    Each result is awaited before the next ``j`` is submitted. The first pair
    reaching ``duplicate_threshold`` marks ``images[i]`` for deletion and ends
    the scan for that ``i``; later duplicates of ``images[i]`` are not looked for.

    Returns:
        The duplicate pairs found, one per discarded image
    """
    settings = settings or Settings()
    duplicates: List[ComparisonTask] = []
    n = len(images)

    for i in range(n):
        for j in range(i + 1, n):
            task = ComparisonTask(first=images[i], second=images[j])
            result = pool.run(task)
            report.comparisons += 1
            if result.failed:
                report.comparison_failures += 1
                continue
            if result.is_duplicate(settings.duplicate_threshold):
                logger.info(
                    f"Images {task.first.path} and {task.second.path} are more than "
                    f"{settings.duplicate_threshold:g}% similar ({result.score:.2f})."
                )
                duplicates.append(task)
                break
        logger.debug(f"Finished {i + 1}/{n}: {images[i].name}")

    return duplicates


def prune_directory(
    directory: Path,
    settings: Optional[Settings] = None,
    dry_run: bool = False,
) -> RunReport:
    """
    Remove near-duplicate images from ``directory``.

    The comparison sweep runs to completion first, then every deletion request
    is processed concurrently, and only after all of them settle are stray
    temporary artifacts swept.

    Raises:
        ListingError: If the directory cannot be listed
    """
    settings = settings or Settings()
    directory = Path(directory)
    report = RunReport(directory=directory, dry_run=dry_run)

    images = list_images(directory, settings.extensions, settings.temp_prefix)
    report.images = len(images)
    total_pairs = len(images) * (len(images) - 1) // 2
    logger.info(f"Comparing {len(images)} images in {directory} (up to {total_pairs} pairs)")

    with ComparisonPool(settings) as pool:
        report.duplicate_pairs = find_duplicates(images, pool, report, settings)
        report.peak_concurrency = pool.peak

    if dry_run:
        for path in report.deletion_requests:
            logger.info(f"Would delete: {path}")
    else:
        report.deletions = delete_files(report.deletion_requests, settings)

    report.temp_artifacts_swept = sweep_temporary_artifacts(directory, settings)
    logger.info("All deletions complete.")
    return report
