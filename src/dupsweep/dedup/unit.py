"""Isolated comparison units and the bounded pool that runs them."""

import threading
import uuid
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from pathlib import Path
from typing import List, Optional

from .model import ComparisonResult, ComparisonTask
from .normalize import ConversionError, normalize_image
from .similarity import SimilarityError, score_images
from ..config import Settings
from ..logging import get_logger

logger = get_logger(__name__)


def compare_pair(task: ComparisonTask, settings: Optional[Settings] = None) -> ComparisonResult:
    """
    Normalize both images, score them and remove any artifacts created.

    Failures are reported in the result rather than raised, so one bad image
    never halts the sweep.
    """
    settings = settings or Settings()
    token = uuid.uuid4().hex[:8]
    created: List[Path] = []

    try:
        usable = []
        for index, ref in enumerate((task.first, task.second)):
            # Inputs may share a stem, e.g. photo.png and photo.PNG
            path = normalize_image(ref.path, token=f"{token}{index}", prefix=settings.temp_prefix)
            if path != ref.path:
                created.append(path)
            usable.append(path)
        score = score_images(usable[0], usable[1], settings)
        return ComparisonResult(task=task, score=score)
    except (ConversionError, SimilarityError, OSError) as exc:
        logger.warning(f"Comparison of {task.first.name} and {task.second.name} failed: {exc}")
        return ComparisonResult(task=task, error=str(exc))
    finally:
        for path in created:
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning(f"Could not remove temporary artifact {path}: {exc}")


class ComparisonPool:
    """
    Runs comparison units with at most ``max_concurrent`` active at once.

    Admission goes through a counting permit pool; a permit is taken before a
    unit is submitted and given back when the unit finishes, whether or not
    the caller is still waiting for it.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or Settings()
        self._permits = threading.BoundedSemaphore(self._settings.max_concurrent)
        self._executor = ThreadPoolExecutor(
            max_workers=self._settings.max_concurrent,
            thread_name_prefix="compare",
        )
        self._lock = threading.Lock()
        self._active = 0
        self._peak = 0
        self._submitted = 0

    @property
    def submitted(self) -> int:
        return self._submitted

    @property
    def peak(self) -> int:
        return self._peak

    @property
    def active(self) -> int:
        return self._active

    def submit(self, task: ComparisonTask) -> "Future[ComparisonResult]":
        """Wait for a free permit, then start a unit for ``task``."""
        self._permits.acquire()
        try:
            future = self._executor.submit(self._run_unit, task)
        except Exception:
            self._permits.release()
            raise
        self._submitted += 1
        return future

    def run(self, task: ComparisonTask) -> ComparisonResult:
        """Submit ``task`` and wait for its result, bounded by ``task_timeout``."""
        future = self.submit(task)
        try:
            return future.result(timeout=self._settings.task_timeout)
        except FutureTimeoutError:
            logger.warning(
                f"Comparison of {task.first.name} and {task.second.name} timed out "
                f"after {self._settings.task_timeout}s"
            )
            return ComparisonResult(task=task, error="timed out")
        except Exception as exc:
            logger.error(f"Comparison of {task.first.name} and {task.second.name} crashed: {exc}")
            return ComparisonResult(task=task, error=str(exc))

    def _run_unit(self, task: ComparisonTask) -> ComparisonResult:
        with self._lock:
            self._active += 1
            self._peak = max(self._peak, self._active)
        try:
            return compare_pair(task, self._settings)
        finally:
            with self._lock:
                self._active -= 1
            self._permits.release()

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "ComparisonPool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
