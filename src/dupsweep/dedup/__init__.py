"""Near-duplicate detection and pruning pipeline."""

from .model import ComparisonResult, ComparisonTask, DeletionOutcome, ImageRef, RunReport
from .listing import ListingError, list_images
from .normalize import ConversionError, normalize_image
from .distance import hamming_distance
from .similarity import SimilarityError, score_images
from .unit import ComparisonPool, compare_pair
from .deletion import delete_file, delete_files, sweep_temporary_artifacts
from .scheduler import find_duplicates, prune_directory

__all__ = [
    "ComparisonResult",
    "ComparisonTask",
    "DeletionOutcome",
    "ImageRef",
    "RunReport",
    "ListingError",
    "list_images",
    "ConversionError",
    "normalize_image",
    "hamming_distance",
    "SimilarityError",
    "score_images",
    "ComparisonPool",
    "compare_pair",
    "delete_file",
    "delete_files",
    "sweep_temporary_artifacts",
    "find_duplicates",
    "prune_directory",
]
