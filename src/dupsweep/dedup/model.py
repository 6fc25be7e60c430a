"""Data types shared by the pruning pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


@dataclass(frozen=True)
class ImageRef:
    """An enumerated image file and its format inferred from the extension."""
    path: Path
    format: str                             # Lower-case extension without the dot

    @classmethod
    def from_path(cls, path: Path) -> "ImageRef":
        return cls(path=path, format=path.suffix.lower().lstrip("."))

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class ComparisonTask:
    """One unordered pair; ``first`` precedes ``second`` in enumeration order."""
    first: ImageRef
    second: ImageRef


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of one ComparisonTask: a score in [0, 100] or an error."""
    task: ComparisonTask
    score: Optional[float] = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.score is None

    def is_duplicate(self, threshold: float) -> bool:
        """Failed comparisons never count as duplicates."""
        return self.score is not None and self.score >= threshold


class DeletionOutcome(str, Enum):
    DELETED = "deleted"
    MISSING = "missing"
    FAILED = "failed"


@dataclass
class RunReport:
    """Summary of one prune run over a directory."""
    directory: Path
    images: int = 0
    comparisons: int = 0
    comparison_failures: int = 0
    duplicate_pairs: List[ComparisonTask] = field(default_factory=list)
    deletions: Dict[Path, DeletionOutcome] = field(default_factory=dict)
    temp_artifacts_swept: List[Path] = field(default_factory=list)
    peak_concurrency: int = 0
    dry_run: bool = False

    @property
    def deletion_requests(self) -> List[Path]:
        return [pair.first.path for pair in self.duplicate_pairs]

    def count(self, outcome: DeletionOutcome) -> int:
        return sum(1 for value in self.deletions.values() if value == outcome)
