"""Tests for the pairwise sweep and the full prune run."""

from pathlib import Path

import pytest

from dupsweep.config import Settings
from dupsweep.dedup.listing import ListingError
from dupsweep.dedup.model import ComparisonResult, DeletionOutcome, ImageRef, RunReport
from dupsweep.dedup.scheduler import find_duplicates, prune_directory
from tests.helpers.image_factory import write_copy, write_corrupt, write_noise

FAST = Settings(delete_delay=0.0)


class ScriptedPool:
    """Stands in for ComparisonPool, answering from a table of pair scores."""

    def __init__(self, scores, failures=()):
        self.scores = scores
        self.failures = set(failures)
        self.calls = []

    def run(self, task):
        pair = (task.first.name, task.second.name)
        self.calls.append(pair)
        if pair in self.failures:
            return ComparisonResult(task=task, error="boom")
        return ComparisonResult(task=task, score=self.scores.get(pair, 10.0))


def refs(*names):
    return [ImageRef.from_path(Path("/images") / name) for name in names]


def sweep(images, pool):
    report = RunReport(directory=Path("/images"))
    duplicates = find_duplicates(images, pool, report, FAST)
    return duplicates, report


class TestFindDuplicates:
    @pytest.mark.parametrize("n", [0, 1, 2, 5, 8])
    def test_all_pairs_without_duplicates(self, n):
        images = refs(*[f"{i}.jpg" for i in range(n)])
        pool = ScriptedPool({})

        duplicates, report = sweep(images, pool)

        assert duplicates == []
        assert report.comparisons == n * (n - 1) // 2
        assert len(set(pool.calls)) == len(pool.calls)

    def test_earlier_image_discarded(self):
        images = refs("a.jpg", "b.jpg", "c.jpg")
        pool = ScriptedPool({("a.jpg", "b.jpg"): 97.0})

        duplicates, report = sweep(images, pool)

        assert [(d.first.name, d.second.name) for d in duplicates] == [("a.jpg", "b.jpg")]
        assert duplicates[0].first.path == Path("/images/a.jpg")
        assert pool.calls == [("a.jpg", "b.jpg"), ("b.jpg", "c.jpg")]

    def test_stops_scanning_after_first_match(self):
        images = refs("a.jpg", "b.jpg", "c.jpg", "d.jpg")
        pool = ScriptedPool({("a.jpg", "b.jpg"): 95.0, ("a.jpg", "c.jpg"): 100.0})

        duplicates, _ = sweep(images, pool)

        assert [d.first.name for d in duplicates] == ["a.jpg"]
        assert ("a.jpg", "c.jpg") not in pool.calls
        assert ("a.jpg", "d.jpg") not in pool.calls

    def test_at_most_one_request_per_image(self):
        images = refs("a.jpg", "b.jpg", "c.jpg")
        everything = {("a.jpg", "b.jpg"): 99.0, ("a.jpg", "c.jpg"): 99.0, ("b.jpg", "c.jpg"): 99.0}

        duplicates, _ = sweep(images, ScriptedPool(everything))

        assert [d.first.name for d in duplicates] == ["a.jpg", "b.jpg"]

    def test_threshold_is_inclusive(self):
        images = refs("a.jpg", "b.jpg")
        assert len(sweep(images, ScriptedPool({("a.jpg", "b.jpg"): 95.0}))[0]) == 1
        assert len(sweep(images, ScriptedPool({("a.jpg", "b.jpg"): 94.999}))[0]) == 0

    def test_failed_comparison_is_not_duplicate(self):
        images = refs("a.jpg", "b.jpg", "c.jpg")
        pool = ScriptedPool({("a.jpg", "c.jpg"): 99.0}, failures={("a.jpg", "b.jpg")})

        duplicates, report = sweep(images, pool)

        assert report.comparison_failures == 1
        assert [(d.first.name, d.second.name) for d in duplicates] == [("a.jpg", "c.jpg")]


class TestPruneDirectory:
    def test_three_images_one_duplicate_pair(self, tmp_path):
        a = write_noise(tmp_path / "a.png", seed=30)
        write_copy(a, tmp_path / "b.png")
        write_noise(tmp_path / "c.png", seed=31)

        report = prune_directory(tmp_path, FAST)

        assert sorted(p.name for p in tmp_path.iterdir()) == ["b.png", "c.png"]
        assert report.deletions == {a: DeletionOutcome.DELETED}
        assert report.comparisons == 2

    def test_distinct_images_untouched(self, tmp_path):
        names = ["a.jpg", "b.png", "c.gif", "d.jpeg"]
        for seed, name in enumerate(names):
            write_noise(tmp_path / name, seed=40 + seed)

        report = prune_directory(tmp_path, FAST)

        assert report.images == 4
        assert report.comparisons == 6
        assert report.deletions == {}
        assert sorted(p.name for p in tmp_path.iterdir()) == names

    def test_no_temporary_artifacts_remain(self, tmp_path):
        a = write_noise(tmp_path / "a.png", seed=50)
        write_copy(a, tmp_path / "b.png")
        write_noise(tmp_path / "c.png", seed=51)
        # Left over from an earlier crashed run
        (tmp_path / "temp_convert_to_jpeg_old.jpg").write_bytes(b"x")

        report = prune_directory(tmp_path, FAST)

        assert not any(p.name.startswith("temp_convert_to_jpeg_") for p in tmp_path.iterdir())
        assert [p.name for p in report.temp_artifacts_swept] == ["temp_convert_to_jpeg_old.jpg"]

    def test_bad_image_does_not_halt_sweep(self, tmp_path):
        write_corrupt(tmp_path / "a.png")
        b = write_noise(tmp_path / "b.jpg", seed=60)
        write_copy(b, tmp_path / "c.jpg")

        report = prune_directory(tmp_path, FAST)

        assert report.comparison_failures == 2
        assert sorted(p.name for p in tmp_path.iterdir()) == ["a.png", "c.jpg"]

    def test_dry_run_keeps_files(self, tmp_path):
        a = write_noise(tmp_path / "a.jpg", seed=70)
        write_copy(a, tmp_path / "b.jpg")

        report = prune_directory(tmp_path, FAST, dry_run=True)

        assert report.deletion_requests == [a]
        assert report.deletions == {}
        assert sorted(p.name for p in tmp_path.iterdir()) == ["a.jpg", "b.jpg"]

    def test_peak_concurrency_within_bound(self, tmp_path):
        for seed in range(4):
            write_noise(tmp_path / f"{seed}.jpg", seed=80 + seed)

        report = prune_directory(tmp_path, FAST)

        assert 1 <= report.peak_concurrency <= 5

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ListingError):
            prune_directory(tmp_path / "missing", FAST)
