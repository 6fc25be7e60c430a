from pathlib import Path

import typer

from .config import Settings
from .logging import get_logger
from .dedup.listing import ListingError
from .dedup.model import DeletionOutcome, RunReport
from .dedup.scheduler import prune_directory

logger = get_logger(__name__)

app = typer.Typer(help="dupsweep – near-duplicate image pruner", no_args_is_help=False)


def safe_echo(message: str) -> None:
    """Echo message, falling back to ASCII on consoles that cannot encode it."""
    try:
        typer.echo(message)
    except UnicodeEncodeError:
        typer.echo(message.encode("ascii", errors="replace").decode("ascii"))


def print_summary(report: RunReport) -> None:
    safe_echo("\nSweep complete!")
    safe_echo(f"Directory: {report.directory}")
    safe_echo(f"Images compared: {report.images}")
    safe_echo(f"Comparisons run: {report.comparisons}")
    if report.comparison_failures:
        safe_echo(f"Failed comparisons: {report.comparison_failures}")
    safe_echo(f"Duplicates found: {len(report.duplicate_pairs)}")
    if report.dry_run:
        for path in report.deletion_requests:
            safe_echo(f"   would delete {path.name}")
    else:
        safe_echo(f"Deleted: {report.count(DeletionOutcome.DELETED)}")
        missing = report.count(DeletionOutcome.MISSING)
        failed = report.count(DeletionOutcome.FAILED)
        if missing:
            safe_echo(f"Already gone: {missing}")
        if failed:
            safe_echo(f"Could not delete: {failed}")
    safe_echo(f"Temporary files swept: {len(report.temp_artifacts_swept)}")


@app.command()
def prune(
    directory: Path = typer.Argument(
        Path("../images"), help="Directory whose near-duplicate images are removed"
    ),
    dry_run: bool = typer.Option(False, "--dry-run/--no-dry-run", help="Report duplicates without deleting them"),
) -> None:
    """
    Compare every pair of images in DIRECTORY and delete near-duplicates.

    For each duplicate pair found, the image listed first is removed and the
    other is kept. Leftover temporary JPEG conversions are cleaned up at the end.
    """
    settings = Settings()

    try:
        report = prune_directory(directory, settings, dry_run=dry_run)
    except ListingError as exc:
        logger.error(f"Error comparing images: {exc}")
        raise typer.Exit(code=1) from exc
    except Exception as exc:
        logger.exception(f"Error comparing images: {exc}")
        raise typer.Exit(code=1) from exc

    print_summary(report)
    raise typer.Exit(code=0)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
