"""Public API for subsidy corpus cleanup.

This module provides the high-level entry point for cleaning a JSON Lines
record store, plus the scoring helpers most callers need on their own.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from subdedupe.clustering import DEFAULT_THRESHOLD
from subdedupe.junk import is_junk
from subdedupe.normalize import normalize_title
from subdedupe.scoring import compute_completeness_score, similarity

if TYPE_CHECKING:
    from subdedupe.engine.config import PipelineResult

__all__ = [
    "CleanupError",
    "clean",
    "compute_completeness_score",
    "is_junk",
    "normalize_title",
    "similarity",
]


class CleanupError(Exception):
    """Raised when a cleanup run cannot compute its plan."""

    def __init__(self, message: str, store: str | None = None) -> None:
        """Initialize cleanup error.

        Parameters
        ----------
        message : str
            Error message.
        store : str | None, optional
            Store the run was reading.
        """
        super().__init__(message)
        self.store = store


def clean(
    store_path: str | Path,
    *,
    dry_run: bool = False,
    output_dir: str | Path = "out",
    threshold: float = DEFAULT_THRESHOLD,
) -> PipelineResult:
    """Clean a JSON Lines record store in place.

    Junk records and non-survivor duplicates are deleted, region names are
    expanded and malformed dates cleared on the records that remain.

    Parameters
    ----------
    store_path : str | Path
        JSON Lines file with one subsidy record per line.
    dry_run : bool, optional
        Validate the plan without changing the store, by default False.
    output_dir : str | Path, optional
        Directory for the plan and summary report, by default "out".
    threshold : float, optional
        Similarity above which titles are duplicates, by default 0.75.

    Returns
    -------
    PipelineResult
        Counts, per-id failures and output file paths. Per-id failures do
        not raise.

    Raises
    ------
    FileNotFoundError
        If the store file does not exist.
    CleanupError
        If the store cannot be loaded or the run fails.

    Examples
    --------
    Preview a cleanup:

        >>> from subdedupe import clean
        >>> result = clean("subsidies.jsonl", dry_run=True)
        >>> print(result.junk_detected, result.records_deleted)
    """
    from subdedupe.engine import PipelineConfig, run_pipeline
    from subdedupe.store import JsonlRecordStore

    store_path_obj = Path(store_path)

    if not store_path_obj.exists():
        raise FileNotFoundError(f"Record store not found: {store_path}")

    config = PipelineConfig(
        similarity_threshold=threshold,
        dry_run=dry_run,
        output_dir=Path(output_dir),
    )

    result = run_pipeline(JsonlRecordStore(store_path_obj), config=config)

    if not result.success:
        raise CleanupError(f"Cleanup failed: {result.error_message}", store=str(store_path_obj))

    return result
