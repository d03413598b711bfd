"""Pipeline configuration and result dataclasses."""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from subdedupe.clustering import DEFAULT_THRESHOLD

__all__ = ["PipelineConfig", "PipelineResult"]


@dataclass
class PipelineConfig:
    """Configuration for one cleanup run.

    Attributes
    ----------
    similarity_threshold : float
        Titles cluster when their similarity is strictly greater than this
        value (default: 0.75).
    dry_run : bool
        Validate the plan against the store without applying it.
    missing_amount_pass : bool
        Also flag listing-style titles of records without ``max_amount``.
    output_dir : Path
        Base directory for artifacts and reports.
    write_artifacts : bool
        Write ``artifacts/cleanup_plan.json`` and
        ``reports/cleanup_summary.json``.
    track_execution_time : bool
        Record pipeline wall-clock time in the result and summary.
    """

    similarity_threshold: float = DEFAULT_THRESHOLD
    dry_run: bool = False
    missing_amount_pass: bool = True
    output_dir: Path = Path("out")
    write_artifacts: bool = True
    track_execution_time: bool = False

    def __post_init__(self) -> None:
        """Validate and coerce."""
        if not 0.0 <= self.similarity_threshold < 1.0:
            raise ValueError(
                f"similarity_threshold must be in [0, 1), got {self.similarity_threshold}"
            )
        self.output_dir = Path(self.output_dir)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["output_dir"] = str(self.output_dir)
        return data


@dataclass
class PipelineResult:
    """Outcome of one cleanup run.

    In dry-run mode the deletion and update counts are the would-be counts
    of ids that passed validation.

    Attributes
    ----------
    success : bool
        Whether a plan was computed and handed to the executor.
    dry_run : bool
        Whether the run only validated the plan.
    total_records : int
        Records in the loaded snapshot.
    junk_detected : int
        Records classified as junk.
    clusters_found : int
        Duplicate clusters (two or more members).
    records_deleted : int
        Ids deleted (junk and duplicates).
    records_updated : int
        Ids whose fields were normalized.
    failed_ids : list[str]
        Ids the executor could not apply.
    errors : list[dict[str, str]]
        ``{"id", "message"}`` per failed id.
    output_files : dict[str, str]
        Map of artifact type to file path.
    error_message : str | None
        Error message if the run failed.
    execution_time_seconds : float | None
        Wall-clock time, when tracked.
    """

    success: bool
    dry_run: bool = False
    total_records: int = 0
    junk_detected: int = 0
    clusters_found: int = 0
    records_deleted: int = 0
    records_updated: int = 0
    failed_ids: list[str] = field(default_factory=list)
    errors: list[dict[str, str]] = field(default_factory=list)
    output_files: dict[str, str] = field(default_factory=dict)
    error_message: str | None = None
    execution_time_seconds: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)
