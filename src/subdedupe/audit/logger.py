"""Append-only JSONL event log for cleanup runs.

Every call writes one compact JSON object and flushes, so ``events.jsonl``
stays readable line by line even if the process dies mid-run. Payload keys
whose value is ``None`` are left out rather than written as ``null``.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from subdedupe.audit.models import LogEvent
from subdedupe.utils import get_iso_timestamp

__all__ = ["AuditLogger", "LEVELS"]

LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")


def _payload(**fields: Any) -> dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None}


class AuditLogger:
    """Event sink bound to one run id and one log file.

    The file is opened in append mode, so several runs may share a log.
    Events without an explicit ``stage`` inherit ``current_stage``.

    Parameters
    ----------
    run_id : str
        Identifier stamped on every event.
    log_path : Path
        Target file; missing parent directories are created.
    """

    def __init__(self, run_id: str, log_path: Path) -> None:
        self.run_id = run_id
        self.log_path = log_path
        self.current_stage: str | None = None

        log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = log_path.open("a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        """Whether the log file has been closed."""
        return self._file.closed

    def close(self) -> None:
        """Flush and close the file; safe to call twice."""
        if self._file.closed:
            return
        self._file.flush()
        self._file.close()

    def set_stage(self, stage: str | None) -> None:
        """Set the stage inherited by later events.

        Parameters
        ----------
        stage : str | None
            Stage name; None clears it.
        """
        self.current_stage = stage

    # ------------------------------------------------------------------
    # Core writer
    # ------------------------------------------------------------------

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        stage: str | None = None,
        rid: str | None = None,
    ) -> None:
        """Append one event.

        Parameters
        ----------
        event_type : str
            Event name, e.g. "record_flagged" or "stage3_cluster_complete".
        data : dict[str, Any] | None, optional
            Payload; written as ``{}`` when omitted.
        level : str, optional
            One of ``LEVELS``.
        stage : str | None, optional
            Overrides ``current_stage`` for this event only.
        rid : str | None, optional
            Subsidy record id the event is about.

        Raises
        ------
        ValueError
            If ``level`` is not in ``LEVELS``.
        """
        if level not in LEVELS:
            raise ValueError(f"Unknown log level: {level}")

        record = LogEvent(
            ts=get_iso_timestamp(),
            run_id=self.run_id,
            level=level,
            event=event_type,
            data=dict(data) if data else {},
            stage=self.current_stage if stage is None else stage,
            rid=rid,
        )
        line = json.dumps(asdict(record), ensure_ascii=False, separators=(",", ":"))
        self._file.write(line + "\n")
        self._file.flush()

    # ------------------------------------------------------------------
    # Run and stage lifecycle
    # ------------------------------------------------------------------

    def run_started(self, command: list[str], parameters: dict[str, Any]) -> None:
        """Open the run.

        Parameters
        ----------
        command : list[str]
            Command line that launched the cleanup.
        parameters : dict[str, Any]
            Effective pipeline configuration.
        """
        self.event("run_started", data={"command": command, "parameters": parameters})

    def run_finished(
        self,
        status: str,
        duration_seconds: float,
        records_processed: int | None = None,
    ) -> None:
        """Close the run.

        Parameters
        ----------
        status : str
            Final status: "success" or "failed".
        duration_seconds : float
            Wall time of the whole run.
        records_processed : int | None, optional
            Size of the loaded snapshot, when one was loaded.
        """
        self.event(
            "run_finished",
            data=_payload(
                status=status,
                duration_seconds=duration_seconds,
                records_processed=records_processed,
            ),
        )

    def stage_started(self, stage: str, expected_records: int | None = None) -> None:
        """Enter a stage; later events inherit it until the next stage.

        Parameters
        ----------
        stage : str
            Stage name, e.g. "cleanup".
        expected_records : int | None, optional
            Number of records the stage is about to handle.
        """
        self.set_stage(stage)
        self.event("stage_started", data=_payload(expected_records=expected_records), stage=stage)

    def stage_finished(
        self,
        stage: str,
        duration_seconds: float,
        counters: dict[str, int] | None = None,
    ) -> None:
        """Leave a stage.

        Parameters
        ----------
        stage : str
            Stage name given to :meth:`stage_started`.
        duration_seconds : float
            Time spent in the stage.
        counters : dict[str, int] | None, optional
            Stage totals such as ``records_deleted``; omitted when empty.
        """
        self.event(
            "stage_finished",
            data=_payload(duration_seconds=duration_seconds, counters=counters or None),
            stage=stage,
        )

    # ------------------------------------------------------------------
    # Per-record decisions
    # ------------------------------------------------------------------

    def record_flagged(
        self,
        rid: str,
        flag_name: str,
        reason_code: str,
        detail: str | None = None,
        stage: str | None = None,
    ) -> None:
        """Note that a record was marked for removal.

        Parameters
        ----------
        rid : str
            Flagged subsidy record.
        flag_name : str
            Kind of flag, "junk" for classifier hits.
        reason_code : str
            Junk category such as "loan" or "navigation".
        detail : str | None, optional
            Pattern that matched the title.
        stage : str | None, optional
            Overrides the current stage.
        """
        self.event(
            "record_flagged",
            data=_payload(flag_name=flag_name, reason_code=reason_code, detail=detail),
            stage=stage,
            rid=rid,
        )

    def duplicate_resolved(
        self,
        cluster_id: str,
        anchor_id: str,
        survivor_id: str,
        deleted_ids: list[str],
        scores: dict[str, int],
    ) -> None:
        """Record which member of a duplicate cluster was kept.

        The event is attached to the survivor.

        Parameters
        ----------
        cluster_id : str
            Hash of the member ids.
        anchor_id : str
            Record the cluster formed around.
        survivor_id : str
            Highest scoring member.
        deleted_ids : list[str]
            Remaining members, in ranking order.
        scores : dict[str, int]
            Completeness score of every member.
        """
        self.event(
            "duplicate_resolved",
            data={
                "cluster_id": cluster_id,
                "anchor_id": anchor_id,
                "survivor_id": survivor_id,
                "deleted_ids": deleted_ids,
                "scores": scores,
            },
            rid=survivor_id,
        )

    def update_proposed(self, rid: str, fields: dict[str, Any]) -> None:
        """Record a planned field update.

        Parameters
        ----------
        rid : str
            Record to update.
        fields : dict[str, Any]
            New column values, e.g. ``{"target_area": ["東京都"]}``.
        """
        self.event("update_proposed", data={"fields": fields}, rid=rid)

    def execution_failed(
        self,
        rid: str,
        operation: str,
        message: str,
        stage: str | None = None,
    ) -> None:
        """A store rejected one delete or update; logged at WARN.

        Parameters
        ----------
        rid : str
            Record the store could not change.
        operation : str
            "delete" or "update".
        message : str
            Reason given by the store.
        stage : str | None, optional
            Overrides the current stage.
        """
        self.event(
            "execution_failed",
            data={"operation": operation, "message": message},
            level="WARN",
            stage=stage,
            rid=rid,
        )

    # ------------------------------------------------------------------
    # Outputs and failures
    # ------------------------------------------------------------------

    def artifact_written(
        self,
        path: str,
        sha256: str,
        stage: str | None = None,
        bytes_written: int | None = None,
        record_count: int | None = None,
    ) -> None:
        """Record an output file.

        Parameters
        ----------
        path : str
            Location relative to the output directory.
        sha256 : str
            Digest with the "sha256:" prefix.
        stage : str | None, optional
            Overrides the current stage.
        bytes_written : int | None, optional
            File size; logged as ``bytes``.
        record_count : int | None, optional
            Number of entries in the file.
        """
        self.event(
            "artifact_written",
            data=_payload(path=path, sha256=sha256, bytes=bytes_written, record_count=record_count),
            stage=stage,
        )

    def error(
        self,
        exception_class: str,
        message: str,
        stage: str | None = None,
        rid: str | None = None,
        traceback: str | None = None,
    ) -> None:
        """Log a failure at ERROR level.

        Parameters
        ----------
        exception_class : str
            Name of the raised exception, e.g. "LoaderError".
        message : str
            Exception text.
        stage : str | None, optional
            Overrides the current stage.
        rid : str | None, optional
            Record the failure concerns, if any.
        traceback : str | None, optional
            Formatted stack trace.
        """
        self.event(
            "error",
            data=_payload(exception_class=exception_class, message=message, traceback=traceback),
            stage=stage,
            level="ERROR",
            rid=rid,
        )
