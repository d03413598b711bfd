"""Run lifecycle: ties the event log and the manifest together."""

import sys
import time
import traceback
from pathlib import Path
from typing import Any

from subdedupe.audit.helpers import (
    generate_run_id,
    get_dependency_versions,
    get_package_version,
    get_platform_info,
    get_python_version,
    get_transform_version,
)
from subdedupe.audit.logger import AuditLogger
from subdedupe.audit.manifest import ManifestWriter
from subdedupe.audit.models import (
    ArtifactInfo,
    CommandInfo,
    EnvironmentInfo,
    ErrorInfo,
    SnapshotInfo,
    StageInfo,
)
from subdedupe.utils import get_iso_timestamp

__all__ = ["EVENTS_FILENAME", "RunContext"]

EVENTS_FILENAME = "events.jsonl"
TRACKED_DEPENDENCIES = ["click", "jsonschema"]


class RunContext:
    """One cleanup run: ``events.jsonl`` plus ``run.json`` in ``output_dir``.

    Attributes
    ----------
    run_id : str
        Unique run identifier.
    output_dir : Path
        Run output directory.
    audit_logger : AuditLogger
        Event logger shared with the pipeline stages.
    manifest_writer : ManifestWriter
        Manifest builder.
    """

    def __init__(
        self,
        run_id: str,
        output_dir: Path,
        audit_logger: AuditLogger,
        manifest_writer: ManifestWriter,
    ) -> None:
        self.run_id = run_id
        self.output_dir = output_dir
        self.audit_logger = audit_logger
        self.manifest_writer = manifest_writer
        self._started = time.perf_counter()
        self._stage_started: dict[str, float] = {}
        self._finished = False

    @classmethod
    def start(
        cls,
        output_dir: Path,
        parameters: dict[str, Any],
        dry_run: bool = False,
        command_argv: list[str] | None = None,
    ) -> "RunContext":
        """Create the output layout and emit ``run_started``.

        Parameters
        ----------
        output_dir : Path
            Run output directory; ``artifacts/`` and ``reports/`` are created.
        parameters : dict[str, Any]
            Configuration snapshot for the manifest.
        dry_run : bool, optional
            Whether the run only validates its plan.
        command_argv : list[str] | None, optional
            Command line, ``sys.argv`` if None.

        Returns
        -------
        RunContext
            Started context.
        """
        run_id = generate_run_id()

        output_dir.mkdir(parents=True, exist_ok=True)
        (output_dir / "artifacts").mkdir(exist_ok=True)
        (output_dir / "reports").mkdir(exist_ok=True)

        command = CommandInfo(argv=list(command_argv or sys.argv), cwd=Path.cwd().name or None)
        environment = EnvironmentInfo(
            python_version=get_python_version(),
            platform=get_platform_info(),
            package_version=get_package_version(),
            dependencies=get_dependency_versions(TRACKED_DEPENDENCIES),
        )

        audit_logger = AuditLogger(run_id=run_id, log_path=output_dir / EVENTS_FILENAME)
        manifest_writer = ManifestWriter(
            run_id=run_id,
            output_dir=output_dir,
            command=command,
            environment=environment,
            transform_version=get_transform_version(),
            parameters=parameters,
            dry_run=dry_run,
        )

        audit_logger.run_started(command=command.argv, parameters=parameters)
        return cls(run_id, output_dir, audit_logger, manifest_writer)

    def set_snapshot(self, snapshot: SnapshotInfo) -> None:
        self.manifest_writer.set_snapshot(snapshot)

    def start_stage(self, name: str, expected_records: int | None = None) -> None:
        """Open a stage in both the log and the manifest."""
        self._stage_started[name] = time.perf_counter()
        self.manifest_writer.add_stage(StageInfo(name=name, started_at=get_iso_timestamp()))
        self.audit_logger.stage_started(stage=name, expected_records=expected_records)

    def finish_stage(self, name: str, counters: dict[str, int] | None = None) -> None:
        """Close a stage.

        Raises
        ------
        ValueError
            If the stage was not started.
        """
        started = self._stage_started.pop(name, None)
        if started is None:
            raise ValueError(f"Stage not started: {name}")

        duration = time.perf_counter() - started
        self.manifest_writer.finish_stage(name, duration_seconds=duration, counters=counters)
        self.audit_logger.stage_finished(stage=name, duration_seconds=duration, counters=counters)
        self.audit_logger.set_stage(None)

    def register_artifact(self, path: Path, record_count: int | None = None) -> ArtifactInfo:
        """List a written file in the manifest and emit ``artifact_written``."""
        artifact = self.manifest_writer.add_artifact(path, record_count=record_count)
        self.audit_logger.artifact_written(
            path=artifact.path,
            sha256=artifact.sha256,
            bytes_written=artifact.bytes,
            record_count=record_count,
        )
        return artifact

    def record_error(
        self,
        exception: BaseException,
        stage: str | None = None,
        rid: str | None = None,
        include_traceback: bool = False,
    ) -> None:
        """Record an exception in the log and the manifest."""
        tb = None
        if include_traceback:
            tb = "".join(
                traceback.format_exception(type(exception), exception, exception.__traceback__)
            )

        stage = stage or self.audit_logger.current_stage
        self.manifest_writer.add_error(
            ErrorInfo(
                timestamp=get_iso_timestamp(),
                exception_class=type(exception).__name__,
                message=str(exception),
                stage=stage,
                traceback=tb,
                rid=rid,
            )
        )
        self.audit_logger.error(
            exception_class=type(exception).__name__,
            message=str(exception),
            stage=stage,
            rid=rid,
            traceback=tb,
        )

    def finish(self, status: str = "success", records_processed: int | None = None) -> None:
        """Emit ``run_finished``, close the log, list it, write ``run.json``.

        Calling it again is a no-op.
        """
        if self._finished:
            return
        self._finished = True

        duration = time.perf_counter() - self._started
        self.audit_logger.run_finished(
            status=status,
            duration_seconds=duration,
            records_processed=records_processed,
        )
        self.audit_logger.close()

        events_path = self.output_dir / EVENTS_FILENAME
        if events_path.exists():
            self.manifest_writer.add_artifact(events_path)

        self.manifest_writer.finish(status=status, duration_seconds=duration)

    def __enter__(self) -> "RunContext":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Finish the run, as failed if an exception escaped."""
        if exc_type is not None:
            self.record_error(exc_val, include_traceback=True)
            self.finish(status="failed")
        else:
            self.finish(status="success")
