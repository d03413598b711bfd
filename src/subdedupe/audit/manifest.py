"""Run manifest (``run.json``) builder with atomic writes."""

import json
import os
from dataclasses import asdict
from pathlib import Path
from typing import Any

from subdedupe.audit.models import (
    ArtifactInfo,
    CommandInfo,
    EnvironmentInfo,
    ErrorInfo,
    ManifestData,
    OutputsInfo,
    SnapshotInfo,
    StageInfo,
)
from subdedupe.utils import calculate_file_sha256, get_iso_timestamp

__all__ = ["MANIFEST_FILENAME", "MANIFEST_VERSION", "ManifestWriter"]

MANIFEST_VERSION = "1.0.0"
MANIFEST_FILENAME = "run.json"


class ManifestWriter:
    """Accumulates run metadata and writes ``run.json`` once at the end.

    Attributes
    ----------
    manifest : ManifestData
        Manifest being built; status stays "partial" until :meth:`finish`.
    output_dir : Path
        Run output directory; artifact paths are relative to it.
    manifest_path : Path
        Destination of the manifest file.
    """

    def __init__(
        self,
        run_id: str,
        output_dir: Path,
        command: CommandInfo,
        environment: EnvironmentInfo,
        transform_version: str,
        parameters: dict[str, Any],
        dry_run: bool = False,
    ) -> None:
        self.output_dir = output_dir
        self.manifest_path = output_dir / MANIFEST_FILENAME
        self.manifest = ManifestData(
            manifest_version=MANIFEST_VERSION,
            run_id=run_id,
            created_at=get_iso_timestamp(),
            status="partial",
            transform_version=transform_version,
            dry_run=dry_run,
            command=command,
            environment=environment,
            snapshot=None,
            parameters=parameters,
            stages=[],
            outputs=OutputsInfo(),
        )
        self._stages: dict[str, StageInfo] = {}

    def _stage(self, name: str) -> StageInfo:
        try:
            return self._stages[name]
        except KeyError:
            raise ValueError(f"Stage not found: {name}") from None

    def set_snapshot(self, snapshot: SnapshotInfo) -> None:
        """Record which snapshot the run loaded."""
        self.manifest.snapshot = snapshot

    def add_stage(self, stage: StageInfo) -> None:
        """Append a started stage."""
        self.manifest.stages.append(stage)
        self._stages[stage.name] = stage

    def finish_stage(
        self,
        name: str,
        duration_seconds: float | None = None,
        counters: dict[str, int] | None = None,
    ) -> None:
        """Close a stage and merge its counters.

        Raises
        ------
        ValueError
            If the stage was never added.
        """
        stage = self._stage(name)
        stage.finished_at = get_iso_timestamp()
        stage.duration_seconds = duration_seconds
        if counters:
            stage.counters.update(counters)

    def add_artifact(self, path: Path, record_count: int | None = None) -> ArtifactInfo:
        """Hash a file under the output directory and list it as an output.

        Parameters
        ----------
        path : Path
            Artifact file; must live under ``output_dir``.
        record_count : int | None, optional
            Entries in the artifact.

        Returns
        -------
        ArtifactInfo
            Registered artifact metadata.
        """
        artifact = ArtifactInfo(
            path=path.relative_to(self.output_dir).as_posix(),
            sha256=calculate_file_sha256(path),
            bytes=path.stat().st_size,
            record_count=record_count,
        )
        self.manifest.outputs.artifacts.append(artifact)
        return artifact

    def add_error(self, error: ErrorInfo) -> None:
        self.manifest.errors.append(error)

    def finish(self, status: str, duration_seconds: float | None = None) -> Path:
        """Finalize the manifest and write it atomically.

        Parameters
        ----------
        status : str
            Final run status ("success", "failed", "partial").
        duration_seconds : float | None, optional
            Total run duration.

        Returns
        -------
        Path
            Written manifest path.
        """
        self.manifest.status = status
        self.manifest.finished_at = get_iso_timestamp()
        self.manifest.duration_seconds = duration_seconds
        write_json_atomic(self.manifest_path, self.to_dict())
        return self.manifest_path

    def to_dict(self) -> dict[str, Any]:
        return asdict(self.manifest)


def write_json_atomic(path: Path, payload: Any) -> None:
    """Write JSON to a temp sibling, fsync, then rename over ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_suffix(path.suffix + ".tmp")

    with temp_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
        f.write("\n")
        f.flush()
        os.fsync(f.fileno())

    temp_path.replace(path)
