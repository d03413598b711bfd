"""Records written to ``run.json`` and ``events.jsonl``.

Plain mutable dataclasses; ``ManifestWriter`` serializes them with
``dataclasses.asdict`` so field names are the on-disk keys.
"""

from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "CommandInfo",
    "EnvironmentInfo",
    "SnapshotInfo",
    "ArtifactInfo",
    "StageInfo",
    "ErrorInfo",
    "OutputsInfo",
    "ManifestData",
    "LogEvent",
]


@dataclass
class CommandInfo:
    """How the run was invoked.

    Attributes
    ----------
    argv : list[str]
        Full command line.
    cwd : str | None
        Basename of the working directory, so manifests carry no home paths.
    """

    argv: list[str]
    cwd: str | None = None


@dataclass
class EnvironmentInfo:
    """Interpreter, platform and library versions of the run.

    Attributes
    ----------
    python_version : str
        Interpreter version, e.g. "3.12.3".
    platform : str
        System, release and machine joined by dashes.
    package_version : str
        Installed subdedupe version.
    dependencies : dict[str, str]
        Versions of click and jsonschema.
    """

    python_version: str
    platform: str
    package_version: str
    dependencies: dict[str, str] = field(default_factory=dict)


@dataclass
class SnapshotInfo:
    """The subsidy snapshot a run cleaned.

    Attributes
    ----------
    source : str
        Store path, or "memory" for in-memory stores.
    total_records : int | None
        Records loaded; None until the snapshot has been read.
    sha256 : str | None
        Digest of the store file before the run, file-backed stores only.
    bytes : int | None
        Size of the store file.
    mtime : str | None
        ISO8601 modification time of the store file.
    """

    source: str
    total_records: int | None = None
    sha256: str | None = None
    bytes: int | None = None
    mtime: str | None = None


@dataclass
class ArtifactInfo:
    """A file the run produced.

    Attributes
    ----------
    path : str
        Location relative to the output directory.
    sha256 : str
        Digest with the "sha256:" prefix.
    bytes : int | None
        File size.
    record_count : int | None
        Entries in the file, when meaningful.
    """

    path: str
    sha256: str
    bytes: int | None = None
    record_count: int | None = None


@dataclass
class StageInfo:
    """Timing and totals of one run stage.

    Attributes
    ----------
    name : str
        Stage name, e.g. "cleanup".
    started_at : str
        ISO8601 UTC start time.
    counters : dict[str, int]
        Stage totals such as records_deleted and failed_ids.
    finished_at : str | None
        ISO8601 UTC end time; None while the stage is open.
    duration_seconds : float | None
        Time spent in the stage.
    """

    name: str
    started_at: str
    counters: dict[str, int] = field(default_factory=dict)
    finished_at: str | None = None
    duration_seconds: float | None = None


@dataclass
class ErrorInfo:
    """A failure captured in the manifest.

    Attributes
    ----------
    timestamp : str
        ISO8601 UTC time the failure was recorded.
    exception_class : str
        Name of the raised exception.
    message : str
        Exception text.
    stage : str | None
        Stage that was running.
    traceback : str | None
        Formatted stack trace, only when the caller asked for it.
    rid : str | None
        Subsidy record the failure concerns, if any.
    """

    timestamp: str
    exception_class: str
    message: str
    stage: str | None = None
    traceback: str | None = None
    rid: str | None = None


@dataclass
class OutputsInfo:
    """Files listed in the manifest.

    Attributes
    ----------
    artifacts : list[ArtifactInfo]
        Plan, summary report and event log, in registration order.
    """

    artifacts: list[ArtifactInfo] = field(default_factory=list)


@dataclass
class ManifestData:
    """Full contents of ``run.json``.

    Attributes
    ----------
    manifest_version : str
        Layout version of this document.
    run_id : str
        Run identifier, shared with every event of the run.
    created_at : str
        ISO8601 UTC start time.
    status : str
        "partial" while the run is open, then "success" or "failed".
    transform_version : str
        Git SHA when available, otherwise the package version.
    dry_run : bool
        True when the cleanup plan was validated but not applied.
    snapshot : SnapshotInfo | None
        The store the run read, when the caller described it.
    parameters : dict[str, Any]
        Effective pipeline configuration.
    command : CommandInfo
        Invocation details.
    environment : EnvironmentInfo
        Interpreter and library versions.
    stages : list[StageInfo]
        Stages in start order.
    outputs : OutputsInfo
        Files the run produced.
    finished_at : str | None
        ISO8601 UTC end time; None while running.
    duration_seconds : float | None
        Wall time of the run.
    errors : list[ErrorInfo]
        Failures recorded during the run.
    """

    manifest_version: str
    run_id: str
    created_at: str
    status: str
    transform_version: str
    dry_run: bool
    command: CommandInfo
    environment: EnvironmentInfo
    snapshot: SnapshotInfo | None
    parameters: dict[str, Any]
    stages: list[StageInfo]
    outputs: OutputsInfo
    finished_at: str | None = None
    duration_seconds: float | None = None
    errors: list[ErrorInfo] = field(default_factory=list)


@dataclass
class LogEvent:
    """One line of ``events.jsonl``.

    Attributes
    ----------
    ts : str
        ISO8601 UTC time with microseconds.
    run_id : str
        Run the event belongs to.
    level : str
        One of DEBUG, INFO, WARN, ERROR.
    event : str
        Event name, e.g. "record_flagged".
    data : dict[str, Any]
        Event payload.
    stage : str | None
        Stage that was running.
    rid : str | None
        Subsidy record the event concerns, if any.
    """

    ts: str
    run_id: str
    level: str
    event: str
    data: dict[str, Any]
    stage: str | None = None
    rid: str | None = None
