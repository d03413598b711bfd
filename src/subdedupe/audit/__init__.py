"""Audit logging and run manifest subsystem.

Main Components
---------------
- RunContext: run lifecycle (event log + manifest)
- AuditLogger: JSONL event logger
- ManifestWriter: ``run.json`` builder
"""

from subdedupe.audit.context import EVENTS_FILENAME, RunContext
from subdedupe.audit.helpers import generate_run_id
from subdedupe.audit.logger import AuditLogger
from subdedupe.audit.manifest import MANIFEST_FILENAME, ManifestWriter, write_json_atomic
from subdedupe.audit.models import SnapshotInfo

__all__ = [
    "EVENTS_FILENAME",
    "MANIFEST_FILENAME",
    "AuditLogger",
    "ManifestWriter",
    "RunContext",
    "SnapshotInfo",
    "generate_run_id",
    "write_json_atomic",
]
