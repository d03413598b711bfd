"""In-memory record store."""

import copy
from collections.abc import Iterable
from typing import Any

from subdedupe.audit.models import SnapshotInfo
from subdedupe.models import SubsidyRecord
from subdedupe.store.base import RowRecordStore

__all__ = ["MemoryRecordStore"]


class MemoryRecordStore(RowRecordStore):
    """Record store over a list of rows held in memory.

    Parameters
    ----------
    records : Iterable[SubsidyRecord | dict[str, Any]]
        Initial content in load order; rows may carry extra columns.
    """

    def __init__(self, records: Iterable[SubsidyRecord | dict[str, Any]] = ()) -> None:
        self._rows: list[dict[str, Any]] = [
            r.to_dict() if isinstance(r, SubsidyRecord) else dict(r) for r in records
        ]

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def rows(self) -> list[dict[str, Any]]:
        """Copy of the current rows."""
        return copy.deepcopy(self._rows)

    def snapshot_info(self) -> SnapshotInfo:
        return SnapshotInfo(source="memory")

    def _read_rows(self) -> list[dict[str, Any]]:
        return copy.deepcopy(self._rows)

    def _write_rows(self, rows: list[dict[str, Any]]) -> None:
        self._rows = rows
