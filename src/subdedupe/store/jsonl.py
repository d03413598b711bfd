"""JSON Lines record store.

One JSON object per line; file order is load order. Every change rewrites
the whole file through a temp sibling (write, fsync, rename) so readers see
either the old or the new content.
"""

import json
import os
from pathlib import Path
from typing import Any

from subdedupe.audit.models import SnapshotInfo
from subdedupe.store.base import RowRecordStore
from subdedupe.store.errors import LoaderError
from subdedupe.utils import calculate_file_sha256, get_file_mtime

__all__ = ["JsonlRecordStore"]


class JsonlRecordStore(RowRecordStore):
    """File-backed record store.

    Parameters
    ----------
    path : Path | str
        JSONL file holding one record per line. Blank lines are ignored.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"JsonlRecordStore({str(self.path)!r})"

    @property
    def source(self) -> str:
        return self.path.name

    def snapshot_info(self) -> SnapshotInfo:
        """Describe the store file for the run manifest."""
        if not self.path.is_file():
            return SnapshotInfo(source=str(self.path))
        return SnapshotInfo(
            source=str(self.path),
            sha256=calculate_file_sha256(self.path),
            bytes=self.path.stat().st_size,
            mtime=get_file_mtime(self.path),
        )

    def _read_rows(self) -> list[dict[str, Any]]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise LoaderError(f"Record store not found: {self.path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise LoaderError(f"Cannot read record store {self.path}: {e}") from e

        rows: list[dict[str, Any]] = []
        for line_no, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                row = json.loads(line)
            except json.JSONDecodeError as e:
                raise LoaderError(f"{self.path.name}:{line_no}: invalid JSON: {e.msg}") from e
            if not isinstance(row, dict):
                raise LoaderError(f"{self.path.name}:{line_no}: expected an object")
            rows.append(row)
        return rows

    def _write_rows(self, rows: list[dict[str, Any]]) -> None:
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")

        try:
            with temp_path.open("w", encoding="utf-8") as f:
                for row in rows:
                    f.write(json.dumps(row, ensure_ascii=False))
                    f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            temp_path.replace(self.path)
        except OSError:
            if temp_path.is_file():
                temp_path.unlink()
            raise
