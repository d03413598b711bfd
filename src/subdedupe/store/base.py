"""Record store interfaces and the shared change-execution logic.

The pipeline only talks to a store through two narrow protocols:
:class:`RecordLoader` for the snapshot read and :class:`ChangeExecutor` for
applying the plan. :class:`RowRecordStore` implements both on top of a list
of raw rows so concrete stores only decide where the rows live.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from subdedupe.models import IMMUTABLE_COLUMNS, RecordFormatError, SubsidyRecord
from subdedupe.resolve.models import UpdateOp
from subdedupe.store.errors import LoaderError, PlanValidationError
from subdedupe.store.validation import delete_request_errors, update_request_errors

__all__ = [
    "ChangeExecutor",
    "ExecutionError",
    "ExecutionResult",
    "LoaderError",
    "PlanValidationError",
    "RecordLoader",
    "RowRecordStore",
]


@dataclass(frozen=True)
class ExecutionError:
    """Failure of one record id.

    Attributes
    ----------
    id : str
        Record id the failure belongs to.
    message : str
        Human-readable reason.
    """

    id: str
    message: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary."""
        return {"id": self.id, "message": self.message}


@dataclass
class ExecutionResult:
    """Outcome of one batch of deletes or updates.

    Attributes
    ----------
    operation : str
        "delete" or "update".
    dry_run : bool
        Whether the batch was only validated.
    succeeded : list[str]
        Ids applied (or that would be applied, in dry-run).
    failed : list[str]
        Ids that could not be applied.
    errors : list[ExecutionError]
        One entry per failed id.
    """

    operation: str
    dry_run: bool = False
    succeeded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    errors: list[ExecutionError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Whether every id was applied."""
        return not self.failed

    def fail(self, record_id: str, message: str) -> None:
        """Record a per-id failure."""
        self.failed.append(record_id)
        self.errors.append(ExecutionError(record_id, message))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "operation": self.operation,
            "dry_run": self.dry_run,
            "succeeded": list(self.succeeded),
            "failed": list(self.failed),
            "errors": [e.to_dict() for e in self.errors],
        }


@runtime_checkable
class RecordLoader(Protocol):
    """Source of the run's record snapshot."""

    def load_all(self) -> list[SubsidyRecord]:
        """Load every record in store order.

        Raises
        ------
        LoaderError
            If no consistent snapshot can be produced.
        """
        ...


@runtime_checkable
class ChangeExecutor(Protocol):
    """Applies planned deletes and updates."""

    def delete(self, ids: Sequence[str], *, dry_run: bool = False) -> ExecutionResult:
        """Delete records by id."""
        ...

    def update(self, ops: Sequence[UpdateOp], *, dry_run: bool = False) -> ExecutionResult:
        """Apply field updates."""
        ...


class RowRecordStore(ABC):
    """Store backed by a list of raw rows (column name -> value).

    Subclasses provide :meth:`_read_rows` and :meth:`_write_rows`. Columns
    unknown to :class:`SubsidyRecord` are carried through untouched.
    """

    @abstractmethod
    def _read_rows(self) -> list[dict[str, Any]]:
        """Return the current rows in store order."""

    @abstractmethod
    def _write_rows(self, rows: list[dict[str, Any]]) -> None:
        """Persist ``rows`` as the new store content."""

    @property
    def source(self) -> str:
        """Short description of where the rows live."""
        return type(self).__name__

    def load_all(self) -> list[SubsidyRecord]:
        """Load every record in store order.

        Returns
        -------
        list[SubsidyRecord]
            Snapshot of the store.

        Raises
        ------
        LoaderError
            If a row cannot be parsed or ids are not unique.
        """
        rows = self._read_rows()
        records: list[SubsidyRecord] = []
        seen: set[str] = set()

        for index, row in enumerate(rows, start=1):
            try:
                record = SubsidyRecord.from_dict(row)
            except RecordFormatError as e:
                raise LoaderError(f"{self.source}: row {index}: {e}") from e
            if record.id in seen:
                raise LoaderError(f"{self.source}: row {index}: duplicate id {record.id}")
            seen.add(record.id)
            records.append(record)

        return records

    def delete(self, ids: Sequence[str], *, dry_run: bool = False) -> ExecutionResult:
        """Delete records by id.

        Parameters
        ----------
        ids : Sequence[str]
            Record ids; unknown ids fail individually.
        dry_run : bool, optional
            Validate the request shape only.

        Returns
        -------
        ExecutionResult
            Per-id outcome.
        """
        ids = list(ids)
        result = ExecutionResult(operation="delete", dry_run=dry_run)

        if dry_run:
            _dry_run_result(result, ids, delete_request_errors(ids))
            return result

        rows = self._read_rows()
        index = _index_rows(rows)
        doomed: set[str] = set()

        for record_id in ids:
            if record_id not in index:
                result.fail(record_id, "record not found")
            elif record_id in doomed:
                result.fail(record_id, "duplicate id in request")
            else:
                doomed.add(record_id)
                result.succeeded.append(record_id)

        if doomed:
            self._commit(result, [row for row in rows if str(row.get("id")) not in doomed])
        return result

    def update(self, ops: Sequence[UpdateOp], *, dry_run: bool = False) -> ExecutionResult:
        """Apply field updates.

        Parameters
        ----------
        ops : Sequence[UpdateOp]
            Updates; unknown ids and unknown or immutable columns fail
            individually and leave the row unchanged.
        dry_run : bool, optional
            Validate the request shape only.

        Returns
        -------
        ExecutionResult
            Per-id outcome.
        """
        ops = list(ops)
        result = ExecutionResult(operation="update", dry_run=dry_run)

        if dry_run:
            payload = [op.to_dict() for op in ops]
            _dry_run_result(result, [op.id for op in ops], update_request_errors(payload))
            return result

        rows = self._read_rows()
        index = _index_rows(rows)
        changed = False

        for op in ops:
            position = index.get(op.id)
            if position is None:
                result.fail(op.id, "record not found")
                continue

            fields = op.to_dict()["fields"]
            immutable = sorted(set(fields) & IMMUTABLE_COLUMNS)
            if immutable:
                result.fail(op.id, f"immutable column: {', '.join(immutable)}")
                continue

            try:
                # Round-trip through the model to type-check the new values.
                SubsidyRecord.from_dict(rows[position]).replace_fields(fields)
            except RecordFormatError as e:
                result.fail(op.id, str(e))
                continue

            rows[position] = {**rows[position], **fields}
            result.succeeded.append(op.id)
            changed = True

        if changed:
            self._commit(result, rows)
        return result

    def _commit(self, result: ExecutionResult, rows: list[dict[str, Any]]) -> None:
        """Persist ``rows``; on a write error fail every id of the batch.

        Nothing of the batch is stored when the write fails, so the ids that
        had passed their per-id checks move from ``succeeded`` to
        ``failed`` with the error message.
        """
        try:
            self._write_rows(rows)
        except OSError as e:
            applied, result.succeeded = result.succeeded, []
            for record_id in applied:
                result.fail(record_id, f"write failed: {e}")


def _index_rows(rows: Iterable[dict[str, Any]]) -> dict[str, int]:
    return {str(row.get("id")): position for position, row in enumerate(rows)}


def _dry_run_result(
    result: ExecutionResult,
    ids: Sequence[str],
    errors: dict[str, list[str]],
) -> None:
    for record_id in ids:
        messages = errors.get(record_id)
        if messages:
            result.fail(record_id, "; ".join(messages))
        else:
            result.succeeded.append(record_id)
