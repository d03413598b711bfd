"""Record stores: snapshot loading and change execution."""

from subdedupe.store.base import (
    ChangeExecutor,
    ExecutionError,
    ExecutionResult,
    RecordLoader,
    RowRecordStore,
)
from subdedupe.store.errors import LoaderError, PlanValidationError
from subdedupe.store.jsonl import JsonlRecordStore
from subdedupe.store.memory import MemoryRecordStore
from subdedupe.store.validation import (
    delete_request_errors,
    load_schema,
    update_request_errors,
    validate_plan,
)

__all__ = [
    "ChangeExecutor",
    "ExecutionError",
    "ExecutionResult",
    "JsonlRecordStore",
    "LoaderError",
    "MemoryRecordStore",
    "PlanValidationError",
    "RecordLoader",
    "RowRecordStore",
    "delete_request_errors",
    "load_schema",
    "update_request_errors",
    "validate_plan",
]
