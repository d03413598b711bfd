"""Subsidy record data model.

Records are loaded once per run from the record store and never mutated
during classification, clustering or scoring. Stores apply planned updates
by building new instances with :meth:`SubsidyRecord.replace_fields`.
"""

from dataclasses import dataclass, fields, replace
from typing import Any

__all__ = [
    "IMMUTABLE_COLUMNS",
    "RECORD_COLUMNS",
    "RecordFormatError",
    "SubsidyRecord",
]

# Column name in the store -> dataclass attribute.
_COLUMN_TO_ATTR: dict[str, str] = {
    "id": "id",
    "jgrants_id": "external_id",
    "title": "title",
    "description": "description",
    "max_amount": "max_amount",
    "subsidy_rate": "subsidy_rate",
    "start_date": "start_date",
    "end_date": "end_date",
    "target_area": "target_area",
    "industry": "industry",
    "catch_phrase": "catch_phrase",
    "front_url": "front_url",
    "created_at": "created_at",
}

_ATTR_TO_COLUMN: dict[str, str] = {attr: col for col, attr in _COLUMN_TO_ATTR.items()}

RECORD_COLUMNS: frozenset[str] = frozenset(_COLUMN_TO_ATTR)

# Columns assigned by the store; updates may never touch them.
IMMUTABLE_COLUMNS: frozenset[str] = frozenset({"id", "jgrants_id", "created_at"})

_LIST_COLUMNS = ("target_area", "industry")


class RecordFormatError(ValueError):
    """Raised when a stored row cannot be turned into a record."""


def _as_tuple(value: Any, column: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise RecordFormatError(f"Column {column!r} must be a list, got {type(value).__name__}")
    return tuple(str(v) for v in value)


def _as_amount(value: Any) -> int | float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    raise RecordFormatError(f"Column 'max_amount' must be numeric, got {type(value).__name__}")


@dataclass(frozen=True)
class SubsidyRecord:
    """One subsidy-like entry of the corpus.

    Attributes
    ----------
    id : str
        Store-assigned unique identifier.
    external_id : str
        Provenance string of the ingesting source (``jgrants_id`` column).
        Only used to derive the source priority.
    title : str | None
        Human-readable name, primary key for similarity and junk checks.
    description : str | None
        Optional long text.
    max_amount : int | float | None
        Monetary ceiling in yen.
    subsidy_rate : str | None
        Free-text rate such as "1/2" or "2/3".
    start_date : str | None
        Application start date, expected as YYYY-MM-DD.
    end_date : str | None
        Application end date, expected as YYYY-MM-DD.
    target_area : tuple[str, ...]
        Region names, possibly abbreviated.
    industry : tuple[str, ...]
        Industry tags.
    catch_phrase : str | None
        Short supplementary text.
    front_url : str | None
        Public landing page.
    created_at : str | None
        Creation timestamp.
    """

    id: str
    external_id: str = ""
    title: str | None = None
    description: str | None = None
    max_amount: int | float | None = None
    subsidy_rate: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    target_area: tuple[str, ...] = ()
    industry: tuple[str, ...] = ()
    catch_phrase: str | None = None
    front_url: str | None = None
    created_at: str | None = None

    @property
    def has_title(self) -> bool:
        """Whether the record carries a usable (non-blank) title."""
        return bool(self.title and self.title.strip())

    def replace_fields(self, updates: dict[str, Any]) -> "SubsidyRecord":
        """Return a copy with store columns overwritten.

        Parameters
        ----------
        updates : dict[str, Any]
            Column name to new value.

        Returns
        -------
        SubsidyRecord
            Updated copy.

        Raises
        ------
        RecordFormatError
            If a column is unknown or immutable.
        """
        changes: dict[str, Any] = {}
        for column, value in updates.items():
            if column not in RECORD_COLUMNS:
                raise RecordFormatError(f"Unknown column: {column}")
            if column in IMMUTABLE_COLUMNS:
                raise RecordFormatError(f"Column is immutable: {column}")
            if column in _LIST_COLUMNS:
                value = _as_tuple(value, column)
            elif column == "max_amount":
                value = _as_amount(value)
            changes[_COLUMN_TO_ATTR[column]] = value
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the store's column layout.

        Returns
        -------
        dict[str, Any]
            Row keyed by column name; list columns as lists.
        """
        row: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, tuple):
                value = list(value)
            row[_ATTR_TO_COLUMN[f.name]] = value
        return row

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "SubsidyRecord":
        """Build a record from a stored row.

        ``external_id`` is accepted as an alias of ``jgrants_id``. Unknown
        columns are ignored.

        Parameters
        ----------
        data : dict[str, Any]
            Row from the record store.

        Returns
        -------
        SubsidyRecord
            Parsed record.

        Raises
        ------
        RecordFormatError
            If the row has no id or a column has the wrong type.
        """
        if not isinstance(data, dict):
            raise RecordFormatError(f"Record must be an object, got {type(data).__name__}")

        record_id = data.get("id")
        if record_id is None or str(record_id).strip() == "":
            raise RecordFormatError("Record has no id")

        external_id = data.get("jgrants_id", data.get("external_id")) or ""

        return SubsidyRecord(
            id=str(record_id),
            external_id=str(external_id),
            title=data.get("title"),
            description=data.get("description"),
            max_amount=_as_amount(data.get("max_amount")),
            subsidy_rate=data.get("subsidy_rate"),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            target_area=_as_tuple(data.get("target_area"), "target_area"),
            industry=_as_tuple(data.get("industry"), "industry"),
            catch_phrase=data.get("catch_phrase"),
            front_url=data.get("front_url"),
            created_at=data.get("created_at"),
        )
