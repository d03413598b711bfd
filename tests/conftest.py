"""Pytest configuration and fixtures for test suite."""

import json
import sys
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from subdedupe.models import SubsidyRecord  # noqa: E402


@pytest.fixture
def make_record() -> Callable[..., SubsidyRecord]:
    """Factory for test records with minimal boilerplate.

    Every field except ``id`` defaults to empty so tests only spell out
    what they exercise.
    """

    def _factory(
        id: str = "r1",
        *,
        external_id: str = "",
        title: str | None = "テスト補助金",
        description: str | None = None,
        max_amount: int | float | None = None,
        subsidy_rate: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        target_area: Iterable[str] = (),
        industry: Iterable[str] = (),
        catch_phrase: str | None = None,
        front_url: str | None = None,
        created_at: str | None = None,
    ) -> SubsidyRecord:
        return SubsidyRecord(
            id=id,
            external_id=external_id,
            title=title,
            description=description,
            max_amount=max_amount,
            subsidy_rate=subsidy_rate,
            start_date=start_date,
            end_date=end_date,
            target_area=tuple(target_area),
            industry=tuple(industry),
            catch_phrase=catch_phrase,
            front_url=front_url,
            created_at=created_at,
        )

    return _factory


@pytest.fixture
def write_store(tmp_path: Path) -> Callable[..., Path]:
    """Write rows to a JSONL store file and return its path."""

    def _write(rows: Iterable[dict[str, Any]], name: str = "subsidies.jsonl") -> Path:
        path = tmp_path / name
        with path.open("w", encoding="utf-8") as f:
            for row in rows:
                f.write(json.dumps(row, ensure_ascii=False) + "\n")
        return path

    return _write

