"""Tests for survivor selection and cleanup planning."""

import json
from pathlib import Path

import pytest

from subdedupe.audit import AuditLogger
from subdedupe.junk import JunkClassifier
from subdedupe.resolve import (
    CleanupPlan,
    DeletionReason,
    UpdateOp,
    plan_cleanup,
    propose_field_updates,
    rank_members,
    select_survivor,
)
from subdedupe.scoring import CompletenessScorer
from subdedupe.store import validate_plan


def _read_events(path: Path) -> list[dict]:
    """Read all JSONL events from file."""
    with path.open(encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


# ---------------------------------------------------------------------------
# Survivor selection
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_highest_score_survives(make_record) -> None:
    """Test the most complete member is retained."""
    members = [make_record("1"), make_record("2", max_amount=1000000), make_record("3")]

    assert select_survivor(members, CompletenessScorer()) == "2"


@pytest.mark.unit
def test_tie_goes_to_earliest_loaded(make_record) -> None:
    """Test equal scores keep load order."""
    members = [make_record("b"), make_record("a"), make_record("c")]

    ranked = rank_members(members, CompletenessScorer())

    assert [r.id for r, _ in ranked] == ["b", "a", "c"]
    assert select_survivor(members, CompletenessScorer()) == "b"


@pytest.mark.unit
def test_select_survivor_empty() -> None:
    """Test empty member lists are rejected."""
    with pytest.raises(ValueError, match="empty"):
        select_survivor([], CompletenessScorer())


# ---------------------------------------------------------------------------
# Field updates
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_propose_field_updates(make_record) -> None:
    """Test region expansion and malformed date clearing."""
    record = make_record(
        target_area=["東京", "横浜市"],
        start_date="令和7年4月",
        end_date="2025-06-30",
    )

    assert propose_field_updates(record) == {"target_area": ["東京都", "横浜市"], "start_date": None}


@pytest.mark.unit
def test_propose_field_updates_clean_record(make_record) -> None:
    """Test clean records need no update."""
    record = make_record(target_area=["東京都"], start_date="2025-04-01")

    assert propose_field_updates(record) == {}


@pytest.mark.unit
def test_non_string_date_is_cleared(make_record) -> None:
    """Test dates stored as numbers count as malformed."""
    record = make_record(end_date=20250630)  # type: ignore[arg-type]

    assert propose_field_updates(record) == {"end_date": None}


@pytest.mark.unit
def test_field_updates_idempotent(make_record) -> None:
    """Test applying proposed updates leaves nothing to propose."""
    record = make_record(target_area=["北海", "千葉"], start_date="4月1日", end_date="未定")

    updated = record.replace_fields(propose_field_updates(record))

    assert propose_field_updates(updated) == {}


# ---------------------------------------------------------------------------
# Full plan
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_plan_cleanup(make_record) -> None:
    """Test junk, duplicates and updates are combined into one plan."""
    records = [
        make_record("1", title="ものづくり補助金（第17回）", max_amount=1000000, target_area=["東京"]),
        make_record("2", title="ものづくり補助金（第18回）", target_area=["大阪"]),
        make_record("3", title="【千代田区】融資・貸付：創業融資あっせん"),
        make_record("4", title="創業助成金", max_amount=500000, start_date="令和7年4月"),
    ]

    plan = plan_cleanup(records)

    assert plan.to_delete == ["3", "2"]
    assert [d.reason for d in plan.deletions] == [DeletionReason.JUNK, DeletionReason.DUPLICATE]
    assert plan.deletions[1].detail == "1"
    assert plan.updates == [
        UpdateOp("1", {"target_area": ["東京都"]}),
        UpdateOp("4", {"start_date": None}),
    ]
    assert plan.junk_count == 1
    assert plan.duplicate_count == 1
    assert plan.clusters_found == 1
    assert plan.clusters_total == 2
    assert plan.total_records == 4


@pytest.mark.unit
def test_junk_is_excluded_from_clustering(make_record) -> None:
    """Test junk records never join or anchor a cluster."""
    records = [
        make_record("1", title="【千代田区】融資・貸付：創業融資あっせん"),
        make_record("2", title="【千代田区】融資・貸付：創業融資あっせん制度"),
    ]

    plan = plan_cleanup(records)

    assert plan.to_delete == ["1", "2"]
    assert plan.clusters_found == 0
    assert plan.clusters_total == 0


@pytest.mark.unit
def test_deleted_records_get_no_updates(make_record) -> None:
    """Test update and deletion ids are disjoint."""
    records = [
        make_record("1", title="省エネ補助金", max_amount=1),
        make_record("2", title="省エネ補助金", target_area=["東京"]),
    ]

    plan = plan_cleanup(records)

    assert plan.to_delete == ["2"]
    assert plan.updates == []


@pytest.mark.unit
def test_plan_cleanup_honors_injected_classifier(make_record) -> None:
    """Test the missing-amount family can be disabled."""
    records = [make_record("1", title="補助金一覧")]

    assert plan_cleanup(records).to_delete == ["1"]
    assert plan_cleanup(records, classifier=JunkClassifier(missing_amount_pass=False)).is_empty


@pytest.mark.unit
def test_plan_cleanup_empty_input() -> None:
    """Test an empty snapshot gives an empty plan."""
    plan = plan_cleanup([])

    assert plan.is_empty
    assert plan.to_dict()["counts"]["clusters_total"] == 0


@pytest.mark.unit
def test_plan_serialization_matches_schema(make_record) -> None:
    """Test serialized plans validate against the plan schema."""
    records = [
        make_record("1", title="ものづくり補助金（第17回）", max_amount=1000000),
        make_record("2", title="ものづくり補助金（第18回）", start_date="令和7年4月"),
        make_record("3", title="お問い合わせ"),
    ]

    data = plan_cleanup(records).to_dict()

    validate_plan(data)
    assert data["to_delete"] == ["3", "2"]
    assert data["clusters"][0]["survivor_id"] == "1"
    assert data["clusters"][0]["scores"] == {"1": 35, "2": 25}


@pytest.mark.unit
def test_plan_cleanup_logs_audit_events(tmp_path: Path, make_record) -> None:
    """Test per-record audit events are emitted."""
    records = [
        make_record("1", title="ものづくり補助金（第17回）", max_amount=1000000),
        make_record("2", title="ものづくり補助金（第18回）"),
        make_record("3", title="お問い合わせ"),
        make_record("4", title="創業助成金", max_amount=1, target_area=["東京"]),
    ]

    with AuditLogger(run_id="t", log_path=tmp_path / "events.jsonl") as logger:
        plan_cleanup(records, logger=logger)

    events = _read_events(tmp_path / "events.jsonl")
    by_type = {e["event"]: e for e in events}

    assert [e["event"] for e in events] == ["record_flagged", "duplicate_resolved", "update_proposed"]
    assert by_type["record_flagged"]["rid"] == "3"
    assert by_type["record_flagged"]["data"]["reason_code"] == "navigation"
    assert by_type["duplicate_resolved"]["data"]["survivor_id"] == "1"
    assert by_type["duplicate_resolved"]["data"]["deleted_ids"] == ["2"]
    assert by_type["update_proposed"]["rid"] == "4"
    assert by_type["update_proposed"]["data"]["fields"] == {"target_area": ["東京都"]}


@pytest.mark.unit
def test_cleanup_plan_defaults() -> None:
    """Test an empty plan object."""
    plan = CleanupPlan()

    assert plan.is_empty
    assert plan.to_delete == []
