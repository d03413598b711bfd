"""Tests for completeness scoring."""

import pytest

from subdedupe.scoring import (
    DEFAULT_SOURCE_PRIORITY,
    CompletenessScorer,
    SourcePriorityTable,
    SourceRule,
    compute_completeness_score,
)

ALL_FIELDS = {
    "max_amount": 1000000,
    "subsidy_rate": "1/2",
    "start_date": "2025-04-01",
    "end_date": "2025-06-30",
    "catch_phrase": "設備投資を支援",
    "industry": ["製造業"],
    "front_url": "https://example.jp/subsidy",
    "target_area": ["東京都"],
}


@pytest.fixture
def scorer() -> CompletenessScorer:
    """Scorer with default tables."""
    return CompletenessScorer()


@pytest.mark.unit
@pytest.mark.parametrize(
    ("external_id", "source", "priority"),
    [
        ("sample:001", "sample", 100),
        ("ABC123", "jgrants", 80),
        ("jnet21:42", "jnet21", 70),
        ("mirasapo:9", "mirasapo", 60),
        ("pref:13-001", "pref", 50),
        ("city:131016", "city", 45),
        ("mhlw:1", "mhlw", 40),
        ("maff:1", "maff", 40),
        ("env:1", "env", 40),
        ("abc123", "default", 10),
        ("ABC-123", "default", 10),
        ("", "default", 10),
    ],
)
def test_source_priority_lookup(external_id: str, source: str, priority: int) -> None:
    """Test prefix rules, registry code shape and default floor."""
    assert DEFAULT_SOURCE_PRIORITY.lookup(external_id) == (source, priority)


@pytest.mark.unit
def test_custom_source_table() -> None:
    """Test injected source tables."""
    table = SourcePriorityTable(
        prefix_rules=(SourceRule("a:", "alpha", 5),),
        registry_pattern=r"R\d+",
        registry_priority=3,
        default_priority=1,
    )

    assert table.lookup("a:1") == ("alpha", 5)
    assert table.lookup("R12") == ("jgrants", 3)
    assert table.lookup("zzz") == ("default", 1)


@pytest.mark.unit
def test_bare_record_scores_default_floor(scorer: CompletenessScorer, make_record) -> None:
    """Test a record with nothing populated scores the default priority."""
    assert scorer.score(make_record()) == 10


@pytest.mark.unit
def test_fully_populated_record(scorer: CompletenessScorer, make_record) -> None:
    """Test every bonus adds up."""
    record = make_record(external_id="ABC123", description="x" * 501, **ALL_FIELDS)

    breakdown = scorer.explain(record)

    assert breakdown.source == "jgrants"
    assert breakdown.field_bonuses == {
        "max_amount": 25,
        "subsidy_rate": 20,
        "start_date": 15,
        "end_date": 15,
        "catch_phrase": 5,
        "industry": 5,
        "front_url": 5,
        "target_area": 3,
    }
    assert breakdown.description_bonus == 15
    assert breakdown.total == 80 + 93 + 15
    assert scorer.score(record) == breakdown.total
    assert breakdown.to_dict()["total"] == breakdown.total


@pytest.mark.unit
@pytest.mark.parametrize(
    ("length", "bonus"),
    [(0, 0), (50, 0), (51, 5), (200, 5), (201, 10), (500, 10), (501, 15)],
)
def test_description_tiers(scorer: CompletenessScorer, make_record, length: int, bonus: int) -> None:
    """Test description tiers use strict lower bounds."""
    record = make_record(description="あ" * length)

    assert scorer.explain(record).description_bonus == bonus


@pytest.mark.unit
@pytest.mark.parametrize(
    ("field", "value"),
    [("max_amount", 0), ("subsidy_rate", "  "), ("industry", []), ("front_url", "")],
)
def test_empty_values_earn_no_bonus(
    scorer: CompletenessScorer, make_record, field: str, value: object
) -> None:
    """Test zero amounts and blank values count as missing."""
    assert scorer.score(make_record(**{field: value})) == 10


@pytest.mark.unit
@pytest.mark.parametrize("field", sorted(ALL_FIELDS))
def test_score_is_monotonic(scorer: CompletenessScorer, make_record, field: str) -> None:
    """Test populating a field never lowers the score."""
    base = {k: v for k, v in ALL_FIELDS.items() if k != field}

    without = scorer.score(make_record(**base))
    with_field = scorer.score(make_record(**base, **{field: ALL_FIELDS[field]}))

    assert with_field > without


@pytest.mark.unit
def test_compute_completeness_score(make_record) -> None:
    """Test the module-level helper uses default tables."""
    assert compute_completeness_score(make_record(max_amount=1000000)) == 35
