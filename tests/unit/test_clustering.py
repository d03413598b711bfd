"""Tests for star clustering."""

import pytest

from subdedupe.clustering import Cluster, build_clusters, compute_cluster_id


def _table_similarity(table: dict[frozenset[str], float]):
    """Similarity function backed by an explicit pair table."""

    def _similarity(a: str | None, b: str | None) -> float:
        if a == b:
            return 1.0
        return table.get(frozenset((a, b)), 0.0)

    return _similarity


@pytest.mark.unit
def test_compute_cluster_id_is_order_independent() -> None:
    """Test cluster ids depend on the member set only."""
    assert compute_cluster_id(["b", "a"]) == compute_cluster_id(["a", "b"])
    assert compute_cluster_id(["a"]).startswith("c:")
    assert compute_cluster_id(["a"]) != compute_cluster_id(["a", "b"])


@pytest.mark.unit
def test_reposts_cluster_together(make_record) -> None:
    """Test session-number reposts end up in one cluster."""
    records = [
        make_record("1", title="ものづくり補助金（第17回）"),
        make_record("2", title="ものづくり補助金（第18回）"),
        make_record("3", title="創業助成金"),
    ]

    clusters = build_clusters(records)

    assert [c.record_ids for c in clusters] == [("1", "2"), ("3",)]
    assert clusters[0].similarities == (1.0, 1.0)
    assert clusters[0].is_duplicate
    assert not clusters[1].is_duplicate


@pytest.mark.unit
def test_members_are_compared_to_anchor_only(make_record) -> None:
    """Test clusters are stars, not transitive closures."""
    sim = _table_similarity(
        {
            frozenset(("A", "B")): 0.9,
            frozenset(("B", "C")): 0.9,
            frozenset(("A", "C")): 0.1,
        }
    )
    records = [make_record("a", title="A"), make_record("b", title="B"), make_record("c", title="C")]

    clusters = build_clusters(records, similarity_fn=sim)

    # C resembles B but not the anchor A, and B is already taken.
    assert [c.record_ids for c in clusters] == [("a", "b"), ("c",)]


@pytest.mark.unit
def test_anchor_absorbs_all_later_matches(make_record) -> None:
    """Test an anchor takes every later record above the threshold."""
    sim = _table_similarity(
        {
            frozenset(("A", "B")): 0.8,
            frozenset(("A", "C")): 0.95,
            frozenset(("B", "C")): 0.0,
        }
    )
    records = [make_record("a", title="A"), make_record("b", title="B"), make_record("c", title="C")]

    (cluster,) = build_clusters(records, similarity_fn=sim)

    assert cluster.anchor.id == "a"
    assert cluster.record_ids == ("a", "b", "c")
    assert cluster.similarities == (1.0, 0.8, 0.95)


@pytest.mark.unit
def test_threshold_is_strict(make_record) -> None:
    """Test a pair scoring exactly the threshold does not cluster."""
    records = [make_record("1", title="地域振興"), make_record("2", title="地域振興券")]

    assert len(build_clusters(records, threshold=0.75)) == 2
    assert len(build_clusters(records, threshold=0.7)) == 1


@pytest.mark.unit
def test_records_without_title_are_skipped(make_record) -> None:
    """Test untitled records belong to no cluster."""
    records = [make_record("1", title=None), make_record("2", title="  "), make_record("3")]

    clusters = build_clusters(records)

    assert [c.record_ids for c in clusters] == [("3",)]


@pytest.mark.unit
def test_every_titled_record_in_exactly_one_cluster(make_record) -> None:
    """Test clusters partition the titled records."""
    titles = ["省エネ補助金", "省エネ補助金（第2回）", "創業助成金", "創業助成金", "IT導入補助金"]
    records = [make_record(str(i), title=t) for i, t in enumerate(titles)]

    clusters = build_clusters(records)
    ids = [rid for c in clusters for rid in c.record_ids]

    assert sorted(ids) == sorted(r.id for r in records)
    assert len(ids) == len(set(ids))


@pytest.mark.unit
def test_empty_input() -> None:
    """Test no records produce no clusters."""
    assert build_clusters([]) == []


@pytest.mark.unit
def test_cluster_to_dict(make_record) -> None:
    """Test cluster serialization."""
    cluster = Cluster(
        cluster_id="c:test",
        members=(make_record("1"), make_record("2")),
        similarities=(1.0, 0.8),
    )

    assert cluster.to_dict() == {
        "cluster_id": "c:test",
        "anchor_id": "1",
        "record_ids": ["1", "2"],
        "similarities": [1.0, 0.8],
    }
    assert cluster.size == 2
