"""Star clustering of records by title similarity.

Each unprocessed record in load order becomes an anchor and absorbs every
later unprocessed record whose title similarity with the anchor exceeds the
threshold. Members are compared to the anchor only, never to each other, so
clusters are stars rather than transitive closures.
"""

from collections.abc import Callable, Sequence

from subdedupe.clustering.models import Cluster, compute_cluster_id
from subdedupe.models import SubsidyRecord
from subdedupe.scoring import similarity

__all__ = ["DEFAULT_THRESHOLD", "build_clusters"]

DEFAULT_THRESHOLD = 0.75

SimilarityFn = Callable[[str | None, str | None], float]


def _scan_anchor(
    anchor_index: int,
    records: Sequence[SubsidyRecord],
    processed: list[bool],
    threshold: float,
    similarity_fn: SimilarityFn,
) -> list[tuple[int, float]]:
    """Find later unprocessed records similar to one anchor.

    Reads ``processed`` but does not write it; the caller commits the
    markers after the scan.
    """
    anchor_title = records[anchor_index].title
    matches: list[tuple[int, float]] = []
    for j in range(anchor_index + 1, len(records)):
        if processed[j]:
            continue
        score = similarity_fn(anchor_title, records[j].title)
        if score > threshold:
            matches.append((j, score))
    return matches


def build_clusters(
    records: Sequence[SubsidyRecord],
    threshold: float = DEFAULT_THRESHOLD,
    similarity_fn: SimilarityFn = similarity,
) -> list[Cluster]:
    """Partition records into star clusters.

    Parameters
    ----------
    records : Sequence[SubsidyRecord]
        Non-junk records in load order. Records without a title are
        skipped and appear in no cluster.
    threshold : float, optional
        Strict similarity threshold, by default 0.75.
    similarity_fn : SimilarityFn, optional
        Symmetric title similarity, by default bigram Jaccard.

    Returns
    -------
    list[Cluster]
        Clusters (singletons included) ordered by anchor position.
    """
    candidates = [record for record in records if record.has_title]
    processed = [False] * len(candidates)

    clusters: list[Cluster] = []
    for i, anchor in enumerate(candidates):
        if processed[i]:
            continue

        matches = _scan_anchor(i, candidates, processed, threshold, similarity_fn)

        members = [anchor]
        similarities = [1.0]
        for j, score in matches:
            members.append(candidates[j])
            similarities.append(score)
            processed[j] = True
        processed[i] = True

        clusters.append(
            Cluster(
                cluster_id=compute_cluster_id([m.id for m in members]),
                members=tuple(members),
                similarities=tuple(similarities),
            )
        )

    return clusters
