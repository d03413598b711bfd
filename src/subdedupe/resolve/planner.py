"""Resolution planning: junk removal, survivor selection, field updates.

The stage functions are pure over the immutable snapshot; ``plan_cleanup``
chains them into a complete :class:`CleanupPlan`.
"""

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from subdedupe.clustering import DEFAULT_THRESHOLD, Cluster, build_clusters
from subdedupe.junk import JunkClassifier, JunkRule
from subdedupe.models import SubsidyRecord
from subdedupe.normalize import DEFAULT_REGION_TABLE, RegionTable, is_iso_date, normalize_regions
from subdedupe.resolve.models import (
    CleanupPlan,
    ClusterResolution,
    DeletionReason,
    PlannedDeletion,
    UpdateOp,
)
from subdedupe.resolve.survivor import rank_members
from subdedupe.scoring import CompletenessScorer

if TYPE_CHECKING:
    from subdedupe.audit.logger import AuditLogger

__all__ = [
    "assemble_plan",
    "deleted_ids",
    "detect_junk",
    "plan_cleanup",
    "propose_field_updates",
    "propose_updates",
    "resolve_clusters",
]

_DATE_COLUMNS = ("start_date", "end_date")


def detect_junk(
    records: Sequence[SubsidyRecord],
    classifier: JunkClassifier,
    logger: "AuditLogger | None" = None,
) -> tuple[list[tuple[SubsidyRecord, JunkRule]], list[SubsidyRecord]]:
    """Split records into junk and survivors.

    Parameters
    ----------
    records : Sequence[SubsidyRecord]
        Snapshot in load order.
    classifier : JunkClassifier
        Junk classifier.
    logger : AuditLogger | None, optional
        Receives one ``record_flagged`` event per junk record.

    Returns
    -------
    tuple[list[tuple[SubsidyRecord, JunkRule]], list[SubsidyRecord]]
        (junk records with their rule, surviving records in load order).
    """
    junk: list[tuple[SubsidyRecord, JunkRule]] = []
    survivors: list[SubsidyRecord] = []

    for record in records:
        rule = classifier.classify(record)
        if rule is None:
            survivors.append(record)
            continue
        junk.append((record, rule))
        if logger:
            logger.record_flagged(
                rid=record.id,
                flag_name="junk",
                reason_code=rule.category.value,
                detail=rule.pattern,
            )

    return junk, survivors


def resolve_clusters(
    clusters: Iterable[Cluster],
    scorer: CompletenessScorer,
    logger: "AuditLogger | None" = None,
) -> list[ClusterResolution]:
    """Pick a survivor in every multi-member cluster.

    Parameters
    ----------
    clusters : Iterable[Cluster]
        Clusters from the cluster builder.
    scorer : CompletenessScorer
        Scorer used to rank members.
    logger : AuditLogger | None, optional
        Receives one ``duplicate_resolved`` event per cluster.

    Returns
    -------
    list[ClusterResolution]
        Resolutions in cluster order; singletons are skipped.
    """
    resolutions: list[ClusterResolution] = []

    for cluster in clusters:
        if not cluster.is_duplicate:
            continue

        ranked = rank_members(cluster.members, scorer)
        survivor = ranked[0][0]
        resolution = ClusterResolution(
            cluster=cluster,
            survivor_id=survivor.id,
            deleted_ids=tuple(record.id for record, _ in ranked[1:]),
            scores={record.id: score for record, score in ranked},
        )
        resolutions.append(resolution)

        if logger:
            logger.duplicate_resolved(
                cluster_id=cluster.cluster_id,
                anchor_id=cluster.anchor.id,
                survivor_id=survivor.id,
                deleted_ids=list(resolution.deleted_ids),
                scores=resolution.scores,
            )

    return resolutions


def propose_field_updates(
    record: SubsidyRecord,
    regions: RegionTable = DEFAULT_REGION_TABLE,
) -> dict[str, Any]:
    """Field normalization changes for one record.

    Parameters
    ----------
    record : SubsidyRecord
        Retained record.
    regions : RegionTable, optional
        Region expansion table.

    Returns
    -------
    dict[str, Any]
        Column to new value; empty when the record is already clean.
    """
    updates: dict[str, Any] = {}

    if record.target_area:
        normalized = normalize_regions(record.target_area, regions)
        if normalized != record.target_area:
            updates["target_area"] = list(normalized)

    for column in _DATE_COLUMNS:
        value = getattr(record, column)
        if value is None:
            continue
        # Non-string dates count as malformed.
        if not isinstance(value, str) or not is_iso_date(value):
            updates[column] = None

    return updates


def propose_updates(
    records: Iterable[SubsidyRecord],
    excluded_ids: set[str],
    regions: RegionTable = DEFAULT_REGION_TABLE,
    logger: "AuditLogger | None" = None,
) -> list[UpdateOp]:
    """Field updates for every retained record that needs one.

    Parameters
    ----------
    records : Iterable[SubsidyRecord]
        Non-junk records in load order.
    excluded_ids : set[str]
        Ids planned for deletion.
    regions : RegionTable, optional
        Region expansion table.
    logger : AuditLogger | None, optional
        Receives one ``update_proposed`` event per update.

    Returns
    -------
    list[UpdateOp]
        Update operations; records without changes produce none.
    """
    ops: list[UpdateOp] = []
    for record in records:
        if record.id in excluded_ids:
            continue
        fields = propose_field_updates(record, regions)
        if not fields:
            continue
        op = UpdateOp(id=record.id, fields=fields)
        ops.append(op)
        if logger:
            logger.update_proposed(rid=record.id, fields=op.to_dict()["fields"])
    return ops


def assemble_plan(
    total_records: int,
    junk: Sequence[tuple[SubsidyRecord, JunkRule]],
    clusters: Sequence[Cluster],
    resolutions: Sequence[ClusterResolution],
    updates: Sequence[UpdateOp],
) -> CleanupPlan:
    """Combine stage outputs into a plan with unique deletion ids."""
    deletions: dict[str, PlannedDeletion] = {}

    for record, rule in junk:
        deletions.setdefault(record.id, PlannedDeletion(record.id, DeletionReason.JUNK, rule.name))

    for resolution in resolutions:
        for record_id in resolution.deleted_ids:
            deletions.setdefault(
                record_id,
                PlannedDeletion(record_id, DeletionReason.DUPLICATE, resolution.survivor_id),
            )

    return CleanupPlan(
        total_records=total_records,
        deletions=list(deletions.values()),
        updates=[op for op in updates if op.id not in deletions],
        resolutions=list(resolutions),
        clusters_total=len(clusters),
    )


def deleted_ids(
    junk: Iterable[tuple[SubsidyRecord, JunkRule]],
    resolutions: Iterable[ClusterResolution],
) -> set[str]:
    """Ids removed by junk classification or survivor selection."""
    ids = {record.id for record, _ in junk}
    for resolution in resolutions:
        ids.update(resolution.deleted_ids)
    return ids


def plan_cleanup(
    records: Sequence[SubsidyRecord],
    *,
    classifier: JunkClassifier | None = None,
    scorer: CompletenessScorer | None = None,
    threshold: float = DEFAULT_THRESHOLD,
    regions: RegionTable = DEFAULT_REGION_TABLE,
    logger: "AuditLogger | None" = None,
) -> CleanupPlan:
    """Compute the full cleanup plan for a snapshot.

    Parameters
    ----------
    records : Sequence[SubsidyRecord]
        Snapshot in load order.
    classifier : JunkClassifier | None, optional
        Junk classifier; built-in taxonomy if None.
    scorer : CompletenessScorer | None, optional
        Completeness scorer; default tables if None.
    threshold : float, optional
        Similarity threshold for clustering, by default 0.75.
    regions : RegionTable, optional
        Region expansion table.
    logger : AuditLogger | None, optional
        Audit logger for per-record events.

    Returns
    -------
    CleanupPlan
        Planned deletions and updates.

    Examples
    --------
        >>> plan = plan_cleanup(records)
        >>> plan.to_delete, [op.id for op in plan.updates]
    """
    classifier = classifier or JunkClassifier()
    scorer = scorer or CompletenessScorer()

    junk, survivors = detect_junk(records, classifier, logger)
    clusters = build_clusters(survivors, threshold=threshold)
    resolutions = resolve_clusters(clusters, scorer, logger)
    updates = propose_updates(survivors, deleted_ids(junk, resolutions), regions, logger)

    return assemble_plan(len(records), junk, clusters, resolutions, updates)
