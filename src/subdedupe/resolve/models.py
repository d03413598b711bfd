"""Data models for the cleanup plan."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from subdedupe.clustering.models import Cluster

__all__ = [
    "PLAN_VERSION",
    "DeletionReason",
    "PlannedDeletion",
    "UpdateOp",
    "ClusterResolution",
    "CleanupPlan",
]

PLAN_VERSION = "1.0.0"


class DeletionReason(StrEnum):
    """Why a record is planned for deletion.

    Attributes
    ----------
    JUNK : str
        Record is not a genuine subsidy entry.
    DUPLICATE : str
        Record lost survivor selection within a duplicate cluster.
    """

    JUNK = "junk"
    DUPLICATE = "duplicate"


@dataclass(frozen=True)
class PlannedDeletion:
    """A record id planned for deletion.

    Attributes
    ----------
    id : str
        Record id.
    reason : DeletionReason
        Deletion reason.
    detail : str
        Matching junk rule name, or the survivor id for duplicates.
    """

    id: str
    reason: DeletionReason
    detail: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"id": self.id, "reason": self.reason.value, "detail": self.detail}


@dataclass(frozen=True)
class UpdateOp:
    """Field updates for one retained record.

    Attributes
    ----------
    id : str
        Record id.
    fields : dict[str, Any]
        Store column to new value; never empty.
    """

    id: str
    fields: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with list-valued columns as lists."""
        return {
            "id": self.id,
            "fields": {
                name: list(value) if isinstance(value, tuple) else value
                for name, value in self.fields.items()
            },
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "UpdateOp":
        """Deserialize an update operation."""
        return UpdateOp(id=data["id"], fields=dict(data["fields"]))


@dataclass(frozen=True)
class ClusterResolution:
    """Survivor decision for one duplicate cluster.

    Attributes
    ----------
    cluster : Cluster
        Resolved cluster.
    survivor_id : str
        Retained record id.
    deleted_ids : tuple[str, ...]
        Members planned for deletion, ranked by score.
    scores : dict[str, int]
        Completeness score per member id.
    """

    cluster: Cluster
    survivor_id: str
    deleted_ids: tuple[str, ...]
    scores: dict[str, int]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            **self.cluster.to_dict(),
            "survivor_id": self.survivor_id,
            "deleted_ids": list(self.deleted_ids),
            "scores": dict(self.scores),
        }


@dataclass
class CleanupPlan:
    """Planned deletions and updates of one run.

    Deletion ids and update ids are disjoint; neither is applied by the
    planner itself.

    Attributes
    ----------
    total_records : int
        Records in the loaded snapshot.
    deletions : list[PlannedDeletion]
        Unique deletions, junk first, in load order.
    updates : list[UpdateOp]
        Field updates for retained records.
    resolutions : list[ClusterResolution]
        One entry per multi-member cluster.
    clusters_total : int
        All clusters built, singletons included.
    """

    total_records: int = 0
    deletions: list[PlannedDeletion] = field(default_factory=list)
    updates: list[UpdateOp] = field(default_factory=list)
    resolutions: list[ClusterResolution] = field(default_factory=list)
    clusters_total: int = 0

    @property
    def to_delete(self) -> list[str]:
        """Ordered unique ids planned for deletion."""
        return [d.id for d in self.deletions]

    @property
    def junk_count(self) -> int:
        """Number of records classified as junk."""
        return sum(1 for d in self.deletions if d.reason == DeletionReason.JUNK)

    @property
    def duplicate_count(self) -> int:
        """Number of records deleted as non-survivor duplicates."""
        return sum(1 for d in self.deletions if d.reason == DeletionReason.DUPLICATE)

    @property
    def clusters_found(self) -> int:
        """Number of duplicate clusters (two or more members)."""
        return len(self.resolutions)

    @property
    def is_empty(self) -> bool:
        """Whether the plan changes nothing."""
        return not self.deletions and not self.updates

    def to_dict(self) -> dict[str, Any]:
        """Convert to the serialized plan layout."""
        return {
            "plan_version": PLAN_VERSION,
            "total_records": self.total_records,
            "counts": {
                "junk": self.junk_count,
                "duplicates": self.duplicate_count,
                "clusters": self.clusters_found,
                "clusters_total": self.clusters_total,
                "updates": len(self.updates),
            },
            "to_delete": self.to_delete,
            "deletions": [d.to_dict() for d in self.deletions],
            "updates": [u.to_dict() for u in self.updates],
            "clusters": [r.to_dict() for r in self.resolutions],
        }
