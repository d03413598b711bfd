"""Data models for duplicate clusters."""

import hashlib
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from subdedupe.models import SubsidyRecord

__all__ = ["Cluster", "compute_cluster_id"]


def compute_cluster_id(record_ids: Sequence[str]) -> str:
    """Compute deterministic cluster ID from member ids.

    Parameters
    ----------
    record_ids : Sequence[str]
        Record IDs in cluster.

    Returns
    -------
    str
        Cluster ID in format "c:{sha256_prefix}".
    """
    content = "\n".join(sorted(record_ids))
    hash_digest = hashlib.sha256(content.encode("utf-8")).hexdigest()
    return f"c:{hash_digest[:12]}"


@dataclass(frozen=True)
class Cluster:
    """Star-shaped duplicate cluster.

    Attributes
    ----------
    cluster_id : str
        Deterministic identifier.
    members : tuple[SubsidyRecord, ...]
        Members in load order; the anchor is always first.
    similarities : tuple[float, ...]
        Similarity of each member to the anchor (1.0 for the anchor).
    """

    cluster_id: str
    members: tuple[SubsidyRecord, ...]
    similarities: tuple[float, ...]

    @property
    def anchor(self) -> SubsidyRecord:
        """First-loaded member every other member was compared against."""
        return self.members[0]

    @property
    def record_ids(self) -> tuple[str, ...]:
        """Member ids in load order."""
        return tuple(record.id for record in self.members)

    @property
    def size(self) -> int:
        """Number of members."""
        return len(self.members)

    @property
    def is_duplicate(self) -> bool:
        """Whether the cluster holds more than one record."""
        return len(self.members) > 1

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "cluster_id": self.cluster_id,
            "anchor_id": self.anchor.id,
            "record_ids": list(self.record_ids),
            "similarities": [round(s, 6) for s in self.similarities],
        }
