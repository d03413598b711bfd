"""Resolution planning.

Turns the classified and clustered snapshot into a cleanup plan: junk and
non-survivor duplicates to delete, and field normalization updates for
every retained record.
"""

from subdedupe.resolve.models import (
    PLAN_VERSION,
    CleanupPlan,
    ClusterResolution,
    DeletionReason,
    PlannedDeletion,
    UpdateOp,
)
from subdedupe.resolve.planner import (
    assemble_plan,
    deleted_ids,
    detect_junk,
    plan_cleanup,
    propose_field_updates,
    propose_updates,
    resolve_clusters,
)
from subdedupe.resolve.survivor import rank_members, select_survivor

__all__ = [
    "PLAN_VERSION",
    "CleanupPlan",
    "ClusterResolution",
    "DeletionReason",
    "PlannedDeletion",
    "UpdateOp",
    "assemble_plan",
    "deleted_ids",
    "detect_junk",
    "plan_cleanup",
    "propose_field_updates",
    "propose_updates",
    "rank_members",
    "resolve_clusters",
    "select_survivor",
]
