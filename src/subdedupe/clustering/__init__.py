"""Duplicate clustering.

Groups non-junk records into star clusters around anchor records using the
bigram title similarity and a strict threshold.
"""

from subdedupe.clustering.cluster_builder import DEFAULT_THRESHOLD, build_clusters
from subdedupe.clustering.models import Cluster, compute_cluster_id

__all__ = [
    "DEFAULT_THRESHOLD",
    "Cluster",
    "build_clusters",
    "compute_cluster_id",
]
