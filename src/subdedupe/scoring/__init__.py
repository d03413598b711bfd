"""Title similarity and record completeness scoring."""

from subdedupe.scoring.completeness import (
    DEFAULT_SOURCE_PRIORITY,
    CompletenessScorer,
    ScoreBreakdown,
    SourcePriorityTable,
    SourceRule,
    compute_completeness_score,
)
from subdedupe.scoring.similarity import bigrams, jaccard, similarity

__all__ = [
    "DEFAULT_SOURCE_PRIORITY",
    "CompletenessScorer",
    "ScoreBreakdown",
    "SourcePriorityTable",
    "SourceRule",
    "bigrams",
    "compute_completeness_score",
    "jaccard",
    "similarity",
]
