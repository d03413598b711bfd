"""Data-quality cleanup for subsidy record corpora.

This package provides:
- Data models (subdedupe.models): the subsidy record type
- Junk classification (subdedupe.junk): non-subsidy entry detection
- Normalization (subdedupe.normalize): title, region and date cleanup
- Scoring (subdedupe.scoring): title similarity and completeness
- Clustering (subdedupe.clustering): star clustering of near-duplicates
- Resolution (subdedupe.resolve): survivor selection and cleanup plans
- Stores (subdedupe.store): snapshot loading and change execution
- Engine (subdedupe.engine): pipeline orchestration
- Audit (subdedupe.audit): logging and traceability
- CLI (subdedupe.cli): command-line interface
- Public API (subdedupe.api): high-level convenience functions
"""

__version__ = "0.1.0"

from subdedupe.api import (
    CleanupError,
    clean,
    compute_completeness_score,
    is_junk,
    normalize_title,
    similarity,
)
from subdedupe.models import SubsidyRecord

__all__ = [
    "__version__",
    "CleanupError",
    "SubsidyRecord",
    "clean",
    "compute_completeness_score",
    "is_junk",
    "normalize_title",
    "similarity",
]
