"""Shared data types for subdedupe.

Domain-specific types live closer to their consumers:
- Junk rules → subdedupe.junk.rules
- Cluster types → subdedupe.clustering.models
- Plan types → subdedupe.resolve.models
- Audit types → subdedupe.audit.models
"""

from subdedupe.models.records import (
    IMMUTABLE_COLUMNS,
    RECORD_COLUMNS,
    RecordFormatError,
    SubsidyRecord,
)

__all__ = [
    "IMMUTABLE_COLUMNS",
    "RECORD_COLUMNS",
    "RecordFormatError",
    "SubsidyRecord",
]
