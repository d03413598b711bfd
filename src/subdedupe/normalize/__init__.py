"""Text and field normalization.

- ``normalize_title``: comparison form of a title for the similarity matcher
- ``normalize_regions`` / ``is_iso_date``: field rules applied to retained
  records by the resolution planner
"""

from subdedupe.normalize.fields import (
    DEFAULT_REGION_TABLE,
    RegionTable,
    is_iso_date,
    normalize_region,
    normalize_regions,
)
from subdedupe.normalize.title import normalize_title

__all__ = [
    "DEFAULT_REGION_TABLE",
    "RegionTable",
    "is_iso_date",
    "normalize_region",
    "normalize_regions",
    "normalize_title",
]
