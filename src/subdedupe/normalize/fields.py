"""Field normalization rules for retained records.

Region names are expanded to their full prefecture form and malformed
dates are discarded. Both rules are idempotent.
"""

import re
from collections.abc import Mapping, Sequence
from types import MappingProxyType

__all__ = [
    "DEFAULT_REGION_TABLE",
    "REGION_SUFFIX_CHARS",
    "DEFAULT_REGION_SUFFIX",
    "RegionTable",
    "is_iso_date",
    "normalize_region",
    "normalize_regions",
]

ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

# Prefecture and city suffixes plus ward, town and village ones, so 渋谷区
# stays as is. 全国 maps to itself in the default table for the same reason.
REGION_SUFFIX_CHARS = "都道府県市区町村"
DEFAULT_REGION_SUFFIX = "県"
SHORT_REGION_MAX_LEN = 3


class RegionTable:
    """Immutable short-name to full-name region mapping.

    Parameters
    ----------
    mappings : Mapping[str, str]
        Exact short names and their full form. An identity entry keeps a
        name from being suffixed.
    suffix_chars : str, optional
        Characters that already mark a full region name.
    default_suffix : str, optional
        Suffix appended to short unmapped names.
    """

    def __init__(
        self,
        mappings: Mapping[str, str],
        suffix_chars: str = REGION_SUFFIX_CHARS,
        default_suffix: str = DEFAULT_REGION_SUFFIX,
    ) -> None:
        self.mappings: Mapping[str, str] = MappingProxyType(dict(mappings))
        self.suffix_chars = suffix_chars
        self.default_suffix = default_suffix


DEFAULT_REGION_TABLE = RegionTable(
    {
        "東京": "東京都",
        "大阪": "大阪府",
        "京都": "京都府",
        "北海": "北海道",
        "全国": "全国",
    }
)


def normalize_region(region: str, table: RegionTable = DEFAULT_REGION_TABLE) -> str:
    """Expand one region name.

    Parameters
    ----------
    region : str
        Region name as stored.
    table : RegionTable, optional
        Mapping and suffix configuration.

    Returns
    -------
    str
        Full region name.
    """
    mapped = table.mappings.get(region)
    if mapped is not None:
        return mapped

    if not region.strip():
        return region

    if len(region) <= SHORT_REGION_MAX_LEN and region[-1] not in table.suffix_chars:
        return region + table.default_suffix

    return region


def normalize_regions(
    regions: Sequence[str],
    table: RegionTable = DEFAULT_REGION_TABLE,
) -> tuple[str, ...]:
    """Expand every entry of a target-area list, preserving order."""
    return tuple(normalize_region(region, table) for region in regions)


def is_iso_date(value: str) -> bool:
    """Check for a strict YYYY-MM-DD date string."""
    return ISO_DATE_RE.fullmatch(value) is not None
