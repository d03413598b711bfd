"""Common utility functions for subdedupe.

Shared hashing and timestamp helpers used by the audit trail and the
record stores.
"""

from subdedupe.utils.hashing import (
    calculate_file_sha256,
    format_sha256,
)
from subdedupe.utils.timestamps import get_file_mtime, get_iso_timestamp

__all__ = [
    "get_iso_timestamp",
    "get_file_mtime",
    "calculate_file_sha256",
    "format_sha256",
]
