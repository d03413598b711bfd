"""Timestamp utilities."""

from datetime import UTC, datetime
from pathlib import Path

__all__ = ["get_iso_timestamp", "get_file_mtime"]


def get_iso_timestamp() -> str:
    """Get current UTC timestamp in ISO8601 format with microseconds.

    Returns
    -------
    str
        ISO8601 timestamp, e.g. "2026-10-17T12:34:56.123456Z".
    """
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def get_file_mtime(file_path: Path) -> str:
    """Get modification time of a file as ISO8601 timestamp.

    Parameters
    ----------
    file_path : Path
        Path to file.

    Returns
    -------
    str
        ISO8601 timestamp truncated to seconds, or empty string if the
        file cannot be read.
    """
    try:
        mtime = datetime.fromtimestamp(file_path.stat().st_mtime, UTC)
        return mtime.replace(microsecond=0).isoformat().replace("+00:00", "Z")
    except (OSError, ValueError):
        return ""
