"""Timestamp helpers shared by the audit log and the record store."""

from datetime import UTC, datetime
from pathlib import Path

__all__ = ["get_iso_timestamp", "get_file_mtime"]


def get_iso_timestamp() -> str:
    """Current UTC time as ISO8601 with microseconds and a ``Z`` suffix."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def get_file_mtime(file_path: Path) -> str | None:
    """Modification time of ``file_path`` as ISO8601 (seconds precision).

    Returns
    -------
    str | None
        Timestamp such as ``'2024-01-30T12:00:00Z'``, or None when the file
        cannot be stat'ed.
    """
    try:
        mtime = datetime.fromtimestamp(file_path.stat().st_mtime, UTC)
    except (OSError, ValueError):
        return None
    return mtime.replace(microsecond=0).isoformat().replace("+00:00", "Z")
