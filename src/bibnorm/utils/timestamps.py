"""UTC timestamps for event records."""

from datetime import UTC, datetime

__all__ = ["get_iso_timestamp"]


def get_iso_timestamp() -> str:
    """Current UTC time as ISO 8601 with microseconds and a ``Z`` suffix.

    The width is fixed (``2026-02-03T12:34:56.000000Z``), so timestamps
    compare correctly as strings.
    """
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
