"""Run identifiers for the event log."""

import secrets

from bibnorm.utils import get_iso_timestamp

__all__ = ["generate_run_id"]


def generate_run_id() -> str:
    """Return ``<UTC timestamp>__<8 hex chars>``; ids sort by start time."""
    return f"{get_iso_timestamp()}__{secrets.token_hex(4)}"
