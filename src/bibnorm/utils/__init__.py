"""Common utility functions for bibnorm."""

from bibnorm.utils.timestamps import get_iso_timestamp

__all__ = ["get_iso_timestamp"]
