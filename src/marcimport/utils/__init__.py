"""Common utility functions for marcimport."""

from marcimport.utils.timestamps import get_file_mtime, get_iso_timestamp

__all__ = ["get_iso_timestamp", "get_file_mtime"]
