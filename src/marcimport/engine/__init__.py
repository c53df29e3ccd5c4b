"""Loader orchestration engine.

This package provides the entry point for loading MARC files record by
record, including configuration and result types.
"""

from marcimport.engine.config import LoaderConfig, LoadResult, load_config
from marcimport.engine.runner import RecordOutcome, load_marc_file, process_record

__all__ = [
    "LoaderConfig",
    "LoadResult",
    "RecordOutcome",
    "load_config",
    "load_marc_file",
    "process_record",
]
