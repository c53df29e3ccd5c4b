"""Relational storage for records, fields and subfields."""

from marcimport.storage.base import RecordStore, StoredRecord
from marcimport.storage.sqlite_store import SqliteRecordStore

__all__ = [
    "RecordStore",
    "StoredRecord",
    "SqliteRecordStore",
]
