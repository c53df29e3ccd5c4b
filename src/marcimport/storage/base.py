"""Storage contract consumed by the loader.

Every insert reports success with a positive identifier and failure with a
non-positive value. Identifiers are assigned by the store and treated as
opaque handles by the loader.
"""

from dataclasses import dataclass
from typing import Protocol

from marcimport.models import FieldKind, RecordType

__all__ = ["RecordStore", "StoredRecord"]


@dataclass(frozen=True)
class StoredRecord:
    """Existing ``record`` row found by a duplicate lookup.

    Attributes
    ----------
    record_id : int
        Row identifier.
    mod_date : float
        Modification date stored with the row.
    """

    record_id: int
    mod_date: float


class RecordStore(Protocol):
    """Row writer for the ``record``, ``field`` and ``subfield`` tables."""

    def insert_record_record(
        self,
        file_id: int,
        record_type: RecordType,
        natural_key: str,
        mod_date: float,
        *,
        institution_code: str = "",
    ) -> int:
        """Insert a record row and return its identifier (<= 0 on failure)."""
        ...

    def insert_field_record(self, record_id: int, tag: str, data: str, kind: FieldKind) -> int:
        """Insert a field row and return its identifier (<= 0 on failure)."""
        ...

    def insert_subfield_record(self, field_row_id: int, code: str, data: str) -> int:
        """Insert a subfield row and return its identifier (<= 0 on failure)."""
        ...
