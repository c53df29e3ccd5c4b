"""Duplicate resolvers.

The loader only branches on the :class:`DuplicateDecision` a resolver
returns; how a resolver compares records is its own business.
"""

from collections.abc import Callable
from typing import Protocol

from marcimport.decision.models import DuplicateDecision
from marcimport.models import RecordType
from marcimport.storage.sqlite_store import SqliteRecordStore

__all__ = [
    "DuplicateResolver",
    "IntegerCodeResolver",
    "StoreDuplicateResolver",
]


class DuplicateResolver(Protocol):
    """Decides whether a record is new, newer than a stored copy, or stale."""

    def resolve(
        self,
        institution_code: str,
        natural_key: str,
        mod_date: float,
        record_type: RecordType,
    ) -> DuplicateDecision:
        """Return the decision for one record."""
        ...


class IntegerCodeResolver:
    """Adapter for lookups that answer with an integer code.

    Parameters
    ----------
    check : Callable[[str, str, float, int], int]
        Called as ``check(institution_code, natural_key, mod_date, type_code)``;
        returns <0 (skip), 0 (insert) or an existing record id.
    """

    def __init__(self, check: Callable[[str, str, float, int], int]) -> None:
        self._check = check

    def resolve(
        self,
        institution_code: str,
        natural_key: str,
        mod_date: float,
        record_type: RecordType,
    ) -> DuplicateDecision:
        """Call the wrapped check and convert its result."""
        code = self._check(institution_code, natural_key, mod_date, record_type.code)
        return DuplicateDecision.from_code(code)


class StoreDuplicateResolver:
    """Resolver backed by the SQLite record store.

    A record matches a stored one when institution code, natural key and
    type are equal. A stored copy with an equal or newer modification date
    wins; an older copy is emptied of its field rows and restamped so the
    loader can rewrite it under the same identifier.

    Attributes
    ----------
    store : SqliteRecordStore
        Store to look up and prepare records in.
    file_id : int
        File identifier stamped on records that get rewritten.
    """

    def __init__(self, store: SqliteRecordStore, file_id: int = 0) -> None:
        self.store = store
        self.file_id = file_id

    def resolve(
        self,
        institution_code: str,
        natural_key: str,
        mod_date: float,
        record_type: RecordType,
    ) -> DuplicateDecision:
        """Look up the record and decide.

        Parameters
        ----------
        institution_code : str
            Institution the record is loaded for.
        natural_key : str
            Control number (001).
        mod_date : float
            Modification date of the incoming record.
        record_type : RecordType
            Classified type of the incoming record.

        Returns
        -------
        DuplicateDecision
            SKIP, INSERT or UPDATE_EXISTING.
        """
        existing = self.store.find_record(institution_code, natural_key, record_type)
        if existing is None:
            return DuplicateDecision.insert()

        if existing.mod_date >= mod_date:
            return DuplicateDecision.skip()

        self.store.clear_record_fields(existing.record_id)
        self.store.update_record_mod_date(existing.record_id, mod_date, self.file_id)
        return DuplicateDecision.update_existing(existing.record_id)
