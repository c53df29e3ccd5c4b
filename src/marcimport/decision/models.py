"""Data models for the duplicate-resolution contract.

A resolver answers one question per record: skip it, insert it as a new
record, or rewrite the rows of an existing record.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class DecisionAction(StrEnum):
    """Three-way duplicate-resolution outcomes.

    Attributes
    ----------
    SKIP : str
        An equal-or-newer record already exists; nothing is written.
    INSERT : str
        No existing record; the store assigns a new identifier.
    UPDATE_EXISTING : str
        An older record exists; its rows are rewritten under its identifier.
    """

    SKIP = "skip"
    INSERT = "insert"
    UPDATE_EXISTING = "update_existing"


@dataclass(frozen=True)
class DuplicateDecision:
    """Decision returned by a duplicate resolver.

    Attributes
    ----------
    action : DecisionAction
        Outcome of the lookup.
    record_id : int | None
        Existing record identifier, set only for UPDATE_EXISTING.
    """

    action: DecisionAction
    record_id: int | None = None

    def __post_init__(self) -> None:
        """Validate that only UPDATE_EXISTING carries a positive identifier."""
        if self.action is DecisionAction.UPDATE_EXISTING:
            if self.record_id is None or self.record_id <= 0:
                raise ValueError(
                    f"update_existing requires a positive record_id, got {self.record_id}"
                )
        elif self.record_id is not None:
            raise ValueError(f"{self.action} decision cannot carry a record_id")

    @classmethod
    def skip(cls) -> "DuplicateDecision":
        """Build a SKIP decision."""
        return cls(DecisionAction.SKIP)

    @classmethod
    def insert(cls) -> "DuplicateDecision":
        """Build an INSERT decision."""
        return cls(DecisionAction.INSERT)

    @classmethod
    def update_existing(cls, record_id: int) -> "DuplicateDecision":
        """Build an UPDATE_EXISTING decision for ``record_id``."""
        return cls(DecisionAction.UPDATE_EXISTING, record_id)

    @classmethod
    def from_code(cls, code: int) -> "DuplicateDecision":
        """Convert an integer lookup result.

        Parameters
        ----------
        code : int
            Negative for skip, zero for insert, positive existing record id.

        Returns
        -------
        DuplicateDecision
            Equivalent decision.
        """
        if code < 0:
            return cls.skip()
        if code == 0:
            return cls.insert()
        return cls.update_existing(code)

    @property
    def is_skip(self) -> bool:
        """Whether the record must not be written."""
        return self.action is DecisionAction.SKIP

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"action": str(self.action), "record_id": self.record_id}
