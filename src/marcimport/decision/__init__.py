"""Duplicate resolution: decision contract and resolvers.

Main Components
---------------
- DuplicateDecision: skip / insert / update-existing outcome
- DuplicateResolver: protocol the loader consumes
- StoreDuplicateResolver: lookup against the SQLite store
- IntegerCodeResolver: adapter for integer-returning checks
- open_record: gate turning a decision into the record id to write under
"""

from marcimport.decision.gate import GateOutcome, GateStatus, open_record
from marcimport.decision.models import DecisionAction, DuplicateDecision
from marcimport.decision.resolver import (
    DuplicateResolver,
    IntegerCodeResolver,
    StoreDuplicateResolver,
)

__all__ = [
    "DecisionAction",
    "DuplicateDecision",
    "DuplicateResolver",
    "GateOutcome",
    "GateStatus",
    "IntegerCodeResolver",
    "StoreDuplicateResolver",
    "open_record",
]
