"""Shared data types for marcimport.

This package contains the record shapes consumed across the importer.

Domain-specific types live closer to their consumers:
- Duplicate decisions → marcimport.decision.models
- Audit events → marcimport.audit.models
"""

from marcimport.models.records import (
    BLANK_INDICATOR,
    CONTROL_NUMBER_TAG,
    HOLDINGS_TAG,
    LAST_CHANGE_TAG,
    ORIGIN_IDENTIFIER_TAG,
    ClassifiedRecord,
    ControlField,
    DataField,
    FieldKind,
    FieldRow,
    HoldingMarker,
    MarkerSource,
    RawRecord,
    RecordKeys,
    RecordType,
    StoredRecordRef,
    Subfield,
    SubfieldRow,
)

__all__ = [
    # Tags
    "CONTROL_NUMBER_TAG",
    "ORIGIN_IDENTIFIER_TAG",
    "LAST_CHANGE_TAG",
    "HOLDINGS_TAG",
    "BLANK_INDICATOR",
    # Enums
    "RecordType",
    "FieldKind",
    "MarkerSource",
    # Raw record
    "RawRecord",
    "ControlField",
    "DataField",
    "Subfield",
    # Derived
    "RecordKeys",
    "ClassifiedRecord",
    "FieldRow",
    "SubfieldRow",
    "HoldingMarker",
    "StoredRecordRef",
]
