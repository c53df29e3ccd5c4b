"""Record data models for marcimport.

This module defines the in-memory shapes a MARC record passes through while
it is classified, resolved against stored records and decomposed into rows.
Integer codes exist only at the storage boundary (``RecordType.code``,
``FieldKind.code``).
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

CONTROL_NUMBER_TAG = "001"
ORIGIN_IDENTIFIER_TAG = "003"
LAST_CHANGE_TAG = "005"
HOLDINGS_TAG = "852"
BLANK_INDICATOR = " "


class RecordType(StrEnum):
    """Logical record type derived from control fields.

    Attributes
    ----------
    BIBLIOGRAPHIC : str
        Originating-catalog record carrying an origin identifier (003).
    HOLDING : str
        Originating-catalog record without an origin identifier.
    UNMATCHED : str
        Record whose key does not follow the originating catalog's numbering,
        and every programmatically synthesized holding record.
    """

    BIBLIOGRAPHIC = "bibliographic"
    HOLDING = "holding"
    UNMATCHED = "unmatched"

    @property
    def code(self) -> int:
        """Integer code persisted in the ``record.type`` column."""
        return _RECORD_TYPE_CODES[self]

    @classmethod
    def from_code(cls, code: int) -> "RecordType":
        """Look up a record type by its storage code.

        Raises
        ------
        ValueError
            If ``code`` is not a known storage code.
        """
        for record_type, value in _RECORD_TYPE_CODES.items():
            if value == code:
                return record_type
        raise ValueError(f"Unknown record type code: {code}")


_RECORD_TYPE_CODES: dict[RecordType, int] = {
    RecordType.BIBLIOGRAPHIC: 1,
    RecordType.HOLDING: 2,
    RecordType.UNMATCHED: 3,
}


class FieldKind(StrEnum):
    """Kind of a stored field row."""

    CONTROL = "control"
    DATA = "data"

    @property
    def code(self) -> int:
        """Integer code persisted in the ``field.kind`` column."""
        return 1 if self is FieldKind.CONTROL else 2


class MarkerSource(StrEnum):
    """Where a holding marker value was taken from."""

    SUBFIELD_A = "subfield_a"
    FIELD_TEXT = "field_text"


@dataclass(frozen=True)
class ControlField:
    """Control field (001-009): a tag and unstructured data.

    Attributes
    ----------
    tag : str
        Three-character field tag.
    data : str
        Raw field data.
    """

    tag: str
    data: str


@dataclass(frozen=True)
class Subfield:
    """Coded subfield of a data field.

    Attributes
    ----------
    code : str
        Single-character subfield code.
    data : str
        Subfield value.
    """

    code: str
    data: str


@dataclass(frozen=True)
class DataField:
    """Variable data field with indicators and ordered subfields.

    Attributes
    ----------
    tag : str
        Three-character field tag.
    subfields : tuple[Subfield, ...]
        Subfields in source order.
    indicator1 : str
        First indicator, blank when absent.
    indicator2 : str
        Second indicator, blank when absent.
    """

    tag: str
    subfields: tuple[Subfield, ...] = ()
    indicator1: str = BLANK_INDICATOR
    indicator2: str = BLANK_INDICATOR

    def get_subfields(self, code: str) -> list[str]:
        """Return the values of every subfield with ``code``, in order."""
        return [sf.data for sf in self.subfields if sf.code == code]


@dataclass(frozen=True)
class RawRecord:
    """A parsed MARC record as handed over by the reader.

    Attributes
    ----------
    control_fields : tuple[ControlField, ...]
        Control fields in source order.
    data_fields : tuple[DataField, ...]
        Data fields in source order.
    """

    control_fields: tuple[ControlField, ...] = ()
    data_fields: tuple[DataField, ...] = ()


@dataclass(frozen=True)
class RecordKeys:
    """Natural key and modification date derived from control fields."""

    natural_key: str
    last_change_raw: str
    mod_date: float


@dataclass(frozen=True)
class ClassifiedRecord:
    """Classification of a raw record, derived once and never mutated.

    Attributes
    ----------
    natural_key : str
        Value of control field 001, empty when absent.
    has_origin_identifier : bool
        Whether control field 003 is present.
    last_change_raw : str
        Value of control field 005, empty when absent.
    mod_date : float
        ``last_change_raw`` as a number, 0.0 when blank.
    record_type : RecordType
        Resolved logical type.
    """

    natural_key: str
    has_origin_identifier: bool
    last_change_raw: str
    mod_date: float
    record_type: RecordType

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "natural_key": self.natural_key,
            "has_origin_identifier": self.has_origin_identifier,
            "last_change_raw": self.last_change_raw,
            "mod_date": self.mod_date,
            "record_type": str(self.record_type),
        }


@dataclass(frozen=True)
class FieldRow:
    """A field row as written to storage."""

    record_id: int
    tag: str
    data: str
    kind: FieldKind


@dataclass(frozen=True)
class SubfieldRow:
    """A subfield row as written to storage."""

    field_row_id: int
    code: str
    data: str


@dataclass(frozen=True)
class HoldingMarker:
    """Location value taken from an 852 field of an originating-catalog record.

    Attributes
    ----------
    value : str
        Value used as the institution code of the synthesized holding record.
    source : MarkerSource
        Whether the value is an ``$a`` subfield or the rendered field text.
    """

    value: str
    source: MarkerSource


@dataclass(frozen=True)
class StoredRecordRef:
    """Reference to a record row written during a load.

    Attributes
    ----------
    record_id : int
        Identifier assigned by the store.
    natural_key : str
        Natural key (001) of the record.
    record_type : RecordType
        Type the record was stored under.
    institution_code : str
        Institution code the record was resolved against.
    action : str
        ``"inserted"`` or ``"updated"``.
    """

    record_id: int
    natural_key: str
    record_type: RecordType
    institution_code: str
    action: str
