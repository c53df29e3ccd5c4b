"""Record-type classification from MARC control fields."""

import math
import re

from marcimport.errors import ModDateError
from marcimport.models import (
    CONTROL_NUMBER_TAG,
    LAST_CHANGE_TAG,
    ORIGIN_IDENTIFIER_TAG,
    ClassifiedRecord,
    RawRecord,
    RecordKeys,
    RecordType,
)

__all__ = [
    "ORIGIN_KEY_PATTERN",
    "classify_record",
    "derive_record_keys",
    "is_origin_catalog_key",
    "parse_mod_date",
    "resolve_record_type",
]

# Originating catalog numbering series: one letter followed by digits
ORIGIN_KEY_PATTERN = re.compile(r"[SNRWT][0-9]+")

# Plain ASCII decimal number, optionally signed, with fraction and exponent
_MOD_DATE_PATTERN = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")


def parse_mod_date(last_change_raw: str) -> float:
    """Parse a 005 last-change value into a number.

    Parameters
    ----------
    last_change_raw : str
        Raw 005 value (``yyyymmddhhmmss.f``), possibly blank.

    Returns
    -------
    float
        Parsed value, 0.0 for a blank value.

    Raises
    ------
    ModDateError
        If the value is neither blank nor a finite ASCII decimal number.
    """
    stripped = last_change_raw.strip()
    if not stripped:
        return 0.0

    if _MOD_DATE_PATTERN.fullmatch(stripped) is None:
        raise ModDateError(last_change_raw)

    value = float(stripped)
    # An exponent can still overflow to inf
    if not math.isfinite(value):
        raise ModDateError(last_change_raw)

    return value


def is_origin_catalog_key(natural_key: str) -> bool:
    """Check whether a natural key follows the originating catalog's numbering."""
    return ORIGIN_KEY_PATTERN.fullmatch(natural_key) is not None


def resolve_record_type(natural_key: str, has_origin_identifier: bool) -> RecordType:
    """Resolve the logical record type.

    Parameters
    ----------
    natural_key : str
        Value of control field 001.
    has_origin_identifier : bool
        Whether control field 003 is present.

    Returns
    -------
    RecordType
        BIBLIOGRAPHIC or HOLDING for originating-catalog keys, else UNMATCHED.
    """
    if not is_origin_catalog_key(natural_key):
        return RecordType.UNMATCHED
    if has_origin_identifier:
        return RecordType.BIBLIOGRAPHIC
    return RecordType.HOLDING


def _scan_control_fields(raw: RawRecord) -> tuple[str, bool, str]:
    natural_key = ""
    has_origin_identifier = False
    last_change_raw = ""

    for field in raw.control_fields:
        if field.tag == CONTROL_NUMBER_TAG:
            natural_key = field.data
        elif field.tag == ORIGIN_IDENTIFIER_TAG:
            has_origin_identifier = True
        elif field.tag == LAST_CHANGE_TAG:
            last_change_raw = field.data

    return natural_key, has_origin_identifier, last_change_raw


def derive_record_keys(raw: RawRecord) -> RecordKeys:
    """Derive the natural key and modification date without classifying.

    Raises
    ------
    ModDateError
        If the 005 value is malformed.
    """
    natural_key, _, last_change_raw = _scan_control_fields(raw)
    return RecordKeys(
        natural_key=natural_key,
        last_change_raw=last_change_raw,
        mod_date=parse_mod_date(last_change_raw),
    )


def classify_record(raw: RawRecord) -> ClassifiedRecord:
    """Classify a raw record from a single pass over its control fields.

    Parameters
    ----------
    raw : RawRecord
        Parsed record.

    Returns
    -------
    ClassifiedRecord
        Natural key, origin-identifier presence, modification date and type.

    Raises
    ------
    ModDateError
        If the 005 value is malformed.

    Examples
    --------
        >>> raw = RawRecord(control_fields=(ControlField("001", "S1000"),))
        >>> classify_record(raw).record_type
        <RecordType.HOLDING: 'holding'>
    """
    natural_key, has_origin_identifier, last_change_raw = _scan_control_fields(raw)

    return ClassifiedRecord(
        natural_key=natural_key,
        has_origin_identifier=has_origin_identifier,
        last_change_raw=last_change_raw,
        mod_date=parse_mod_date(last_change_raw),
        record_type=resolve_record_type(natural_key, has_origin_identifier),
    )
