"""Decomposition of a record into field and subfield rows.

Control fields become one CONTROL row each. Every data field becomes one DATA
row carrying its rendered text plus one subfield row per subfield. While
walking 852 fields of an originating-catalog record, holding markers are
collected for the holding synthesizer.
"""

from dataclasses import dataclass, field
from enum import StrEnum

from marcimport.audit.logger import AuditLogger
from marcimport.models import (
    HOLDINGS_TAG,
    ORIGIN_IDENTIFIER_TAG,
    DataField,
    FieldKind,
    FieldRow,
    HoldingMarker,
    MarkerSource,
    RawRecord,
    SubfieldRow,
)
from marcimport.storage.base import RecordStore

__all__ = [
    "DEFAULT_ORIGIN_CATALOG_CODE",
    "FieldDecomposition",
    "HoldingMarkerStrategy",
    "decompose_fields",
    "extract_holding_markers",
    "render_data_field",
]

DEFAULT_ORIGIN_CATALOG_CODE = "estc"

_LOCATION_CODE = "a"


class HoldingMarkerStrategy(StrEnum):
    """Which parts of an 852 field become holding markers.

    Attributes
    ----------
    SUBFIELD_A : str
        One marker per ``$a`` (location) subfield.
    FIELD_TEXT : str
        One marker per 852 field, its rendered text.
    BOTH : str
        Both of the above, ``$a`` markers first.
    """

    SUBFIELD_A = "subfield_a"
    FIELD_TEXT = "field_text"
    BOTH = "both"


@dataclass
class FieldDecomposition:
    """Outcome of decomposing one record.

    Attributes
    ----------
    holding_markers : list[HoldingMarker]
        Markers collected from 852 fields, in encounter order.
    rows_written : int
        Field and subfield rows the store accepted.
    rows_failed : int
        Field and subfield rows the store rejected.
    """

    holding_markers: list[HoldingMarker] = field(default_factory=list)
    rows_written: int = 0
    rows_failed: int = 0


def render_data_field(data_field: DataField) -> str:
    """Render a data field as ``TAG I1I2$aVALUE$bVALUE``.

    Examples
    --------
        >>> render_data_field(DataField("852", (Subfield("a", "LIB"),), "1", " "))
        '852 1 $aLIB'
    """
    subfields = "".join(f"${sf.code}{sf.data}" for sf in data_field.subfields)
    return f"{data_field.tag} {data_field.indicator1}{data_field.indicator2}{subfields}"


def extract_holding_markers(
    data_field: DataField,
    strategy: HoldingMarkerStrategy = HoldingMarkerStrategy.BOTH,
) -> list[HoldingMarker]:
    """Collect holding markers from a single 852 field.

    Parameters
    ----------
    data_field : DataField
        Field to inspect; non-852 fields yield no markers.
    strategy : HoldingMarkerStrategy, optional
        Extraction strategy, by default BOTH.

    Returns
    -------
    list[HoldingMarker]
        Markers in encounter order.
    """
    if data_field.tag != HOLDINGS_TAG:
        return []

    markers: list[HoldingMarker] = []
    if strategy in (HoldingMarkerStrategy.SUBFIELD_A, HoldingMarkerStrategy.BOTH):
        markers.extend(
            HoldingMarker(value=value, source=MarkerSource.SUBFIELD_A)
            for value in data_field.get_subfields(_LOCATION_CODE)
        )
    if strategy in (HoldingMarkerStrategy.FIELD_TEXT, HoldingMarkerStrategy.BOTH):
        markers.append(
            HoldingMarker(value=render_data_field(data_field), source=MarkerSource.FIELD_TEXT)
        )
    return markers


def _write_field(
    store: RecordStore,
    row: FieldRow,
    result: FieldDecomposition,
    logger: AuditLogger | None,
    rid: str | None,
) -> int:
    field_id = store.insert_field_record(row.record_id, row.tag, row.data, row.kind)
    if field_id > 0:
        result.rows_written += 1
        if logger:
            logger.event(
                "field_saved",
                data={"record_id": row.record_id, "tag": row.tag, "field_id": field_id},
                level="DEBUG",
                rid=rid,
            )
    else:
        result.rows_failed += 1
        if logger:
            logger.event(
                "row_write_failed",
                data={
                    "table": "field",
                    "record_id": row.record_id,
                    "tag": row.tag,
                    "kind": str(row.kind),
                    "reason": getattr(store, "last_error", None),
                },
                level="ERROR",
                rid=rid,
            )
    return field_id


def _write_subfield(
    store: RecordStore,
    row: SubfieldRow,
    result: FieldDecomposition,
    logger: AuditLogger | None,
    rid: str | None,
) -> None:
    subfield_id = store.insert_subfield_record(row.field_row_id, row.code, row.data)
    if subfield_id > 0:
        result.rows_written += 1
        if logger:
            logger.event(
                "subfield_saved",
                data={"field_id": row.field_row_id, "code": row.code, "subfield_id": subfield_id},
                level="DEBUG",
                rid=rid,
            )
    else:
        result.rows_failed += 1
        if logger:
            logger.event(
                "row_write_failed",
                data={
                    "table": "subfield",
                    "field_id": row.field_row_id,
                    "code": row.code,
                    "reason": getattr(store, "last_error", None),
                },
                level="ERROR",
                rid=rid,
            )


def decompose_fields(
    raw: RawRecord,
    record_id: int,
    *,
    institution_code: str,
    has_origin_identifier: bool,
    store: RecordStore,
    collect_holdings: bool = True,
    origin_catalog_code: str = DEFAULT_ORIGIN_CATALOG_CODE,
    marker_strategy: HoldingMarkerStrategy = HoldingMarkerStrategy.BOTH,
    logger: AuditLogger | None = None,
    rid: str | None = None,
) -> FieldDecomposition:
    """Write every field and subfield of a record to the store.

    Each row write is independent: a rejected row is logged and counted and
    the remaining rows are still written.

    Parameters
    ----------
    raw : RawRecord
        Record to decompose.
    record_id : int
        Identifier of the stored record the rows belong to.
    institution_code : str
        Institution the record is loaded for; written as a synthesized 003
        when the record has none.
    has_origin_identifier : bool
        Whether the record already carries a 003 control field.
    store : RecordStore
        Row writer.
    collect_holdings : bool, optional
        Whether to collect 852 holding markers, by default True.
    origin_catalog_code : str, optional
        Institution code of the originating catalog; markers are only
        collected when ``institution_code`` equals it.
    marker_strategy : HoldingMarkerStrategy, optional
        Which parts of an 852 become markers, by default BOTH.
    logger : AuditLogger | None, optional
        Audit logger. If None, no logging.
    rid : str | None, optional
        Natural key used to tag log events.

    Returns
    -------
    FieldDecomposition
        Collected holding markers and row counters.
    """
    result = FieldDecomposition()

    for control in raw.control_fields:
        row = FieldRow(record_id, control.tag, control.data, FieldKind.CONTROL)
        _write_field(store, row, result, logger, rid)

    if not has_origin_identifier:
        row = FieldRow(record_id, ORIGIN_IDENTIFIER_TAG, institution_code, FieldKind.CONTROL)
        if _write_field(store, row, result, logger, rid) > 0 and logger:
            logger.event(
                "origin_identifier_added",
                data={"record_id": record_id, "institution_code": institution_code},
                level="DEBUG",
                rid=rid,
            )

    collecting = collect_holdings and institution_code == origin_catalog_code

    for data_field in raw.data_fields:
        row = FieldRow(record_id, data_field.tag, render_data_field(data_field), FieldKind.DATA)
        field_id = _write_field(store, row, result, logger, rid)

        # Subfields of a rejected field are still attempted; the store rejects them too
        for subfield in data_field.subfields:
            sub_row = SubfieldRow(field_id, subfield.code, subfield.data)
            _write_subfield(store, sub_row, result, logger, rid)

        if collecting:
            result.holding_markers.extend(extract_holding_markers(data_field, marker_strategy))

    return result
