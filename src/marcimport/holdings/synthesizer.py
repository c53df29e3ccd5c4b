"""Synthesis of holding records from 852 markers of a bibliographic record.

Each marker yields one stored record that reuses the parent's control and
data fields verbatim, keyed by the parent's 001/005 but resolved under the
marker value as institution code and always typed UNMATCHED.
"""

from collections.abc import Sequence

from marcimport.audit.logger import AuditLogger
from marcimport.classify.classifier import derive_record_keys
from marcimport.decision.gate import open_record
from marcimport.decision.resolver import DuplicateResolver
from marcimport.decompose.decomposer import FieldDecomposition, decompose_fields
from marcimport.models import HoldingMarker, RawRecord, RecordType, StoredRecordRef
from marcimport.storage.base import RecordStore

__all__ = ["SYNTHETIC_RECORD_TYPE", "synthesize_holdings"]

SYNTHETIC_RECORD_TYPE = RecordType.UNMATCHED


def synthesize_holdings(
    parent: RawRecord,
    markers: Sequence[HoldingMarker],
    file_id: int,
    *,
    store: RecordStore,
    resolver: DuplicateResolver,
    logger: AuditLogger | None = None,
    decompositions: list[FieldDecomposition] | None = None,
) -> list[StoredRecordRef]:
    """Store one derived holding record per marker.

    Parameters
    ----------
    parent : RawRecord
        Bibliographic record the markers were collected from.
    markers : Sequence[HoldingMarker]
        Markers in collection order.
    file_id : int
        Identifier of the source file.
    store : RecordStore
        Row writer.
    resolver : DuplicateResolver
        Duplicate lookup; each marker is resolved independently.
    logger : AuditLogger | None, optional
        Audit logger. If None, no logging.
    decompositions : list[FieldDecomposition] | None, optional
        If given, the decomposition of every stored holding is appended.

    Returns
    -------
    list[StoredRecordRef]
        References of the holding records written (skipped markers are
        absent).

    Raises
    ------
    ModDateError
        If the parent's 005 value is malformed.
    """
    if not markers:
        return []

    keys = derive_record_keys(parent)
    stored: list[StoredRecordRef] = []

    for marker in markers:
        if logger:
            logger.event(
                "holding_synthesis_started",
                data={"institution_code": marker.value, "marker_source": str(marker.source)},
                level="DEBUG",
                rid=keys.natural_key or None,
            )

        gate = open_record(
            institution_code=marker.value,
            natural_key=keys.natural_key,
            mod_date=keys.mod_date,
            record_type=SYNTHETIC_RECORD_TYPE,
            file_id=file_id,
            store=store,
            resolver=resolver,
            logger=logger,
        )
        ref = gate.record
        if ref is None:
            continue

        decomposition = decompose_fields(
            parent,
            ref.record_id,
            institution_code=marker.value,
            has_origin_identifier=False,
            store=store,
            collect_holdings=False,
            logger=logger,
            rid=keys.natural_key,
        )
        if decompositions is not None:
            decompositions.append(decomposition)

        if logger:
            logger.event(
                "holding_synthesized",
                data={
                    "record_id": ref.record_id,
                    "institution_code": marker.value,
                    "action": ref.action,
                },
                rid=keys.natural_key,
            )
        stored.append(ref)

    return stored
