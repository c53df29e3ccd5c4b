"""Duplicate-resolution gate shared by parent and synthesized holding records."""

from dataclasses import dataclass
from enum import StrEnum

from marcimport.audit.logger import AuditLogger
from marcimport.audit.models import SEVERITY_ERROR, SEVERITY_INFO
from marcimport.decision.models import DecisionAction
from marcimport.decision.resolver import DuplicateResolver
from marcimport.models import RecordType, StoredRecordRef
from marcimport.storage.base import RecordStore

__all__ = ["GateOutcome", "GateStatus", "open_record"]


class GateStatus(StrEnum):
    """Result of passing a record through the gate."""

    INSERTED = "inserted"
    UPDATED = "updated"
    SKIPPED = "skipped"
    MISSING_KEY = "missing_key"
    INSERT_FAILED = "insert_failed"


@dataclass(frozen=True)
class GateOutcome:
    """Gate status plus the record to write rows under, when there is one.

    Attributes
    ----------
    status : GateStatus
        What the gate did.
    record : StoredRecordRef | None
        Set for INSERTED and UPDATED only.
    """

    status: GateStatus
    record: StoredRecordRef | None = None

    @property
    def writable(self) -> bool:
        """Whether rows should be written for the record."""
        return self.record is not None


def open_record(
    *,
    institution_code: str,
    natural_key: str,
    mod_date: float,
    record_type: RecordType,
    file_id: int,
    store: RecordStore,
    resolver: DuplicateResolver,
    logger: AuditLogger | None = None,
) -> GateOutcome:
    """Resolve a record against stored ones and obtain the id to write under.

    Parameters
    ----------
    institution_code : str
        Institution the record is resolved for.
    natural_key : str
        Control number (001).
    mod_date : float
        Modification date (005).
    record_type : RecordType
        Type the record is stored under.
    file_id : int
        Identifier of the source file.
    store : RecordStore
        Store that mints identifiers for new records.
    resolver : DuplicateResolver
        Duplicate lookup; never called for a record without natural key.
    logger : AuditLogger | None, optional
        Audit logger. If None, no logging.

    Returns
    -------
    GateOutcome
        Status and, for inserted or updated records, the reference to write
        rows under.
    """
    if not natural_key.strip():
        if logger:
            logger.log(
                SEVERITY_ERROR,
                "Unable to process record due to missing or blank control field [001]",
                event_type="missing_control_key",
                data={"institution_code": institution_code},
            )
        return GateOutcome(GateStatus.MISSING_KEY)

    decision = resolver.resolve(institution_code, natural_key, mod_date, record_type)

    if decision.action is DecisionAction.SKIP:
        if logger:
            logger.log(
                SEVERITY_INFO,
                f"Skipping duplicate {record_type} record with control "
                f"{natural_key} and modification datetimestamp {mod_date}",
                event_type="duplicate_skipped",
                data={
                    "record_type": str(record_type),
                    "mod_date": mod_date,
                    "institution_code": institution_code,
                },
                rid=natural_key,
            )
        return GateOutcome(GateStatus.SKIPPED)

    if decision.action is DecisionAction.UPDATE_EXISTING and decision.record_id is not None:
        if logger:
            logger.event(
                "record_updated",
                data={"record_id": decision.record_id, "record_type": str(record_type)},
                rid=natural_key,
            )
        return GateOutcome(
            GateStatus.UPDATED,
            StoredRecordRef(
                record_id=decision.record_id,
                natural_key=natural_key,
                record_type=record_type,
                institution_code=institution_code,
                action=GateStatus.UPDATED.value,
            ),
        )

    record_id = store.insert_record_record(
        file_id,
        record_type,
        natural_key,
        mod_date,
        institution_code=institution_code,
    )
    if record_id <= 0:
        if logger:
            logger.event(
                "record_insert_failed",
                data={
                    "record_type": str(record_type),
                    "institution_code": institution_code,
                    "reason": getattr(store, "last_error", None),
                },
                level="ERROR",
                rid=natural_key,
            )
        return GateOutcome(GateStatus.INSERT_FAILED)

    if logger:
        logger.event(
            "record_inserted",
            data={"record_id": record_id, "record_type": str(record_type), "mod_date": mod_date},
            rid=natural_key,
        )
    return GateOutcome(
        GateStatus.INSERTED,
        StoredRecordRef(
            record_id=record_id,
            natural_key=natural_key,
            record_type=record_type,
            institution_code=institution_code,
            action=GateStatus.INSERTED.value,
        ),
    )
