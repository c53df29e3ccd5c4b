"""MARC file loader.

Sequences, for every record read from a file:

    1. Classification (001/003/005 → key, type, modification date)
    2. Duplicate resolution (skip / insert / rewrite existing)
    3. Field decomposition (field and subfield rows, 852 markers)
    4. Holding synthesis (one derived record per marker)

Records are processed strictly one after another; a record is fully written,
holdings included, before the next one is read.
"""

from dataclasses import dataclass, field
from pathlib import Path

from pymarc.exceptions import PymarcException

from marcimport.audit.logger import AuditLogger
from marcimport.classify.classifier import classify_record
from marcimport.decision.gate import GateStatus, open_record
from marcimport.decision.resolver import DuplicateResolver
from marcimport.decompose.decomposer import FieldDecomposition, decompose_fields
from marcimport.engine.config import LoaderConfig, LoadResult
from marcimport.errors import ModDateError, UnreadableRecordError
from marcimport.holdings.synthesizer import synthesize_holdings
from marcimport.models import RawRecord, StoredRecordRef
from marcimport.parse.reader import iter_raw_records
from marcimport.storage.base import RecordStore

__all__ = ["RecordOutcome", "load_marc_file", "process_record"]


@dataclass
class RecordOutcome:
    """What happened to one record read from the input.

    Attributes
    ----------
    status : str
        "inserted", "updated", "skipped" or "rejected".
    record : StoredRecordRef | None
        Parent record written, if any.
    holdings : list[StoredRecordRef]
        Holding records synthesized from the parent's 852 markers.
    decompositions : list[FieldDecomposition]
        Row counters of the parent followed by those of each holding.
    """

    status: str
    record: StoredRecordRef | None = None
    holdings: list[StoredRecordRef] = field(default_factory=list)
    decompositions: list[FieldDecomposition] = field(default_factory=list)


def process_record(
    raw: RawRecord,
    *,
    institution_code: str,
    file_id: int,
    store: RecordStore,
    resolver: DuplicateResolver,
    config: LoaderConfig | None = None,
    logger: AuditLogger | None = None,
) -> RecordOutcome:
    """Classify, resolve, decompose and expand one record.

    Parameters
    ----------
    raw : RawRecord
        Record to load.
    institution_code : str
        MARC institution code of the organization that created the file.
    file_id : int
        Identifier of the source file.
    store : RecordStore
        Row writer.
    resolver : DuplicateResolver
        Duplicate lookup.
    config : LoaderConfig | None, optional
        Loader configuration. If None, uses defaults.
    logger : AuditLogger | None, optional
        Audit logger. If None, no logging.

    Returns
    -------
    RecordOutcome
        Outcome of the parent record and its synthesized holdings.

    Raises
    ------
    ModDateError
        If the record's 005 value is malformed.
    """
    if config is None:
        config = LoaderConfig()

    classified = classify_record(raw)
    rid = classified.natural_key or None

    if logger:
        logger.event(
            "record_classified",
            data={"record_type": str(classified.record_type), "mod_date": classified.mod_date},
            level="DEBUG",
            rid=rid,
        )

    gate = open_record(
        institution_code=institution_code,
        natural_key=classified.natural_key,
        mod_date=classified.mod_date,
        record_type=classified.record_type,
        file_id=file_id,
        store=store,
        resolver=resolver,
        logger=logger,
    )
    ref = gate.record
    if ref is None:
        status = "skipped" if gate.status is GateStatus.SKIPPED else "rejected"
        return RecordOutcome(status=status)

    decomposition = decompose_fields(
        raw,
        ref.record_id,
        institution_code=institution_code,
        has_origin_identifier=classified.has_origin_identifier,
        store=store,
        collect_holdings=True,
        origin_catalog_code=config.origin_catalog_code,
        marker_strategy=config.holding_marker_strategy,
        logger=logger,
        rid=classified.natural_key,
    )
    outcome = RecordOutcome(status=ref.action, record=ref, decompositions=[decomposition])

    outcome.holdings = synthesize_holdings(
        raw,
        decomposition.holding_markers,
        file_id,
        store=store,
        resolver=resolver,
        logger=logger,
        decompositions=outcome.decompositions,
    )
    return outcome


def load_marc_file(
    path: Path | str,
    institution_code: str,
    file_id: int,
    *,
    store: RecordStore,
    resolver: DuplicateResolver,
    config: LoaderConfig | None = None,
    logger: AuditLogger | None = None,
) -> LoadResult:
    """Load every record of a MARC file into the store.

    A file that cannot be opened fails the whole load; nothing is read from
    it. Per-record problems (missing 001, malformed 005, unreadable record)
    and per-row write failures are logged and counted, and loading carries on.

    Parameters
    ----------
    path : Path | str
        MARC file to load.
    institution_code : str
        MARC institution code of the organization that created the file.
    file_id : int
        Identifier of the file in the store.
    store : RecordStore
        Row writer.
    resolver : DuplicateResolver
        Duplicate lookup.
    config : LoaderConfig | None, optional
        Loader configuration. If None, uses defaults.
    logger : AuditLogger | None, optional
        Audit logger. If None, no logging.

    Returns
    -------
    LoadResult
        Counters for the file; ``success`` is False when the file could not
        be opened, or when a record could not be decoded with permissive
        reading switched off.

    Examples
    --------
        >>> from marcimport.decision import StoreDuplicateResolver
        >>> from marcimport.storage import SqliteRecordStore
        >>> store = SqliteRecordStore("work.sqlite3")
        >>> result = load_marc_file(
        ...     "estc.mrc", "estc", 1, store=store, resolver=StoreDuplicateResolver(store)
        ... )
    """
    path = Path(path)
    if config is None:
        config = LoaderConfig()

    result = LoadResult(success=True, path=str(path))

    if logger:
        logger.file_started(str(path), institution_code, file_id)

    try:
        handle = path.open("rb")
    except OSError as e:
        result.success = False
        result.error_message = f"Failed to load MARC file: {type(e).__name__}: {e}"
        if logger:
            logger.error(type(e).__name__, result.error_message, stage="load")
            logger.file_finished(str(path), "failed", result.counters())
        return result

    def _on_unreadable(index: int, exc: Exception | None, chunk: bytes | None) -> None:
        result.records_read += 1
        result.records_unreadable += 1
        if logger:
            logger.event(
                "unreadable_record",
                data={
                    "index": index,
                    "exception_class": type(exc).__name__ if exc else None,
                    "message": str(exc) if exc else None,
                },
                level="ERROR",
            )

    with handle:
        records = iter_raw_records(
            handle,
            permissive=config.permissive,
            force_utf8=config.force_utf8,
            on_error=_on_unreadable,
        )
        try:
            for raw in records:
                result.records_read += 1
                try:
                    outcome = process_record(
                        raw,
                        institution_code=institution_code,
                        file_id=file_id,
                        store=store,
                        resolver=resolver,
                        config=config,
                        logger=logger,
                    )
                except ModDateError as e:
                    result.records_rejected += 1
                    if logger:
                        logger.event(
                            "invalid_mod_date",
                            data={"exception_class": type(e).__name__, "message": str(e)},
                            level="ERROR",
                        )
                    continue

                _tally(result, outcome)
        except (UnreadableRecordError, PymarcException) as e:
            # Only reachable with permissive reading switched off
            result.success = False
            result.error_message = (
                f"Failed to read record {result.records_read + 1} of {path.name}: "
                f"{type(e).__name__}: {e}"
            )
            if logger:
                logger.error(type(e).__name__, result.error_message, stage="load")

    if logger:
        status = "success" if result.success else "failed"
        logger.file_finished(str(path), status, result.counters())

    return result


def _tally(result: LoadResult, outcome: RecordOutcome) -> None:
    if outcome.status == "inserted":
        result.records_inserted += 1
    elif outcome.status == "updated":
        result.records_updated += 1
    elif outcome.status == "skipped":
        result.records_skipped += 1
    else:
        result.records_rejected += 1

    if outcome.record is not None:
        result.stored.append(outcome.record.record_id)

    result.holdings_synthesized += len(outcome.holdings)
    result.stored.extend(ref.record_id for ref in outcome.holdings)

    for decomposition in outcome.decompositions:
        result.rows_written += decomposition.rows_written
        result.rows_failed += decomposition.rows_failed
