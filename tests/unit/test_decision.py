"""Unit tests for duplicate decisions, resolvers and the record gate."""

import json
from pathlib import Path
from typing import Any

import pytest

from marcimport.audit import AuditLogger
from marcimport.decision import (
    DecisionAction,
    DuplicateDecision,
    GateStatus,
    IntegerCodeResolver,
    StoreDuplicateResolver,
    open_record,
)
from marcimport.models import FieldKind, RecordType
from marcimport.storage import SqliteRecordStore


def _read_events(path: Path) -> list[dict]:
    """Read all JSONL events from file."""
    with path.open() as f:
        return [json.loads(line) for line in f if line.strip()]


# ---------------------------------------------------------------------------
# DuplicateDecision
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("code", "action", "record_id"),
    [
        (-1, DecisionAction.SKIP, None),
        (-99, DecisionAction.SKIP, None),
        (0, DecisionAction.INSERT, None),
        (17, DecisionAction.UPDATE_EXISTING, 17),
    ],
)
def test_decision_from_code(code: int, action: DecisionAction, record_id: int | None) -> None:
    """Test the integer contract maps onto the three actions."""
    decision = DuplicateDecision.from_code(code)

    assert decision.action is action
    assert decision.record_id == record_id
    assert decision.is_skip is (action is DecisionAction.SKIP)


@pytest.mark.unit
def test_decision_update_requires_positive_id() -> None:
    """Test UPDATE_EXISTING without a positive id is rejected."""
    with pytest.raises(ValueError, match="positive record_id"):
        DuplicateDecision(DecisionAction.UPDATE_EXISTING, 0)
    with pytest.raises(ValueError, match="positive record_id"):
        DuplicateDecision(DecisionAction.UPDATE_EXISTING)


@pytest.mark.unit
def test_decision_skip_cannot_carry_id() -> None:
    """Test only UPDATE_EXISTING carries an id."""
    with pytest.raises(ValueError, match="cannot carry"):
        DuplicateDecision(DecisionAction.SKIP, 5)


@pytest.mark.unit
def test_decision_to_dict() -> None:
    """Test to_dict serializes the action as its value."""
    assert DuplicateDecision.update_existing(3).to_dict() == {
        "action": "update_existing",
        "record_id": 3,
    }


# ---------------------------------------------------------------------------
# IntegerCodeResolver
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_integer_resolver_passes_type_code() -> None:
    """Test the wrapped check receives the storage code of the type."""
    calls: list[tuple[Any, ...]] = []

    def check(institution: str, key: str, moddate: float, record_type: int) -> int:
        calls.append((institution, key, moddate, record_type))
        return 12

    decision = IntegerCodeResolver(check).resolve("estc", "S1", 1.0, RecordType.UNMATCHED)

    assert calls == [("estc", "S1", 1.0, 3)]
    assert decision == DuplicateDecision.update_existing(12)


# ---------------------------------------------------------------------------
# StoreDuplicateResolver
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> SqliteRecordStore:
    """In-memory SQLite store closed after the test."""
    st = SqliteRecordStore()
    yield st
    st.close()


@pytest.mark.unit
def test_store_resolver_inserts_unknown(store: SqliteRecordStore) -> None:
    """Test an unknown record resolves to INSERT."""
    decision = StoreDuplicateResolver(store).resolve("estc", "S1", 1.0, RecordType.BIBLIOGRAPHIC)

    assert decision.action is DecisionAction.INSERT


@pytest.mark.unit
@pytest.mark.parametrize("incoming", [100.0, 50.0])
def test_store_resolver_skips_equal_or_older(store: SqliteRecordStore, incoming: float) -> None:
    """Test a stored copy with an equal or newer date wins."""
    store.insert_record_record(1, RecordType.BIBLIOGRAPHIC, "S1", 100.0, institution_code="estc")

    decision = StoreDuplicateResolver(store).resolve(
        "estc", "S1", incoming, RecordType.BIBLIOGRAPHIC
    )

    assert decision.is_skip


@pytest.mark.unit
def test_store_resolver_matches_institution_and_type(store: SqliteRecordStore) -> None:
    """Test records of another institution or type do not match."""
    store.insert_record_record(1, RecordType.BIBLIOGRAPHIC, "S1", 100.0, institution_code="estc")
    resolver = StoreDuplicateResolver(store)

    assert resolver.resolve("uk-BL", "S1", 1.0, RecordType.BIBLIOGRAPHIC).action is (
        DecisionAction.INSERT
    )
    assert resolver.resolve("estc", "S1", 1.0, RecordType.HOLDING).action is DecisionAction.INSERT


@pytest.mark.unit
def test_store_resolver_prepares_newer_update(store: SqliteRecordStore) -> None:
    """Test a newer incoming record clears the stored fields and restamps."""
    record_id = store.insert_record_record(
        1, RecordType.UNMATCHED, "ocm1", 100.0, institution_code="uk-BL"
    )
    field_id = store.insert_field_record(record_id, "245", "245 00$aOld", FieldKind.DATA)
    store.insert_subfield_record(field_id, "a", "Old")

    decision = StoreDuplicateResolver(store, file_id=9).resolve(
        "uk-BL", "ocm1", 200.0, RecordType.UNMATCHED
    )

    assert decision == DuplicateDecision.update_existing(record_id)
    assert store.fields_for_record(record_id) == []
    assert store.subfields_for_field(field_id) == []
    stored = store.records()[0]
    assert stored["mod_date"] == 200.0
    assert stored["file_id"] == 9


# ---------------------------------------------------------------------------
# open_record
# ---------------------------------------------------------------------------


def _open(store: Any, resolver: Any, key: str = "S1", **kwargs: Any):
    params: dict[str, Any] = {
        "institution_code": "estc",
        "natural_key": key,
        "mod_date": 20200101000000.0,
        "record_type": RecordType.BIBLIOGRAPHIC,
        "file_id": 1,
        "store": store,
        "resolver": resolver,
    }
    params.update(kwargs)
    return open_record(**params)


@pytest.mark.unit
def test_open_record_inserts(fake_store: Any, resolver: Any) -> None:
    """Test INSERT mints a new record with the classified attributes."""
    outcome = _open(fake_store, resolver)

    assert outcome.status is GateStatus.INSERTED
    assert outcome.writable
    assert outcome.record is not None
    assert outcome.record.action == "inserted"
    assert fake_store.records == [
        {
            "id": outcome.record.record_id,
            "file_id": 1,
            "record_type": RecordType.BIBLIOGRAPHIC,
            "natural_key": "S1",
            "mod_date": 20200101000000.0,
            "institution_code": "estc",
        }
    ]


@pytest.mark.unit
def test_open_record_update_reuses_id(fake_store: Any, make_resolver: Any) -> None:
    """Test UPDATE_EXISTING writes no new record row."""
    resolver = make_resolver({"estc": DuplicateDecision.update_existing(41)})

    outcome = _open(fake_store, resolver)

    assert outcome.status is GateStatus.UPDATED
    assert outcome.record is not None
    assert outcome.record.record_id == 41
    assert fake_store.records == []


@pytest.mark.unit
def test_open_record_skip_logs_message(
    fake_store: Any, make_resolver: Any, tmp_path: Path
) -> None:
    """Test SKIP writes nothing and logs the duplicate message."""
    resolver = make_resolver({"estc": DuplicateDecision.skip()})
    log_path = tmp_path / "events.jsonl"

    with AuditLogger("run", log_path) as logger:
        outcome = _open(fake_store, resolver, mod_date=5.0, logger=logger)

    assert outcome.status is GateStatus.SKIPPED
    assert not outcome.writable
    assert fake_store.writes == []
    event = _read_events(log_path)[0]
    assert event["event"] == "duplicate_skipped"
    assert event["level"] == "INFO"
    assert event["rid"] == "S1"
    assert event["data"]["record_type"] == "bibliographic"
    assert event["data"]["message"] == (
        "Skipping duplicate bibliographic record with control S1 "
        "and modification datetimestamp 5.0"
    )


@pytest.mark.unit
def test_open_record_missing_key_never_resolves(
    fake_store: Any, resolver: Any, tmp_path: Path
) -> None:
    """Test an empty key is rejected before the resolver is consulted."""
    log_path = tmp_path / "events.jsonl"

    with AuditLogger("run", log_path) as logger:
        outcome = _open(fake_store, resolver, key="", logger=logger)

    assert outcome.status is GateStatus.MISSING_KEY
    assert resolver.calls == []
    assert fake_store.writes == []
    event = _read_events(log_path)[0]
    assert event["level"] == "ERROR"
    assert event["event"] == "missing_control_key"
    assert event["data"] == {
        "institution_code": "estc",
        "message": "Unable to process record due to missing or blank control field [001]",
    }


@pytest.mark.unit
@pytest.mark.parametrize("key", ["   ", "\t", " \n "])
def test_open_record_blank_key_never_resolves(
    fake_store: Any, resolver: Any, key: str
) -> None:
    """Test a whitespace-only key is treated as missing."""
    outcome = _open(fake_store, resolver, key=key)

    assert outcome.status is GateStatus.MISSING_KEY
    assert resolver.calls == []
    assert fake_store.writes == []


@pytest.mark.unit
def test_open_record_insert_failure(make_store: Any, resolver: Any) -> None:
    """Test a rejected record insert reports INSERT_FAILED."""
    store = make_store(fail_record_keys=["S1"])

    outcome = _open(store, resolver)

    assert outcome.status is GateStatus.INSERT_FAILED
    assert outcome.record is None
