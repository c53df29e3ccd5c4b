"""Unit tests for the SQLite record store."""

from pathlib import Path

import pytest

from marcimport.models import FieldKind, FieldRow, RecordType, SubfieldRow
from marcimport.storage import SqliteRecordStore, StoredRecord


@pytest.fixture
def store() -> SqliteRecordStore:
    """In-memory SQLite store closed after the test."""
    st = SqliteRecordStore()
    yield st
    st.close()


@pytest.mark.unit
def test_insert_rows_round_trip(store: SqliteRecordStore) -> None:
    """Test record, field and subfield rows are readable in insertion order."""
    record_id = store.insert_record_record(
        2, RecordType.HOLDING, "N42", 20200101.0, institution_code="estc"
    )
    control_id = store.insert_field_record(record_id, "001", "N42", FieldKind.CONTROL)
    data_id = store.insert_field_record(record_id, "245", "245 10$aT$bU", FieldKind.DATA)
    store.insert_subfield_record(data_id, "a", "T")
    store.insert_subfield_record(data_id, "b", "U")

    assert record_id > 0
    assert store.records() == [
        {
            "id": record_id,
            "file_id": 2,
            "record_type": RecordType.HOLDING,
            "natural_key": "N42",
            "mod_date": 20200101.0,
            "institution_code": "estc",
        }
    ]
    assert store.fields_for_record(record_id) == [
        (control_id, FieldRow(record_id, "001", "N42", FieldKind.CONTROL)),
        (data_id, FieldRow(record_id, "245", "245 10$aT$bU", FieldKind.DATA)),
    ]
    assert store.subfields_for_field(data_id) == [
        SubfieldRow(data_id, "a", "T"),
        SubfieldRow(data_id, "b", "U"),
    ]


@pytest.mark.unit
def test_record_type_stored_as_code(store: SqliteRecordStore) -> None:
    """Test record types cross the storage boundary as integer codes."""
    store.insert_record_record(1, RecordType.UNMATCHED, "ocm1", 0.0)

    raw_type = store._conn.execute("SELECT type FROM record").fetchone()[0]

    assert raw_type == 3


@pytest.mark.unit
def test_orphan_subfield_is_rejected(store: SqliteRecordStore) -> None:
    """Test a subfield of a missing field fails and records the error."""
    assert store.insert_subfield_record(0, "a", "x") == 0
    assert store.last_error is not None
    assert "IntegrityError" in store.last_error


@pytest.mark.unit
def test_last_error_cleared_on_success(store: SqliteRecordStore) -> None:
    """Test a successful write clears the previous error."""
    store.insert_field_record(999, "245", "x", FieldKind.DATA)
    assert store.last_error is not None

    store.insert_record_record(1, RecordType.UNMATCHED, "ocm1", 0.0)

    assert store.last_error is None


@pytest.mark.unit
def test_find_record_prefers_latest(store: SqliteRecordStore) -> None:
    """Test the newest matching record wins a lookup."""
    store.insert_record_record(1, RecordType.UNMATCHED, "ocm1", 5.0, institution_code="a")
    newest = store.insert_record_record(1, RecordType.UNMATCHED, "ocm1", 9.0, institution_code="a")
    store.insert_record_record(1, RecordType.UNMATCHED, "ocm1", 99.0, institution_code="b")

    assert store.find_record("a", "ocm1", RecordType.UNMATCHED) == StoredRecord(newest, 9.0)
    assert store.find_record("a", "ocm1", RecordType.HOLDING) is None


@pytest.mark.unit
def test_clear_record_fields_cascades(store: SqliteRecordStore) -> None:
    """Test clearing fields also removes their subfields."""
    record_id = store.insert_record_record(1, RecordType.UNMATCHED, "ocm1", 0.0)
    field_id = store.insert_field_record(record_id, "245", "x", FieldKind.DATA)
    store.insert_subfield_record(field_id, "a", "x")

    assert store.clear_record_fields(record_id) == 1
    assert store.fields_for_record(record_id) == []
    assert store.subfields_for_field(field_id) == []


@pytest.mark.unit
def test_insert_file_record(tmp_path: Path) -> None:
    """Test files are registered with their modification time."""
    marc = tmp_path / "in.mrc"
    marc.write_bytes(b"")
    db_path = tmp_path / "nested" / "work.sqlite3"

    with SqliteRecordStore(db_path) as store:
        file_id = store.insert_file_record(marc, "estc")
        row = store._conn.execute("SELECT * FROM file WHERE id = ?", (file_id,)).fetchone()

    assert db_path.exists()
    assert file_id == 1
    assert row["path"] == str(marc)
    assert row["institution_code"] == "estc"
    assert row["file_mtime"].endswith("Z")
