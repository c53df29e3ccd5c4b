"""SQLite-backed record store.

Tables mirror the working database of the record importer: ``file`` (one row
per loaded file), ``record`` (one row per stored record), ``field`` (control
and data fields) and ``subfield``. Writes are autocommitted one statement at a
time so a failed row never rolls back rows already written for the record.
"""

import sqlite3
from pathlib import Path
from typing import Any

from marcimport.models import FieldKind, FieldRow, RecordType, SubfieldRow
from marcimport.storage.base import StoredRecord
from marcimport.utils import get_file_mtime, get_iso_timestamp

__all__ = ["SqliteRecordStore", "SCHEMA"]

SCHEMA = """
CREATE TABLE IF NOT EXISTS file (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    path TEXT NOT NULL,
    institution_code TEXT NOT NULL,
    file_mtime TEXT,
    loaded_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS record (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    file_id INTEGER NOT NULL,
    type INTEGER NOT NULL,
    control_key TEXT NOT NULL,
    moddate REAL NOT NULL,
    institution_code TEXT NOT NULL DEFAULT ''
);

CREATE INDEX IF NOT EXISTS idx_record_lookup
    ON record (institution_code, control_key, type);

CREATE TABLE IF NOT EXISTS field (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    record_id INTEGER NOT NULL REFERENCES record (id) ON DELETE CASCADE,
    tag TEXT NOT NULL,
    data TEXT NOT NULL,
    kind INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS subfield (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    field_id INTEGER NOT NULL REFERENCES field (id) ON DELETE CASCADE,
    code TEXT NOT NULL,
    data TEXT NOT NULL
);
"""


class SqliteRecordStore:
    """Record store over a SQLite database.

    Attributes
    ----------
    database_path : str
        Path of the database file, or ``":memory:"``.
    last_error : str | None
        Message of the most recent failed write, cleared on success.
    """

    def __init__(self, database_path: Path | str = ":memory:") -> None:
        """Open the database and create the schema if needed.

        Parameters
        ----------
        database_path : Path | str, optional
            Database file, by default an in-memory database.
        """
        self.database_path = str(database_path)
        if self.database_path != ":memory:":
            Path(self.database_path).parent.mkdir(parents=True, exist_ok=True)

        self._conn = sqlite3.connect(self.database_path, isolation_level=None)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._conn.executescript(SCHEMA)
        self.last_error: str | None = None

    def __enter__(self) -> "SqliteRecordStore":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and close the connection."""
        self.close()

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def _insert(self, sql: str, params: tuple[Any, ...]) -> int:
        try:
            cursor = self._conn.execute(sql, params)
        except sqlite3.Error as e:
            self.last_error = f"{type(e).__name__}: {e}"
            return 0
        self.last_error = None
        return cursor.lastrowid or 0

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert_file_record(self, path: Path, institution_code: str) -> int:
        """Register a loaded file and return its identifier."""
        return self._insert(
            "INSERT INTO file (path, institution_code, file_mtime, loaded_at) VALUES (?, ?, ?, ?)",
            (str(path), institution_code, get_file_mtime(path), get_iso_timestamp()),
        )

    def insert_record_record(
        self,
        file_id: int,
        record_type: RecordType,
        natural_key: str,
        mod_date: float,
        *,
        institution_code: str = "",
    ) -> int:
        """Insert a ``record`` row.

        Parameters
        ----------
        file_id : int
            Identifier of the file the record came from.
        record_type : RecordType
            Logical type, stored as its integer code.
        natural_key : str
            Control number (001).
        mod_date : float
            Modification date (005).
        institution_code : str, optional
            Institution the record was resolved against.

        Returns
        -------
        int
            New record identifier, 0 on failure.
        """
        return self._insert(
            "INSERT INTO record (file_id, type, control_key, moddate, institution_code) "
            "VALUES (?, ?, ?, ?, ?)",
            (file_id, record_type.code, natural_key, mod_date, institution_code),
        )

    def insert_field_record(self, record_id: int, tag: str, data: str, kind: FieldKind) -> int:
        """Insert a ``field`` row; returns its identifier, 0 on failure."""
        return self._insert(
            "INSERT INTO field (record_id, tag, data, kind) VALUES (?, ?, ?, ?)",
            (record_id, tag, data, kind.code),
        )

    def insert_subfield_record(self, field_row_id: int, code: str, data: str) -> int:
        """Insert a ``subfield`` row; returns its identifier, 0 on failure."""
        return self._insert(
            "INSERT INTO subfield (field_id, code, data) VALUES (?, ?, ?)",
            (field_row_id, code, data),
        )

    def clear_record_fields(self, record_id: int) -> int:
        """Delete every field row (and, by cascade, subfield row) of a record.

        Returns
        -------
        int
            Number of field rows deleted.
        """
        cursor = self._conn.execute("DELETE FROM field WHERE record_id = ?", (record_id,))
        return cursor.rowcount

    def update_record_mod_date(self, record_id: int, mod_date: float, file_id: int) -> None:
        """Stamp an existing record with a newer modification date and file."""
        self._conn.execute(
            "UPDATE record SET moddate = ?, file_id = ? WHERE id = ?",
            (mod_date, file_id, record_id),
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_record(
        self,
        institution_code: str,
        natural_key: str,
        record_type: RecordType,
    ) -> StoredRecord | None:
        """Find the stored record matching institution, key and type.

        When several rows match, the one with the latest modification date
        wins.
        """
        row = self._conn.execute(
            "SELECT id, moddate FROM record "
            "WHERE institution_code = ? AND control_key = ? AND type = ? "
            "ORDER BY moddate DESC, id DESC LIMIT 1",
            (institution_code, natural_key, record_type.code),
        ).fetchone()
        if row is None:
            return None
        return StoredRecord(record_id=row["id"], mod_date=row["moddate"])

    def records(self) -> list[dict[str, Any]]:
        """Return every record row as a dictionary, ordered by identifier."""
        rows = self._conn.execute(
            "SELECT id, file_id, type, control_key, moddate, institution_code "
            "FROM record ORDER BY id"
        ).fetchall()
        return [
            {
                "id": row["id"],
                "file_id": row["file_id"],
                "record_type": RecordType.from_code(row["type"]),
                "natural_key": row["control_key"],
                "mod_date": row["moddate"],
                "institution_code": row["institution_code"],
            }
            for row in rows
        ]

    def fields_for_record(self, record_id: int) -> list[tuple[int, FieldRow]]:
        """Return ``(field_id, FieldRow)`` pairs of a record in insertion order."""
        rows = self._conn.execute(
            "SELECT id, record_id, tag, data, kind FROM field WHERE record_id = ? ORDER BY id",
            (record_id,),
        ).fetchall()
        return [
            (
                row["id"],
                FieldRow(
                    record_id=row["record_id"],
                    tag=row["tag"],
                    data=row["data"],
                    kind=FieldKind.CONTROL if row["kind"] == 1 else FieldKind.DATA,
                ),
            )
            for row in rows
        ]

    def subfields_for_field(self, field_id: int) -> list[SubfieldRow]:
        """Return the subfield rows of a field in insertion order."""
        rows = self._conn.execute(
            "SELECT field_id, code, data FROM subfield WHERE field_id = ? ORDER BY id",
            (field_id,),
        ).fetchall()
        return [
            SubfieldRow(field_row_id=row["field_id"], code=row["code"], data=row["data"])
            for row in rows
        ]
