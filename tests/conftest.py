"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from marcimport.decision import DuplicateDecision  # noqa: E402
from marcimport.models import (  # noqa: E402
    ControlField,
    DataField,
    FieldKind,
    FieldRow,
    RawRecord,
    RecordType,
    Subfield,
    SubfieldRow,
)


class FakeStore:
    """In-memory RecordStore that records every write in call order.

    ``writes`` holds ``("record", dict)``, ``("field", FieldRow)`` and
    ``("subfield", SubfieldRow)`` tuples. Writes can be forced to fail by
    record key, field tag or subfield code.
    """

    def __init__(
        self,
        *,
        fail_record_keys: Sequence[str] = (),
        fail_field_tags: Sequence[str] = (),
        fail_subfield_codes: Sequence[str] = (),
    ) -> None:
        self.fail_record_keys = set(fail_record_keys)
        self.fail_field_tags = set(fail_field_tags)
        self.fail_subfield_codes = set(fail_subfield_codes)
        self.writes: list[tuple[str, Any]] = []
        self.last_error: str | None = None
        self._next_id = 0

    def _mint(self) -> int:
        self._next_id += 1
        self.last_error = None
        return self._next_id

    def insert_record_record(
        self,
        file_id: int,
        record_type: RecordType,
        natural_key: str,
        mod_date: float,
        *,
        institution_code: str = "",
    ) -> int:
        if natural_key in self.fail_record_keys:
            self.last_error = f"record {natural_key} rejected"
            return 0
        record_id = self._mint()
        self.writes.append(
            (
                "record",
                {
                    "id": record_id,
                    "file_id": file_id,
                    "record_type": record_type,
                    "natural_key": natural_key,
                    "mod_date": mod_date,
                    "institution_code": institution_code,
                },
            )
        )
        return record_id

    def insert_field_record(self, record_id: int, tag: str, data: str, kind: FieldKind) -> int:
        if tag in self.fail_field_tags:
            self.last_error = f"field {tag} rejected"
            return 0
        self.writes.append(("field", FieldRow(record_id, tag, data, kind)))
        return self._mint()

    def insert_subfield_record(self, field_row_id: int, code: str, data: str) -> int:
        if field_row_id <= 0 or code in self.fail_subfield_codes:
            self.last_error = f"subfield {code} rejected"
            return 0
        self.writes.append(("subfield", SubfieldRow(field_row_id, code, data)))
        return self._mint()

    # Convenience views

    @property
    def records(self) -> list[dict[str, Any]]:
        return [payload for kind, payload in self.writes if kind == "record"]

    @property
    def fields(self) -> list[FieldRow]:
        return [payload for kind, payload in self.writes if kind == "field"]

    @property
    def subfields(self) -> list[SubfieldRow]:
        return [payload for kind, payload in self.writes if kind == "subfield"]

    def fields_of(self, record_id: int) -> list[FieldRow]:
        return [row for row in self.fields if row.record_id == record_id]


class ScriptedResolver:
    """DuplicateResolver answering from a table keyed by institution code.

    Unlisted institutions get INSERT. Every call is recorded in ``calls``.
    """

    def __init__(self, decisions: dict[str, DuplicateDecision] | None = None) -> None:
        self.decisions = decisions or {}
        self.calls: list[tuple[str, str, float, RecordType]] = []

    def resolve(
        self,
        institution_code: str,
        natural_key: str,
        mod_date: float,
        record_type: RecordType,
    ) -> DuplicateDecision:
        self.calls.append((institution_code, natural_key, mod_date, record_type))
        return self.decisions.get(institution_code, DuplicateDecision.insert())


@pytest.fixture
def fake_store() -> FakeStore:
    """Provide an empty in-memory fake store."""
    return FakeStore()


@pytest.fixture
def make_store() -> Callable[..., FakeStore]:
    """Factory for fake stores configured to reject some writes."""
    return FakeStore


@pytest.fixture
def resolver() -> ScriptedResolver:
    """Provide a resolver that inserts everything."""
    return ScriptedResolver()


@pytest.fixture
def make_resolver() -> Callable[..., ScriptedResolver]:
    """Factory for resolvers with scripted decisions per institution."""
    return ScriptedResolver


@pytest.fixture
def make_raw() -> Callable[..., RawRecord]:
    """Factory for raw records with minimal boilerplate.

    Control fields are given as ``(tag, data)`` pairs. Data fields are given
    as ``(tag, [(code, value), ...])`` or ``(tag, [(code, value), ...], "ind")``
    where ``ind`` is a two-character indicator string.
    """

    def _factory(
        key: str | None = "S100",
        *,
        origin: str | None = None,
        moddate: str | None = "20200101000000.0",
        extra_control: Sequence[tuple[str, str]] = (),
        data: Sequence[tuple[Any, ...]] = (),
    ) -> RawRecord:
        control: list[ControlField] = []
        if key is not None:
            control.append(ControlField("001", key))
        if origin is not None:
            control.append(ControlField("003", origin))
        if moddate is not None:
            control.append(ControlField("005", moddate))
        control.extend(ControlField(tag, value) for tag, value in extra_control)

        data_fields = []
        for spec in data:
            tag, subfields = spec[0], spec[1]
            indicators = spec[2] if len(spec) > 2 else "  "
            data_fields.append(
                DataField(
                    tag=tag,
                    subfields=tuple(Subfield(code, value) for code, value in subfields),
                    indicator1=indicators[0],
                    indicator2=indicators[1],
                )
            )

        return RawRecord(control_fields=tuple(control), data_fields=tuple(data_fields))

    return _factory


@pytest.fixture
def write_marc(tmp_path: Path) -> Callable[..., Path]:
    """Write pymarc records to a binary MARC file under tmp_path."""
    from pymarc import Field, Record
    from pymarc import Subfield as PymarcSubfield

    def _build(
        key: str | None,
        *,
        origin: str | None = None,
        moddate: str | None = "20200101000000.0",
        data: Sequence[tuple[str, Sequence[tuple[str, str]]]] = (),
    ) -> Record:
        record = Record()
        if key is not None:
            record.add_field(Field(tag="001", data=key))
        if origin is not None:
            record.add_field(Field(tag="003", data=origin))
        if moddate is not None:
            record.add_field(Field(tag="005", data=moddate))
        for tag, subfields in data:
            record.add_field(
                Field(
                    tag=tag,
                    indicators=[" ", " "],
                    subfields=[PymarcSubfield(code=c, value=v) for c, v in subfields],
                )
            )
        return record

    def _factory(name: str, records: Sequence[dict[str, Any]], trailing: bytes = b"") -> Path:
        path = tmp_path / name
        with path.open("wb") as f:
            for spec in records:
                f.write(_build(**spec).as_marc())
            f.write(trailing)
        return path

    return _factory
