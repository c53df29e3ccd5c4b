"""Reading MARC transmission files into :class:`RawRecord` values.

Binary decoding is delegated to ``pymarc``; this module only converts each
``pymarc.Record`` into the importer's own record shape, one record at a time.
"""

from collections.abc import Callable, Iterator
from typing import BinaryIO

import pymarc

from marcimport.errors import UnreadableRecordError
from marcimport.models import BLANK_INDICATOR, ControlField, DataField, RawRecord, Subfield

__all__ = ["ReadErrorHandler", "from_pymarc", "iter_raw_records"]

ReadErrorHandler = Callable[[int, Exception | None, bytes | None], None]


def _indicator(value: str | None) -> str:
    return value if value else BLANK_INDICATOR


def from_pymarc(record: pymarc.Record) -> RawRecord:
    """Convert a ``pymarc.Record`` into a :class:`RawRecord`.

    Control fields and data fields keep their relative source order.

    Parameters
    ----------
    record : pymarc.Record
        Decoded record.

    Returns
    -------
    RawRecord
        Immutable record with control and data fields split.
    """
    control_fields: list[ControlField] = []
    data_fields: list[DataField] = []

    for field in record.fields:
        if field.is_control_field():
            control_fields.append(ControlField(tag=field.tag, data=field.data or ""))
            continue

        data_fields.append(
            DataField(
                tag=field.tag,
                subfields=tuple(Subfield(code=sf.code, data=sf.value) for sf in field.subfields),
                indicator1=_indicator(field.indicator1),
                indicator2=_indicator(field.indicator2),
            )
        )

    return RawRecord(control_fields=tuple(control_fields), data_fields=tuple(data_fields))


def iter_raw_records(
    handle: BinaryIO,
    *,
    permissive: bool = True,
    force_utf8: bool = False,
    on_error: ReadErrorHandler | None = None,
) -> Iterator[RawRecord]:
    """Lazily read records from an open MARC file.

    Parameters
    ----------
    handle : BinaryIO
        File opened in binary mode.
    permissive : bool, optional
        If True, unreadable records are reported to ``on_error`` and skipped.
        If False, the first one raises, by default True.
    force_utf8 : bool, optional
        Decode as UTF-8 regardless of leader position 9, by default False.
    on_error : ReadErrorHandler | None, optional
        Called with ``(index, exception, chunk)`` for every unreadable record.

    Yields
    ------
    RawRecord
        One record at a time, in file order.

    Raises
    ------
    UnreadableRecordError
        In strict mode, for the first record the decoder rejects.
    """
    reader = pymarc.MARCReader(
        handle,
        to_unicode=True,
        force_utf8=force_utf8,
        utf8_handling="replace",
        permissive=permissive,
    )

    for index, record in enumerate(reader):
        if record is None:
            if not permissive:
                raise UnreadableRecordError(index, reader.current_exception)
            if on_error is not None:
                on_error(index, reader.current_exception, reader.current_chunk)
            continue
        yield from_pymarc(record)
