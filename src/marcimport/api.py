"""Public API for loading MARC files.

This module provides the main public API for marcimport, enabling:
- Loading a MARC file into a SQLite working database
- Classifying the records of a file without writing anything
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from marcimport.audit import AuditLogger, generate_run_id
from marcimport.classify import classify_record
from marcimport.errors import MarcImportError
from marcimport.models import ClassifiedRecord
from marcimport.parse import iter_raw_records

if TYPE_CHECKING:
    from marcimport.engine.config import LoaderConfig, LoadResult

__all__ = [
    "classify_file",
    "load_file",
    "LoadError",
]


class LoadError(MarcImportError):
    """Raised when a MARC file cannot be loaded."""

    error_code = "LOAD_ERROR"

    def __init__(
        self,
        message: str,
        file: str | None = None,
    ) -> None:
        """Initialize load error.

        Parameters
        ----------
        message : str
            Error message.
        file : str | None, optional
            File where error occurred.
        """
        super().__init__(message)
        self.file = file


def load_file(
    path: str | Path,
    institution_code: str,
    *,
    config: LoaderConfig | None = None,
) -> LoadResult:
    """Load a MARC file into the configured SQLite database.

    The file is registered in the ``file`` table, then every record is
    classified, resolved against stored records, decomposed into rows and,
    for originating-catalog files, expanded into holding records.

    Parameters
    ----------
    path : str | Path
        MARC file to load.
    institution_code : str
        MARC institution code of the organization that created the file.
    config : LoaderConfig | None, optional
        Loader configuration. If None, uses defaults.

    Returns
    -------
    LoadResult
        Per-file counters.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    LoadError
        If the file cannot be read or registered.

    Examples
    --------
    Load an ESTC export:

        >>> from marcimport import load_file
        >>> result = load_file("estc_2016.mrc", "estc")
        >>> print(result.records_inserted, result.holdings_synthesized)
    """
    from marcimport.decision import StoreDuplicateResolver
    from marcimport.engine import LoaderConfig, load_marc_file
    from marcimport.storage import SqliteRecordStore

    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    if config is None:
        config = LoaderConfig()

    logger = (
        AuditLogger(generate_run_id(file_path), config.log_path, min_level=config.log_level)
        if config.log_path is not None
        else None
    )

    try:
        with SqliteRecordStore(config.database_path) as store:
            file_id = store.insert_file_record(file_path, institution_code)
            if file_id <= 0:
                raise LoadError(
                    f"Failed to register {file_path.name}: {store.last_error}",
                    file=str(file_path),
                )

            result = load_marc_file(
                file_path,
                institution_code,
                file_id,
                store=store,
                resolver=StoreDuplicateResolver(store, file_id=file_id),
                config=config,
                logger=logger,
            )
    finally:
        if logger:
            logger.close()

    if not result.success:
        raise LoadError(result.error_message or "Load failed", file=str(file_path))

    return result


def classify_file(
    path: str | Path,
    *,
    config: LoaderConfig | None = None,
) -> list[ClassifiedRecord]:
    """Classify every readable record of a MARC file without storing it.

    Parameters
    ----------
    path : str | Path
        MARC file to read.
    config : LoaderConfig | None, optional
        Reader settings. If None, uses defaults.

    Returns
    -------
    list[ClassifiedRecord]
        One classification per readable record, in file order.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ModDateError
        If a record carries a malformed 005 value.
    """
    from marcimport.engine import LoaderConfig

    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    if config is None:
        config = LoaderConfig()

    with file_path.open("rb") as f:
        records = iter_raw_records(f, permissive=config.permissive, force_utf8=config.force_utf8)
        return [classify_record(raw) for raw in records]
