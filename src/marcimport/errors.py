"""Domain errors raised by the record importer."""


class MarcImportError(Exception):
    """Base class for importer failures."""

    error_code = "MARC_IMPORT_ERROR"


class ConfigError(MarcImportError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class ModDateError(MarcImportError, ValueError):
    """Raised when a 005 last-change value is not a numeric timestamp."""

    error_code = "MOD_DATE_ERROR"

    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid 005 last-change timestamp: {value!r}")
        self.value = value


class UnreadableRecordError(MarcImportError):
    """Raised when strict reading meets a record the decoder rejects."""

    error_code = "UNREADABLE_RECORD"

    def __init__(self, index: int, cause: Exception | None = None) -> None:
        detail = f"{type(cause).__name__}: {cause}" if cause is not None else "unknown error"
        super().__init__(f"Unreadable record at index {index}: {detail}")
        self.index = index
