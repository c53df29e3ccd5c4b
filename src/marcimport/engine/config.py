"""Loader configuration and result dataclasses."""

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import jsonschema

from marcimport.audit.models import LEVELS
from marcimport.decompose.decomposer import DEFAULT_ORIGIN_CATALOG_CODE, HoldingMarkerStrategy
from marcimport.errors import ConfigError

__all__ = ["CONFIG_SCHEMA", "LoaderConfig", "LoadResult", "load_config"]

CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "origin_catalog_code": {"type": "string", "minLength": 1},
        "holding_marker_strategy": {
            "type": "string",
            "enum": [s.value for s in HoldingMarkerStrategy],
        },
        "permissive": {"type": "boolean"},
        "force_utf8": {"type": "boolean"},
        "database_path": {"type": "string", "minLength": 1},
        "log_path": {"type": ["string", "null"]},
        "log_level": {"type": "string", "enum": list(LEVELS)},
    },
}


@dataclass
class LoaderConfig:
    """Configuration for loading MARC files.

    Attributes
    ----------
    origin_catalog_code : str
        Institution code of the originating catalog (default: "estc").
        Holding records are only synthesized for files loaded under it.
    holding_marker_strategy : HoldingMarkerStrategy
        Which parts of an 852 field become holding markers (default: both).
    permissive : bool
        Skip unreadable records instead of failing the file.
    force_utf8 : bool
        Decode records as UTF-8 regardless of the leader's coding scheme.
    database_path : Path
        SQLite database used by the CLI and the public API.
    log_path : Path | None
        JSONL audit log. If None, no audit log is written.
    log_level : str
        Lowest level written to the audit log.
    """

    origin_catalog_code: str = DEFAULT_ORIGIN_CATALOG_CODE
    holding_marker_strategy: HoldingMarkerStrategy = HoldingMarkerStrategy.BOTH
    permissive: bool = True
    force_utf8: bool = False
    database_path: Path = Path("marcimport.sqlite3")
    log_path: Path | None = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """Coerce types and validate."""
        if not self.origin_catalog_code:
            raise ConfigError("origin_catalog_code must not be empty")

        try:
            self.holding_marker_strategy = HoldingMarkerStrategy(self.holding_marker_strategy)
        except ValueError as e:
            raise ConfigError(
                f"holding_marker_strategy must be one of "
                f"{[s.value for s in HoldingMarkerStrategy]}, got {self.holding_marker_strategy!r}"
            ) from e

        if self.log_level not in LEVELS:
            raise ConfigError(f"log_level must be one of {list(LEVELS)}, got {self.log_level!r}")

        self.database_path = Path(self.database_path)
        if self.log_path is not None:
            self.log_path = Path(self.log_path)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["holding_marker_strategy"] = str(self.holding_marker_strategy)
        data["database_path"] = str(self.database_path)
        data["log_path"] = str(self.log_path) if self.log_path is not None else None
        return data


def load_config(path: Path | str) -> LoaderConfig:
    """Load a JSON configuration file.

    Parameters
    ----------
    path : Path | str
        JSON file whose keys are ``LoaderConfig`` attributes.

    Returns
    -------
    LoaderConfig
        Validated configuration; missing keys take their defaults.

    Raises
    ------
    ConfigError
        If the file is missing, is not valid JSON or fails schema validation.
    """
    config_path = Path(path)
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {config_path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file is not valid JSON: {config_path}: {e}") from e

    try:
        jsonschema.validate(instance=data, schema=CONFIG_SCHEMA)
    except jsonschema.ValidationError as e:
        raise ConfigError(f"Invalid config {config_path}: {e.message}") from e

    return LoaderConfig(**data)


@dataclass
class LoadResult:
    """Results from loading one MARC file.

    Attributes
    ----------
    success : bool
        Whether the file could be read to the end.
    path : str
        Loaded file.
    records_read : int
        Records handed over by the reader (readable or not).
    records_inserted : int
        Records stored under a new identifier.
    records_updated : int
        Existing records whose rows were rewritten.
    records_skipped : int
        Records the resolver reported as duplicates.
    records_rejected : int
        Records dropped for a missing 001, a malformed 005 or a failed insert.
    records_unreadable : int
        Records the reader could not decode.
    holdings_synthesized : int
        Holding records stored from 852 markers.
    rows_written : int
        Field and subfield rows accepted by the store.
    rows_failed : int
        Field and subfield rows rejected by the store.
    stored : list[int]
        Identifiers of every record written, holdings included.
    error_message : str | None
        Error message if failed.
    """

    success: bool
    path: str
    records_read: int = 0
    records_inserted: int = 0
    records_updated: int = 0
    records_skipped: int = 0
    records_rejected: int = 0
    records_unreadable: int = 0
    holdings_synthesized: int = 0
    rows_written: int = 0
    rows_failed: int = 0
    stored: list[int] = field(default_factory=list)
    error_message: str | None = None

    def counters(self) -> dict[str, int]:
        """Integer counters only, as logged in ``file_finished``."""
        return {k: v for k, v in asdict(self).items() if isinstance(v, int) and k != "success"}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)
