"""Loading of MARC catalog records into a relational working database.

This package provides:
- Data models (marcimport.models) — raw records, row shapes, record types
- Parsing (marcimport.parse) — pymarc-backed record reading
- Classification (marcimport.classify) — natural key, type, modification date
- Decision (marcimport.decision) — duplicate-resolution contract and gate
- Decomposition (marcimport.decompose) — field and subfield rows, 852 markers
- Holdings (marcimport.holdings) — derived holding records
- Storage (marcimport.storage) — SQLite record store
- Engine (marcimport.engine) — file loading orchestration and configuration
- Audit (marcimport.audit) — structured JSONL logging
- CLI (marcimport.cli) — command-line interface
- Public API (marcimport.api) — high-level convenience functions
"""

__version__ = "0.4.0"
__license__ = "MIT"

from marcimport.api import LoadError, classify_file, load_file
from marcimport.classify import classify_record
from marcimport.models import ClassifiedRecord, RawRecord, RecordType

__all__ = [
    "__version__",
    "__license__",
    "ClassifiedRecord",
    "RawRecord",
    "RecordType",
    "classify_file",
    "classify_record",
    "load_file",
    "LoadError",
]
