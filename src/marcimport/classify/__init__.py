"""Record classification: natural key, modification date and record type."""

from marcimport.classify.classifier import (
    ORIGIN_KEY_PATTERN,
    classify_record,
    derive_record_keys,
    is_origin_catalog_key,
    parse_mod_date,
    resolve_record_type,
)

__all__ = [
    "ORIGIN_KEY_PATTERN",
    "classify_record",
    "derive_record_keys",
    "is_origin_catalog_key",
    "parse_mod_date",
    "resolve_record_type",
]
