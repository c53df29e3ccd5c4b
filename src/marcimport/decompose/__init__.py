"""Field and subfield decomposition of MARC records."""

from marcimport.decompose.decomposer import (
    DEFAULT_ORIGIN_CATALOG_CODE,
    FieldDecomposition,
    HoldingMarkerStrategy,
    decompose_fields,
    extract_holding_markers,
    render_data_field,
)

__all__ = [
    "DEFAULT_ORIGIN_CATALOG_CODE",
    "FieldDecomposition",
    "HoldingMarkerStrategy",
    "decompose_fields",
    "extract_holding_markers",
    "render_data_field",
]
