"""MARC file reading."""

from marcimport.parse.reader import ReadErrorHandler, from_pymarc, iter_raw_records

__all__ = ["ReadErrorHandler", "from_pymarc", "iter_raw_records"]
