"""Record sources for managed-fetch tables."""

from .http_source import HttpRecordSource
from .repo import Database, SqlRecordSource, row_to_record

__all__ = [
    "Database",
    "HttpRecordSource",
    "SqlRecordSource",
    "row_to_record",
]
