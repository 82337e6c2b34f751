"""Tabular ingestion.

This package provides:
- load_workbook_sources: one SourceTable per non-empty ``.xlsx`` worksheet
- load_csv_source: one SourceTable per CSV file
- load_sources: suffix-based dispatch over a list of files
"""

from tabular_consolidator.loaders.spreadsheet import (
    CSV_SUFFIXES,
    WORKBOOK_SUFFIXES,
    load_csv_source,
    load_sources,
    load_workbook_sources,
    rows_to_records,
)

__all__ = [
    "CSV_SUFFIXES",
    "WORKBOOK_SUFFIXES",
    "load_csv_source",
    "load_sources",
    "load_workbook_sources",
    "rows_to_records",
]
