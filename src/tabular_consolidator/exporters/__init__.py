"""Tabular encoding of consolidated results.

This package provides:
- encode_workbook: records to ``.xlsx`` bytes (placeholder and error fallbacks)
- write_workbook: encode and write to disk
- result_to_json: JSON export of a full ConsolidatedResult
"""

from tabular_consolidator.exporters.workbook import (
    DATA_SHEET_TITLE,
    EMPTY_SHEET_TITLE,
    ERROR_SHEET_TITLE,
    XLSX_MEDIA_TYPE,
    encode_empty_workbook,
    encode_error_workbook,
    encode_workbook,
    result_to_json,
    write_workbook,
)

__all__ = [
    "DATA_SHEET_TITLE",
    "EMPTY_SHEET_TITLE",
    "ERROR_SHEET_TITLE",
    "XLSX_MEDIA_TYPE",
    "encode_empty_workbook",
    "encode_error_workbook",
    "encode_workbook",
    "result_to_json",
    "write_workbook",
]
