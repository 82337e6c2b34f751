"""Spreadsheet encoding of consolidated records.

Encoding never raises: an empty record set produces a one-sheet placeholder
workbook, and any failure while writing produces a one-sheet diagnostic
workbook describing the error.
"""

from __future__ import annotations

import io
import json
from collections.abc import Sequence
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

import structlog
from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from tabular_consolidator.models import ConsolidatedResult, Entity

logger = structlog.get_logger(__name__)

DATA_SHEET_TITLE = "Consolidated Data"
EMPTY_SHEET_TITLE = "Empty"
ERROR_SHEET_TITLE = "Error"

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _cell_value(value: Any) -> Any:
    """Convert a record value into something a worksheet cell can hold."""
    if value is None or isinstance(value, str | int | float | bool | date | datetime):
        return value
    return json.dumps(value, default=str)


def _save(workbook: Workbook) -> bytes:
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def _single_sheet(title: str, rows: list[dict[str, Any]]) -> bytes:
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = title
    headers = list(rows[0])
    worksheet.append(headers)
    for row in rows:
        worksheet.append([row[header] for header in headers])
    return _save(workbook)


def encode_empty_workbook() -> bytes:
    """Encode the placeholder workbook used when there is no data."""
    return _single_sheet(EMPTY_SHEET_TITLE, [{"Message": "No data available"}])


def encode_error_workbook(error: Exception) -> bytes:
    """Encode a diagnostic workbook describing an encoding failure.

    Args:
        error: The exception raised while encoding.

    Returns:
        Workbook bytes with one ``Error`` sheet.
    """
    message = ILLEGAL_CHARACTERS_RE.sub("", str(error)) or type(error).__name__
    return _single_sheet(
        ERROR_SHEET_TITLE,
        [
            {
                "Error": "Failed to generate Excel file",
                "Message": message,
                "Timestamp": datetime.now(UTC).isoformat(),
            }
        ],
    )


def encode_workbook(records: Sequence[Entity], headers: Sequence[str] | None = None) -> bytes:
    """Encode records as an ``.xlsx`` workbook.

    Args:
        records: Consolidated records.
        headers: Column order; defaults to the keys of the first record.

    Returns:
        Workbook bytes: a ``Consolidated Data`` sheet with a header row and one
        row per record, the ``Empty`` placeholder when there are no records, or
        the ``Error`` sheet if writing failed.
    """
    if not records:
        logger.info("No records to encode, writing placeholder workbook")
        return encode_empty_workbook()

    try:
        columns = list(headers) if headers else list(records[0])
        workbook = Workbook()
        worksheet = workbook.active
        worksheet.title = DATA_SHEET_TITLE
        worksheet.append(columns)
        for record in records:
            worksheet.append([_cell_value(record.get(column)) for column in columns])
        content = _save(workbook)
    except Exception as e:
        logger.warning("Workbook encoding failed, writing error workbook", error=str(e))
        return encode_error_workbook(e)

    logger.info("Workbook encoded", rows=len(records), columns=len(columns), size=len(content))
    return content


def write_workbook(
    path: str | Path,
    records: Sequence[Entity],
    headers: Sequence[str] | None = None,
) -> Path:
    """Encode records and write the workbook to disk.

    Args:
        path: Destination ``.xlsx`` path; parent directories are created.
        records: Consolidated records.
        headers: Column order.

    Returns:
        The written path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode_workbook(records, headers))
    return path


def result_to_json(result: ConsolidatedResult) -> str:
    """Serialize a consolidated result as indented JSON."""
    return result.model_dump_json(indent=2)
