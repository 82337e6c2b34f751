"""Spreadsheet and CSV ingestion.

Turns uploaded files into SourceTable values: one table per non-empty
worksheet of an ``.xlsx`` workbook (read with openpyxl), or one table per
CSV file. Header names come from the first non-empty row; cells keep their
raw values, with blanks preserved as None.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any
from zipfile import BadZipFile

import openpyxl
import structlog
from openpyxl.utils.exceptions import InvalidFileException

from tabular_consolidator.exceptions import IngestionError
from tabular_consolidator.models import SourceTable

logger = structlog.get_logger(__name__)

WORKBOOK_SUFFIXES = frozenset({".xlsx", ".xlsm"})
CSV_SUFFIXES = frozenset({".csv"})


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _header_names(cells: Sequence[Any]) -> list[str]:
    """Turn header cells into unique column names.

    Blank cells become ``Column N`` (1-based position); repeated names get
    ``_2``, ``_3``, ... appended.
    """
    names: list[str] = []
    seen: set[str] = set()
    for index, cell in enumerate(cells):
        base = f"Column {index + 1}" if _is_blank(cell) else str(cell).strip()
        name = base
        suffix = 2
        while name in seen:
            name = f"{base}_{suffix}"
            suffix += 1
        seen.add(name)
        names.append(name)
    return names


def rows_to_records(raw_rows: Iterable[Sequence[Any]]) -> list[dict[str, Any]]:
    """Convert positional rows (header first) into records keyed by header.

    Leading blank rows are skipped, the first non-blank row is the header,
    and blank data rows are dropped. Columns with neither a header nor any
    value are dropped.

    Args:
        raw_rows: Rows of cell values, in sheet order.

    Returns:
        Records keyed by header name, blanks kept as None.
    """
    header: Sequence[Any] | None = None
    data: list[Sequence[Any]] = []
    for row in raw_rows:
        if all(_is_blank(cell) for cell in row):
            continue
        if header is None:
            header = row
        else:
            data.append(row)

    if header is None or not data:
        return []

    width = max(len(header), *(len(row) for row in data))
    header_cells = list(header) + [None] * (width - len(header))
    keep = [
        index
        for index in range(width)
        if not _is_blank(header_cells[index])
        or any(index < len(row) and not _is_blank(row[index]) for row in data)
    ]
    names = _header_names([header_cells[index] for index in keep])

    records = []
    for row in data:
        record = {}
        for name, index in zip(names, keep, strict=True):
            value = row[index] if index < len(row) else None
            record[name] = None if _is_blank(value) else value
        records.append(record)
    return records


def load_workbook_sources(
    source: str | Path | bytes,
    file_name: str | None = None,
) -> list[SourceTable]:
    """Load every non-empty worksheet of an ``.xlsx`` workbook.

    Args:
        source: Path to the workbook, or its raw bytes.
        file_name: Name used in source ids; defaults to the path's file name.

    Returns:
        One SourceTable per worksheet with at least one data row, with
        ``source_id`` ``"<file_name>:<sheet_name>"``.

    Raises:
        IngestionError: If the file is not a readable workbook.
    """
    if isinstance(source, bytes):
        file_name = file_name or "workbook.xlsx"
        handle: Any = io.BytesIO(source)
    else:
        path = Path(source)
        file_name = file_name or path.name
        handle = path

    try:
        workbook = openpyxl.load_workbook(handle, read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, OSError) as e:
        raise IngestionError(file_name, str(e)) from e

    tables = []
    try:
        for worksheet in workbook.worksheets:
            records = rows_to_records(worksheet.iter_rows(values_only=True))
            if not records:
                logger.debug("Skipping empty worksheet", file=file_name, sheet=worksheet.title)
                continue
            tables.append(
                SourceTable(
                    source_id=f"{file_name}:{worksheet.title}",
                    rows=records,
                    file_name=file_name,
                    sheet_name=worksheet.title,
                )
            )
    finally:
        workbook.close()

    logger.info("Workbook loaded", file=file_name, sheets=len(tables))
    return tables


def load_csv_source(path: str | Path, encoding: str = "utf-8-sig") -> SourceTable:
    """Load a CSV file as one source table.

    Args:
        path: Path to the CSV file.
        encoding: Text encoding; the default strips a UTF-8 byte-order mark.

    Returns:
        SourceTable whose ``source_id`` is the file name. Empty cells are None.

    Raises:
        IngestionError: If the file cannot be read or decoded.
    """
    path = Path(path)
    try:
        with path.open(newline="", encoding=encoding) as handle:
            records = rows_to_records(csv.reader(handle))
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise IngestionError(str(path), str(e)) from e

    logger.info("CSV loaded", file=path.name, rows=len(records))
    return SourceTable(source_id=path.name, rows=records, file_name=path.name)


def load_sources(paths: Iterable[str | Path]) -> list[SourceTable]:
    """Load workbooks and CSV files, dispatching on the file suffix.

    Source ids that repeat across files get ``#2``, ``#3``, ... appended so
    they stay unique.

    Args:
        paths: Files to load, in order.

    Returns:
        Source tables in file (then worksheet) order.

    Raises:
        IngestionError: If a file is missing, unsupported or unreadable.
    """
    tables: list[SourceTable] = []
    for raw_path in paths:
        path = Path(raw_path)
        if not path.is_file():
            raise IngestionError(str(path), "file does not exist")

        suffix = path.suffix.lower()
        if suffix in WORKBOOK_SUFFIXES:
            tables.extend(load_workbook_sources(path))
        elif suffix in CSV_SUFFIXES:
            tables.append(load_csv_source(path))
        else:
            msg = f"unsupported file type {suffix or '(none)'}; expected .xlsx, .xlsm or .csv"
            raise IngestionError(str(path), msg)

    seen: dict[str, int] = {}
    unique = []
    for table in tables:
        count = seen.get(table.source_id, 0) + 1
        seen[table.source_id] = count
        if count > 1:
            table = table.model_copy(update={"source_id": f"{table.source_id}#{count}"})
        unique.append(table)
    return unique
