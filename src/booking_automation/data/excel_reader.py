"""
excel_reader.py

What this module does
- Reads a row-oriented .xlsx sheet into an ordered list of {header: value} records.

Why it matters
- Test cases live in a spreadsheet that non-developers edit; blank rows and
  unnamed helper columns are common and must not turn into bogus cases.

Behavior summary
- The first non-blank row is the header row; blank rows before it are ignored.
- Rows with every cell empty are skipped with an INFO line naming the row.
- Columns with an empty header cell are dropped from every record.
- Values are strings as the sheet displays them; empty cells become "".
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, time
from pathlib import Path

from openpyxl import load_workbook

from booking_automation.utils.errors import SheetNotFoundError

logger = logging.getLogger(__name__)


def format_cell(value: object) -> str:
    """Renders a cell value as a trimmed string, the way the sheet shows it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def rows_to_records(rows: Iterable[Iterable[object]]) -> list[dict[str, str]]:
    """
    What it does:
    - Turns raw sheet rows (header row first) into records.

    Why it matters:
    - Keeps the table rules independent of openpyxl so they are easy to test.

    Behavior:
    - Row numbers in diagnostics are 1-based, as the spreadsheet shows them.
    """
    headers: list[str] | None = None
    records: list[dict[str, str]] = []

    for row_number, raw in enumerate(rows, start=1):
        cells = [format_cell(v) for v in raw]

        if headers is None:
            if any(cells):
                headers = cells
            continue

        record = {
            header: (cells[i] if i < len(cells) else "")
            for i, header in enumerate(headers)
            if header
        }
        if not any(record.values()):
            logger.info("Skipping row %d as all cells are empty", row_number)
            continue
        records.append(record)

    return records


def read_records(path: str | Path, sheet_name: str) -> list[dict[str, str]]:
    """
    Reads `sheet_name` from the workbook at `path`.

    Raises SheetNotFoundError if the sheet does not exist; a missing file raises
    FileNotFoundError from openpyxl.
    """
    workbook = load_workbook(filename=str(path), data_only=True)
    try:
        if sheet_name not in workbook.sheetnames:
            raise SheetNotFoundError(sheet_name, str(path), list(workbook.sheetnames))
        sheet = workbook[sheet_name]
        records = rows_to_records(sheet.iter_rows(values_only=True))
    finally:
        workbook.close()

    logger.info("Loaded %d record(s) from %s [%s]", len(records), path, sheet_name)
    return records
