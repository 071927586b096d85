"""
Spreadsheet ingestion with openpyxl.

The first row of the sheet is the header row. Rows are returned as dicts
keyed by trimmed header text with the raw cell values openpyxl produces
(``str``, ``int``, ``float``, ``datetime`` or None).
"""

import logging
import zipfile
from collections.abc import Sequence
from datetime import date, datetime
from pathlib import Path
from typing import Any

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from reconciliation.errors import IngestionError

logger = logging.getLogger(__name__)


def cell_to_text(value: Any) -> str | None:
    """
    Render a cell value the way it reads in the spreadsheet.

    Whole numbers lose their ``.0``, dates render as ISO text and strings
    are trimmed. Blank cells become None.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    text = str(value).strip()
    return text or None


def _header_text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def read_excel_rows(path: str | Path, sheet_name: str | None = None) -> list[dict[str, Any]]:
    """
    Read every data row of one sheet.

    Args:
        path: Workbook path
        sheet_name: Sheet to read; the first sheet when None

    Returns:
        One dict per non-empty data row, keyed by header text. Columns with
        a blank header are dropped.

    Raises:
        IngestionError: File missing or unreadable, sheet not found, or the
            sheet has no header row
    """
    path = Path(path)
    if not path.is_file():
        raise IngestionError(f"Excel file not found: {path}")

    try:
        workbook = load_workbook(path, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, OSError, KeyError, ValueError) as e:
        raise IngestionError(f"Cannot read excel file {path}: {e}") from e

    try:
        if sheet_name is None:
            if not workbook.sheetnames:
                raise IngestionError(f"No sheets in workbook: {path}")
            sheet = workbook[workbook.sheetnames[0]]
        elif sheet_name in workbook.sheetnames:
            sheet = workbook[sheet_name]
        else:
            raise IngestionError(f"Sheet '{sheet_name}' not found in {path}")

        row_iter = sheet.iter_rows(values_only=True)
        header_row = next(row_iter, None)
        if header_row is None:
            raise IngestionError(f"Header row not found: {sheet.title}")
        headers = [_header_text(cell) for cell in header_row]

        rows = []
        for values in row_iter:
            if all(value is None or _header_text(value) == "" for value in values):
                continue
            rows.append(
                {header: value for header, value in zip(headers, values) if header}
            )
    finally:
        workbook.close()

    logger.info(f"Read {len(rows)} row(s) from sheet '{sheet.title}' of {path.name}")
    return rows


def resolve_header(rows: Sequence[dict[str, Any]], header: str, headers: Sequence[str] | None = None) -> str:
    """
    Find the actual header matching ``header`` ignoring case and whitespace.

    Raises:
        IngestionError: No such header
    """
    if headers is None:
        headers = dict.fromkeys(key for row in rows for key in row)
    available = list(headers)
    wanted = header.strip().lower()
    for candidate in available:
        if candidate.strip().lower() == wanted:
            return candidate
    raise IngestionError(f"Header '{header}' not found. Available headers: {available}")


def excel_column(rows: Sequence[dict[str, Any]], header: str) -> list[Any]:
    """Raw values of one column, matched case-insensitively."""
    if not rows:
        return []
    actual = resolve_header(rows, header)
    return [row.get(actual) for row in rows]


def rows_as_text(rows: Sequence[dict[str, Any]]) -> list[dict[str, str | None]]:
    return [{header: cell_to_text(value) for header, value in row.items()} for row in rows]
