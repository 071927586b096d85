"""
Readers turning the excel and csv inputs into in-memory rows.
"""

from .csv_source import csv_column, read_csv_rows, require_columns
from .dates import (
    CSV_DATE_FORMATS,
    EXCEL_TEXT_FORMATS,
    format_date,
    parse_csv_date,
    parse_excel_date,
)
from .excel import cell_to_text, excel_column, read_excel_rows, resolve_header, rows_as_text

__all__ = [
    "read_excel_rows",
    "excel_column",
    "resolve_header",
    "rows_as_text",
    "cell_to_text",
    "read_csv_rows",
    "csv_column",
    "require_columns",
    "parse_excel_date",
    "parse_csv_date",
    "format_date",
    "EXCEL_TEXT_FORMATS",
    "CSV_DATE_FORMATS",
]
