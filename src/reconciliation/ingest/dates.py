"""
Date parsing for both sources.

Dates are compared at day granularity, so every parser returns a
``datetime.date`` or None when the value cannot be read as a date.
"""

import logging
from datetime import date, datetime
from typing import Any

from openpyxl.utils.datetime import from_excel

logger = logging.getLogger(__name__)

# Text dates typed into the spreadsheet (day first)
EXCEL_TEXT_FORMATS = (
    "%d/%m/%y %H:%M",
    "%d/%m/%Y %H:%M",
    "%d/%m/%y",
    "%d/%m/%Y",
    "%d%m%Y",
)

# Dates written by the csv export (month first or ISO)
CSV_DATE_FORMATS = (
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f",
)


def _parse_text(value: str, formats: tuple[str, ...]) -> date | None:
    text = value.strip()
    if not text:
        return None
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_excel_date(value: Any) -> date | None:
    """
    Read a spreadsheet cell value as a date.

    Date cells come back from openpyxl as ``datetime``; bare numbers are
    treated as Excel serial dates; text is tried against the day-first
    formats in ``EXCEL_TEXT_FORMATS``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        try:
            converted = from_excel(value)
        except (OverflowError, ValueError) as e:
            logger.debug(f"Ignoring numeric cell {value!r}: {e}")
            return None
        if isinstance(converted, datetime):
            return converted.date()
        return converted if isinstance(converted, date) else None
    return _parse_text(str(value), EXCEL_TEXT_FORMATS)


def parse_csv_date(value: Any) -> date | None:
    """
    Read a csv value as a date.

    Tries ``CSV_DATE_FORMATS`` in order, then falls back to ISO 8601.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None

    parsed = _parse_text(text, CSV_DATE_FORMATS)
    if parsed is not None:
        return parsed
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def format_date(value: date | None, fmt: str = "%m/%d/%Y") -> str | None:
    return value.strftime(fmt) if value is not None else None
