"""
Csv ingestion.

Values are trimmed and blank values become None, so every consumer sees
the same normalized text regardless of padding in the export.
"""

import csv
import logging
from pathlib import Path

from reconciliation.errors import IngestionError

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    text = value.strip()
    return text or None


def read_csv_rows(
    path: str | Path,
    delimiter: str = ",",
    encoding: str = "utf-8-sig",
) -> list[dict[str, str | None]]:
    """
    Read a csv file with a header row into dicts keyed by column name.

    Raises:
        IngestionError: File missing, unreadable, or without a header row
    """
    path = Path(path)
    if not path.is_file():
        raise IngestionError(f"CSV file not found: {path}")

    try:
        with open(path, newline="", encoding=encoding) as f:
            reader = csv.DictReader(f, delimiter=delimiter)
            if reader.fieldnames is None:
                raise IngestionError(f"CSV file has no header row: {path}")
            columns = [name.strip() for name in reader.fieldnames]
            rows = [
                {column: _clean(row.get(name)) for column, name in zip(columns, reader.fieldnames)}
                for row in reader
            ]
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise IngestionError(f"Cannot read csv file {path}: {e}") from e

    logger.info(f"Read {len(rows)} row(s) from {path.name}")
    return rows


def require_columns(rows: list[dict[str, str | None]], *columns: str) -> None:
    """
    Raises:
        IngestionError: One of ``columns`` is absent from the csv header
    """
    if not rows:
        return
    missing = [column for column in columns if column not in rows[0]]
    if missing:
        raise IngestionError(f"CSV column(s) not found: {', '.join(missing)}")


def csv_column(rows: list[dict[str, str | None]], column: str) -> list[str | None]:
    require_columns(rows, column)
    return [row.get(column) for row in rows]
