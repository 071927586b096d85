"""
Unit tests for excel and csv ingestion.

Tests date parsing, cell rendering, and reading rows from files.
"""

from datetime import date, datetime

import pytest

from reconciliation.errors import IngestionError
from reconciliation.ingest import (
    cell_to_text,
    csv_column,
    excel_column,
    format_date,
    parse_csv_date,
    parse_excel_date,
    read_csv_rows,
    read_excel_rows,
    rows_as_text,
)


class TestParseExcelDate:
    """Test reading spreadsheet values as dates."""

    def test_datetime_cell(self):
        assert parse_excel_date(datetime(2024, 3, 1, 9, 30)) == date(2024, 3, 1)

    def test_date_cell(self):
        assert parse_excel_date(date(2024, 3, 1)) == date(2024, 3, 1)

    def test_serial_number(self):
        assert parse_excel_date(45352) == date(2024, 3, 1)

    def test_fractional_serial_number(self):
        assert parse_excel_date(45352.75) == date(2024, 3, 1)

    @pytest.mark.parametrize(
        "text",
        ["1/3/24 9:30", "01/03/2024 09:30", "1/3/24", "01/03/2024", "01032024", " 1/3/2024 "],
    )
    def test_day_first_text(self, text):
        assert parse_excel_date(text) == date(2024, 3, 1)

    @pytest.mark.parametrize("value", [None, "", "not a date", "2024/31/12", True])
    def test_unparseable(self, value):
        assert parse_excel_date(value) is None


class TestParseCsvDate:
    """Test reading csv values as dates."""

    @pytest.mark.parametrize(
        "text",
        [
            "03/01/2024",
            "03/01/2024 09:30",
            "03/01/2024 09:30:15",
            "2024-03-01",
            "2024-03-01 09:30:15",
            "2024-03-01 09:30:15.123456",
            "2024-03-01T09:30:15",
        ],
    )
    def test_supported_formats(self, text):
        assert parse_csv_date(text) == date(2024, 3, 1)

    @pytest.mark.parametrize("value", [None, "", "   ", "yesterday", "13/45/2024"])
    def test_unparseable(self, value):
        assert parse_csv_date(value) is None

    def test_format_date(self):
        assert format_date(date(2024, 3, 1)) == "03/01/2024"
        assert format_date(date(2024, 3, 1), "%Y-%m-%d") == "2024-03-01"
        assert format_date(None) is None


class TestCellToText:
    """Test rendering of spreadsheet cells as text."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, None),
            ("", None),
            ("  A-1 ", "A-1"),
            (767010, "767010"),
            (12.0, "12"),
            (12.5, "12.5"),
            (True, "TRUE"),
            (datetime(2024, 3, 1, 9, 30), "2024-03-01T09:30:00"),
        ],
    )
    def test_rendering(self, value, expected):
        assert cell_to_text(value) == expected

    def test_rows_as_text(self):
        assert rows_as_text([{"Result": 7.0, "Note": None}]) == [{"Result": "7", "Note": None}]


class TestReadExcelRows:
    """Test reading rows from a workbook."""

    def test_reads_rows_keyed_by_header(self, write_xlsx):
        path = write_xlsx([" Device sample ID ", "Result"], [["767010", 12.5], ["767011", "<1"]])

        rows = read_excel_rows(path)

        assert rows == [
            {"Device sample ID": "767010", "Result": 12.5},
            {"Device sample ID": "767011", "Result": "<1"},
        ]

    def test_skips_empty_rows(self, write_xlsx):
        path = write_xlsx(["A", "B"], [["1", "2"], [None, None], ["3", None]])
        rows = read_excel_rows(path)
        assert [row["A"] for row in rows] == ["1", "3"]

    def test_named_sheet(self, write_xlsx):
        path = write_xlsx(["A"], [["1"]], sheet_title="Data")
        assert read_excel_rows(path, sheet_name="Data") == [{"A": "1"}]

    def test_unknown_sheet(self, write_xlsx):
        path = write_xlsx(["A"], [["1"]])
        with pytest.raises(IngestionError, match="Sheet 'Other' not found"):
            read_excel_rows(path, sheet_name="Other")

    def test_missing_file(self, tmp_path):
        with pytest.raises(IngestionError, match="Excel file not found"):
            read_excel_rows(tmp_path / "missing.xlsx")

    def test_not_a_workbook(self, tmp_path):
        path = tmp_path / "broken.xlsx"
        path.write_text("definitely not a zip")
        with pytest.raises(IngestionError, match="Cannot read excel file"):
            read_excel_rows(path)

    def test_header_only(self, write_xlsx):
        assert read_excel_rows(write_xlsx(["A", "B"], [])) == []


class TestExcelColumn:
    """Test column lookup."""

    def test_header_match_ignores_case_and_whitespace(self):
        rows = [{"Device sample ID": "1"}, {"Device sample ID": "2"}]
        assert excel_column(rows, " device SAMPLE id ") == ["1", "2"]

    def test_short_rows_read_as_none(self):
        rows = [{"A": "1", "B": "x"}, {"A": "2"}]
        assert excel_column(rows, "B") == ["x", None]

    def test_unknown_header(self):
        with pytest.raises(IngestionError, match="Header 'Missing' not found"):
            excel_column([{"A": "1"}], "Missing")

    def test_no_rows(self):
        assert excel_column([], "A") == []


class TestReadCsvRows:
    """Test reading rows from a csv file."""

    def test_values_are_trimmed_and_blank_is_none(self, write_csv):
        path = write_csv([" id ", "entity"], [[" 767010 ", ""], ["767011", " CCSMP011"]])

        rows = read_csv_rows(path)

        assert rows == [
            {"id": "767010", "entity": None},
            {"id": "767011", "entity": "CCSMP011"},
        ]

    def test_byte_order_mark_is_stripped(self, tmp_path):
        path = tmp_path / "bom.csv"
        path.write_text("device_sample_id,entity\n767010,CCSMP010\n", encoding="utf-8-sig")
        assert read_csv_rows(path)[0]["device_sample_id"] == "767010"

    def test_custom_delimiter(self, tmp_path):
        path = tmp_path / "semi.csv"
        path.write_text("a;b\n1;2\n", encoding="utf-8")
        assert read_csv_rows(path, delimiter=";") == [{"a": "1", "b": "2"}]

    def test_short_rows(self, tmp_path):
        path = tmp_path / "short.csv"
        path.write_text("a,b\n1\n", encoding="utf-8")
        assert read_csv_rows(path) == [{"a": "1", "b": None}]

    def test_missing_file(self, tmp_path):
        with pytest.raises(IngestionError, match="CSV file not found"):
            read_csv_rows(tmp_path / "missing.csv")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")
        with pytest.raises(IngestionError, match="no header row"):
            read_csv_rows(path)

    def test_csv_column(self, write_csv):
        rows = read_csv_rows(write_csv(["a"], [["1"], ["2"]]))
        assert csv_column(rows, "a") == ["1", "2"]
        with pytest.raises(IngestionError, match="not found: b"):
            csv_column(rows, "b")
