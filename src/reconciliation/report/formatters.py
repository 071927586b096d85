"""
Report formatting and export utilities.

This module provides functions to export validation reports
in various formats: JSON, console/terminal output, and an xlsx workbook
with one highlighted sheet per check.
"""

import json
import logging
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from reconciliation.compare import EntityOutcome, ReconciliationOutcome, SplitOutcome

from .generator import CHECK_LAYOUTS, DATE_CHECK, DEVICE_ID_CHECK, ENTITY_CHECK, SPLIT_CHECK

logger = logging.getLogger(__name__)

PASS_FILL = PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid")
IGNORED_FILL = PatternFill(start_color="FFF2CC", end_color="FFF2CC", fill_type="solid")
FAIL_FILL = PatternFill(start_color="C00000", end_color="C00000", fill_type="solid")
FAIL_FONT = Font(bold=True, color="FFFFFF")
HEADER_FONT = Font(bold=True)

MAX_COLUMN_WIDTH = 60

# Sheet order of the workbook; counts sheets follow the check they belong to
SHEET_ORDER = (
    (DATE_CHECK, "Date Counts", "dates"),
    (DEVICE_ID_CHECK, "ID Counts", "device_ids"),
    (ENTITY_CHECK, "Entity Counts", "entities"),
    (SPLIT_CHECK, None, None),
)

FAILING_OUTCOMES = frozenset(
    outcome.value
    for outcome_type in (ReconciliationOutcome, SplitOutcome, EntityOutcome)
    for outcome in outcome_type
    if outcome.failing
)


def export_report_json(report: dict[str, Any], output_path: str | Path) -> None:
    """
    Export report to JSON file

    Args:
        report: Report dictionary
        output_path: Path to output file
    """
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(report, f, indent=2, ensure_ascii=False, default=str)


def format_report_console(report: dict[str, Any], max_rows: int = 20) -> str:
    """
    Format report for console output

    Args:
        report: Report dictionary
        max_rows: Failing rows listed per check before truncating

    Returns:
        Formatted string for console display
    """
    lines = []

    lines.append("=" * 80)
    lines.append("VALIDATION REPORT")
    lines.append("=" * 80)
    lines.append(f"Status: {report['status']}")
    lines.append(f"Timestamp: {report['timestamp']}")
    for name, path in report.get("sources", {}).items():
        lines.append(f"{name.capitalize()} file: {path}")
    lines.append("")

    lines.append("SUMMARY")
    lines.append("-" * 80)
    lines.append(report['summary'])
    lines.append("")

    for check, summary in report['checks'].items():
        lines.append(f"{summary['title'].upper()} [{summary['status']}]")
        lines.append("-" * 80)
        outcomes = ", ".join(f"{name}={count}" for name, count in summary['outcomes'].items())
        lines.append(f"Rows: {summary['total']}  ({outcomes})")

        failing_rows = [
            row for row in report['results'].get(check, [])
            if row['outcome'] in FAILING_OUTCOMES
        ]
        columns = CHECK_LAYOUTS[check].columns
        for row in failing_rows[:max_rows]:
            lines.append("  " + " | ".join(_cell_text(row.get(column)) for column in columns))
        if len(failing_rows) > max_rows:
            lines.append(f"  ... {len(failing_rows) - max_rows} more failing row(s)")
        lines.append("")

    if report.get('counts'):
        lines.append("COUNTS")
        lines.append("-" * 80)
        for axis, counts in report['counts'].items():
            lines.append(f"{axis}: " + ", ".join(f"{key}={value}" for key, value in counts.items()))
        lines.append("")

    if report.get('recommendations'):
        lines.append("RECOMMENDATIONS")
        lines.append("-" * 80)
        for i, rec in enumerate(report['recommendations'], 1):
            lines.append(f"{i}. {rec}")
        lines.append("")

    lines.append("=" * 80)

    return "\n".join(lines)


def _cell_text(value: Any) -> str:
    return "" if value is None else str(value)


def _style_header(ws) -> None:
    for cell in ws[1]:
        cell.font = HEADER_FONT
        cell.alignment = Alignment(horizontal="center", vertical="center")
    ws.freeze_panes = "A2"


def _autosize_columns(ws) -> None:
    for column in ws.columns:
        width = max(len(_cell_text(cell.value)) for cell in column)
        ws.column_dimensions[get_column_letter(column[0].column)].width = min(width + 2, MAX_COLUMN_WIDTH)


def _mark_failing(cell) -> None:
    cell.fill = FAIL_FILL
    cell.font = FAIL_FONT


def _highlight_row(check: str, row: dict[str, Any], cells: list) -> None:
    outcome = row["outcome"]
    status_cell = cells[-1]

    if outcome in FAILING_OUTCOMES:
        _mark_failing(status_cell)
    elif outcome == EntityOutcome.IGNORED.value:
        status_cell.fill = IGNORED_FILL
    else:
        status_cell.fill = PASS_FILL

    if check in (DATE_CHECK, DEVICE_ID_CHECK):
        # the side the key is missing from
        for cell in cells[:2]:
            if cell.value is None:
                _mark_failing(cell)
    elif check == ENTITY_CHECK and outcome == EntityOutcome.MISSING_ENTITY.value:
        _mark_failing(cells[1])


def _write_check_sheet(workbook: Workbook, check: str, rows: list[dict[str, Any]]) -> None:
    layout = CHECK_LAYOUTS[check]
    ws = workbook.create_sheet(layout.title)
    ws.append(list(layout.columns))

    for row in rows:
        ws.append([row.get(column) for column in layout.columns])
        _highlight_row(check, row, list(ws[ws.max_row]))

    _style_header(ws)
    _autosize_columns(ws)


def _write_counts_sheet(workbook: Workbook, title: str, counts: dict[str, int]) -> None:
    ws = workbook.create_sheet(title)
    ws.append(["metric", "value"])
    for key, value in counts.items():
        ws.append([key, value])
    _style_header(ws)
    _autosize_columns(ws)


def export_report_xlsx(report: dict[str, Any], output_path: str | Path) -> Path:
    """
    Export report to a highlighted xlsx workbook

    Outcome cells are green for passing results, light yellow for ignored
    rows and red with white text for failing ones. On the key match sheets
    the cell of the side missing a key is red; on the entity sheet the
    entity cell is red when the entity is missing.

    Args:
        report: Report dictionary
        output_path: Path to output file; parent directories are created

    Returns:
        Path of the written workbook
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    workbook = Workbook()
    workbook.remove(workbook.active)

    for check, counts_title, counts_key in SHEET_ORDER:
        if check in report['results']:
            _write_check_sheet(workbook, check, report['results'][check])
        if counts_title and counts_key in report.get('counts', {}):
            _write_counts_sheet(workbook, counts_title, report['counts'][counts_key])

    if not workbook.sheetnames:
        workbook.create_sheet("Summary")
    workbook.save(output_path)

    logger.info(f"Saved excel report: {output_path.resolve()} ({', '.join(workbook.sheetnames)})")
    return output_path
