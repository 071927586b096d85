"""
Validation report generation and formatting.

This submodule builds the report dictionary from classified results, with
support for JSON, console and highlighted xlsx output.
"""

from .formatters import export_report_json, export_report_xlsx, format_report_console
from .generator import (
    CHECK_LAYOUTS,
    DATE_CHECK,
    DEVICE_ID_CHECK,
    ENTITY_CHECK,
    SPLIT_CHECK,
    CheckLayout,
    format_timestamp,
    generate_report,
    result_to_row,
)

__all__ = [
    'generate_report',
    'result_to_row',
    'format_timestamp',
    'export_report_json',
    'export_report_xlsx',
    'format_report_console',
    'CheckLayout',
    'CHECK_LAYOUTS',
    'DATE_CHECK',
    'DEVICE_ID_CHECK',
    'ENTITY_CHECK',
    'SPLIT_CHECK',
]
