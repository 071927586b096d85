"""
Excel / csv validation for exported sample data.

This module checks that a csv export agrees with the spreadsheet it was
produced from.

Components:
- rules: Device prefix mappings and column split rules
- compare: Classification of dates, device ids, entities and split columns
- ingest: Excel and csv readers
- report: Report generation and export
- runner: One end-to-end validation run

Usage:
    from reconciliation.rules import load_rule_set
    from reconciliation.runner import run_validation
    from reconciliation.report import export_report_xlsx
"""

__version__ = "1.0.0"
__all__ = ["compare", "ingest", "report", "rules", "runner"]
