"""
CLI command implementations.

This module contains the implementation of the CLI commands:
- run: Validate an excel/csv pair and export the report
- rules: Load, validate and print the rule files
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from prometheus_client import CollectorRegistry

from utils.metrics import ValidationMetrics, write_metrics_file

from reconciliation.errors import ReconciliationError
from reconciliation.report import export_report_json, export_report_xlsx, format_report_console
from reconciliation.rules import load_rule_set
from reconciliation.runner import ValidationSettings, run_validation

logger = logging.getLogger(__name__)

OUTPUT_DIR_ENV = "RECONCILE_OUTPUT_DIR"
DEFAULT_XLSX_NAME = "validation_results.xlsx"

EXIT_PASS = 0
EXIT_FAIL = 1
EXIT_ERROR = 2


def resolve_output_path(args: argparse.Namespace) -> Path | None:
    """
    Where the report goes.

    An explicit ``--output`` wins. The xlsx format always writes a file,
    defaulting to ``validation_results.xlsx`` in ``--output-dir``,
    ``$RECONCILE_OUTPUT_DIR`` or the current directory.
    """
    if args.output:
        return Path(args.output)
    if args.format == "xlsx":
        output_dir = args.output_dir or os.getenv(OUTPUT_DIR_ENV) or "."
        return Path(output_dir) / DEFAULT_XLSX_NAME
    return None


def _load_rules(args: argparse.Namespace):
    rule_set = load_rule_set(
        mappings_path=args.mappings,
        split_rules_path=args.split_rules,
        config_dir=args.config_dir,
    )
    return rule_set.validate()


def cmd_run(args: argparse.Namespace) -> None:
    """
    Run one validation

    Exits 0 when every check passes, 1 when the report has failing
    results, and 2 when the run could not be completed.

    Args:
        args: Parsed command-line arguments
    """
    logger.info(f"Starting validation of {args.excel} against {args.csv}")

    settings = ValidationSettings.from_env().with_overrides(sheet_name=args.sheet)
    if args.case_sensitive_ids:
        settings = settings.with_overrides(case_insensitive_ids=False)
    if args.case_sensitive_entity:
        settings = settings.with_overrides(case_insensitive_entity=False)
    if args.truncate_split_rows:
        settings = settings.with_overrides(strict_alignment=False)

    registry = CollectorRegistry()
    metrics = ValidationMetrics(registry=registry)

    try:
        rule_set = _load_rules(args)
        report = run_validation(args.excel, args.csv, rule_set, settings, metrics=metrics)

        output_path = resolve_output_path(args)
        if output_path is None or args.format == "console":
            print(format_report_console(report))
        if output_path is not None:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            if args.format == "json":
                export_report_json(report, output_path)
            elif args.format == "xlsx":
                export_report_xlsx(report, output_path)
            else:
                output_path.write_text(format_report_console(report), encoding="utf-8")
            logger.info(f"Report saved to {output_path}")

    except (ReconciliationError, OSError) as e:
        logger.error(f"Validation failed: {e}")
        sys.exit(EXIT_ERROR)
    finally:
        if args.metrics_file:
            write_metrics_file(args.metrics_file, registry)

    # Exit with appropriate code
    if report["status"] == "FAIL":
        logger.warning("Validation found discrepancies")
        sys.exit(EXIT_FAIL)
    logger.info("Validation completed successfully")
    sys.exit(EXIT_PASS)


def cmd_rules(args: argparse.Namespace) -> None:
    """
    Print the rule summary after validating the rule files

    Args:
        args: Parsed command-line arguments
    """
    try:
        rule_set = _load_rules(args)
    except ReconciliationError as e:
        logger.error(f"Invalid rule configuration: {e}")
        sys.exit(EXIT_ERROR)

    print(rule_set.summary())
