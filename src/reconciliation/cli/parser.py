"""
Command-line argument parser configuration.

This module sets up the argument parser for the reconcile-sheets CLI tool,
defining all commands and their options.
"""

import argparse


def _add_rule_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--mappings',
        help='Device to entity mapping file (default: search for device-entity-mappings-simplified.json)'
    )
    parser.add_argument(
        '--split-rules',
        help='Column split rule file (default: search for column-split-validations.json)'
    )
    parser.add_argument(
        '--config-dir',
        help='Directory searched first for rule files (default: $RECONCILE_CONFIG_DIR)'
    )


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog='reconcile-sheets',
        description="Validate a csv export against the excel file it was produced from",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate and print the report to the console
  reconcile-sheets run --excel samples.xlsx --csv export.csv

  # Write the highlighted workbook to ./reports/validation_results.xlsx
  reconcile-sheets run --excel samples.xlsx --csv export.csv --format xlsx --output-dir reports

  # Use rule files from a specific directory and save a JSON report
  reconcile-sheets run --excel samples.xlsx --csv export.csv --config-dir config \\
      --format json --output report.json

  # Compare ids case-sensitively and truncate split rows to the shorter file
  reconcile-sheets run --excel samples.xlsx --csv export.csv --case-sensitive-ids --truncate-split-rows

  # Show the loaded rules
  reconcile-sheets rules --config-dir config
        """
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='INFO',
        help='Logging level (default: INFO)'
    )
    parser.add_argument(
        '--log-json',
        action='store_true',
        help='Emit logs as JSON lines'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # ========== Run command ==========
    run_parser = subparsers.add_parser('run', help='Validate an excel/csv pair')
    run_parser.add_argument(
        '--excel',
        required=True,
        help='Spreadsheet (.xlsx) file'
    )
    run_parser.add_argument(
        '--csv',
        required=True,
        help='Delimited text export'
    )
    _add_rule_arguments(run_parser)
    run_parser.add_argument(
        '--sheet',
        help='Sheet to read (default: first sheet)'
    )
    run_parser.add_argument(
        '--output',
        help='Output file path for report'
    )
    run_parser.add_argument(
        '--format',
        choices=['console', 'json', 'xlsx'],
        default='console',
        help='Output format (default: console)'
    )
    run_parser.add_argument(
        '--output-dir',
        help='Directory for the xlsx report when --output is not given '
             '(default: $RECONCILE_OUTPUT_DIR or current directory)'
    )
    run_parser.add_argument(
        '--case-sensitive-ids',
        action='store_true',
        help='Compare device ids case-sensitively'
    )
    run_parser.add_argument(
        '--case-sensitive-entity',
        action='store_true',
        help='Compare device prefixes and entities case-sensitively'
    )
    run_parser.add_argument(
        '--truncate-split-rows',
        action='store_true',
        help='Compare split columns on the shorter file instead of failing on a row count mismatch'
    )
    run_parser.add_argument(
        '--metrics-file',
        help='Write Prometheus metrics of the run to this file'
    )

    # ========== Rules command ==========
    rules_parser = subparsers.add_parser('rules', help='Validate and print the rule files')
    _add_rule_arguments(rules_parser)

    return parser
