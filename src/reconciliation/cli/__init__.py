"""
Command-line interface for excel/csv validation.

This module provides a CLI for validating a csv export against the
spreadsheet it was produced from.

Available commands:
- run: Validate one excel/csv pair
- rules: Show the loaded rule files
"""

import sys

from utils.logging import setup_logging, shutdown_logging
from utils.tracing import shutdown_tracing

from .commands import cmd_rules, cmd_run, resolve_output_path
from .parser import create_parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the reconcile-sheets CLI"""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Setup logging
    setup_logging(args.log_level, json_format=args.log_json)

    try:
        # Execute command
        if args.command == 'run':
            cmd_run(args)
        elif args.command == 'rules':
            cmd_rules(args)
        else:
            parser.print_help()
            sys.exit(2)
    finally:
        shutdown_tracing()
        shutdown_logging()


__all__ = [
    'main',
    'cmd_run',
    'cmd_rules',
    'create_parser',
    'resolve_output_path',
]


if __name__ == '__main__':
    main()
