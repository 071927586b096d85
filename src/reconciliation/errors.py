"""
Exceptions raised by the reconciliation tool.

Only conditions that make a run meaningless are errors. A key present on
one side only, an id without a rule, or a mismatching value are outcomes
and never raise.
"""


class ReconciliationError(Exception):
    """Base class for all reconciliation errors."""


class ConfigError(ReconciliationError):
    """Rule configuration is missing, unreadable, or structurally invalid."""


class IngestionError(ReconciliationError):
    """An input file, sheet, or required column could not be read."""


class InputAlignmentError(ReconciliationError):
    """Positionally aligned sources do not have the same number of rows."""

    def __init__(self, excel_rows: int, csv_rows: int):
        self.excel_rows = excel_rows
        self.csv_rows = csv_rows
        super().__init__(
            f"Cannot align rows by position: excel has {excel_rows} row(s), "
            f"csv has {csv_rows} row(s)"
        )
