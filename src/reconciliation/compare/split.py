"""
Column split validation.

One excel column is exported to the csv as two columns: a raw mirror of
the value and an LG column that only carries values containing special
characters. Rows of both sources are aligned by position, so both files
must keep the same row order and row count.
"""

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any

from reconciliation.errors import InputAlignmentError
from reconciliation.rules import SplitColumnRule

from .outcomes import ClassificationResult, SplitOutcome

logger = logging.getLogger(__name__)

# Anything outside this set makes a value "special" and routes it to LG
SPECIAL_CHARACTER = re.compile(r"[^0-9.]")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def is_blank(value: Any) -> bool:
    return _text(value) == ""


def classify_split(excel_value: Any, raw_value: Any, lg_value: Any) -> SplitOutcome:
    """
    Classify one excel value against its raw and LG csv values.

    Branches are checked in order and the first one that applies wins:

    1. excel blank, raw filled: ADDITIONAL_VALUE
    2. excel filled and different from raw: RAW_MISMATCH
    3. excel filled with a special character: LG must hold the whole value;
       excel filled with digits and dots only: LG must be blank.
       Otherwise LG_MISMATCH.
    4. both blank: PASS
    """
    excel = _text(excel_value)
    raw = _text(raw_value)
    lg = _text(lg_value)

    if not excel and raw:
        return SplitOutcome.ADDITIONAL_VALUE
    if excel and excel != raw:
        return SplitOutcome.RAW_MISMATCH
    if excel:
        if SPECIAL_CHARACTER.search(excel):
            return SplitOutcome.PASS if lg == excel else SplitOutcome.LG_MISMATCH
        return SplitOutcome.PASS if not lg else SplitOutcome.LG_MISMATCH
    return SplitOutcome.PASS


def align_rows(
    excel_rows: Sequence[Mapping[str, Any]],
    csv_rows: Sequence[Mapping[str, Any]],
    strict: bool = True,
) -> int:
    """
    Return the number of row pairs to compare.

    Raises:
        InputAlignmentError: Row counts differ and ``strict`` is set
    """
    if len(excel_rows) == len(csv_rows):
        return len(excel_rows)
    if strict:
        raise InputAlignmentError(len(excel_rows), len(csv_rows))

    aligned = min(len(excel_rows), len(csv_rows))
    logger.warning(
        f"Row count mismatch for column split validation: excel has {len(excel_rows)}, "
        f"csv has {len(csv_rows)}; comparing the first {aligned} row(s) only"
    )
    return aligned


def classify_split_columns(
    rules: Sequence[SplitColumnRule],
    excel_rows: Sequence[Mapping[str, Any]],
    csv_rows: Sequence[Mapping[str, Any]],
    strict: bool = True,
) -> list[ClassificationResult]:
    """
    Apply every split rule to every positionally aligned row pair.

    Args:
        rules: Split rules, in report order
        excel_rows: Excel rows keyed by header
        csv_rows: Csv rows keyed by column name
        strict: Fail on differing row counts instead of truncating

    Returns:
        Results ordered by rule, then by 1-based row number. ``values`` is
        ``(excel, raw, lg)``; a column absent from a row reads as blank.

    Raises:
        InputAlignmentError: Row counts differ and ``strict`` is set
    """
    row_count = align_rows(excel_rows, csv_rows, strict=strict)

    results = []
    for rule in rules:
        failures = 0
        for index in range(row_count):
            excel_value = excel_rows[index].get(rule.source_column)
            raw_value = csv_rows[index].get(rule.primary_column)
            lg_value = csv_rows[index].get(rule.secondary_column)

            outcome = classify_split(excel_value, raw_value, lg_value)
            if outcome.failing:
                failures += 1

            results.append(
                ClassificationResult(
                    row_index=index + 1,
                    field=rule.source_column,
                    values=(excel_value, raw_value, lg_value),
                    outcome=outcome,
                )
            )

        logger.debug(f"Split column '{rule.source_column}': {failures} of {row_count} row(s) failing")

    return results
