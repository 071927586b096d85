"""
Report generation for validation results.

Turns the classified results of each check into report rows, counts and
a PASS/FAIL verdict, with a human-readable summary and recommendations.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Any

from reconciliation.compare import (
    ClassificationResult,
    EntityCounts,
    EntityOutcome,
    ReconciliationOutcome,
    SourceCounts,
    SplitOutcome,
    count_failing,
    count_outcomes,
)
from reconciliation.ingest.dates import format_date

DATE_CHECK = "date_match"
DEVICE_ID_CHECK = "device_id_match"
ENTITY_CHECK = "device_entity"
SPLIT_CHECK = "column_split"


@dataclass(frozen=True)
class CheckLayout:
    """How one check is titled and laid out in exported reports."""

    title: str
    columns: tuple[str, ...]
    outcome_type: type
    match_label: str | None = None


CHECK_LAYOUTS: dict[str, CheckLayout] = {
    DATE_CHECK: CheckLayout(
        title="Date Match",
        columns=("Measurement date", "created_on", "result"),
        outcome_type=ReconciliationOutcome,
        match_label="Date present in both xlsx and csv and it matches",
    ),
    DEVICE_ID_CHECK: CheckLayout(
        title="Device ID Match",
        columns=("device_sample_id_excel", "device_sample_id_csv", "result"),
        outcome_type=ReconciliationOutcome,
        match_label="ID present in both xlsx and csv and it matches",
    ),
    ENTITY_CHECK: CheckLayout(
        title="Device→Entity Report",
        columns=("device_sample_id", "entity_id", "expected_entity", "status"),
        outcome_type=EntityOutcome,
    ),
    SPLIT_CHECK: CheckLayout(
        title="Column Split Validation",
        columns=("row_num", "column_name", "excel_value", "csv_raw", "csv_lg", "status"),
        outcome_type=SplitOutcome,
    ),
}


def format_timestamp(timestamp: datetime) -> str:
    """ISO 8601 timestamp for reports."""
    return timestamp.isoformat()


def _display(value: Any, date_format: str) -> Any:
    if isinstance(value, (date, datetime)):
        return format_date(value, date_format)
    return value


def _label(result: ClassificationResult, layout: CheckLayout) -> str:
    if layout.match_label and result.outcome == ReconciliationOutcome.MATCHED:
        return layout.match_label
    return result.outcome.label


def result_to_row(
    check: str,
    result: ClassificationResult,
    date_format: str = "%m/%d/%Y",
) -> dict[str, Any]:
    """
    Convert one classified result into a report row.

    Keys are the layout's column names plus ``outcome``, the enum value
    used for highlighting.
    """
    layout = CHECK_LAYOUTS[check]
    label = _label(result, layout)

    if check == SPLIT_CHECK:
        cells = (result.row_index, result.field, *result.values, label)
    else:
        cells = (*(_display(value, date_format) for value in result.values), label)

    row = dict(zip(layout.columns, cells))
    row["outcome"] = result.outcome.value
    return row


def _check_summary(check: str, results: Sequence[ClassificationResult]) -> dict[str, Any]:
    layout = CHECK_LAYOUTS[check]
    failing = count_failing(results)
    return {
        "title": layout.title,
        "status": "PASS" if failing == 0 else "FAIL",
        "total": len(results),
        "failing": failing,
        "outcomes": count_outcomes(results, layout.outcome_type),
    }


def generate_report(
    check_results: dict[str, Sequence[ClassificationResult]],
    source_counts: dict[str, dict[str, SourceCounts]] | None = None,
    date_format: str = "%m/%d/%Y",
    sources: dict[str, str] | None = None,
) -> dict[str, Any]:
    """
    Generate a validation report from classified results

    Args:
        check_results: Results per check name (``DATE_CHECK``, ...). Checks
            that did not run are simply absent.
        source_counts: Per axis (``dates``, ``device_ids``) the excel and csv
            ``SourceCounts``
        date_format: strftime format for date values in report rows
        sources: Input file names, copied into the report

    Returns:
        Dictionary containing:
        - status: PASS when no result has a failing outcome, else FAIL
        - timestamp: Report generation timestamp
        - checks: Per-check status, totals and outcome counts
        - results: Per-check list of report rows
        - counts: Source counts per axis and device to entity aggregates
        - summary: Human-readable summary
        - recommendations: List of recommended actions
    """
    checks = {}
    results = {}
    for check, check_rows in check_results.items():
        checks[check] = _check_summary(check, check_rows)
        results[check] = [result_to_row(check, result, date_format) for result in check_rows]

    counts: dict[str, dict[str, int]] = {}
    for axis, per_source in (source_counts or {}).items():
        merged: dict[str, int] = {}
        for source, source_count in per_source.items():
            merged.update(source_count.to_dict(f"{source}_{axis}"))
        counts[axis] = merged
    if ENTITY_CHECK in check_results:
        counts["entities"] = EntityCounts.from_results(check_results[ENTITY_CHECK]).to_dict()

    failed_checks = [check for check, summary in checks.items() if summary["status"] == "FAIL"]
    status = "PASS" if not failed_checks else "FAIL"

    return {
        "status": status,
        "timestamp": format_timestamp(datetime.now(UTC)),
        "sources": dict(sources or {}),
        "checks": checks,
        "results": results,
        "counts": counts,
        "summary": _generate_summary(checks, failed_checks),
        "recommendations": _generate_recommendations(checks),
    }


def _generate_summary(checks: dict[str, dict[str, Any]], failed_checks: list[str]) -> str:
    if not checks:
        return "No checks were run"
    if not failed_checks:
        return f"All {len(checks)} checks passed. Excel and csv are consistent."
    titles = ", ".join(checks[check]["title"] for check in failed_checks)
    return (
        f"Validation found discrepancies in {len(failed_checks)} of {len(checks)} checks: "
        f"{titles}."
    )


def _generate_recommendations(checks: dict[str, dict[str, Any]]) -> list[str]:
    """
    Generate actionable recommendations based on failing outcomes

    Args:
        checks: Per-check summaries from ``generate_report``

    Returns:
        List of recommendation strings
    """
    recommendations = []

    if all(summary["failing"] == 0 for summary in checks.values()):
        recommendations.append("Excel and csv are consistent. No action needed.")
        return recommendations

    for check in (DATE_CHECK, DEVICE_ID_CHECK):
        outcomes = checks.get(check, {}).get("outcomes", {})
        only_excel = outcomes.get(ReconciliationOutcome.ONLY_IN_A.value, 0)
        only_csv = outcomes.get(ReconciliationOutcome.ONLY_IN_B.value, 0)
        noun = "date(s)" if check == DATE_CHECK else "device id(s)"
        if only_excel:
            recommendations.append(
                f"{only_excel} {noun} present in the excel file are missing from the csv export."
            )
        if only_csv:
            recommendations.append(
                f"{only_csv} {noun} in the csv export do not appear in the excel file."
            )

    entity_outcomes = checks.get(ENTITY_CHECK, {}).get("outcomes", {})
    if entity_outcomes.get(EntityOutcome.FAIL.value, 0):
        recommendations.append(
            f"{entity_outcomes[EntityOutcome.FAIL.value]} entity value(s) differ from the device "
            "mapping. Check the device mapping file against the export."
        )
    if entity_outcomes.get(EntityOutcome.MISSING_ENTITY.value, 0):
        recommendations.append(
            f"{entity_outcomes[EntityOutcome.MISSING_ENTITY.value]} csv row(s) have a mapped "
            "device id but no entity."
        )

    split_outcomes = checks.get(SPLIT_CHECK, {}).get("outcomes", {})
    split_failures = sum(
        split_outcomes.get(outcome.value, 0) for outcome in SplitOutcome if outcome.failing
    )
    if split_failures:
        recommendations.append(
            f"{split_failures} split column value(s) do not match. Review the raw and LG "
            "columns of the csv export."
        )

    return recommendations
