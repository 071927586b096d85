"""
End-to-end validation run.

The caller supplies a RuleSet and the two input files. Everything that can
make the run meaningless (empty rules, missing files or columns,
misaligned split rows) is checked before the first classification, so a
run either returns a complete report or raises.
"""

import logging
import os
import time
import uuid
from collections.abc import Callable, Hashable, Sequence
from dataclasses import dataclass, fields, replace
from functools import partial
from pathlib import Path
from typing import Any

from utils.logging import ContextLogger
from utils.metrics import ValidationMetrics
from utils.tracing import add_span_attributes, trace_operation

from .compare import (
    ClassificationResult,
    SourceCounts,
    align_rows,
    classify_entities,
    classify_split_columns,
    collect_keys,
    collect_records,
    count_failing,
    count_outcomes,
    normalize_key,
    reconcile,
    source_counts,
)
from .ingest import (
    cell_to_text,
    csv_column,
    excel_column,
    parse_csv_date,
    parse_excel_date,
    read_csv_rows,
    read_excel_rows,
    require_columns,
    resolve_header,
    rows_as_text,
)
from .report import (
    CHECK_LAYOUTS,
    DATE_CHECK,
    DEVICE_ID_CHECK,
    ENTITY_CHECK,
    SPLIT_CHECK,
    generate_report,
)
from .rules import RuleSet, SplitColumnRule

logger = logging.getLogger(__name__)

ENV_PREFIX = "RECONCILE_"


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ValidationSettings:
    """
    Column names and comparison switches for one run.

    Every field can be overridden from the environment as
    ``RECONCILE_<FIELD NAME IN UPPER CASE>``, e.g.
    ``RECONCILE_CSV_ENTITY_COLUMN=entity_id``.
    """

    excel_date_header: str = "Sampling date"
    excel_id_header: str = "Device sample ID"
    csv_date_column: str = "created_on"
    csv_id_column: str = "device_sample_id"
    csv_entity_column: str = "entity"
    display_date_format: str = "%m/%d/%Y"
    case_insensitive_ids: bool = True
    case_insensitive_entity: bool = True
    strict_alignment: bool = True
    sheet_name: str | None = None
    csv_delimiter: str = ","

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "ValidationSettings":
        environ = os.environ if environ is None else environ
        overrides: dict[str, Any] = {}
        for field in fields(cls):
            value = environ.get(f"{ENV_PREFIX}{field.name.upper()}")
            if value is None:
                continue
            overrides[field.name] = _env_bool(value) if field.type in (bool, "bool") else value
        return cls(**overrides)

    def with_overrides(self, **overrides: Any) -> "ValidationSettings":
        """Copy with the given fields replaced; None values are ignored."""
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})


@dataclass(frozen=True)
class _Inputs:
    excel_rows: list[dict[str, Any]]
    csv_rows: list[dict[str, str | None]]
    split_rules: tuple[SplitColumnRule, ...]
    aligned_rows: int


def _same(value: Any) -> Any:
    return value


def _reconcile_axis(
    check: str,
    excel_values: Sequence[Any],
    csv_values: Sequence[Any],
    key_func: Callable[[Any], Hashable | None],
) -> tuple[list[ClassificationResult], dict[str, SourceCounts]]:
    results = reconcile(
        collect_keys(collect_records(excel_values, key_func)),
        collect_keys(collect_records(csv_values, key_func)),
        field=check,
    )
    counts = {
        "excel": source_counts(list(excel_values), key_func),
        "csv": source_counts(list(csv_values), key_func),
    }
    return results, counts


def _resolve_split_rules(
    rules: Sequence[SplitColumnRule],
    excel_rows: list[dict[str, Any]],
    csv_rows: list[dict[str, str | None]],
) -> tuple[SplitColumnRule, ...]:
    """
    Check that every split rule names existing columns.

    Returns:
        The rules with ``source_column`` replaced by the actual excel header

    Raises:
        IngestionError: A rule column is absent from either file
    """
    resolved = []
    for rule in rules:
        require_columns(csv_rows, rule.primary_column, rule.secondary_column)
        if excel_rows:
            rule = replace(rule, source_column=resolve_header(excel_rows, rule.source_column))
        resolved.append(rule)
    return tuple(resolved)


def _load_inputs(
    excel_path: Path,
    csv_path: Path,
    rule_set: RuleSet,
    settings: ValidationSettings,
) -> _Inputs:
    excel_rows = read_excel_rows(excel_path, settings.sheet_name)
    csv_rows = read_csv_rows(csv_path, delimiter=settings.csv_delimiter)

    if excel_rows:
        resolve_header(excel_rows, settings.excel_date_header)
        resolve_header(excel_rows, settings.excel_id_header)
    require_columns(
        csv_rows,
        settings.csv_date_column,
        settings.csv_id_column,
        settings.csv_entity_column,
    )
    split_rules = _resolve_split_rules(rule_set.split_rules, excel_rows, csv_rows)

    aligned = len(excel_rows)
    if split_rules:
        aligned = align_rows(excel_rows, csv_rows, strict=settings.strict_alignment)

    return _Inputs(excel_rows=excel_rows, csv_rows=csv_rows, split_rules=split_rules, aligned_rows=aligned)


def run_validation(
    excel_path: str | Path,
    csv_path: str | Path,
    rule_set: RuleSet,
    settings: ValidationSettings | None = None,
    metrics: ValidationMetrics | None = None,
) -> dict[str, Any]:
    """
    Run all four checks on one excel/csv pair.

    Args:
        excel_path: Spreadsheet export
        csv_path: Delimited text export of the same records
        rule_set: Prefix and split rules; must not be empty
        settings: Column names and switches (default: ``ValidationSettings()``)
        metrics: Where to record outcome counts and the run, if anywhere

    Returns:
        Report dictionary from ``generate_report``

    Raises:
        ConfigError: A rule list is empty
        IngestionError: An input file, sheet or column cannot be read
        InputAlignmentError: Row counts differ and alignment is strict
    """
    settings = settings or ValidationSettings()
    excel_path = Path(excel_path)
    csv_path = Path(csv_path)
    run_logger = ContextLogger(__name__, run_id=uuid.uuid4().hex[:8], excel=excel_path.name, csv=csv_path.name)
    start_time = time.time()

    with trace_operation("validation_run", excel=excel_path.name, csv=csv_path.name) as span:
        rule_set.validate()
        run_logger.info(
            f"Starting validation with {len(rule_set.prefix_rules)} device mapping(s) "
            f"and {len(rule_set.split_rules)} split rule(s)"
        )

        with trace_operation("ingest_inputs"):
            inputs = _load_inputs(excel_path, csv_path, rule_set, settings)
            add_span_attributes(
                excel_rows=len(inputs.excel_rows),
                csv_rows=len(inputs.csv_rows),
                aligned_rows=inputs.aligned_rows,
            )
        run_logger.info(
            f"Ingested {len(inputs.excel_rows)} excel row(s) and {len(inputs.csv_rows)} csv row(s)"
        )

        excel_rows = inputs.excel_rows
        csv_rows = inputs.csv_rows
        check_results: dict[str, list[ClassificationResult]] = {}
        axis_counts: dict[str, dict[str, SourceCounts]] = {}

        with trace_operation("check_dates"):
            check_results[DATE_CHECK], axis_counts["dates"] = _reconcile_axis(
                DATE_CHECK,
                [parse_excel_date(value) for value in excel_column(excel_rows, settings.excel_date_header)],
                [parse_csv_date(value) for value in csv_column(csv_rows, settings.csv_date_column)],
                _same,
            )

        with trace_operation("check_device_ids", case_insensitive=settings.case_insensitive_ids):
            check_results[DEVICE_ID_CHECK], axis_counts["device_ids"] = _reconcile_axis(
                DEVICE_ID_CHECK,
                [cell_to_text(value) for value in excel_column(excel_rows, settings.excel_id_header)],
                csv_column(csv_rows, settings.csv_id_column),
                partial(normalize_key, case_insensitive=settings.case_insensitive_ids),
            )

        with trace_operation("check_device_entity", case_insensitive=settings.case_insensitive_entity):
            check_results[ENTITY_CHECK] = classify_entities(
                csv_rows,
                rule_set.prefix_rules,
                case_insensitive=settings.case_insensitive_entity,
                id_column=settings.csv_id_column,
                entity_column=settings.csv_entity_column,
            )

        with trace_operation("check_column_split", rules=len(inputs.split_rules)):
            check_results[SPLIT_CHECK] = classify_split_columns(
                inputs.split_rules,
                rows_as_text(excel_rows[: inputs.aligned_rows]),
                csv_rows[: inputs.aligned_rows],
            )

        for check, results in check_results.items():
            failing = count_failing(results)
            check_logger = run_logger.bind(check=check)
            check_logger.info(f"{CHECK_LAYOUTS[check].title}: {len(results)} result(s), {failing} failing")
            if metrics is not None:
                metrics.record_outcomes(
                    check,
                    count_outcomes(results, CHECK_LAYOUTS[check].outcome_type),
                    failing=failing,
                )

        report = generate_report(
            check_results,
            source_counts=axis_counts,
            date_format=settings.display_date_format,
            sources={"excel": str(excel_path), "csv": str(csv_path)},
        )
        span.set_attribute("status", report["status"])

    duration = time.time() - start_time
    if metrics is not None:
        metrics.record_run(success=report["status"] == "PASS", duration=duration)
    run_logger.info(f"Validation finished with status {report['status']} in {duration:.2f}s")

    return report
