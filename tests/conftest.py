"""
Pytest configuration and fixtures for validation tests.
Provides shared rule sets and builders for excel/csv input files.
"""

import csv
import json
from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest
from openpyxl import Workbook
from prometheus_client import CollectorRegistry

from reconciliation.rules import PrefixRule, RuleSet, SplitColumnRule


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def config_dir(project_root: Path) -> Path:
    """Directory holding the sample rule files."""
    return project_root / "config"


@pytest.fixture
def prefix_rules() -> tuple[PrefixRule, ...]:
    return (PrefixRule("767", "CCSMP"), PrefixRule("768", "CCSMQ"))


@pytest.fixture
def split_rules() -> tuple[SplitColumnRule, ...]:
    return (SplitColumnRule("Result", "result_raw", "result_lg", "Result split"),)


@pytest.fixture
def rule_set(prefix_rules, split_rules) -> RuleSet:
    return RuleSet(prefix_rules=prefix_rules, split_rules=split_rules)


@pytest.fixture
def registry() -> CollectorRegistry:
    """Fresh Prometheus registry so metric names never collide between tests."""
    return CollectorRegistry()


@pytest.fixture
def write_xlsx(tmp_path: Path) -> Callable[..., Path]:
    """Build an xlsx file from a header row and data rows."""

    def _write(
        headers: Sequence[str],
        rows: Sequence[Sequence[Any]],
        name: str = "input.xlsx",
        sheet_title: str = "Samples",
    ) -> Path:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = sheet_title
        sheet.append(list(headers))
        for row in rows:
            sheet.append(list(row))
        path = tmp_path / name
        workbook.save(path)
        return path

    return _write


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """Build a csv file from a header row and data rows."""

    def _write(
        headers: Sequence[str],
        rows: Sequence[Sequence[Any]],
        name: str = "export.csv",
    ) -> Path:
        path = tmp_path / name
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(headers)
            writer.writerows(rows)
        return path

    return _write


@pytest.fixture
def write_rule_files(tmp_path: Path) -> Callable[..., Path]:
    """Write both rule documents into a directory and return it."""

    def _write(
        mappings: list[dict[str, Any]] | None = None,
        splits: list[dict[str, Any]] | None = None,
        directory: str = "rules",
    ) -> Path:
        target = tmp_path / directory
        target.mkdir(parents=True, exist_ok=True)
        if mappings is None:
            mappings = [{"prefix": "767", "replacement": "CCSMP"}]
        if splits is None:
            splits = [
                {
                    "excelColumn": "Result",
                    "rawColumn": "result_raw",
                    "lgColumn": "result_lg",
                    "description": "Result split",
                }
            ]
        (target / "device-entity-mappings-simplified.json").write_text(
            json.dumps({"deviceMappings": mappings}), encoding="utf-8"
        )
        (target / "column-split-validations.json").write_text(
            json.dumps({"columnSplitValidations": splits}), encoding="utf-8"
        )
        return target

    return _write


EXCEL_HEADERS = ("Sampling date", "Device sample ID", "Result")
CSV_HEADERS = ("created_on", "device_sample_id", "entity", "result_raw", "result_lg")


@pytest.fixture
def matching_inputs(write_xlsx, write_csv) -> tuple[Path, Path]:
    """An excel/csv pair on which every check passes."""
    excel = write_xlsx(
        EXCEL_HEADERS,
        [
            (datetime(2024, 3, 1, 9, 30), "767010", 12.5),
            (datetime(2024, 3, 2, 10, 0), "768020", "<0.5"),
        ],
    )
    csv_path = write_csv(
        CSV_HEADERS,
        [
            ("03/01/2024", "767010", "CCSMP010", "12.5", ""),
            ("03/02/2024", "768020", "CCSMQ020", "<0.5", "<0.5"),
        ],
    )
    return excel, csv_path
