"""
Metrics for validation runs.

Tracks runs, per-check outcome counts, and run duration so that a batch
scheduler can alert on failing or missing validations.
"""

import logging
import time
from collections.abc import Mapping
from typing import Optional

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    CollectorRegistry,
    REGISTRY,
)

logger = logging.getLogger(__name__)


class ValidationMetrics:
    """
    Metrics for spreadsheet/CSV validation runs

    Pass a dedicated ``CollectorRegistry`` when more than one instance can
    live in the same process (tests, repeated runs in a notebook).
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        """
        Initialize validation metrics

        Args:
            registry: Custom Prometheus registry (default: global REGISTRY)
        """
        self.registry = registry or REGISTRY

        self.validation_runs_total = Counter(
            "validation_runs_total",
            "Total number of validation runs",
            ["status"],
            registry=self.registry,
        )

        self.validation_duration_seconds = Histogram(
            "validation_duration_seconds",
            "Duration of validation runs in seconds",
            buckets=(0.1, 0.5, 1, 5, 10, 30, 60, 300),
            registry=self.registry,
        )

        self.validation_last_run_timestamp = Gauge(
            "validation_last_run_timestamp",
            "Timestamp of the last completed validation run",
            registry=self.registry,
        )

        self.validation_outcomes_total = Counter(
            "validation_outcomes_total",
            "Classified comparison units by check and outcome",
            ["check", "outcome"],
            registry=self.registry,
        )

        self.validation_failures = Gauge(
            "validation_failures",
            "Failing comparison units in the last run, by check",
            ["check"],
            registry=self.registry,
        )

    def record_run(self, success: bool, duration: float) -> None:
        """
        Record a finished validation run

        Args:
            success: Whether the run produced a PASS report
            duration: Duration in seconds
        """
        status = "pass" if success else "fail"
        self.validation_runs_total.labels(status=status).inc()
        self.validation_duration_seconds.observe(duration)
        self.validation_last_run_timestamp.set(time.time())

        logger.info(f"Recorded validation run: status={status}, duration={duration:.2f}s")

    def record_outcomes(
        self,
        check: str,
        counts: Mapping[str, int],
        failing: int = 0,
    ) -> None:
        """
        Record the outcome distribution of one check

        Args:
            check: Check name (date, device_id, device_entity, column_split)
            counts: Mapping of outcome name to occurrence count
            failing: Number of results with a failing outcome
        """
        for outcome, count in counts.items():
            if count:
                self.validation_outcomes_total.labels(
                    check=check, outcome=outcome
                ).inc(count)

        self.validation_failures.labels(check=check).set(failing)

        if failing:
            logger.warning(f"Check {check} has {failing} failing result(s)")
