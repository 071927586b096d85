"""
Prometheus metrics for validation runs

Usage:
    from utils.metrics import ValidationMetrics, write_metrics_file

    metrics = ValidationMetrics()
    metrics.record_outcomes("date", {"MATCHED": 40, "ONLY_IN_A": 2}, failing=2)
    metrics.record_run(success=False, duration=3.2)
    write_metrics_file("/var/lib/node_exporter/reconcile.prom")
"""

import logging
from typing import Callable, TypeVar

from prometheus_client import CollectorRegistry, REGISTRY

from .publisher import write_metrics_file
from .validation import ValidationMetrics

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_or_create_metric(
    metric_factory: Callable[[], T],
    metric_name: str,
    registry: CollectorRegistry = REGISTRY,
) -> T:
    """
    Create a metric or return the one already registered under its name.

    Module-level metrics are created at import time; re-importing a module
    (test reloads) would otherwise fail with a duplicate registration.

    Args:
        metric_factory: Callable that creates the metric (e.g., lambda: Counter(...))
        metric_name: Name of the metric for lookup if already registered
        registry: Prometheus registry to use (default: global REGISTRY)

    Example:
        REWRITES = get_or_create_metric(
            lambda: Counter("prefix_rewrites_total", "Prefix rewrites", ["result"]),
            "prefix_rewrites_total"
        )
    """
    try:
        return metric_factory()
    except ValueError:
        existing = registry._names_to_collectors.get(metric_name)
        if existing is not None:
            return existing
        raise


__all__ = [
    "ValidationMetrics",
    "get_or_create_metric",
    "write_metrics_file",
]
