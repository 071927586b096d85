"""
Metrics export for batch runs.

A validation run is short-lived, so instead of serving ``/metrics`` the
registry is written to a file picked up by the node exporter textfile
collector.
"""

import logging
from pathlib import Path
from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, write_to_textfile

logger = logging.getLogger(__name__)


def write_metrics_file(
    path: str | Path,
    registry: Optional[CollectorRegistry] = None,
) -> Path:
    """
    Write all metrics of a registry in Prometheus text format

    Args:
        path: Target ``.prom`` file; parent directories are created
        registry: Registry to export (default: global REGISTRY)

    Returns:
        Path of the written file
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    # write_to_textfile writes a temp file and renames it into place
    write_to_textfile(str(target), registry or REGISTRY)
    logger.info(f"Metrics written to {target}")

    return target
