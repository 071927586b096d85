"""
Base transformer class and shared transformation metrics.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict

from prometheus_client import Counter

from utils.metrics import get_or_create_metric

logger = logging.getLogger(__name__)


TRANSFORMATIONS_APPLIED = get_or_create_metric(
    lambda: Counter(
        "transformations_applied_total",
        "Values rewritten by a transformer",
        ["transformer_type"],
    ),
    "transformations_applied_total",
)

TRANSFORMATIONS_SKIPPED = get_or_create_metric(
    lambda: Counter(
        "transformations_skipped_total",
        "Values no transformer rule applied to",
        ["transformer_type"],
    ),
    "transformations_skipped_total",
)


class Transformer(ABC):
    """Base class for value transformers."""

    @abstractmethod
    def transform(self, value: Any, context: Dict[str, Any]) -> Any:
        """
        Transform a single value.

        Args:
            value: Value to transform
            context: Transformation context (field_name, row, etc.)

        Returns:
            Transformed value, or None when the transformer does not apply
        """

    def get_type(self) -> str:
        """Get transformer type for metrics."""
        return self.__class__.__name__
