"""
Two-source key reconciliation.

Used for the date and device id checks: each side is reduced to its set of
distinct normalized keys, and every key of the union is classified as
present in both sources, only in the excel source (A), or only in the csv
source (B).
"""

import logging
from collections.abc import Callable, Hashable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .outcomes import ClassificationResult, ReconciliationOutcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComparableRecord:
    """A normalized comparison key and the raw value kept for display."""

    key: Hashable
    raw_value: Any


@dataclass(frozen=True)
class SourceCounts:
    """Row statistics of one source for one comparison axis."""

    total: int
    used: int
    distinct: int

    def to_dict(self, prefix: str) -> dict[str, int]:
        return {
            f"{prefix}_total": self.total,
            f"{prefix}_used": self.used,
            f"{prefix}_distinct": self.distinct,
        }


def normalize_key(value: Any, case_insensitive: bool = False) -> str | None:
    """
    Normalize a text value into a comparison key.

    Trims whitespace, maps blank to None, and upper-cases when
    ``case_insensitive`` is set.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text.upper() if case_insensitive else text


def collect_records(
    values: Iterable[Any],
    key_func: Callable[[Any], Hashable | None],
) -> list[ComparableRecord]:
    """
    Build comparable records from raw values, dropping those without a key.

    Duplicates are kept; ``collect_keys`` collapses them.
    """
    records = []
    for value in values:
        key = key_func(value)
        if key is not None:
            raw = value.strip() if isinstance(value, str) else value
            records.append(ComparableRecord(key, raw))
    return records


def collect_keys(records: Iterable[ComparableRecord]) -> dict[Hashable, Any]:
    """
    Collapse records to distinct keys.

    The first raw value seen for a key is kept for display, so the outcome
    of a run only depends on the input order, not on hashing.
    """
    keys: dict[Hashable, Any] = {}
    for record in records:
        keys.setdefault(record.key, record.raw_value)
    return keys


def source_counts(values: list[Any], key_func: Callable[[Any], Hashable | None]) -> SourceCounts:
    """Total rows, rows with a usable key, and distinct keys of one source."""
    keys = [key_func(value) for value in values]
    used = [key for key in keys if key is not None]
    return SourceCounts(total=len(values), used=len(used), distinct=len(set(used)))


def _as_mapping(keys: Mapping[Hashable, Any] | Iterable[Hashable]) -> Mapping[Hashable, Any]:
    if isinstance(keys, Mapping):
        return keys
    return {key: key for key in keys}


def reconcile(
    keys_a: Mapping[Hashable, Any] | Iterable[Hashable],
    keys_b: Mapping[Hashable, Any] | Iterable[Hashable],
    field: str = "key",
) -> list[ClassificationResult]:
    """
    Classify every distinct key of two sources.

    Args:
        keys_a: Keys of the excel source, either a set of keys or a mapping
            of key to raw display value
        keys_b: Keys of the csv source, same shape as ``keys_a``
        field: Name of the compared field, copied onto each result

    Returns:
        One result per key of the union, sorted ascending by key. ``values``
        is ``(raw_a, raw_b)`` with None for the side missing the key. Keys
        of both sources must be mutually orderable (all text or all dates).
    """
    a = _as_mapping(keys_a)
    b = _as_mapping(keys_b)

    results = []
    for key in sorted(a.keys() | b.keys()):
        in_a = key in a
        in_b = key in b
        if in_a and in_b:
            outcome = ReconciliationOutcome.MATCHED
        elif in_a:
            outcome = ReconciliationOutcome.ONLY_IN_A
        else:
            outcome = ReconciliationOutcome.ONLY_IN_B

        results.append(
            ClassificationResult(
                row_index=None,
                field=field,
                values=(a.get(key) if in_a else None, b.get(key) if in_b else None),
                outcome=outcome,
            )
        )

    logger.debug(
        f"Reconciled {field}: {len(a)} excel key(s), {len(b)} csv key(s), "
        f"{len(results)} distinct"
    )
    return results
