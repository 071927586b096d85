"""
Classification engine for the excel / csv validation checks.

This submodule provides the pure comparison logic, free of file handling:
- Key reconciliation for dates and device ids (fields)
- Column split validation (split)
- Device to entity validation (entity)
- Outcome enums, result rows and counting helpers (outcomes)
"""

from .entity import EntityCounts, classify_entities, classify_entity, decide_entity
from .fields import (
    ComparableRecord,
    SourceCounts,
    collect_keys,
    collect_records,
    normalize_key,
    reconcile,
    source_counts,
)
from .outcomes import (
    ClassificationResult,
    EntityOutcome,
    Outcome,
    ReconciliationOutcome,
    SplitOutcome,
    count_failing,
    count_outcomes,
)
from .split import align_rows, classify_split, classify_split_columns, is_blank

__all__ = [
    'ClassificationResult',
    'ComparableRecord',
    'EntityCounts',
    'EntityOutcome',
    'Outcome',
    'ReconciliationOutcome',
    'SourceCounts',
    'SplitOutcome',
    'align_rows',
    'classify_entities',
    'classify_entity',
    'classify_split',
    'classify_split_columns',
    'collect_keys',
    'collect_records',
    'count_failing',
    'count_outcomes',
    'decide_entity',
    'is_blank',
    'normalize_key',
    'reconcile',
    'source_counts',
]
