"""
Device to entity validation.

The entity column of each csv row must equal the value the prefix rules
derive from the row's device sample id. Rows whose id no rule covers are
ignored rather than failed.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from reconciliation.rules import PrefixRule
from transformation.transformers import PrefixRuleTransformer, transform

from .outcomes import ClassificationResult, EntityOutcome

logger = logging.getLogger(__name__)

DEFAULT_ID_COLUMN = "device_sample_id"
DEFAULT_ENTITY_COLUMN = "entity"


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def decide_entity(expected: str | None, entity_value: Any, case_insensitive: bool = False) -> EntityOutcome:
    """Outcome for an already transformed id and the entity found in the csv."""
    if expected is None:
        return EntityOutcome.IGNORED

    actual = _clean(entity_value)
    if actual is None:
        return EntityOutcome.MISSING_ENTITY

    if case_insensitive:
        expected = expected.upper()
        actual = actual.upper()
    return EntityOutcome.PASS if expected == actual else EntityOutcome.FAIL


def classify_entity(
    raw_id: str | None,
    entity_value: Any,
    rules: Sequence[PrefixRule],
    case_insensitive: bool = False,
) -> EntityOutcome:
    """
    Classify one device id / entity pair.

    Returns:
        IGNORED when no rule applies to ``raw_id``, MISSING_ENTITY when the
        entity is blank, PASS when it equals the expected value, else FAIL
    """
    return decide_entity(transform(_clean(raw_id), rules, case_insensitive), entity_value, case_insensitive)


def _sort_key(result: ClassificationResult):
    device_id, entity, _ = result.values
    key = entity if entity is not None else device_id
    return (key is None, key or "")


def classify_entities(
    rows: Sequence[Mapping[str, Any]],
    rules: Sequence[PrefixRule],
    case_insensitive: bool = False,
    id_column: str = DEFAULT_ID_COLUMN,
    entity_column: str = DEFAULT_ENTITY_COLUMN,
) -> list[ClassificationResult]:
    """
    Classify the entity of every csv row.

    Args:
        rows: Csv rows keyed by column name
        rules: Prefix rules in priority order
        case_insensitive: Compare prefixes and entities ignoring case
        id_column: Column holding the device sample id
        entity_column: Column holding the entity

    Returns:
        One result per row with ``values`` ``(device_id, entity, expected)``,
        sorted by entity, falling back to the device id when the entity is
        blank. Rows with neither sort last; ties keep csv order.
    """
    transformer = PrefixRuleTransformer(rules, case_insensitive)

    results = []
    for index, row in enumerate(rows, start=1):
        device_id = _clean(row.get(id_column))
        entity = _clean(row.get(entity_column))
        expected = transformer.transform(device_id, {"field_name": id_column, "row": index})

        results.append(
            ClassificationResult(
                row_index=index,
                field=entity_column,
                values=(device_id, entity, expected),
                outcome=decide_entity(expected, entity, case_insensitive),
            )
        )

    results.sort(key=_sort_key)
    logger.debug(f"Classified entities of {len(results)} csv row(s)")
    return results


@dataclass(frozen=True)
class EntityCounts:
    """Aggregate device to entity outcomes of one run."""

    total: int
    with_rule: int
    passed: int
    failed: int
    missing_entity: int
    ignored: int

    @classmethod
    def from_results(cls, results: Sequence[ClassificationResult]) -> "EntityCounts":
        passed = failed = missing_entity = ignored = 0
        for result in results:
            if result.outcome == EntityOutcome.PASS:
                passed += 1
            elif result.outcome == EntityOutcome.FAIL:
                failed += 1
            elif result.outcome == EntityOutcome.MISSING_ENTITY:
                missing_entity += 1
            else:
                ignored += 1

        with_rule = passed + failed + missing_entity
        return cls(
            total=with_rule + ignored,
            with_rule=with_rule,
            passed=passed,
            failed=failed,
            missing_entity=missing_entity,
            ignored=ignored,
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "total_rows": self.total,
            "rule_rows": self.with_rule,
            "pass_rows": self.passed,
            "fail_rows": self.failed,
            "missing_entity_rows": self.missing_entity,
            "ignored_rows": self.ignored,
        }
