"""
Outcome taxonomy and classification result rows.

Every comparison unit (a distinct key, a csv row, or one split column in
one row) receives exactly one outcome. Outcomes are ``str`` enums so they
serialize directly into JSON reports; ``label`` holds the wording used in
the spreadsheet report.
"""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Outcome(str, Enum):
    """Base for outcome enums; members are ``(value, label, failing)``."""

    def __new__(cls, value: str, label: str, failing: bool):
        member = str.__new__(cls, value)
        member._value_ = value
        member.label = label
        member.failing = failing
        return member

    def __str__(self) -> str:
        return self.value


class ReconciliationOutcome(Outcome):
    """Presence of a distinct key in the excel (A) and csv (B) sources."""

    MATCHED = ("MATCHED", "Present in both xlsx and csv and it matches", False)
    ONLY_IN_A = ("ONLY_IN_A", "Present in xlsx only", True)
    ONLY_IN_B = ("ONLY_IN_B", "Present in csv only", True)


class SplitOutcome(Outcome):
    """Result of checking one excel value against its raw and LG csv columns."""

    PASS = ("PASS", "PASS", False)
    RAW_MISMATCH = ("RAW_MISMATCH", "RAW_MISMATCH", True)
    LG_MISMATCH = ("LG_MISMATCH", "LG_MISMATCH", True)
    ADDITIONAL_VALUE = ("ADDITIONAL_VALUE", "ADDITIONAL_VALUE", True)


class EntityOutcome(Outcome):
    """Result of checking a csv entity against the id derived from its device id."""

    PASS = ("PASS", "PASS", False)
    FAIL = ("FAIL", "FAIL", True)
    MISSING_ENTITY = ("MISSING_ENTITY", "MISSING ENTITY", True)
    IGNORED = ("IGNORED", "IGNORED (no rule)", False)


@dataclass(frozen=True)
class ClassificationResult:
    """
    One classified comparison unit.

    Attributes:
        row_index: 1-based source row for row-oriented checks, None for
            key reconciliation
        field: Column or field the unit belongs to
        values: The compared inputs, in the order the check reports them
        outcome: Assigned outcome
    """

    row_index: int | None
    field: str
    values: tuple
    outcome: Outcome

    def to_dict(self) -> dict[str, Any]:
        return {
            "row_index": self.row_index,
            "field": self.field,
            "values": list(self.values),
            "outcome": self.outcome.value,
        }


def count_outcomes(
    results: Iterable[ClassificationResult],
    outcome_type: type[Outcome],
) -> dict[str, int]:
    """
    Count results per outcome.

    Every member of ``outcome_type`` appears in the mapping, with 0 when it
    did not occur, so summaries always have the same shape.
    """
    counts = Counter(result.outcome.value for result in results)
    return {member.value: counts.get(member.value, 0) for member in outcome_type}


def count_failing(results: Iterable[ClassificationResult]) -> int:
    return sum(1 for result in results if result.outcome.failing)
