"""
Ordered prefix rewriting of device sample ids.

Rules are tried in list order and the first rule whose prefix matches the
start of the id wins; a longer, more specific prefix later in the list
never overrides an earlier match. The matched prefix is replaced and the
rest of the id is appended unchanged::

    rules = [PrefixRule("767", "CCSMP")]
    transform("767010", rules)  # -> "CCSMP010"
    transform("999010", rules)  # -> None
"""

import logging
from collections.abc import Sequence
from typing import Any

from reconciliation.rules.models import PrefixRule

from .base import TRANSFORMATIONS_APPLIED, TRANSFORMATIONS_SKIPPED, Transformer

logger = logging.getLogger(__name__)


def match_rule(
    raw_id: str | None,
    rules: Sequence[PrefixRule],
    case_insensitive: bool = False,
) -> PrefixRule | None:
    """
    Return the first rule whose prefix starts ``raw_id``, or None.

    Only the first ``len(prefix)`` characters of ``raw_id`` are compared,
    and only they are case-folded; upper-casing can change a string's
    length (``"ß"`` becomes ``"SS"``).
    """
    if raw_id is None or not raw_id.strip():
        return None

    for rule in rules:
        n = len(rule.prefix)
        if len(raw_id) < n:
            continue
        head = raw_id[:n]
        if case_insensitive:
            matched = head.upper() == rule.prefix.upper()
        else:
            matched = head == rule.prefix
        if matched:
            return rule
    return None


def transform(
    raw_id: str | None,
    rules: Sequence[PrefixRule],
    case_insensitive: bool = False,
) -> str | None:
    """
    Compute the expected entity value for a device id.

    Args:
        raw_id: Device id as read from the source (already trimmed)
        rules: Prefix rules in priority order
        case_insensitive: Compare prefixes ignoring case

    Returns:
        ``replacement + raw_id[len(prefix):]`` for the first matching rule,
        or None when no rule applies or the id is blank
    """
    rule = match_rule(raw_id, rules, case_insensitive)
    if rule is None:
        return None
    return rule.replacement + raw_id[len(rule.prefix):]


class PrefixRuleTransformer(Transformer):
    """
    Transformer form of ``transform`` bound to one rule list.

    Counts rewritten and unmatched ids so a run shows how much of the input
    the mapping file covers.
    """

    def __init__(self, rules: Sequence[PrefixRule], case_insensitive: bool = False):
        self.rules = tuple(rules)
        self.case_insensitive = case_insensitive

    def transform(self, value: Any, context: dict[str, Any] | None = None) -> str | None:
        if value is not None and not isinstance(value, str):
            value = str(value)

        expected = transform(value, self.rules, self.case_insensitive)

        counter = TRANSFORMATIONS_APPLIED if expected is not None else TRANSFORMATIONS_SKIPPED
        counter.labels(transformer_type=self.get_type()).inc()

        if expected is None and context:
            logger.debug(f"No prefix rule for {value!r} in {context.get('field_name', 'unknown')}")

        return expected
