"""
Property-based tests for the classification engine using Hypothesis.

Tests invariants that should hold for all inputs:
- Prefix rewriting: first matching rule wins, case folding only affects prefixes
- Key reconciliation: total coverage, symmetry between sources
- Split classification: every input gets exactly one outcome
- Entity classification: aggregate counts add up
"""

from hypothesis import given, settings, strategies as st

from reconciliation.compare import (
    EntityCounts,
    EntityOutcome,
    ReconciliationOutcome,
    SplitOutcome,
    classify_entities,
    classify_split,
    reconcile,
)
from reconciliation.rules import PrefixRule
from transformation import match_rule, transform

id_text = st.text(alphabet="0123456789ABCabc", min_size=0, max_size=10)
prefixes = st.text(alphabet="0123456789ABCabc", min_size=1, max_size=4)
replacements = st.text(alphabet="ABCDEFGHXYZ", min_size=0, max_size=6)
prefix_rules = st.lists(
    st.builds(PrefixRule, prefix=prefixes, replacement=replacements),
    max_size=6,
)
cell_values = st.one_of(
    st.none(),
    st.just(""),
    st.just("   "),
    st.text(alphabet="0123456789.", min_size=1, max_size=6),
    st.text(alphabet="0123456789.<>-eE ", min_size=1, max_size=6),
)


# Property: The first rule whose prefix matches decides the rewrite
@given(raw_id=id_text, rules=prefix_rules)
def test_first_matching_rule_wins(raw_id: str, rules: list[PrefixRule]):
    expected = transform(raw_id, rules)
    matching = [rule for rule in rules if raw_id and raw_id.startswith(rule.prefix)]

    if not matching:
        assert expected is None
    else:
        first = matching[0]
        assert match_rule(raw_id, rules) is first
        assert expected == first.replacement + raw_id[len(first.prefix):]


# Property: Adding rules after a match never changes the result
@given(data=st.data(), rules=prefix_rules.filter(bool), suffix=id_text, extra=prefix_rules)
def test_appended_rules_do_not_override(data, rules, suffix: str, extra):
    chosen = data.draw(st.sampled_from(rules))
    raw_id = chosen.prefix + suffix
    base = transform(raw_id, rules)

    assert base is not None
    assert transform(raw_id, rules + extra) == base


# Property: Case-insensitive matching is blind to the case of the id prefix
@given(raw_id=id_text, rules=prefix_rules)
def test_case_folded_prefix_matching(raw_id: str, rules):
    upper = transform(raw_id.upper(), rules, case_insensitive=True)
    lower = transform(raw_id.lower(), rules, case_insensitive=True)

    assert (upper is None) == (lower is None)
    if upper is not None:
        assert upper.upper() == lower.upper()


# Property: The suffix after the matched prefix is kept verbatim
@given(prefix=prefixes, replacement=replacements, suffix=id_text)
def test_suffix_preserved(prefix: str, replacement: str, suffix: str):
    rules = [PrefixRule(prefix, replacement)]

    assert transform(prefix + suffix, rules) == replacement + suffix


# Property: Every key of the union is classified exactly once
@given(
    keys_a=st.sets(st.text(alphabet="abcdef0123", min_size=1, max_size=5), max_size=15),
    keys_b=st.sets(st.text(alphabet="abcdef0123", min_size=1, max_size=5), max_size=15),
)
def test_reconcile_total_coverage(keys_a: set, keys_b: set):
    results = reconcile(keys_a, keys_b)
    by_key = {}
    for result in results:
        raw_a, raw_b = result.values
        by_key[raw_a if raw_a is not None else raw_b] = result.outcome

    assert len(results) == len(keys_a | keys_b)
    assert set(by_key) == keys_a | keys_b
    for key, outcome in by_key.items():
        if key in keys_a and key in keys_b:
            assert outcome == ReconciliationOutcome.MATCHED
        elif key in keys_a:
            assert outcome == ReconciliationOutcome.ONLY_IN_A
        else:
            assert outcome == ReconciliationOutcome.ONLY_IN_B


# Property: Swapping the sources swaps ONLY_IN_A and ONLY_IN_B
@given(
    keys_a=st.sets(st.integers(min_value=0, max_value=50), max_size=20),
    keys_b=st.sets(st.integers(min_value=0, max_value=50), max_size=20),
)
def test_reconcile_symmetry(keys_a: set, keys_b: set):
    swap = {
        ReconciliationOutcome.MATCHED: ReconciliationOutcome.MATCHED,
        ReconciliationOutcome.ONLY_IN_A: ReconciliationOutcome.ONLY_IN_B,
        ReconciliationOutcome.ONLY_IN_B: ReconciliationOutcome.ONLY_IN_A,
    }

    forward = reconcile(keys_a, keys_b)
    backward = reconcile(keys_b, keys_a)

    assert [swap[result.outcome] for result in forward] == [result.outcome for result in backward]


# Property: Reconciling a source with itself matches everything
@given(keys=st.sets(st.text(min_size=1, max_size=8), max_size=20))
def test_reconcile_identity(keys: set):
    results = reconcile(keys, keys)

    assert all(result.outcome == ReconciliationOutcome.MATCHED for result in results)


# Property: Split classification is total and consistent with its inputs
@given(excel=cell_values, raw=cell_values, lg=cell_values)
def test_split_classification_total(excel, raw, lg):
    outcome = classify_split(excel, raw, lg)
    assert isinstance(outcome, SplitOutcome)

    excel_text = (excel or "").strip()
    raw_text = (raw or "").strip()
    if not excel_text and raw_text:
        assert outcome == SplitOutcome.ADDITIONAL_VALUE
    elif excel_text and excel_text != raw_text:
        assert outcome == SplitOutcome.RAW_MISMATCH
    elif not excel_text:
        assert outcome == SplitOutcome.PASS
    else:
        assert outcome in (SplitOutcome.PASS, SplitOutcome.LG_MISMATCH)


# Property: A value copied faithfully into raw and LG always passes
@given(value=st.text(alphabet="0123456789.<>-", min_size=1, max_size=8))
def test_split_faithful_copy_passes(value: str):
    has_special = any(ch not in "0123456789." for ch in value)
    lg = value if has_special else None

    assert classify_split(value, value, lg) == SplitOutcome.PASS


# Property: Entity aggregate counts are consistent with the results
@settings(max_examples=50)
@given(
    rows=st.lists(
        st.fixed_dictionaries({
            "device_sample_id": st.one_of(st.none(), st.sampled_from(["767001", "768002", "999003", "77x"])),
            "entity": st.one_of(st.none(), st.just(""), st.sampled_from(["CCSMP001", "ccsmq002", "WRONG"])),
        }),
        max_size=20,
    ),
    case_insensitive=st.booleans(),
)
def test_entity_counts_consistent(rows, case_insensitive: bool):
    rules = [PrefixRule("767", "CCSMP"), PrefixRule("768", "CCSMQ")]

    results = classify_entities(rows, rules, case_insensitive=case_insensitive)
    counts = EntityCounts.from_results(results)

    assert len(results) == len(rows)
    assert counts.total == len(rows)
    assert counts.total == counts.with_rule + counts.ignored
    assert counts.with_rule == counts.passed + counts.failed + counts.missing_entity
    assert sorted(result.row_index for result in results) == list(range(1, len(rows) + 1))
    for result in results:
        device_id, entity, expected = result.values
        if expected is None:
            assert result.outcome == EntityOutcome.IGNORED
        elif entity is None:
            assert result.outcome == EntityOutcome.MISSING_ENTITY
