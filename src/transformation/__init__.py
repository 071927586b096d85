"""
Identifier transformation for the reconciliation tool.

Provides the rule-driven rewrite of device sample ids into expected entity
ids.
"""

from transformation.transformers import (
    PrefixRuleTransformer,
    Transformer,
    match_rule,
    transform,
)

__all__ = [
    "Transformer",
    "PrefixRuleTransformer",
    "match_rule",
    "transform",
]
