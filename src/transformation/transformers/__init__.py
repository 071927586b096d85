"""
Value transformers.

Currently provides the ordered prefix rewrite used to derive the expected
entity id from a device sample id.
"""

from .base import Transformer
from .prefix import PrefixRuleTransformer, match_rule, transform

__all__ = [
    "Transformer",
    "PrefixRuleTransformer",
    "match_rule",
    "transform",
]
