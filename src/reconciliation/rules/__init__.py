"""
Rule store: ordered device prefix mappings and column split rules.
"""

from .loader import (
    DEVICE_MAPPINGS_FILENAME,
    SPLIT_RULES_FILENAME,
    default_search_dirs,
    find_config_file,
    load_prefix_rules,
    load_rule_set,
    load_split_rules,
    parse_prefix_rules,
    parse_split_rules,
)
from .models import PrefixRule, RuleSet, SplitColumnRule

__all__ = [
    "PrefixRule",
    "SplitColumnRule",
    "RuleSet",
    "load_rule_set",
    "load_prefix_rules",
    "load_split_rules",
    "parse_prefix_rules",
    "parse_split_rules",
    "find_config_file",
    "default_search_dirs",
    "DEVICE_MAPPINGS_FILENAME",
    "SPLIT_RULES_FILENAME",
]
