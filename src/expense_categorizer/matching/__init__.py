"""Keyword matching, split rules and unmatched-transaction resolvers."""

from .categorizer import CategoryMatcher, categorize
from .resolvers import Resolver, console_resolver, mapping_resolver, no_op_resolver
from .rules import KeywordAmountSplitRule, SplitRule, build_split_rules

__all__ = [
    "CategoryMatcher",
    "categorize",
    "Resolver",
    "console_resolver",
    "mapping_resolver",
    "no_op_resolver",
    "KeywordAmountSplitRule",
    "SplitRule",
    "build_split_rules",
]
