"""Junk classification of non-subsidy records.

Navigation pages, announcements, loan programs, association-internal
benefits and category landing pages are detected by an ordered taxonomy of
text patterns and removed from the corpus before duplicate detection.
"""

from subdedupe.junk.classifier import JunkClassifier, is_bracket_title, is_junk
from subdedupe.junk.rules import (
    BRACKET_RULES,
    DEFAULT_RULE_SET,
    GENERIC_RULES,
    MISSING_AMOUNT_RULES,
    JunkCategory,
    JunkRule,
    JunkRuleSet,
    RuleKind,
)

__all__ = [
    "BRACKET_RULES",
    "DEFAULT_RULE_SET",
    "GENERIC_RULES",
    "MISSING_AMOUNT_RULES",
    "JunkCategory",
    "JunkClassifier",
    "JunkRule",
    "JunkRuleSet",
    "RuleKind",
    "is_bracket_title",
    "is_junk",
]
