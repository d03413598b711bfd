"""Junk classifier: flags records that are not genuine subsidy entries."""

import re

from subdedupe.junk.rules import DEFAULT_RULE_SET, JunkRule, JunkRuleSet
from subdedupe.models import SubsidyRecord

__all__ = ["JunkClassifier", "is_bracket_title", "is_junk"]

# 【令和8年2月5日】-style prefixes are dates, not the aggregator's location bracket.
DATE_BRACKET_RE = re.compile(r"^【令和\d+年")


def is_bracket_title(title: str) -> bool:
    """Check for the aggregator's ``【location】category：name`` convention.

    Parameters
    ----------
    title : str
        Record title.

    Returns
    -------
    bool
        True for location-bracket titles; date-bracket titles are excluded.
    """
    if DATE_BRACKET_RE.match(title):
        return False
    return title.startswith("【") and "】" in title


class JunkClassifier:
    """Ordered first-match junk classification.

    Parameters
    ----------
    rules : JunkRuleSet, optional
        Rule families to evaluate, by default the built-in taxonomy.
    missing_amount_pass : bool, optional
        Whether records without ``max_amount`` are also checked against the
        missing-amount family, by default True.
    """

    def __init__(
        self,
        rules: JunkRuleSet = DEFAULT_RULE_SET,
        *,
        missing_amount_pass: bool = True,
    ) -> None:
        self.rules = rules
        self.missing_amount_pass = missing_amount_pass

    def classify(self, record: SubsidyRecord) -> JunkRule | None:
        """Return the first rule matching the record, if any.

        Records without a title are never junk.

        Parameters
        ----------
        record : SubsidyRecord
            Record to classify.

        Returns
        -------
        JunkRule | None
            Matching rule, or None for genuine entries.
        """
        if not record.has_title:
            return None

        title = record.title or ""
        bracket = is_bracket_title(title)

        families: list[tuple[JunkRule, ...]] = []
        if bracket:
            families.append(self.rules.bracket)
        families.append(self.rules.generic)
        if self.missing_amount_pass and not bracket and record.max_amount is None:
            families.append(self.rules.missing_amount)

        for family in families:
            for rule in family:
                if rule.matches(title):
                    return rule
        return None

    def is_junk(self, record: SubsidyRecord) -> bool:
        """Check whether a record is junk."""
        return self.classify(record) is not None


_DEFAULT_CLASSIFIER = JunkClassifier()


def is_junk(record: SubsidyRecord) -> bool:
    """Classify a record with the built-in taxonomy."""
    return _DEFAULT_CLASSIFIER.is_junk(record)
