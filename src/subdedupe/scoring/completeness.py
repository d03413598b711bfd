"""Completeness scoring used to pick the record a duplicate cluster keeps.

The score is additive: one source priority, independent bonuses for each
populated field, and a description-length tier. Magnitudes only matter
relative to other members of the same cluster.
"""

import re
from dataclasses import dataclass, field
from typing import Any

from subdedupe.models import SubsidyRecord

__all__ = [
    "DEFAULT_FIELD_BONUSES",
    "DEFAULT_DESCRIPTION_TIERS",
    "DEFAULT_SOURCE_PRIORITY",
    "CompletenessScorer",
    "ScoreBreakdown",
    "SourcePriorityTable",
    "SourceRule",
    "compute_completeness_score",
]


@dataclass(frozen=True)
class SourceRule:
    """External-id prefix rule.

    Attributes
    ----------
    prefix : str
        Required ``external_id`` prefix, e.g. "jnet21:".
    source : str
        Source name reported in breakdowns.
    priority : int
        Score contribution.
    """

    prefix: str
    source: str
    priority: int


@dataclass(frozen=True)
class SourcePriorityTable:
    """Ordered source-priority lookup keyed by ``external_id`` shape.

    Prefix rules are checked first, then the primary registry's bare
    alphanumeric code shape, then the default floor.

    Attributes
    ----------
    prefix_rules : tuple[SourceRule, ...]
        Prefix rules in check order.
    registry_source : str
        Name of the registry whose ids are bare codes.
    registry_priority : int
        Priority of registry-coded records.
    registry_pattern : str
        Full-match pattern of a registry code.
    default_source : str
        Name reported for unrecognized provenance.
    default_priority : int
        Floor priority for unrecognized provenance.
    """

    prefix_rules: tuple[SourceRule, ...]
    registry_source: str = "jgrants"
    registry_priority: int = 80
    registry_pattern: str = r"[A-Z0-9]+"
    default_source: str = "default"
    default_priority: int = 10
    _registry_re: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Compile the registry code pattern."""
        object.__setattr__(self, "_registry_re", re.compile(self.registry_pattern))

    def lookup(self, external_id: str) -> tuple[str, int]:
        """Resolve source name and priority for an external id.

        Parameters
        ----------
        external_id : str
            Provenance string of a record.

        Returns
        -------
        tuple[str, int]
            (source name, priority) of the first matching rule.
        """
        for rule in self.prefix_rules:
            if external_id.startswith(rule.prefix):
                return rule.source, rule.priority
        if self._registry_re.fullmatch(external_id):
            return self.registry_source, self.registry_priority
        return self.default_source, self.default_priority


DEFAULT_SOURCE_PRIORITY = SourcePriorityTable(
    prefix_rules=(
        SourceRule("sample:", "sample", 100),
        SourceRule("jnet21:", "jnet21", 70),
        SourceRule("mirasapo:", "mirasapo", 60),
        SourceRule("pref:", "pref", 50),
        SourceRule("city:", "city", 45),
        SourceRule("mhlw:", "mhlw", 40),
        SourceRule("maff:", "maff", 40),
        SourceRule("env:", "env", 40),
    ),
)

# (attribute, bonus) in evaluation order
DEFAULT_FIELD_BONUSES: tuple[tuple[str, int], ...] = (
    ("max_amount", 25),
    ("subsidy_rate", 20),
    ("start_date", 15),
    ("end_date", 15),
    ("catch_phrase", 5),
    ("industry", 5),
    ("front_url", 5),
    ("target_area", 3),
)

# (exclusive minimum length, bonus), longest first
DEFAULT_DESCRIPTION_TIERS: tuple[tuple[int, int], ...] = (
    (500, 15),
    (200, 10),
    (50, 5),
)


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-term decomposition of a completeness score.

    Attributes
    ----------
    source : str
        Source resolved from the external id.
    source_priority : int
        Priority contribution.
    field_bonuses : dict[str, int]
        Bonus per populated field.
    description_bonus : int
        Description-length tier bonus.
    """

    source: str
    source_priority: int
    field_bonuses: dict[str, int]
    description_bonus: int

    @property
    def total(self) -> int:
        """Total completeness score."""
        return self.source_priority + sum(self.field_bonuses.values()) + self.description_bonus

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for audit events."""
        return {
            "source": self.source,
            "source_priority": self.source_priority,
            "field_bonuses": dict(self.field_bonuses),
            "description_bonus": self.description_bonus,
            "total": self.total,
        }


def _is_populated(value: Any) -> bool:
    # Zero amounts and empty strings/lists carry no information.
    if isinstance(value, str):
        return bool(value.strip())
    return bool(value)


class CompletenessScorer:
    """Deterministic completeness scoring with injected tables.

    Parameters
    ----------
    source_priority : SourcePriorityTable, optional
        External-id lookup table.
    field_bonuses : tuple[tuple[str, int], ...], optional
        Record attribute and bonus pairs.
    description_tiers : tuple[tuple[int, int], ...], optional
        Description length thresholds, longest first.
    """

    def __init__(
        self,
        source_priority: SourcePriorityTable = DEFAULT_SOURCE_PRIORITY,
        field_bonuses: tuple[tuple[str, int], ...] = DEFAULT_FIELD_BONUSES,
        description_tiers: tuple[tuple[int, int], ...] = DEFAULT_DESCRIPTION_TIERS,
    ) -> None:
        self.source_priority = source_priority
        self.field_bonuses = field_bonuses
        self.description_tiers = tuple(sorted(description_tiers, reverse=True))

    def explain(self, record: SubsidyRecord) -> ScoreBreakdown:
        """Score a record term by term.

        Parameters
        ----------
        record : SubsidyRecord
            Record to score.

        Returns
        -------
        ScoreBreakdown
            Decomposed score.
        """
        source, priority = self.source_priority.lookup(record.external_id or "")

        bonuses: dict[str, int] = {}
        for attr, bonus in self.field_bonuses:
            if _is_populated(getattr(record, attr, None)):
                bonuses[attr] = bonus

        description_bonus = 0
        if isinstance(record.description, str):
            length = len(record.description)
            for min_length, bonus in self.description_tiers:
                if length > min_length:
                    description_bonus = bonus
                    break

        return ScoreBreakdown(
            source=source,
            source_priority=priority,
            field_bonuses=bonuses,
            description_bonus=description_bonus,
        )

    def score(self, record: SubsidyRecord) -> int:
        """Compute the completeness score of a record."""
        return self.explain(record).total


_DEFAULT_SCORER = CompletenessScorer()


def compute_completeness_score(record: SubsidyRecord) -> int:
    """Score a record with the default tables."""
    return _DEFAULT_SCORER.score(record)
