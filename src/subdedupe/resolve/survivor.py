"""Survivor selection for duplicate clusters."""

from collections.abc import Sequence

from subdedupe.models import SubsidyRecord
from subdedupe.scoring import CompletenessScorer

__all__ = ["rank_members", "select_survivor"]


def rank_members(
    members: Sequence[SubsidyRecord],
    scorer: CompletenessScorer,
) -> list[tuple[SubsidyRecord, int]]:
    """Rank cluster members by completeness score, highest first.

    The sort is stable: members with equal scores keep their load order,
    so the earliest-loaded record wins a tie.

    Parameters
    ----------
    members : Sequence[SubsidyRecord]
        Cluster members in load order.
    scorer : CompletenessScorer
        Scorer to rank with.

    Returns
    -------
    list[tuple[SubsidyRecord, int]]
        (record, score) pairs in rank order.
    """
    scored = [(record, scorer.score(record)) for record in members]
    return sorted(scored, key=lambda pair: pair[1], reverse=True)


def select_survivor(members: Sequence[SubsidyRecord], scorer: CompletenessScorer) -> str:
    """Select the id of the record a cluster retains.

    Raises
    ------
    ValueError
        If members is empty.
    """
    if not members:
        raise ValueError("Cannot select survivor from empty members list")
    return rank_members(members, scorer)[0][0].id
