"""Bigram-Jaccard title similarity.

Titles are Japanese and carry no reliable word boundaries, so similarity
works on character shingles instead of words.
"""

from subdedupe.normalize import normalize_title

__all__ = ["NGRAM_SIZE", "bigrams", "jaccard", "similarity"]

NGRAM_SIZE = 2


def bigrams(text: str, n: int = NGRAM_SIZE) -> frozenset[str]:
    """Set of contiguous ``n``-character substrings of ``text``.

    Parameters
    ----------
    text : str
        Input string (already normalized).
    n : int, optional
        Shingle length, by default 2.

    Returns
    -------
    frozenset[str]
        Distinct shingles; empty when ``text`` is shorter than ``n``.
    """
    return frozenset(text[i : i + n] for i in range(len(text) - n + 1))


def jaccard(a: frozenset[str], b: frozenset[str]) -> float:
    """Jaccard coefficient ``|a & b| / |a | b|``; 0.0 when both are empty."""
    intersection = len(a & b)
    union = len(a) + len(b) - intersection
    return 0.0 if union == 0 else intersection / union


def similarity(title_a: str | None, title_b: str | None) -> float:
    """Symmetric similarity in [0, 1] between two titles.

    Both titles are normalized; byte-equal normalized forms score 1.0,
    otherwise the Jaccard coefficient of their bigram sets is returned.

    Parameters
    ----------
    title_a : str | None
        First title.
    title_b : str | None
        Second title.

    Returns
    -------
    float
        Similarity score.

    Examples
    --------
        >>> similarity("補助金（第17回）", "補助金（第18回）")
        1.0
    """
    norm_a = normalize_title(title_a)
    norm_b = normalize_title(title_b)

    if norm_a == norm_b:
        return 1.0

    return jaccard(bigrams(norm_a), bigrams(norm_b))
