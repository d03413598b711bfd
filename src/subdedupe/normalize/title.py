"""Title normalization for similarity comparison.

The normalized form is only used as matcher input and is never written
back to a record.
"""

import re

__all__ = ["normalize_title"]

BRACKET_RE = re.compile(r"[【】\[\]「」『』（）()]")
WHITESPACE_RE = re.compile(r"\s+")
# Session numbers and fiscal years change between reposts of one program.
# ASCII digits only; full-width numerals are left in the title.
CYCLE_TOKEN_RE = re.compile(r"第[0-9]+回|第[0-9]+次|令和(?:[0-9]+|元)年度|20[0-9]{2}年度")


def normalize_title(title: str | None) -> str:
    """Canonicalize a title into its comparison form.

    Removes bracket characters (ASCII and full-width), removes whitespace,
    strips cycle/session and fiscal-year tokens, and lowercases.

    Parameters
    ----------
    title : str | None
        Raw title.

    Returns
    -------
    str
        Normalized title; empty string for missing titles.

    Notes
    -----
    Token removal is repeated until no token remains, since removing one
    token can join the pieces of another (``第第1回1回``). This keeps the
    function idempotent.
    """
    if not title:
        return ""
    text = BRACKET_RE.sub("", title)
    text = WHITESPACE_RE.sub("", text)
    while True:
        stripped = CYCLE_TOKEN_RE.sub("", text)
        if stripped == text:
            break
        text = stripped
    return text.lower()
