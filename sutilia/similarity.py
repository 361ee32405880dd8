"""
Letter-set overlap between two words. A cheap proxy for lexical closeness, not meaning.
"""
from __future__ import annotations

from .normalize import normalize_word


def _letters(word: str) -> set[str]:
    return set(normalize_word(word))


def similarity(a: str, b: str) -> float:
    """Jaccard index over the two words' character sets, in [0, 1].

    Both words must be non-empty after normalization; callers handle that case first.
    """
    sa, sb = _letters(a), _letters(b)
    if not sa or not sb:
        raise ValueError("similarity needs two non-empty words")
    return len(sa & sb) / len(sa | sb)


def shared_letters(a: str, b: str) -> int:
    """Number of distinct letters the two words have in common."""
    return len(_letters(a) & _letters(b))
