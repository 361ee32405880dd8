"""
Turn score: the judge's verdict corrected by letter overlap between the two words.
Lexically close pairs never score as subtle, and no thread never scores above 2.
"""
from __future__ import annotations

import math

from .normalize import normalize_word
from .similarity import similarity

MIN_SCORE = 0
MAX_SCORE = 10

NEAR_IDENTICAL_SIM = 0.65
NEAR_IDENTICAL_CAP = 4
REPEAT_SCORE = 1

RARITY_COMMON = "comun"
RARITY_UNUSUAL = "inusual"
RARITY_EVOCATIVE = "evocadora"


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def clamp_score(x: float) -> int:
    if math.isnan(x):
        return MIN_SCORE
    if math.isinf(x):
        return MAX_SCORE if x > 0 else MIN_SCORE
    return max(MIN_SCORE, min(MAX_SCORE, round_half_up(x)))


def _no_thread_score(sim: float) -> int:
    if sim > 0.6:
        return 0
    if sim > 0.35:
        return 1
    return 2


def reconcile(has_thread: bool, raw_strength: float, machine_word: str, user_word: str) -> int:
    """Final 0-10 score for a turn."""
    a, b = normalize_word(machine_word), normalize_word(user_word)
    if not a or not b:
        return MIN_SCORE
    if a == b:
        return REPEAT_SCORE

    sim = similarity(a, b)
    if not has_thread:
        # No thread: at most 2, even for near-identical pairs
        return _no_thread_score(sim)
    if sim > NEAR_IDENTICAL_SIM:
        return clamp_score(min(NEAR_IDENTICAL_CAP, raw_strength))

    score = clamp_score(raw_strength)
    # Top scores need both a strong verdict and little letter overlap
    if raw_strength >= 9 and sim > 0.25:
        score -= 1
    if sim > 0.55 and raw_strength >= 8:
        score -= 1
    return clamp_score(score)


def rarity_for(score: int) -> str:
    """comun / inusual / evocadora band, for colouring the UI."""
    if score >= 8:
        return RARITY_EVOCATIVE
    if score >= 5:
        return RARITY_UNUSUAL
    return RARITY_COMMON
