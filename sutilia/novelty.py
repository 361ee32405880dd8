"""
Keep the machine's next word fresh: never a repeat of this turn, recent history,
or the same rough word family (plural/suffix variants).
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Iterable

from .normalize import clean_word, is_normalized_word, normalize_word
from .seeds import DEFAULT_WORD, SEED_ATTEMPTS, SEED_WORDS, seed_candidates
from .words import Dictionary

logger = logging.getLogger(__name__)

HISTORY_WINDOW = 18
FAMILY_PREFIX = 5
MIN_STEM = 3

# Tried in order, so longer / more specific endings come first.
SUFFIXES = (
    "aciones", "iciones", "amientos", "imientos",
    "amiento", "imiento", "idades", "mente",
    "acion", "icion", "ismos", "istas", "adora", "edora",
    "ador", "edor", "idad", "ismo", "ista", "ante", "ente",
    "itos", "itas", "ito", "ita", "illo", "illa",
    "ces", "es", "s",
)

_HISTORY_KEYS = (
    ("machineWord", "userWord"),
    ("palabraMaquina", "palabraUsuario"),
    ("machine_word", "user_word"),
    ("word",),
)


def family_key(word: str) -> str:
    """Crude stem used to spot near-duplicate forms (mareas ~ marea, latidos ~ latido).

    Heuristic only: expect false positives on short unrelated words sharing a prefix.
    """
    w = normalize_word(word)
    if not w:
        return ""
    for suffix in SUFFIXES:
        if w.endswith(suffix) and len(w) - len(suffix) >= MIN_STEM:
            w = w[: -len(suffix)]
            break
    return w[:FAMILY_PREFIX]


def _turn_words(turn: Any) -> list[str]:
    if isinstance(turn, str):
        return [turn]
    if not isinstance(turn, dict):
        return []
    for keys in _HISTORY_KEYS:
        if any(k in turn for k in keys):
            return [turn.get(k) or "" for k in keys]
    return []


def recent_words(history: Iterable[Any] | None, window: int = HISTORY_WINDOW) -> list[str]:
    """Normalized words from the newest turns backwards, at most `window` of them."""
    if not history or window <= 0:
        return []
    out: list[str] = []
    for turn in reversed(list(history)):
        for w in _turn_words(turn):
            key = normalize_word(w)
            if key:
                out.append(key)
                if len(out) >= window:
                    return out
    return out


@dataclass(frozen=True)
class UsedWords:
    words: frozenset[str]
    families: frozenset[str]

    @classmethod
    def build(cls, machine_word: str, user_word: str, history: Iterable[Any] | None, window: int = HISTORY_WINDOW) -> "UsedWords":
        used = {normalize_word(machine_word), normalize_word(user_word), *recent_words(history, window)}
        used.discard("")
        return cls(frozenset(used), frozenset(family_key(w) for w in used))

    def conflicts(self, word: str) -> bool:
        key = normalize_word(word)
        return key in self.words or family_key(key) in self.families


class NoveltyFilter:
    """Screens proposed next words and falls back to the seed pool."""

    def __init__(
        self,
        seeds: Iterable[str] = SEED_WORDS,
        dictionary: Dictionary | None = None,
        rng: random.Random | None = None,
        window: int = HISTORY_WINDOW,
        attempts: int = SEED_ATTEMPTS,
    ):
        self.seeds = tuple(seeds)
        self.dictionary = dictionary if dictionary is not None else Dictionary.empty()
        self.rng = rng or random.Random()
        self.window = window
        self.attempts = attempts

    def used(self, machine_word: str, user_word: str, history: Iterable[Any] | None) -> UsedWords:
        return UsedWords.build(machine_word, user_word, history, self.window)

    def screen(self, proposed: str | None, used: UsedWords) -> str:
        """Cleaned (accent-restored) proposal, or "" if it is empty, malformed or repeats."""
        word = clean_word(proposed)
        if not is_normalized_word(normalize_word(word)):
            return ""
        if used.conflicts(word):
            logger.debug("Rejected repeated next word %r", word)
            return ""
        return self.dictionary.restore_accents(word)

    def seed_fallback(self, machine_word: str, user_word: str, used: UsedWords) -> str:
        candidates = seed_candidates(
            self.rng, anchors=(machine_word, user_word), exclude=used.words, pool=self.seeds
        )
        for word in candidates[: self.attempts]:
            if not used.conflicts(word):
                return word
        logger.warning("Seed pool exhausted after %d attempts; using %r", self.attempts, DEFAULT_WORD)
        return DEFAULT_WORD

    def pick_next_word(self, proposed: str | None, machine_word: str, user_word: str, history: Iterable[Any] | None = None) -> str:
        used = self.used(machine_word, user_word, history)
        word = self.screen(proposed, used)
        if word:
            return word
        return self.seed_fallback(machine_word, user_word, used)
