"""
Load the Spanish word list and accent list used to validate machine words.
Paths come from settings (SUTILIA_DICTIONARY / SUTILIA_ACCENTS). Both files: one word per line.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from .normalize import clean_word, is_normalized_word, normalize_word

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_DICTIONARY = DATA_DIR / "diccionario_es.txt"
DEFAULT_ACCENTS = DATA_DIR / "acentos_es.txt"
MIN_LENGTH = 2
MAX_LENGTH = 24


def read_word_file(path: Path) -> list[str]:
    """Cleaned, non-empty words from a one-word-per-line file. Raises OSError if unreadable."""
    words: list[str] = []
    with open(path, "r", encoding="utf-8", errors="ignore") as f:
        for line in f:
            w = clean_word(line)
            if w and MIN_LENGTH <= len(w) <= MAX_LENGTH:
                words.append(w)
    return words


@dataclass(frozen=True)
class Dictionary:
    """Normalized dictionary entries plus an accent-restoration map (bare form -> accented form)."""

    entries: frozenset[str] = frozenset()
    accents: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def available(self) -> bool:
        return bool(self.entries)

    def is_valid_word(self, word: str) -> bool:
        key = normalize_word(word)
        if not is_normalized_word(key):
            return False
        return key in self.entries

    def restore_accents(self, word: str) -> str:
        """Accented spelling from the accent list, or the word unchanged."""
        return self.accents.get(normalize_word(word), word)

    def __len__(self) -> int:
        return len(self.entries)

    @classmethod
    def empty(cls) -> "Dictionary":
        return cls()

    @classmethod
    def load(cls, words_path: Path | str | None, accents_path: Path | str | None = None) -> "Dictionary":
        """Build the dictionary once at startup. Missing or unreadable files give an empty set, never an error."""
        entries: frozenset[str] = frozenset()
        if words_path:
            try:
                entries = frozenset(normalize_word(w) for w in read_word_file(Path(words_path)))
                logger.info("Loaded %d dictionary entries from %s", len(entries), words_path)
            except OSError as e:
                logger.warning("Dictionary unavailable (%s); word validation disabled", e)

        accents: dict[str, str] = {}
        if accents_path:
            try:
                for w in read_word_file(Path(accents_path)):
                    accents.setdefault(normalize_word(w), w)
                logger.info("Loaded %d accented forms from %s", len(accents), accents_path)
            except OSError as e:
                logger.warning("Accent list unavailable (%s)", e)

        return cls(entries=entries, accents=MappingProxyType(accents))
