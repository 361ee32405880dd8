"""
Canonical forms for comparing Spanish words.
clean_word keeps accents (display form); normalize_word strips them but keeps ñ.
"""
from __future__ import annotations

import re
import unicodedata
from typing import Iterable

# Letters a Word may contain after cleaning
ALPHABET = "abcdefghijklmnopqrstuvwxyzáéíóúüñ"
_NOT_ALPHABET = re.compile(f"[^{ALPHABET}]")
_NORMALIZED_WORD = re.compile(r"^[a-zñ]+$")

# Stand-in for ñ while combining marks are stripped (NFD would split it into n + tilde)
_ENYE_PLACEHOLDER = "\u0000"


def _fold(ch: str) -> str:
    """Spanish letters pass through; other accented letters lose their marks (à -> a)."""
    if ch in ALPHABET:
        return ch
    return "".join(c for c in unicodedata.normalize("NFD", ch) if not unicodedata.combining(c))


def clean_word(raw: str | None) -> str:
    """Lowercase, first whitespace-delimited token, target-alphabet letters only."""
    if not raw or not isinstance(raw, str):
        return ""
    s = unicodedata.normalize("NFC", raw.strip().lower())
    parts = s.split()
    if not parts:
        return ""
    return _NOT_ALPHABET.sub("", "".join(_fold(c) for c in parts[0]))


def strip_accents(word: str) -> str:
    protected = word.replace("ñ", _ENYE_PLACEHOLDER)
    decomposed = unicodedata.normalize("NFD", protected)
    bare = "".join(c for c in decomposed if not unicodedata.combining(c))
    return bare.replace(_ENYE_PLACEHOLDER, "ñ")


def normalize_word(raw: str | None) -> str:
    """Comparison form: clean_word without diacritics (ñ preserved). Empty if nothing survives."""
    return strip_accents(clean_word(raw))


def is_normalized_word(word: str) -> bool:
    return bool(word) and bool(_NORMALIZED_WORD.match(word))


def unique_by_normalized(words: Iterable[str]) -> list[str]:
    """Dedupe by normalized form, keeping the first (accented) spelling seen."""
    seen: set[str] = set()
    out: list[str] = []
    for w in words:
        key = normalize_word(w)
        if not key or key in seen:
            continue
        seen.add(key)
        out.append(w)
    return out
