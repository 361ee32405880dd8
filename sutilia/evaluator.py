"""
One game turn: normalize the words, ask the judge, keep the next word fresh, reconcile the score.
The judge is unreliable; whatever it does, the caller gets a playable TurnResult.
"""
from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Iterable

from .judge import Judge, JudgeError, JudgmentResult, LocalJudge, build_judge, neutral_verdict
from .normalize import clean_word, normalize_word
from .novelty import HISTORY_WINDOW, NoveltyFilter, UsedWords, recent_words
from .scoring import MIN_SCORE, rarity_for, reconcile
from .seeds import DEFAULT_WORD, SEED_WORDS, random_seed
from .words import Dictionary

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_MISSING_WORD = "missing_word"
STATUS_DEGRADED = "degraded"
STATUS_ERROR = "error"

NEED_TWO_WORDS = "Necesito dos palabras vivas para poder escuchar el hilo entre ellas."
INTERFERENCE = "Ha habido una interferencia en la conexión. Tu palabra queda anotada; sigamos con otra."


@dataclass(frozen=True)
class TurnResult:
    score: int
    explanation: str
    next_word: str
    has_thread: bool
    status: str = STATUS_OK

    @property
    def rarity(self) -> str:
        return rarity_for(self.score)

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "explanation": self.explanation,
            "nextWord": self.next_word,
            "hasThread": self.has_thread,
            "rarity": self.rarity,
        }


class TurnEvaluator:
    """Holds the process-lifetime state (dictionary, seeds, judge) and evaluates turns against it."""

    def __init__(
        self,
        judge: Judge | None = None,
        dictionary: Dictionary | None = None,
        seeds: Iterable[str] = SEED_WORDS,
        rng: random.Random | None = None,
        judge_timeout: float = 12.0,
        word_retries: int = 8,
        history_window: int = HISTORY_WINDOW,
    ):
        self.judge = judge or LocalJudge()
        self.dictionary = dictionary if dictionary is not None else Dictionary.empty()
        self.rng = rng or random.Random()
        self.seeds = tuple(seeds)
        self.novelty = NoveltyFilter(self.seeds, self.dictionary, self.rng, window=history_window)
        self.judge_timeout = judge_timeout
        self.word_retries = max(1, word_retries)
        self.history_window = history_window

    @classmethod
    def from_settings(cls, settings, judge: Judge | None = None, rng: random.Random | None = None) -> "TurnEvaluator":
        dictionary = Dictionary.load(settings.dictionary_path, settings.accents_path)
        return cls(
            judge=judge or build_judge(settings),
            dictionary=dictionary,
            rng=rng,
            judge_timeout=settings.judge_timeout,
            word_retries=settings.word_retries,
            history_window=settings.history_window,
        )

    def seed_word(self, exclude: Iterable[str] = ()) -> str:
        return random_seed(self.rng, exclude=exclude, pool=self.seeds)

    async def evaluate_turn(self, machine_word: str | None, user_word: str | None, history: Iterable[Any] | None = None) -> TurnResult:
        """Never raises: internal failures become a neutral, game-continuing result."""
        try:
            return await self._evaluate(machine_word or "", user_word or "", list(history or []))
        except Exception:
            logger.exception("Turn evaluation failed (machine=%r, user=%r)", machine_word, user_word)
            return TurnResult(
                score=MIN_SCORE,
                explanation=INTERFERENCE,
                next_word=self._safe_seed(machine_word, user_word),
                has_thread=False,
                status=STATUS_ERROR,
            )

    def _safe_seed(self, *exclude: str | None) -> str:
        try:
            return self.seed_word(exclude=[w for w in exclude if w])
        except Exception:
            logger.exception("Seed selection failed")
            return DEFAULT_WORD

    async def _evaluate(self, machine_word: str, user_word: str, history: list) -> TurnResult:
        a, b = normalize_word(machine_word), normalize_word(user_word)
        if not a or not b:
            present = clean_word(machine_word) if a else clean_word(user_word) if b else ""
            return TurnResult(
                score=MIN_SCORE,
                explanation=NEED_TWO_WORDS,
                next_word=present or self.seed_word(),
                has_thread=False,
                status=STATUS_MISSING_WORD,
            )

        recent = recent_words(history, self.history_window)
        verdict = await self._ask_judge(clean_word(machine_word), clean_word(user_word), recent)
        used = self.novelty.used(machine_word, user_word, history)
        next_word = await self._choose_next_word(
            verdict.proposed_word, machine_word, user_word, used, retry=not verdict.degraded
        )

        if verdict.degraded:
            score = MIN_SCORE
        else:
            score = reconcile(verdict.has_thread, verdict.thread_strength, a, b)
        logger.info(
            "Turn %s/%s: thread=%s strength=%d score=%d next=%s%s",
            a, b, verdict.has_thread, verdict.thread_strength, score, next_word,
            " (degraded)" if verdict.degraded else "",
        )
        return TurnResult(
            score=score,
            explanation=verdict.rationale,
            next_word=next_word,
            has_thread=verdict.has_thread,
            status=STATUS_DEGRADED if verdict.degraded else STATUS_OK,
        )

    async def _ask_judge(self, machine_word: str, user_word: str, recent: list[str]) -> JudgmentResult:
        try:
            return await asyncio.wait_for(self.judge.judge(machine_word, user_word, recent), self.judge_timeout)
        except asyncio.TimeoutError:
            logger.warning("Judge timed out after %.1fs; using neutral verdict", self.judge_timeout)
        except asyncio.CancelledError:
            logger.warning("Judge call cancelled; using neutral verdict")
        except JudgeError as e:
            logger.warning("Judge unavailable (%s); using neutral verdict", e)
        return neutral_verdict(machine_word)

    def _acceptable(self, word: str) -> bool:
        return bool(word) and (not self.dictionary.available or self.dictionary.is_valid_word(word))

    async def _choose_next_word(
        self, proposed: str, machine_word: str, user_word: str, used: UsedWords, retry: bool = True
    ) -> str:
        """Screened proposal; with a dictionary, re-ask the judge until a valid fresh word turns up.

        After a degraded verdict the judge is not asked again: the turn goes straight to the seeds.
        """
        word = self.novelty.screen(proposed, used)
        if self._acceptable(word):
            return word
        if retry and self.dictionary.available:
            avoid = sorted(used.words)
            for attempt in range(1, self.word_retries + 1):
                try:
                    candidate = await asyncio.wait_for(
                        self.judge.propose_word(clean_word(machine_word), clean_word(user_word), avoid),
                        self.judge_timeout,
                    )
                except (JudgeError, asyncio.TimeoutError, asyncio.CancelledError) as e:
                    logger.warning("Next-word request %d failed (%s)", attempt, str(e) or type(e).__name__)
                    break
                word = self.novelty.screen(candidate, used)
                if self._acceptable(word):
                    return word
                logger.debug("Next-word candidate %r rejected (attempt %d/%d)", candidate, attempt, self.word_retries)
        return self.novelty.seed_fallback(machine_word, user_word, used)
