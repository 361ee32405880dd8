import asyncio
import json
import random

import pytest

from sutilia.evaluator import TurnEvaluator
from sutilia.judge import ScriptedJudge
from sutilia.words import Dictionary


def verdict(has_thread=True, strength=7, explanation="Un hilo sutil.", next_word="niebla"):
    """Raw model reply for a verdict, as the judge would send it."""
    return json.dumps(
        {"hasThread": has_thread, "strength": strength, "explanation": explanation, "nextWord": next_word},
        ensure_ascii=False,
    )


class SlowJudge:
    """Judge that never answers within the evaluator's timeout."""

    def __init__(self, delay: float = 5.0):
        self.delay = delay

    async def judge(self, machine_word, user_word, history):
        await asyncio.sleep(self.delay)

    async def propose_word(self, machine_word, user_word, avoid):
        await asyncio.sleep(self.delay)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def make_evaluator(rng):
    def _make(verdicts=(), words=(), dictionary=None, **kwargs):
        judge = kwargs.pop("judge", None) or ScriptedJudge(verdicts, words)
        if dictionary is None:
            dictionary = Dictionary.empty()
        return TurnEvaluator(judge=judge, dictionary=dictionary, rng=rng, **kwargs)

    return _make
