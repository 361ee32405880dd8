import itertools
import random

import pytest

from sutilia.scoring import rarity_for, reconcile, round_half_up
from sutilia.seeds import SEED_WORDS


def test_empty_word_scores_zero():
    assert reconcile(True, 10, "", "mar") == 0
    assert reconcile(True, 10, "mar", "!!") == 0


@pytest.mark.parametrize("has_thread, strength", [(True, 10), (False, 0), (True, 3)])
def test_exact_repeat_scores_one(has_thread, strength):
    assert reconcile(has_thread, strength, "mar", "Mar") == 1
    assert reconcile(has_thread, strength, "canción", "cancion") == 1


def test_near_identical_is_capped():
    # {m,a,r,e} vs {m,a,r,e,s}: 0.8
    assert reconcile(True, 10, "marea", "mareas") == 4
    assert reconcile(False, 10, "marea", "mareas") == 0
    assert reconcile(True, 2, "marea", "mareas") == 2


def test_no_thread_buckets_by_similarity():
    assert reconcile(False, 9, "faro", "noche") == 2
    assert reconcile(False, 9, "mar", "marino") == 1


def test_no_thread_never_above_two():
    pairs = itertools.islice(itertools.combinations(SEED_WORDS, 2), 3000)
    for a, b in pairs:
        assert reconcile(False, 10, a, b) in {0, 1, 2}


def test_no_thread_random_strengths():
    r = random.Random(7)
    for _ in range(500):
        a, b = r.sample(SEED_WORDS, 2)
        assert reconcile(False, r.uniform(-5, 15), a, b) <= 2


def test_thread_with_low_overlap_keeps_strength():
    # {f,a,r,o} vs {n,o,c,h,e}: 0.125
    assert reconcile(True, 10, "faro", "noche") == 10
    assert reconcile(True, 6, "faro", "noche") == 6


def test_top_scores_need_low_overlap():
    # {b,r,u,m,a} vs {m,a,r,e}: 0.5
    assert reconcile(True, 10, "bruma", "marea") == 9
    assert reconcile(True, 8, "bruma", "marea") == 8


def test_high_overlap_loses_two_points():
    # {m,a,r} vs {r,a,m,o,s}: 0.6
    assert reconcile(True, 10, "mar", "ramos") == 8
    assert reconcile(True, 8, "mar", "ramos") == 7


def test_strength_is_rounded_half_up_and_clamped():
    assert reconcile(True, 7.5, "faro", "noche") == 8
    assert reconcile(True, 42, "faro", "noche") == 10
    assert reconcile(True, -3, "faro", "noche") == 0
    assert round_half_up(2.5) == 3


def test_non_finite_strength_is_clamped():
    assert reconcile(True, float("inf"), "faro", "noche") == 10
    assert reconcile(True, float("-inf"), "faro", "noche") == 0
    assert reconcile(True, float("nan"), "faro", "noche") == 0
    assert reconcile(True, float("inf"), "marea", "mareas") == 4


def test_rarity_bands():
    assert rarity_for(10) == "evocadora"
    assert rarity_for(8) == "evocadora"
    assert rarity_for(5) == "inusual"
    assert rarity_for(4) == "comun"
    assert rarity_for(0) == "comun"
