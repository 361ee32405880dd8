import random

import pytest
from fastapi.testclient import TestClient

from conftest import verdict
from sutilia.app import create_app
from sutilia.config import Settings
from sutilia.evaluator import NEED_TWO_WORDS, TurnEvaluator
from sutilia.judge import ScriptedJudge
from sutilia.seeds import SEED_WORDS


def make_client(verdicts):
    settings = Settings(dictionary_path=None, accents_path=None, credits=42)
    evaluator = TurnEvaluator(judge=ScriptedJudge(verdicts), rng=random.Random(3))
    return TestClient(create_app(settings=settings, evaluator=evaluator))


@pytest.fixture
def client():
    return make_client([verdict(True, 8, "La luz guía en la noche.", "Niebla")])


def test_ping(client):
    r = client.get("/ping")
    assert r.status_code == 200
    assert r.text == "pong"


def test_turn(client):
    r = client.post("/api/turn", json={"machineWord": "faro", "userWord": "noche", "history": []})
    assert r.status_code == 200
    assert r.json() == {
        "score": 8,
        "explanation": "La luz guía en la noche.",
        "nextWord": "niebla",
        "hasThread": True,
        "rarity": "evocadora",
        "creditsRemaining": 42,
    }


def test_spanish_route_and_keys(client):
    r = client.post(
        "/jugar",
        json={"palabraMaquina": "faro", "palabraUsuario": "noche", "historial": [{"palabraMaquina": "mar"}]},
    )
    assert r.status_code == 200
    assert r.json()["score"] == 8


def test_missing_word_is_a_client_error(client):
    r = client.post("/api/turn", json={"machineWord": "faro"})
    assert r.status_code == 400
    body = r.json()
    assert body["score"] == 0
    assert body["hasThread"] is False
    assert body["explanation"] == NEED_TWO_WORDS
    assert body["nextWord"] == "faro"


def test_null_fields_are_tolerated(client):
    r = client.post("/api/turn", json={"machineWord": None, "userWord": None, "history": None})
    assert r.status_code == 400
    assert r.json()["nextWord"] in SEED_WORDS


def test_broken_judge_still_answers():
    client = make_client(["{{{ nada"])
    r = client.post("/api/turn", json={"machineWord": "faro", "userWord": "luz"})
    assert r.status_code == 200
    body = r.json()
    assert body["score"] == 0
    assert body["hasThread"] is False
    assert body["explanation"]
    assert body["nextWord"] not in {"faro", "luz"}


def test_internal_error_still_answers():
    client = make_client([RuntimeError("bug")])
    r = client.post("/api/turn", json={"machineWord": "faro", "userWord": "luz"})
    assert r.status_code == 200
    assert r.json()["score"] == 0


def test_seed(client):
    r = client.get("/api/seed")
    assert r.status_code == 200
    assert r.json()["word"] in SEED_WORDS
