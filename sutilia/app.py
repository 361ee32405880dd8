"""
HTTP API for the Sutilia word-association game.
Run: uvicorn sutilia.app:app --reload --host 0.0.0.0
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import AliasChoices, BaseModel, Field

from .config import Settings
from .evaluator import STATUS_MISSING_WORD, TurnEvaluator
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


class TurnRequest(BaseModel):
    machine_word: str | None = Field(
        default="", validation_alias=AliasChoices("machineWord", "palabraMaquina", "machine_word")
    )
    user_word: str | None = Field(
        default="", validation_alias=AliasChoices("userWord", "palabraUsuario", "user_word")
    )
    history: list[Any] | None = Field(default=None, validation_alias=AliasChoices("history", "historial"))


def create_app(settings: Settings | None = None, evaluator: TurnEvaluator | None = None) -> FastAPI:
    """Build the app. Dictionary and seeds are loaded here, once, before any request is served."""
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    evaluator = evaluator or TurnEvaluator.from_settings(settings)

    app = FastAPI(title="Sutilia")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"], allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.evaluator = evaluator

    @app.get("/ping", response_class=PlainTextResponse)
    def ping():
        return "pong"

    @app.get("/api/seed")
    def api_seed():
        """A seed word to open a fresh game."""
        return {"word": evaluator.seed_word()}

    @app.post("/jugar")
    @app.post("/api/turn")
    async def api_turn(body: TurnRequest):
        """Score the user's word against the machine's and return the machine's next word."""
        result = await evaluator.evaluate_turn(body.machine_word, body.user_word, body.history or [])
        payload = {**result.to_dict(), "creditsRemaining": settings.credits}
        status_code = 400 if result.status == STATUS_MISSING_WORD else 200
        return JSONResponse(payload, status_code=status_code)

    logger.info(
        "Sutilia ready: judge=%s dictionary=%d words seeds=%d",
        type(evaluator.judge).__name__, len(evaluator.dictionary), len(evaluator.seeds),
    )
    return app


app = create_app()
