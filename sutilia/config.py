"""
Service settings from the environment (and a project-root .env, if present).
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .judge import DEFAULT_MODEL
from .novelty import HISTORY_WINDOW
from .words import DEFAULT_ACCENTS, DEFAULT_DICTIONARY

ENV_PATH = Path(__file__).resolve().parent.parent / ".env"


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Settings:
    openai_api_key: str | None = None
    openai_model: str = DEFAULT_MODEL
    judge_timeout: float = 12.0
    word_retries: int = 8
    history_window: int = HISTORY_WINDOW
    dictionary_path: Path | None = DEFAULT_DICTIONARY
    accents_path: Path | None = DEFAULT_ACCENTS
    credits: int = 42
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: Path | None = ENV_PATH) -> "Settings":
        """Read settings. .env values do not override variables already set in the process."""
        if env_file is not None and env_file.exists():
            load_dotenv(env_file)
        return cls(
            openai_api_key=os.environ.get("OPENAI_API_KEY") or None,
            openai_model=os.environ.get("OPENAI_MODEL") or DEFAULT_MODEL,
            judge_timeout=max(0.1, _env_float("SUTILIA_JUDGE_TIMEOUT", 12.0)),
            word_retries=max(1, _env_int("SUTILIA_WORD_RETRIES", 8)),
            history_window=max(0, _env_int("SUTILIA_HISTORY_WINDOW", HISTORY_WINDOW)),
            dictionary_path=Path(os.environ.get("SUTILIA_DICTIONARY") or DEFAULT_DICTIONARY),
            accents_path=Path(os.environ.get("SUTILIA_ACCENTS") or DEFAULT_ACCENTS),
            credits=_env_int("SUTILIA_CREDITS", 42),
            log_level=os.environ.get("SUTILIA_LOG_LEVEL", "INFO"),
        )
