"""
Judge whether two words share a thread, and propose the machine's next word.
With OPENAI_API_KEY set, an OpenAI chat model is the judge; otherwise a local
letter-overlap heuristic stands in. Model output is untrusted: every field is coerced.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Protocol, Sequence

from .normalize import clean_word
from .scoring import MAX_SCORE, MIN_SCORE, clamp_score
from .similarity import shared_letters

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"

NO_THREAD_RATIONALE = (
    "Aquí casi no hay hilo. Prueba con una imagen, un recuerdo o una sensación que toque a ambas palabras."
)
THREAD_RATIONALE = "Hay un hilo entre ambas palabras, aunque no salta a la vista: se intuye un pequeño relato."
UNAVAILABLE_RATIONALE = (
    "Perdona, ahora mismo no consigo escuchar bien el hilo entre tus palabras. Sigamos jugando con la siguiente."
)
NEUTRAL_STRENGTH = 1

# Accepted spellings for each verdict field, first match wins
_THREAD_KEYS = ("hasThread", "has_thread", "hayHilo", "hilo")
_STRENGTH_KEYS = ("strength", "threadStrength", "thread_strength", "fuerza", "puntuacion", "score")
_RATIONALE_KEYS = ("explanation", "rationale", "explicacion", "explicación")
_WORD_KEYS = ("nextWord", "proposedWord", "next_word", "nueva_palabra", "nuevaPalabra", "word", "palabra")

_TRUE_STRINGS = {"true", "yes", "si", "sí", "1", "verdadero"}

SYSTEM_PROMPT = (
    "Eres Sutilia, el juez de un juego de asociación de palabras en español. "
    "La máquina dice una palabra y la persona responde con otra. Tu tarea es decidir si existe un HILO: "
    "una conexión con sentido (semántica, simbólica o de experiencia) entre ambas. "
    "Reglas:\n"
    "- Sinónimos, antónimos, derivados, plurales o palabras casi iguales NO son sutiles: fuerza baja.\n"
    "- Un hilo sutil pero reconocible merece fuerza alta (7-10).\n"
    "- Si no hay hilo, hasThread es false y la fuerza no pasa de 2.\n"
    "- Propón una nueva palabra para la máquina: un solo sustantivo común en español, evocador, "
    "que no repita ninguna palabra de la ronda ni del historial, ni sea de su misma familia.\n"
    "Responde SOLO con un objeto JSON, sin markdown ni texto alrededor:\n"
    '{"hasThread": true|false, "strength": 0-10, "explanation": "una o dos frases", "nextWord": "palabra"}'
)

WORD_PROMPT = (
    "Propón una palabra para continuar un juego de asociación en español. "
    "Debe ser un solo sustantivo común en español, con sus tildes, que no aparezca en la lista 'evitar' "
    "ni pertenezca a la misma familia que ninguna de ellas. "
    'Responde SOLO con JSON: {"nextWord": "palabra"}'
)


class JudgeError(RuntimeError):
    """The judgment source failed or returned something unusable."""


@dataclass(frozen=True)
class JudgmentResult:
    has_thread: bool
    thread_strength: int
    rationale: str
    proposed_word: str
    degraded: bool = False


def neutral_verdict(machine_word: str) -> JudgmentResult:
    """Stand-in verdict when the judge is unavailable: no thread, keep the game going."""
    return JudgmentResult(
        has_thread=False,
        thread_strength=NEUTRAL_STRENGTH,
        rationale=UNAVAILABLE_RATIONALE,
        proposed_word=clean_word(machine_word),
        degraded=True,
    )


def extract_json_object(text: str | None) -> dict:
    """Decode the single JSON object in a model reply, tolerating code fences and chatter."""
    if not text or not isinstance(text, str):
        raise JudgeError("empty judge response")
    cleaned = text.strip()
    for fence in ("```json", "```JSON", "```"):
        cleaned = cleaned.replace(fence, "")
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end <= start:
        raise JudgeError("no JSON object in judge response")
    try:
        data = json.loads(cleaned[start : end + 1])
    except json.JSONDecodeError as e:
        raise JudgeError(f"malformed judge JSON: {e}") from e
    if not isinstance(data, dict):
        raise JudgeError("judge JSON is not an object")
    return data


def _first(data: dict, keys: Iterable[str]) -> Any:
    for k in keys:
        if k in data and data[k] is not None:
            return data[k]
    return None


def coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value > 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def coerce_strength(value: Any) -> int:
    if isinstance(value, bool):
        return MAX_SCORE if value else MIN_SCORE
    try:
        x = float(str(value).strip().replace(",", ".")) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return MIN_SCORE
    except OverflowError:  # integers beyond float range
        return MAX_SCORE if value > 0 else MIN_SCORE
    # NaN and infinities are handled by clamp_score
    return clamp_score(x)


def parse_verdict(raw: str | dict, machine_word: str = "") -> JudgmentResult:
    """Validate a verdict field by field. Raises JudgeError only if no JSON object can be found."""
    data = raw if isinstance(raw, dict) else extract_json_object(raw)
    has_thread = coerce_bool(_first(data, _THREAD_KEYS))
    strength = coerce_strength(_first(data, _STRENGTH_KEYS))
    rationale = _first(data, _RATIONALE_KEYS)
    rationale = " ".join(rationale.split()) if isinstance(rationale, str) else ""
    if not rationale:
        rationale = THREAD_RATIONALE if has_thread else NO_THREAD_RATIONALE
    word = _first(data, _WORD_KEYS)
    proposed = clean_word(word) if isinstance(word, str) else ""
    return JudgmentResult(
        has_thread=has_thread,
        thread_strength=strength,
        rationale=rationale,
        proposed_word=proposed or clean_word(machine_word),
    )


class Judge(Protocol):
    async def judge(self, machine_word: str, user_word: str, history: Sequence[str]) -> JudgmentResult: ...

    async def propose_word(self, machine_word: str, user_word: str, avoid: Sequence[str]) -> str: ...


class OpenAIJudge:
    """Chat-completions judge. Network and parse failures surface as JudgeError."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, timeout: float = 12.0, client: Any = None):
        if client is None:
            from openai import AsyncOpenAI
            client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.client = client
        self.model = model

    async def _complete(self, system: str, payload: dict, temperature: float) -> str:
        from openai import OpenAIError
        try:
            resp = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": json.dumps(payload, ensure_ascii=False)},
                ],
                temperature=temperature,
                max_tokens=300,
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            raise JudgeError(f"OpenAI request failed: {e}") from e
        if not resp.choices:
            raise JudgeError("OpenAI returned no choices")
        return resp.choices[0].message.content or ""

    async def judge(self, machine_word: str, user_word: str, history: Sequence[str]) -> JudgmentResult:
        payload = {"palabraMaquina": machine_word, "palabraUsuario": user_word, "historial": list(history)}
        text = await self._complete(SYSTEM_PROMPT, payload, temperature=0.7)
        return parse_verdict(text, machine_word)

    async def propose_word(self, machine_word: str, user_word: str, avoid: Sequence[str]) -> str:
        payload = {"palabraMaquina": machine_word, "palabraUsuario": user_word, "evitar": list(avoid)}
        text = await self._complete(WORD_PROMPT, payload, temperature=0.9)
        word = _first(extract_json_object(text), _WORD_KEYS)
        return clean_word(word) if isinstance(word, str) else ""


# Shared letters -> (thread?, strength, rationale)
_LOCAL_BANDS = (
    (False, 2, NO_THREAD_RATIONALE),
    (True, 4, "Hay un hilo mínimo, casi invisible. Se intuye algo, pero todavía puedes hilar más fino."),
    (True, 7, "La conexión empieza a sentirse: no es obvia, pero podría contarse como un pequeño relato."),
    (True, 9, "El hilo entre ambas palabras vibra con fuerza silenciosa. No es literal, pero tiene sentido interno."),
)


class LocalJudge:
    """Offline judge from shared letters. Never proposes a word, so seeds take over."""

    async def judge(self, machine_word: str, user_word: str, history: Sequence[str]) -> JudgmentResult:
        common = shared_letters(machine_word, user_word)
        has_thread, strength, rationale = _LOCAL_BANDS[min(common, len(_LOCAL_BANDS) - 1)]
        return JudgmentResult(has_thread, strength, rationale, proposed_word="")

    async def propose_word(self, machine_word: str, user_word: str, avoid: Sequence[str]) -> str:
        return ""


class ScriptedJudge:
    """Test double: replays scripted verdicts (raw text, dicts, JudgmentResult or exceptions) in order.

    The last verdict / word repeats once the script runs out.
    """

    def __init__(self, verdicts: Sequence[Any] = (), words: Sequence[Any] = ()):
        self.verdicts = list(verdicts)
        self.words = list(words)
        self.judge_calls: list[tuple[str, str, list[str]]] = []
        self.word_calls: list[tuple[str, str, list[str]]] = []

    @staticmethod
    def _next(script: list, calls: int) -> Any:
        if not script:
            raise JudgeError("nothing scripted")
        return script[min(calls, len(script) - 1)]

    async def judge(self, machine_word: str, user_word: str, history: Sequence[str]) -> JudgmentResult:
        item = self._next(self.verdicts, len(self.judge_calls))
        self.judge_calls.append((machine_word, user_word, list(history)))
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, JudgmentResult):
            return item
        return parse_verdict(item, machine_word)

    async def propose_word(self, machine_word: str, user_word: str, avoid: Sequence[str]) -> str:
        item = self._next(self.words, len(self.word_calls))
        self.word_calls.append((machine_word, user_word, list(avoid)))
        if isinstance(item, BaseException):
            raise item
        return str(item)


def build_judge(settings) -> Judge:
    """OpenAI judge when a key is configured, local heuristic otherwise."""
    if settings.openai_api_key:
        return OpenAIJudge(settings.openai_api_key, model=settings.openai_model, timeout=settings.judge_timeout)
    logger.info("OPENAI_API_KEY not set; using the local letter-overlap judge")
    return LocalJudge()