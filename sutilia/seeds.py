"""
Curated seed words: used to start a game and whenever a proposed next word is rejected.
"""
from __future__ import annotations

import random
from typing import Iterable

from .normalize import normalize_word, unique_by_normalized
from .similarity import shared_letters

DEFAULT_WORD = "amistad"
SEED_ATTEMPTS = 12

# Pick modes: lean towards a seed that echoes the turn ("hilo"), one that breaks
# away from it ("ruptura"), or anything.
MODE_THREAD = "hilo"
MODE_BREAK = "ruptura"
MODE_ANY = "cualquiera"
THREAD_SHARE = 0.55
BREAK_SHARE = 0.25

# Core words first, then the wider pool. Order matters only for dedupe.
_CORE = [
    "bruma", "orilla", "invierno", "latido", "deriva",
    "umbría", "faro", "vacío", "círculo", "marea",
]

_EXTENDED = [
    # origin and bonds
    "raíz", "origen", "vínculo", "huella", "eco", "brújula", "umbral", "pulso", "trama", "sendero",
    "refugio", "claridad", "sombra", "destello", "silencio", "susurro", "mirada", "presencia", "memoria", "instante",
    # inner weather
    "despertar", "anhelo", "certeza", "duda", "coraje", "ternura", "templanza", "calma", "fervor", "asombro",
    "cuidado", "piedad", "perdón", "gratitud", "respeto", "honra", "dignidad", "verdad",
    # sea and sky
    "norte", "surco", "corriente", "brisa", "nube", "llovizna", "rocío", "cauce", "río", "mar",
    "isla", "puerto", "vela", "timón", "nave", "mapa", "constelación", "cielo", "horizonte", "aurora",
    "crepúsculo", "medianoche", "alba", "ocaso", "claroscuro", "neblina", "tormenta", "calima", "escarcha",
    # time and rhythm
    "tránsito", "estación", "ciclo", "ritmo", "cadencia", "compás", "armonía", "melodía", "nota", "acorde",
    "resonancia", "vibración", "canto", "voz", "suspiro", "pausa", "tempo", "síncopa", "timbre", "lira",
    "piano", "bajo", "cuerda", "arco", "métrica", "rima",
    # meeting and leaving
    "pacto", "alianza", "encuentro", "despedida", "abrazo", "límite", "frontera", "puente", "paso", "viaje",
    "retorno", "hogar", "casa", "nido", "cobijo",
    # earth
    "tierra", "barro", "semilla", "brote", "flor", "rama", "bosque", "hoja", "corteza", "piedra",
    "arena", "sal", "arcilla", "mineral", "cristal", "caverna", "montaña", "valle", "ladera", "senda",
    "pradera", "jardín",
    # fire and metal
    "chispa", "brasa", "ceniza", "calor", "candil", "farol", "ardor", "forja", "metal", "yunque",
    "martillo", "filo", "brillo",
    # water
    "ola", "espuma", "remanso", "poza", "manantial", "fuente", "llanto", "lágrima", "cascada", "dique",
    "abismo", "profundidad", "superficie", "reflejo", "espejo",
    # house
    "ventana", "puerta", "llave", "cerradura", "pasillo", "escalera", "peldaño", "altura", "bóveda", "techo",
    "pared", "sala", "rincón", "esquina", "penumbra",
    # body
    "cuerpo", "piel", "hueso", "sangre", "aliento", "respiración", "mano", "gesto", "postura", "nervio",
    "músculo", "equilibrio", "cansancio", "energía", "calidez", "frío",
    # childhood and seasons
    "niñez", "infancia", "juego", "risa", "sueño", "cuna", "cuento", "tiza", "patio", "cometa",
    "canica", "dibujo", "verano", "otoño", "primavera", "mudanza",
    # choices
    "adulto", "madurez", "decisión", "elección", "renuncia", "acuerdo", "promesa", "mentira", "secreto", "confesión",
    "revelación", "pregunta", "respuesta", "misterio", "rumor", "señal", "símbolo", "metáfora",
    # writing
    "carta", "mensaje", "palabra", "frase", "nombre", "apodo", "sílaba", "tinta", "papel", "pluma",
    "borrador", "margen", "párrafo", "verso", "prosa", "relato", "capítulo", "epílogo", "prólogo", "narrador",
    # story
    "historia", "travesía", "aventura", "prueba", "reto", "caída", "ascenso", "giro", "nudo", "desenlace",
    "destino", "azar", "casualidad", "sincronicidad", "coincidencia", "presagio", "augurio", "rastro", "pista", "clave",
    "código", "enigma", "laberinto", "salida", "entrada", "portal", "vértigo", "riesgo", "audacia", "osadía",
    "valentía", "serenidad",
]

SEED_WORDS: tuple[str, ...] = tuple(unique_by_normalized(_CORE + _EXTENDED))


def pick_mode(rng: random.Random) -> str:
    r = rng.random()
    if r < THREAD_SHARE:
        return MODE_THREAD
    if r < THREAD_SHARE + BREAK_SHARE:
        return MODE_BREAK
    return MODE_ANY


def _mode_filter(mode: str, anchors: list[str]):
    if mode == MODE_THREAD:
        return lambda w: max(shared_letters(w, a) for a in anchors) >= 2
    if mode == MODE_BREAK:
        return lambda w: all(shared_letters(w, a) <= 1 for a in anchors)
    return lambda w: True


def seed_candidates(
    rng: random.Random,
    anchors: Iterable[str] = (),
    exclude: Iterable[str] = (),
    pool: Iterable[str] = SEED_WORDS,
) -> list[str]:
    """Shuffled seeds not in `exclude` (normalized forms), the ones matching the chosen mode first."""
    banned = {normalize_word(w) for w in exclude}
    candidates = [w for w in pool if normalize_word(w) not in banned]
    rng.shuffle(candidates)
    anchor_list = [a for a in (normalize_word(x) for x in anchors) if a]
    if not anchor_list or not candidates:
        return candidates
    keep = _mode_filter(pick_mode(rng), anchor_list)
    preferred = [w for w in candidates if keep(w)]
    rest = [w for w in candidates if not keep(w)]
    return preferred + rest


def random_seed(
    rng: random.Random | None = None, exclude: Iterable[str] = (), pool: Iterable[str] = SEED_WORDS
) -> str:
    """One seed word for a fresh game (or DEFAULT_WORD if everything is excluded)."""
    candidates = seed_candidates(rng or random.Random(), exclude=exclude, pool=pool)
    return candidates[0] if candidates else DEFAULT_WORD
