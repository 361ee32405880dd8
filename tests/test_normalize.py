import pytest

from sutilia.normalize import clean_word, is_normalized_word, normalize_word, strip_accents, unique_by_normalized


@pytest.mark.parametrize(
    "raw, cleaned, normalized",
    [
        ("  Árbol Viejo ", "árbol", "arbol"),
        ("Niño", "niño", "niño"),
        ("AÑORANZA", "añoranza", "añoranza"),
        ("¡Hola!", "hola", "hola"),
        ("pingüino", "pingüino", "pinguino"),
        ("canción,", "canción", "cancion"),
        ("mar\tcielo", "mar", "mar"),
        ("Àrbol", "arbol", "arbol"),
        ("crème", "creme", "creme"),
    ],
)
def test_clean_and_normalize(raw, cleaned, normalized):
    assert clean_word(raw) == cleaned
    assert normalize_word(raw) == normalized


@pytest.mark.parametrize("raw", ["", "   ", "123", "¿?", None, "---"])
def test_nothing_survives(raw):
    assert normalize_word(raw) == ""


def test_decomposed_input_is_recomposed():
    assert clean_word("a\u0301rbol") == "\u00e1rbol"
    assert normalize_word("n\u0303andu\u0301") == "\u00f1andu"


def test_strip_accents_keeps_enye():
    assert strip_accents("señoría") == "señoria"


def test_is_normalized_word():
    assert is_normalized_word("niño")
    assert not is_normalized_word("árbol")
    assert not is_normalized_word("")


def test_unique_by_normalized_keeps_first_spelling():
    assert unique_by_normalized(["vacío", "vacio", "Faro", "faro", "", "ola"]) == ["vacío", "Faro", "ola"]
