import time

import pytest

from multitrack.normalizer import is_boilerplate, normalize

SAMPLES = [
    "",
    "Entregado",
    "Estado\u00a0de la entrega\u00a0\u00a0Entregado",
    "Skip to content\nTracking   results\n\n\nEntregado el 27/08/2025",
    "Saltar al contenido principal  ENTREGADO CIUDAD DE MEXICO",
    "Skip to Skip to content content\tdone",
    "  \t \n \r\n line one \r line two\u200b  ",
    "Aceptar todas las cookies Configuración de cookies Entrega estimada: 27/08/2025",
    "\u00a0\u202f\u3000",
]


def test_non_breaking_spaces_become_spaces():
    assert normalize("Estado\u00a0de la entrega\u202fEntregado") == "Estado de la entrega Entregado"


def test_horizontal_whitespace_collapses_but_lines_stay():
    text = "Estado:   \t Entregado\n\nEntregado  el   27/08/2025\n"
    assert normalize(text) == "Estado: Entregado\nEntregado el 27/08/2025"


def test_boilerplate_stripped_in_both_languages():
    text = "Saltar al contenido\nSkip to main content\nENTREGADO MONTERREY"
    assert normalize(text) == "ENTREGADO MONTERREY"


def test_boilerplate_case_insensitive():
    assert normalize("SKIP TO CONTENT Entregado") == "Entregado"


def test_spliced_boilerplate_removed_fully():
    assert normalize("Skip to Skip to content content\tdone") == "done"


def test_carriage_returns_and_zero_width():
    assert normalize("a\r\nb\rc\u200bd") == "a\nb\ncd"


def test_none_is_empty():
    assert normalize(None) == ""


@pytest.mark.parametrize("raw", SAMPLES)
def test_idempotent(raw):
    once = normalize(raw)
    assert normalize(once) == once


@pytest.mark.parametrize("span,expected", [
    ("SALTAR AL", True),
    ("Skip to", True),
    ("Skip to content", True),
    ("ir al contenido", True),
    ("CIUDAD DE MEXICO", False),
    ("", False),
])
def test_is_boilerplate(span, expected):
    assert is_boilerplate(span) is expected


def test_longer_phrase_wins_over_its_prefix():
    assert normalize("Saltar al contenido principal ENTREGADO") == "ENTREGADO"
    assert normalize("Ir al contenido principal") == ""
    assert normalize("Saltar al contenido ENTREGADO") == "ENTREGADO"


def test_phrase_must_stay_on_one_line():
    assert normalize("Skip to\ncontent") == "Skip to\ncontent"


def test_deeply_spliced_boilerplate_is_linear():
    n = 20000
    raw = "Skip to " * n + "content " * n + "Entregado"
    start = time.perf_counter()
    result = normalize(raw)
    elapsed = time.perf_counter() - start

    assert result == "Entregado"
    assert normalize(result) == result
    assert elapsed < 2.0


def test_large_page_normalizes_quickly():
    raw = ("Estado de la entrega Entregado  \t\n\n" * 20000)
    start = time.perf_counter()
    result = normalize(raw)
    assert time.perf_counter() - start < 2.0
    assert result.splitlines()[0] == "Estado de la entrega Entregado"
    assert len(result.splitlines()) == 20000
