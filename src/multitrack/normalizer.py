"""
Page text normalization.

Carrier pages come back from the browser as `innerText`: bilingual, full of
non-breaking spaces, navigation skip-links and cookie banner buttons. The
extraction rules expect one canonical shape: single spaces, no boilerplate,
one non-empty line per visual line. Line breaks are kept because several
rules anchor to line starts.
"""

import re

# Non-breaking, narrow, figure, ideographic and the other unicode space separators
UNICODE_SPACES_RE = re.compile(r"[\u00a0\u1680\u2000-\u200a\u202f\u205f\u3000]")
ZERO_WIDTH_RE = re.compile(r"[\u200b\u200c\u200d\u2060\ufeff]")
HORIZONTAL_WS_RE = re.compile(r"[ \t\f\v]+")

# Longest phrases first so the alternation never eats a prefix of a longer one
BOILERPLATE_PHRASES = (
    "Saltar al contenido principal",
    "Ir al contenido principal",
    "Saltar al contenido",
    "Ir al contenido",
    "Skip to main content",
    "Skip to content",
    "Skip navigation",
    "Aceptar todas las cookies",
    "Rechazar todas las cookies",
    "Configuración de cookies",
    "Accept all cookies",
    "Reject all cookies",
    "Cookie settings",
)

# What is left behind when a skip-link is split across lines
BOILERPLATE_FRAGMENTS = (
    "saltar al",
    "ir al contenido",
    "skip to",
    "skip navigation",
)


def _phrase_pattern(phrase):
    words = [re.escape(w) for w in phrase.split()]
    return r"[ \t]+".join(words)


BOILERPLATE_RE = re.compile(
    "|".join(_phrase_pattern(p) for p in BOILERPLATE_PHRASES),
    re.IGNORECASE,
)


BOILERPLATE_WORDS = sorted(
    (tuple(p.lower().split()) for p in BOILERPLATE_PHRASES),
    key=len,
    reverse=True,
)

# ("saltar", "al", "contenido") -> [("principal",)]
LONGER_FORMS = {
    short: [long[len(short):] for long in BOILERPLATE_WORDS
            if len(long) > len(short) and long[:len(short)] == short]
    for short in BOILERPLATE_WORDS
}


def _extends_to_longer(phrase, words, start):
    for rest in LONGER_FORMS[phrase]:
        if tuple(w.lower() for w in words[start:start + len(rest)]) == rest:
            return True
    return False


def _strip_boilerplate(line):
    """
    Drop boilerplate phrases from one line, word by word.

    A phrase is removed the moment its last word is pushed, so whatever it
    splices together ("Skip to Skip to content content") is checked again
    as the scan continues. A phrase that is the start of a longer one
    waits when the following words complete the longer one. No phrase
    survives in the output.
    """
    words = line.split()
    kept = []
    lowered = []
    for index, word in enumerate(words):
        kept.append(word)
        lowered.append(word.lower())
        for phrase in BOILERPLATE_WORDS:
            n = len(phrase)
            if len(lowered) < n or tuple(lowered[-n:]) != phrase:
                continue
            if not _extends_to_longer(phrase, words, index + 1):
                del kept[-n:]
                del lowered[-n:]
            break
    return " ".join(kept)


def normalize(raw_text):
    """
    Turn raw page text into the canonical form the extraction rules match on.

    One left-to-right pass per line, linear in the text, and idempotent:
    normalize(normalize(x)) == normalize(x).
    """
    if not raw_text:
        return ""
    text = raw_text.replace("\r\n", "\n").replace("\r", "\n")
    text = UNICODE_SPACES_RE.sub(" ", text)
    text = ZERO_WIDTH_RE.sub("", text)
    lines = (_strip_boilerplate(line) for line in text.split("\n"))
    return "\n".join(line for line in lines if line)


def is_boilerplate(span):
    """True when a captured span is leftover navigation or cookie text."""
    if not span:
        return False
    lowered = HORIZONTAL_WS_RE.sub(" ", span).strip().lower()
    if BOILERPLATE_RE.search(lowered):
        return True
    return lowered.startswith(BOILERPLATE_FRAGMENTS)
