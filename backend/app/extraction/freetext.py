"""Free-text clause capture and naive place-name extraction."""

import re

from backend.app.extraction.keywords import compile_keywords

SAFETY_KEYWORDS = (
    "safety",
    "safe",
    "security",
    "wheelchair",
    "accessibility",
    "accessible",
    "mobility",
    "disability",
    "medical",
    "medication",
    "health",
    "asthma",
    "diabetes",
    "diabetic",
    "pregnant",
    "pregnancy",
    "elderly",
    "senior citizen",
    "senior citizens",
)

SPECIAL_KEYWORDS = (
    "special",
    "requirement",
    "requirements",
    "allergy",
    "allergies",
    "allergic",
    "dietary",
    "diet",
    "gluten",
    "lactose",
    "pet",
    "pets",
)

AVOID_TRIGGERS = (
    "avoid",
    "skip",
    "don't",
    "dont",
    "do not",
    "exclude",
    "stay away",
    "not interested in",
)

VISITED_TRIGGERS = ("visited", "been to", "already", "went to")

_SAFETY = compile_keywords(SAFETY_KEYWORDS)
_SPECIAL = compile_keywords(SPECIAL_KEYWORDS)
_AVOID = compile_keywords(AVOID_TRIGGERS)
_VISITED = compile_keywords(VISITED_TRIGGERS)

SENTENCE_RE = re.compile(r"[^.!?]+[.!?]?")

# Naive place-name candidates: runs of capitalized words. Sentence-initial
# words and unrelated proper nouns are captured too; this is a known
# limitation of the heuristic.
CAPITALIZED_RE = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*")


def capture_clause(message: str, pattern: re.Pattern[str]) -> str | None:
    """Return the first sentence containing the pattern, verbatim and trimmed."""
    for sentence in SENTENCE_RE.findall(message):
        if pattern.search(sentence):
            clause = sentence.strip()
            return clause or None
    return None


def parse_safety_needs(message: str) -> str | None:
    return capture_clause(message, _SAFETY)


def parse_special_requirements(message: str) -> str | None:
    return capture_clause(message, _SPECIAL)


def capitalized_phrases(message: str) -> list[str]:
    """Capitalized (multi-word) tokens longer than two characters, deduplicated."""
    phrases: list[str] = []
    for phrase in CAPITALIZED_RE.findall(message):
        if len(phrase) > 2 and phrase not in phrases:
            phrases.append(phrase)
    return phrases


def parse_avoid_places(message: str) -> list[str] | None:
    if not _AVOID.search(message):
        return None
    return capitalized_phrases(message) or None


def parse_visited_places(message: str) -> list[str] | None:
    if not _VISITED.search(message):
        return None
    return capitalized_phrases(message) or None
