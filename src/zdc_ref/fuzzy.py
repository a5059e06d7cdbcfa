"""Fuzzy string matching utilities for chart lookups."""

import re

# Removed outright so "28-R" and "28R" compare equal
_DELETED_PUNCTUATION = re.compile(r"[-.'`]")
# Anything else that isn't alphanumeric separates words
_WORD_SEPARATORS = re.compile(r"[^A-Z0-9]+")

# Words that can be glued to a runway number: "ILS28R" -> "ILS 28R"
RUNWAY_PREFIXES = (
    "ILS", "LOC", "LDA", "SDF", "VOR", "NDB", "GPS", "RNAV", "RNP", "TACAN", "RWY",
)
_GLUED_RUNWAY = re.compile(
    r"^(" + "|".join(RUNWAY_PREFIXES) + r")(\d{1,2}[LRC]?)$"
)
_SHORT_RUNWAY = re.compile(r"^\d[LRC]?$")

# Long forms are folded into the abbreviation published on FAA charts
ABBREVIATIONS = {
    "RUNWAY": "RWY",
    "RUNWAYS": "RWY",
    "LOCALIZER": "LOC",
    "APPROACH": "APCH",
    "DEPARTURE": "DEP",
    "ARRIVAL": "ARR",
    "MINIMUMS": "MINS",
}


def _canonical_words(word: str) -> list[str]:
    """Canonicalize one raw word; "4R" -> ["04R"], "ILS28R" -> ["ILS", "28R"]."""
    glued = _GLUED_RUNWAY.match(word)
    parts = [glued.group(1), glued.group(2)] if glued else [word]

    words = []
    for part in parts:
        part = ABBREVIATIONS.get(part, part)
        if _SHORT_RUNWAY.match(part):
            part = "0" + part
        words.append(part)
    return words


def normalize_words(text: str) -> list[str]:
    """
    Split text into canonical comparison words.

    Upper-cases, drops hyphens/periods/apostrophes, treats any other
    punctuation as a word break, splits glued approach/runway tokens,
    folds long forms into abbreviations and pads single-digit runways.

    Examples:
        "ILS or LOC Rwy 28R" -> ["ILS", "OR", "LOC", "RWY", "28R"]
        "RNAV (GPS) RUNWAY 1" -> ["RNAV", "GPS", "RWY", "01"]
        "28-R" -> ["28R"]
    """
    if not text:
        return []
    cleaned = _DELETED_PUNCTUATION.sub("", text.upper())
    words = []
    for raw in _WORD_SEPARATORS.split(cleaned):
        if raw:
            words.extend(_canonical_words(raw))
    return words


def levenshtein(s1: str, s2: str) -> int:
    """
    Calculate the Levenshtein (edit) distance between two strings.

    Returns the minimum number of single-character edits (insertions,
    deletions, or substitutions) needed to transform s1 into s2.
    """
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    if len(s2) == 0:
        return len(s1)

    previous_row = range(len(s2) + 1)
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            # Cost is 0 if characters match, 1 otherwise
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def similarity(s1: str, s2: str) -> float:
    """Edit distance scaled to [0, 1], where 1.0 means identical.

    Empty input never counts as similar to anything.
    """
    if not s1 or not s2:
        return 0.0
    if s1 == s2:
        return 1.0
    return 1.0 - levenshtein(s1, s2) / max(len(s1), len(s2))
