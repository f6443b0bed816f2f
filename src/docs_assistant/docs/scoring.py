"""Keyword relevance scoring for documentation sections.

Terms are counted as literal substrings with no word-boundary anchoring, so
"test" also matches inside "testing".
"""

from __future__ import annotations

import re

from docs_assistant.config import SearchConfig

STOP_WORDS = frozenset(
    {
        "how",
        "do",
        "does",
        "i",
        "can",
        "what",
        "is",
        "are",
        "the",
        "a",
        "an",
        "to",
        "in",
        "on",
        "for",
        "with",
        "from",
        "my",
        "me",
        "you",
        "should",
        "would",
        "could",
    }
)

SPELLING_VARIANTS = (
    ("organisation", "organization"),
    ("visualise", "visualize"),
    ("initialise", "initialize"),
    ("analyse", "analyze"),
)

_BEGINNER_QUERY = re.compile(
    r"create|new|start|begin|setup|get started|make|add|first|initial",
    flags=re.IGNORECASE,
)
_BEGINNER_SECTION = re.compile(
    r"getting started|creating|setup|introduction|quick start|first|initial",
    flags=re.IGNORECASE,
)

_DEFAULT_CONFIG = SearchConfig()


def normalize_query(query: str) -> str:
    normalized = query.lower()
    for variant, canonical in SPELLING_VARIANTS:
        normalized = normalized.replace(variant, canonical)
    return normalized


def extract_terms(query: str) -> list[str]:
    """Return scoring terms; never empty."""
    terms = [
        term
        for term in normalize_query(query).split()
        if len(term) > 2 and term not in STOP_WORDS
    ]
    if not terms:
        terms.append(query.lower())
    return terms


def is_beginner_query(normalized_query: str) -> bool:
    return _BEGINNER_QUERY.search(normalized_query) is not None


def is_beginner_section(title: str) -> bool:
    return _BEGINNER_SECTION.search(title) is not None


def _count(term: str, text: str) -> int:
    return len(re.findall(re.escape(term), text))


def score_section(
    query: str,
    title: str,
    body: str,
    config: SearchConfig | None = None,
) -> float:
    """Score one section against a query; the result is always >= 0."""

    cfg = config or _DEFAULT_CONFIG
    normalized = normalize_query(query)
    title_lower = title.lower()
    body_lower = body.lower()

    score = 0.0
    for term in extract_terms(query):
        score += _count(term, title_lower) * cfg.title_weight
        score += _count(term, body_lower)

    if normalized in body_lower:
        score += cfg.body_phrase_bonus
    if normalized in title_lower:
        score += cfg.title_phrase_bonus

    # Multiplicative boost goes last, after every additive term.
    if is_beginner_query(normalized) and is_beginner_section(title_lower):
        score *= cfg.beginner_boost

    return score
