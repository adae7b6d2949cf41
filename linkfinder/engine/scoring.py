"""Lexical relevance scoring for a single URL."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from .config import EngineConfig, load_config
from .types import KeywordIndex, RelevanceResult

NO_SLUG_KEYWORDS = "No identifiable keywords in URL"
NO_OVERLAP = "No significant keyword overlap detected."


def calculate_relevance(
    slug_keywords: Sequence[str],
    article_keywords: KeywordIndex,
    excluded_keywords: Iterable[str] = (),
    config: EngineConfig | None = None,
) -> RelevanceResult:
    """Score the slug against the article keywords using exact token matches.

    Each matched slug keyword adds ``frequency * points_per_occurrence``,
    capped per keyword at ``max_points_per_keyword``; the total is capped at
    ``max_score``.
    """

    if not slug_keywords:
        return RelevanceResult(score=0, matched_keywords=[], explanation=NO_SLUG_KEYWORDS)

    engine_config = config or load_config(None)
    per_occurrence = int(engine_config.get("points_per_occurrence", 20))
    per_keyword_cap = int(engine_config.get("max_points_per_keyword", 50))
    max_score = int(engine_config.get("max_score", 100))

    excluded = {keyword.lower() for keyword in excluded_keywords}
    matched: List[str] = []
    total = 0

    for slug_word in slug_keywords:
        word = slug_word.lower()
        if word in excluded:
            continue
        frequency = article_keywords.get(word)
        if frequency:
            matched.append(word)
            total += min(frequency * per_occurrence, per_keyword_cap)

    score = min(total, max_score)
    if matched:
        shown = matched[: int(engine_config.get("explanation_keywords", 3))]
        explanation = f"Matched keywords focus on: {', '.join(shown)}."
    else:
        explanation = NO_OVERLAP

    return RelevanceResult(score=score, matched_keywords=matched, explanation=explanation)


def get_score_category(score: int, config: EngineConfig | None = None) -> str:
    """Return ``high``, ``medium`` or ``low`` for styling the score."""

    engine_config = config or load_config(None)
    if score >= engine_config.category_threshold("high"):
        return "high"
    if score >= engine_config.category_threshold("medium"):
        return "medium"
    return "low"
