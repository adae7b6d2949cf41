"""Lexical analysis pass over every candidate URL."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from .config import EngineConfig, load_config
from .keywords import extract_keywords, extract_slug_keywords
from .scoring import calculate_relevance
from .types import AnalysisResult, LinkOpportunity

MODES = ("individual", "batch")


def analyze_internal_links(
    article_text: str,
    urls: Sequence[str],
    mode: str = "batch",
    max_results: int | None = None,
    excluded_keywords: Iterable[str] = (),
    config: EngineConfig | None = None,
) -> AnalysisResult:
    """Score every non-blank URL against the article and order the matches.

    ``batch`` mode sorts by score (ties keep input order) and keeps the top
    ``max_results``; ``individual`` mode keeps input order without truncation.
    ``article_keywords`` only lists keywords that matched at least one URL.
    """

    if mode not in MODES:
        raise ValueError(f"Unknown analysis mode: {mode!r}")

    engine_config = config or load_config(None)
    limit = engine_config.get("max_results", 20) if max_results is None else max_results

    excluded = {keyword.lower() for keyword in excluded_keywords}
    article_keywords = {
        keyword: count
        for keyword, count in extract_keywords(article_text).items()
        if keyword not in excluded
    }

    opportunities: List[LinkOpportunity] = []
    matched_vocabulary: set[str] = set()
    for raw_url in urls:
        url = raw_url.strip()
        if not url:
            continue
        slug_keywords = extract_slug_keywords(url)
        relevance = calculate_relevance(slug_keywords, article_keywords, excluded, engine_config)
        matched_vocabulary.update(relevance.matched_keywords)
        opportunities.append(
            LinkOpportunity(
                url=url,
                score=relevance.score,
                matched_keywords=relevance.matched_keywords,
                slug_keywords=slug_keywords,
                explanation=relevance.explanation,
            )
        )

    selected = [item for item in opportunities if item.matched_keywords and item.score > 0]
    if mode == "batch":
        selected.sort(key=lambda item: item.score, reverse=True)
        selected = selected[: max(int(limit), 0)]

    return AnalysisResult(
        opportunities=selected,
        article_keywords=sorted(matched_vocabulary),
        total_urls=len(opportunities),
    )
