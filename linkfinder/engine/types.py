"""Typed data structures shared by the link analysis engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

KeywordIndex = Dict[str, int]
Vector = List[float]


@dataclass(frozen=True)
class SemanticMatch:
    """Best-matching article chunk for an opportunity's slug query."""

    score: int
    chunk_text: str
    chunk_index: int


@dataclass(frozen=True)
class RelevanceResult:
    """Lexical score for a single URL against the article keywords."""

    score: int
    matched_keywords: List[str]
    explanation: str


@dataclass(frozen=True)
class LinkOpportunity:
    """One candidate destination URL and how well it fits the article."""

    url: str
    score: int
    matched_keywords: List[str]
    slug_keywords: List[str]
    explanation: str
    semantic_score: Optional[int] = None
    semantic_match: Optional[SemanticMatch] = None


@dataclass(frozen=True)
class AnalysisResult:
    """Ordered opportunities plus the vocabulary that produced matches."""

    opportunities: List[LinkOpportunity]
    article_keywords: List[str]
    total_urls: int
    semantic: bool = field(default=False)
