"""Semantic augmentation of lexical link opportunities."""

from __future__ import annotations

import asyncio
import math
from dataclasses import replace
from typing import List, Optional, Sequence

from .config import EngineConfig, load_config
from .embeddings import Embedder
from .text import cosine_similarity
from .types import LinkOpportunity, SemanticMatch, Vector


def semantic_score(similarity: float) -> int:
    """Convert a similarity in [0, 1] to a 0-100 score, rounding halves up."""

    return int(math.floor(similarity * 100 + 0.5))


def best_chunk(query: Vector, chunk_embeddings: Sequence[Vector]) -> tuple[float, int]:
    """Return ``(max_similarity, index)`` for the closest chunk, or ``(0.0, -1)``.

    Similarity is floored at zero; ties keep the earliest chunk.
    """

    best_index = -1
    best_similarity = 0.0
    for index, embedding in enumerate(chunk_embeddings):
        similarity = cosine_similarity(query, embedding)
        if best_index == -1 or similarity > best_similarity:
            best_index = index
            best_similarity = similarity
    return max(best_similarity, 0.0), best_index


def fuse(
    opportunity: LinkOpportunity,
    max_similarity: float,
    best_index: int,
    chunks: Sequence[str],
    config: EngineConfig,
) -> LinkOpportunity:
    """Fold a semantic similarity into an opportunity without lowering its score."""

    score = semantic_score(max_similarity)
    match: Optional[SemanticMatch] = None
    if best_index >= 0:
        match = SemanticMatch(score=score, chunk_text=chunks[best_index], chunk_index=best_index)

    explanation = opportunity.explanation
    if max_similarity > float(config.get("strong_semantic_threshold", 0.6)):
        explanation = f"Strong semantic match ({score}%) found in content."

    max_score = int(config.get("max_score", 100))
    return replace(
        opportunity,
        score=min(max(opportunity.score, score), max_score),
        semantic_score=score,
        semantic_match=match,
        explanation=explanation,
    )


async def augment_opportunities(
    opportunities: Sequence[LinkOpportunity],
    chunks: Sequence[str],
    chunk_embeddings: Sequence[Vector],
    embedder: Embedder,
    config: EngineConfig | None = None,
) -> List[LinkOpportunity]:
    """Embed each slug query, fuse its best chunk similarity, and sort best-first."""

    engine_config = config or load_config(None)

    async def _augment(opportunity: LinkOpportunity) -> LinkOpportunity:
        query = " ".join(opportunity.slug_keywords)
        if not query:
            return opportunity
        query_embedding = await embedder.embed(query)
        max_similarity, best_index = best_chunk(query_embedding, chunk_embeddings)
        return fuse(opportunity, max_similarity, best_index, chunks, engine_config)

    augmented = await asyncio.gather(*(_augment(item) for item in opportunities))
    return sorted(augmented, key=lambda item: item.score, reverse=True)
