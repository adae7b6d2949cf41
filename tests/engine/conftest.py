"""Shared fixtures and fakes for engine tests."""

from __future__ import annotations

import asyncio
from typing import Dict, List, Optional, Sequence

import pytest

from linkfinder.engine.config import load_config
from linkfinder.engine.text import tokenize
from linkfinder.engine.types import LinkOpportunity

ARTICLE_A = "SEO strategy requires keyword research. Good keyword research improves SEO results."
URL_A = "/seo/keyword-research-guide"

VOCABULARY = ("keyword", "research", "guide", "seo", "camera", "lens", "travel", "coffee")


class FakeEmbedder:
    """Deterministic embedder producing bag-of-words vectors over ``VOCABULARY``.

    Explicit ``vectors`` override the bag-of-words output for exact texts.
    Embedding any text containing ``fail_on`` raises, and a set ``gate``
    blocks every embedding until the event fires.
    """

    def __init__(
        self,
        vectors: Optional[Dict[str, Sequence[float]]] = None,
        *,
        fail_on: Optional[str] = None,
        fail_init: bool = False,
        gate: Optional[asyncio.Event] = None,
    ) -> None:
        self.vectors = dict(vectors or {})
        self.fail_on = fail_on
        self.fail_init = fail_init
        self.gate = gate
        self.calls: List[str] = []
        self.init_calls = 0

    async def init(self) -> None:
        self.init_calls += 1
        if self.fail_init:
            raise RuntimeError("model unavailable")

    async def embed(self, text: str) -> List[float]:
        self.calls.append(text)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_on is not None and self.fail_on in text:
            raise RuntimeError(f"embedding failed for {text!r}")
        if text in self.vectors:
            return [float(value) for value in self.vectors[text]]
        words = tokenize(text)
        return [float(words.count(term)) for term in VOCABULARY]


@pytest.fixture()
def engine_config():
    """Provide a fresh copy of the default engine configuration."""

    return load_config(None)


def make_opportunity(
    url: str,
    score: int,
    slug_keywords: Sequence[str],
    matched_keywords: Sequence[str] | None = None,
    explanation: str = "Matched keywords focus on: keyword.",
) -> LinkOpportunity:
    return LinkOpportunity(
        url=url,
        score=score,
        matched_keywords=list(matched_keywords if matched_keywords is not None else slug_keywords),
        slug_keywords=list(slug_keywords),
        explanation=explanation,
    )
